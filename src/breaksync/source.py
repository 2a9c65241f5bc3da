"""Pull-based record sources with one record of look-ahead."""
from __future__ import annotations

import queue
from typing import Callable, Generic, Iterable, Optional, Protocol, Tuple, TypeVar

from .key import END, FrontierKey, Key, prefix_equal
from .rupture import Rupture

T = TypeVar("T")

Reader = Callable[[], Tuple[Optional[T], bool]]
Keyer = Callable[[T], Key]


class _Closed:
    def __repr__(self) -> str:
        return "CLOSED"


CLOSED = _Closed()


def close(channel: "queue.Queue") -> None:
    """Signal exhaustion to the queue-backed source reading ``channel``."""
    channel.put(CLOSED)


class SyncSource(Protocol):
    """Type-erased view of a source, as driven by a Synchronization."""

    synchronized: bool
    rupture: Optional[Rupture]

    @property
    def current(self) -> object:
        """Record handed to the business callback for the current step."""

    @property
    def current_key(self) -> FrontierKey:
        """Key of ``current``."""

    @property
    def next_key(self) -> FrontierKey:
        """Key of the look-ahead record, or END once exhausted."""

    def read(self) -> None:
        """Advance by one record when the source is due."""

    def compute_synchro(self, key: FrontierKey) -> None:
        """Mark the source synchronized iff its current key matches ``key``."""


class Source(Generic[T]):
    """Stages the current record plus one look-ahead record of a sorted stream.

    ``reader`` returns ``(record, exhausted)``; exhaustion is never an
    exception and anything the reader raises is surfaced unchanged. When a
    ``rupture`` is bound, the source only moves once that rupture reports the
    previous group closed.
    """

    def __init__(
        self,
        reader: Reader[T],
        keyer: Keyer[T],
        rupture: Optional[Rupture] = None,
    ) -> None:
        self.reader = reader
        self.keyer = keyer
        self.rupture = rupture
        self.synchronized = True
        self._current: Optional[T] = None
        self._current_key: FrontierKey = ""
        self._next: Optional[T] = None
        self._next_key: FrontierKey = ""
        self._exhausted = False

    @classmethod
    def from_iterable(
        cls,
        iterable: Iterable[T],
        keyer: Keyer[T],
        rupture: Optional[Rupture] = None,
    ) -> "Source[T]":
        """Read a sequence or generator lazily, one item per pull."""
        iterator = iter(iterable)

        def _reader() -> Tuple[Optional[T], bool]:
            for item in iterator:
                return item, False
            return None, True

        return cls(_reader, keyer, rupture)

    @classmethod
    def from_queue(
        cls,
        channel: "queue.Queue[T]",
        keyer: Keyer[T],
        rupture: Optional[Rupture] = None,
        timeout: Optional[float] = None,
    ) -> "Source[T]":
        """Read from a blocking queue until the CLOSED marker arrives.

        With a ``timeout``, an idle queue raises ``queue.Empty`` from ``read``.
        """

        def _reader() -> Tuple[Optional[T], bool]:
            item = channel.get(timeout=timeout)
            if item is CLOSED:
                return None, True
            return item, False

        return cls(_reader, keyer, rupture)

    @property
    def current(self) -> Optional[T]:
        return self._current

    @property
    def current_key(self) -> FrontierKey:
        return self._current_key

    @property
    def next(self) -> Optional[T]:
        return self._next

    @property
    def next_key(self) -> FrontierKey:
        return self._next_key

    @property
    def due(self) -> bool:
        if not self.synchronized:
            return False
        return self.rupture is None or self.rupture.last

    def read(self) -> None:
        if not self.due:
            return
        self._current = self._next
        self._current_key = self._next_key
        if self._exhausted:
            return

        record, exhausted = self.reader()
        if exhausted:
            self._exhausted = True
            self._next = None
            self._next_key = END
            return
        self._next = record
        self._next_key = self.keyer(record)

    def compute_synchro(self, key: FrontierKey) -> None:
        self.synchronized = prefix_equal(self._current_key, key)

    def __repr__(self) -> str:
        return (
            f"Source(current_key={self._current_key!r}, next_key={self._next_key!r}, "
            f"synchronized={self.synchronized})"
        )


__all__ = ["CLOSED", "Keyer", "Reader", "Source", "SyncSource", "close"]
