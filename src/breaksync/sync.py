"""Break/sync driver over a set of sorted sources."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from .key import END, FrontierKey
from .rupture import Rupture
from .source import SyncSource

logger = logging.getLogger(__name__)

Business = Callable[[int, List[object]], None]


@dataclass(frozen=True)
class Step:
    """Snapshot of one synchronization step.

    ``desync`` has bit i set when source i is held back at this step and
    ``edges`` holds the ``(first, last)`` pair of every rupture, in
    registration order.
    """

    number: int
    key: FrontierKey
    desync: int
    row: Tuple[object, ...]
    edges: Tuple[Tuple[bool, bool], ...]

    def is_synchronized(self, index: int) -> bool:
        return not self.desync & (1 << index)

    @property
    def all_synchronized(self) -> bool:
        return self.desync == 0


class Synchronization:
    """Advances every source in lockstep along the merged key frontier.

    Ruptures are evaluated in registration order and each one receives the
    previous one's ``last`` as ``force``: a break on an earlier (outer)
    rupture always forces a break on every later (inner) rupture.
    """

    def __init__(self) -> None:
        self.current_key: Optional[FrontierKey] = None
        self.next_key: Optional[FrontierKey] = None
        self.end = False
        self._sources: List[SyncSource] = []
        self._ruptures: List[Rupture] = []
        self._started = False

    @property
    def sources(self) -> Tuple[SyncSource, ...]:
        return tuple(self._sources)

    @property
    def ruptures(self) -> Tuple[Rupture, ...]:
        return tuple(self._ruptures)

    def add_sources(self, *sources: SyncSource) -> "Synchronization":
        self._ensure_not_started()
        for source in sources:
            self._sources.append(source)
            if source.rupture is not None:
                self._register_rupture(source.rupture)
        return self

    def add_ruptures(self, *ruptures: Rupture) -> "Synchronization":
        """Register grouping ruptures that do not gate any source."""
        self._ensure_not_started()
        for rupture in ruptures:
            self._register_rupture(rupture)
        return self

    def _register_rupture(self, rupture: Rupture) -> None:
        if not any(existing is rupture for existing in self._ruptures):
            self._ruptures.append(rupture)

    def _ensure_not_started(self) -> None:
        if self._started:
            raise RuntimeError("Synchronization already run; build a new one.")

    def run(self, business: Business) -> None:
        """Call ``business(desync, row)`` once per step until every source is exhausted."""
        for step in self.steps():
            business(step.desync, list(step.row))

    def steps(self) -> Iterator[Step]:
        self._ensure_not_started()
        self._started = True
        logger.info(
            "Starting synchronization of %s source(s) with %s rupture(s)",
            len(self._sources),
            len(self._ruptures),
        )

        self._read()
        self._compute_key()

        number = 0
        while not self.end:
            self._read()
            self._compute_synchro()
            self._compute_key()
            self._compute_ruptures()

            number += 1
            step = Step(
                number=number,
                key=self.current_key,
                desync=self._desync(),
                row=tuple(source.current for source in self._sources),
                edges=tuple((rupture.first, rupture.last) for rupture in self._ruptures),
            )
            logger.debug(
                "Step %s key=%r next=%r desync=%s", number, step.key, self.next_key, step.desync
            )
            yield step

        logger.info("Synchronization finished after %s step(s)", number)

    def _read(self) -> None:
        for source in self._sources:
            source.read()

    def _compute_synchro(self) -> None:
        for source in self._sources:
            source.compute_synchro(self.next_key)

    def _compute_key(self) -> None:
        self.current_key = self.next_key
        candidates: Sequence[FrontierKey] = [
            source.next_key if source.synchronized else source.current_key
            for source in self._sources
        ]
        self.next_key = min(candidates, default=END)
        self.end = self.next_key is END

    def _compute_ruptures(self) -> None:
        force = False
        for rupture in self._ruptures:
            force = rupture.compute(self.current_key, self.next_key, force)

    def _desync(self) -> int:
        mask = 0
        for index, source in enumerate(self._sources):
            if not source.synchronized:
                mask |= 1 << index
        return mask


__all__ = ["Business", "Step", "Synchronization"]
