"""Break detection over the merged frontier."""
from __future__ import annotations

from typing import Callable

from .key import END, FrontierKey, Key

Extractor = Callable[[Key], Key]


def identity(key: Key) -> Key:
    return key


def truncate(width: int) -> Extractor:
    """Return an extractor keeping the first ``width`` items of a key."""
    if width < 0:
        raise ValueError("width must not be negative")

    def _extract(key: Key) -> Key:
        return key[:width]

    return _extract


class Rupture:
    """Named two-state edge detector bound to a key-derivation function.

    ``first`` tells whether the current step opens a new group and ``last``
    whether it closes one. A fresh rupture has ``last`` set so that the very
    first row always starts a group.
    """

    def __init__(self, name: str, extract: Extractor = identity) -> None:
        self.name = name
        self.extract = extract
        self.first = False
        self.last = True

    def compute(self, current: FrontierKey, next_key: FrontierKey, force: bool) -> bool:
        self.first = self.last
        if force:
            self.last = True
        elif current is END or next_key is END:
            self.last = current is not next_key
        else:
            self.last = self.extract(current) != self.extract(next_key)
        return self.last

    def __repr__(self) -> str:
        return f"Rupture(name={self.name!r}, first={self.first}, last={self.last})"


__all__ = ["Extractor", "Rupture", "identity", "truncate"]
