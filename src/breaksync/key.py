"""Ordered keys and the exhausted-stream marker."""
from __future__ import annotations

from typing import Union

Key = Union[str, bytes]


class Exhausted:
    """Marker key for a source with no more records.

    Sorts after every real key and is only equal to itself.
    """

    _instance: "Exhausted | None" = None

    def __new__(cls) -> "Exhausted":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "END"

    def __eq__(self, other: object) -> bool:
        return other is self

    def __hash__(self) -> int:
        return hash(Exhausted)

    def __lt__(self, other: object) -> bool:
        return False

    def __le__(self, other: object) -> bool:
        return other is self

    def __gt__(self, other: object) -> bool:
        return other is not self

    def __ge__(self, other: object) -> bool:
        return True


END = Exhausted()

FrontierKey = Union[str, bytes, Exhausted]


def prefix_equal(a: FrontierKey, b: FrontierKey) -> bool:
    """Compare two keys on the length of the shorter one."""
    if a is END or b is END:
        return a is b
    size = min(len(a), len(b))
    return a[:size] == b[:size]


def pad(value: object, width: int) -> str:
    """Left-justify ``value`` to exactly ``width`` characters."""
    return f"{value!s:<{width}.{width}}"


def encode_int(value: int, width: int) -> str:
    """Encode an integer so that string order matches numeric order."""
    limit = 10**width
    if not -limit < value < limit:
        raise ValueError(f"{value} does not fit in {width} digits")
    if value >= 0:
        return f"{value:0{width}d}"
    return "-" + f"{limit + value:0{width}d}"


__all__ = [
    "END",
    "Exhausted",
    "FrontierKey",
    "Key",
    "encode_int",
    "pad",
    "prefix_equal",
]
