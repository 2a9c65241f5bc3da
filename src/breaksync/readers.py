"""File-backed record streams and keyers for reconciliation jobs."""
from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Callable, Iterable, Iterator, Mapping, Sequence

from .config import KeyFieldConfig, SourceConfig
from .key import encode_int, pad

logger = logging.getLogger(__name__)

Record = Mapping[str, object]


class UnsortedSourceError(ValueError):
    """Raised when a source yields a key lower than the previous one."""


def iter_jsonl(path: Path) -> Iterator[Record]:
    with path.open("r", encoding="utf-8") as handle:
        for line in handle:
            if line.strip():
                yield json.loads(line)


def iter_csv(path: Path, delimiter: str = ",") -> Iterator[Record]:
    with path.open("r", encoding="utf-8", newline="") as handle:
        yield from csv.DictReader(handle, delimiter=delimiter)


def open_records(config: SourceConfig) -> Iterator[Record]:
    if not config.path.exists():
        raise FileNotFoundError(f"Source '{config.name}' not found: {config.path}")
    logger.info("Opening %s source %s from %s", config.format, config.name, config.path)
    if config.format == "csv":
        return iter_csv(config.path, delimiter=config.delimiter)
    return iter_jsonl(config.path)


def _encode_field(record: Record, key_field: KeyFieldConfig) -> str:
    try:
        value = record[key_field.field]
    except KeyError:
        raise KeyError(f"Record has no key field '{key_field.field}'") from None
    if key_field.kind == "int":
        return encode_int(int(value), key_field.width)
    if key_field.width is None:
        return str(value)
    return pad(value, key_field.width)


def build_keyer(fields: Sequence[KeyFieldConfig]) -> Callable[[Record], str]:
    """Concatenate the order-preserving encoding of each key field."""

    def _keyer(record: Record) -> str:
        return "".join(_encode_field(record, key_field) for key_field in fields)

    return _keyer


def ensure_ordered(
    records: Iterable[Record],
    keyer: Callable[[Record], str],
    name: str,
) -> Iterator[Record]:
    previous = None
    for index, record in enumerate(records):
        key = keyer(record)
        if previous is not None and key < previous:
            raise UnsortedSourceError(
                f"Source '{name}' is not sorted: record {index} key {key!r} < {previous!r}"
            )
        previous = key
        yield record


__all__ = [
    "UnsortedSourceError",
    "build_keyer",
    "ensure_ordered",
    "iter_csv",
    "iter_jsonl",
    "open_records",
]
