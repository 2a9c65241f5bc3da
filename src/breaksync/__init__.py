"""Break/sync synchronization of pre-sorted record streams."""
from importlib.metadata import version, PackageNotFoundError

from .key import END, Exhausted, Key, encode_int, pad, prefix_equal
from .rupture import Rupture, identity, truncate
from .source import CLOSED, Source, SyncSource, close
from .sync import Step, Synchronization

try:
    __version__ = version("breaksync")
except PackageNotFoundError:  # pragma: no cover - during local dev without install
    __version__ = "0.0.0"

__all__ = [
    "CLOSED",
    "END",
    "Exhausted",
    "Key",
    "Rupture",
    "Source",
    "Step",
    "SyncSource",
    "Synchronization",
    "__version__",
    "close",
    "encode_int",
    "identity",
    "pad",
    "prefix_equal",
    "truncate",
]
