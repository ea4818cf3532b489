"""Map in-memory byte buffers to self-cleaning temporary files."""

from .config import KvfsConfig, load_config
from .entry import Entry
from .errors import KvfsError, UnknownKeyError
from .storage import Storage

__all__ = [
    "Entry",
    "KvfsConfig",
    "KvfsError",
    "Storage",
    "UnknownKeyError",
    "load_config",
]
