from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import TracebackType

from .config import KvfsConfig
from .entry import ByteSource, Entry
from .errors import UnknownKeyError

logger = logging.getLogger(__name__)


class Storage:
    """Keyed container of entries.

    Works like a dict: ``add`` replaces and returns the previous entry under
    the same key. An entry dropped by the caller after ``add``, ``remove`` or
    ``clear`` unmaps itself.
    """

    def __init__(
        self,
        entries: Mapping[str, Entry | ByteSource] | None = None,
        *,
        config: KvfsConfig | None = None,
    ) -> None:
        self.config = config or KvfsConfig()
        self._temp_dir = self.config.resolve_temp_dir()
        self.entries: dict[str, Entry] = {}
        for key, value in (entries or {}).items():
            self.add(key, value)

    def add(self, key: object, entry: Entry | ByteSource) -> Entry | None:
        key = str(key)
        previous = self.entries.get(key)
        self.entries[key] = Entry.wrap(entry, temp_dir=self._temp_dir)
        if previous is not None:
            logger.debug("storage replace key=%s previous=%s", key, previous.identifier)
        return previous

    def get(self, key: object) -> Entry | None:
        return self.entries.get(str(key))

    def remove(self, key: object) -> Entry | None:
        return self.entries.pop(str(key), None)

    def map(self, key: object) -> Path:
        entry = self.get(key)
        if entry is None:
            raise UnknownKeyError(str(key))
        return entry.map()

    def unmap(self, key: object) -> None:
        """Unmap the entry under ``key``; an unknown key has nothing to unmap."""
        entry = self.get(key)
        if entry is not None:
            entry.unmap()

    def clear(self) -> None:
        self.entries.clear()

    def release(self) -> None:
        for entry in self.entries.values():
            entry.release()
        self.entries.clear()

    def __enter__(self) -> Storage:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.release()

    def __contains__(self, key: object) -> bool:
        return str(key) in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
