from __future__ import annotations


class KvfsError(Exception):
    """Base exception for errors raised by kinda_virtual_fs itself."""


class UnknownKeyError(KvfsError, LookupError):
    """Raised when a storage key has no entry."""

    def __init__(self, key: str) -> None:
        super().__init__(f"No entry with key {key} found")
        self.key = key
