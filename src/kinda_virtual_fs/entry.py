from __future__ import annotations

import logging
import tempfile
import time
import weakref
from collections.abc import Iterable
from pathlib import Path
from types import TracebackType

logger = logging.getLogger(__name__)

ENTRY_SUFFIX = ".kvfs"

ByteSource = bytes | bytearray | memoryview | str | Iterable[int]


def build_identifier(timestamp_micros: int, size: int) -> str:
    return f"{timestamp_micros:x}-{size:x}{ENTRY_SUFFIX}"


def temp_path_for(identifier: str, temp_dir: Path | None = None) -> Path:
    base_dir = temp_dir if temp_dir is not None else Path(tempfile.gettempdir())
    return base_dir / identifier


def _now_micros() -> int:
    try:
        return max(time.time_ns() // 1_000, 0)
    except OSError:
        return 0


def _to_bytes(data: ByteSource) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, int):
        # bytes(int) would silently allocate a zero-filled buffer
        raise TypeError("Entry data must be a byte sequence, not int")
    return bytes(data)


def _discard_file(identifier: str, temp_dir: Path | None) -> None:
    path = temp_path_for(identifier, temp_dir)
    try:
        if path.exists():
            path.unlink()
    except OSError as exc:
        logger.debug("entry cleanup failed path=%s error=%s", path, exc)


class Entry:
    """In-memory byte buffer that can be mapped to a temporary file.

    The file name is derived once from the construction time (microseconds
    since the Unix epoch) and the buffer length, so two entries created in
    the same microsecond with the same length share a path. The mapped file
    is removed when the entry is garbage collected or when the interpreter
    exits. ``release()`` removes it early without disarming that cleanup.
    """

    def __init__(self, data: ByteSource, *, temp_dir: str | Path | None = None) -> None:
        self._data = _to_bytes(data)
        self._identifier = build_identifier(_now_micros(), len(self._data))
        self._temp_dir = Path(temp_dir) if temp_dir is not None else None
        self._finalizer = weakref.finalize(
            self, _discard_file, self._identifier, self._temp_dir
        )

    @classmethod
    def wrap(cls, value: Entry | ByteSource, *, temp_dir: str | Path | None = None) -> Entry:
        if isinstance(value, Entry):
            return value
        return cls(value, temp_dir=temp_dir)

    @property
    def identifier(self) -> str:
        return self._identifier

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def temp_dir(self) -> Path | None:
        return self._temp_dir

    @property
    def temp_path(self) -> Path:
        return temp_path_for(self._identifier, self._temp_dir)

    @property
    def is_mapped(self) -> bool:
        return self.temp_path.exists()

    def map(self) -> Path:
        """Write the buffer to its temp path unless a file is already there.

        Returns:
            The temp path. ``OSError`` from the write propagates unchanged.
        """
        path = self.temp_path
        if not path.exists():
            path.write_bytes(self._data)
            logger.debug("entry map path=%s bytes=%s", path, len(self._data))
        return path

    def unmap(self) -> None:
        path = self.temp_path
        if path.exists():
            path.unlink()
            logger.debug("entry unmap path=%s", path)

    def release(self) -> None:
        """Remove the mapped file now, swallowing errors.

        The cleanup on garbage collection stays armed, so a file mapped again
        after ``release()`` is still removed when the entry goes away.
        """
        _discard_file(self._identifier, self._temp_dir)

    def __enter__(self) -> Entry:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.release()

    def __bytes__(self) -> bytes:
        return self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Entry(identifier={self._identifier!r}, size={len(self._data)})"
