"""In-memory file records, file handles and registries for the fake file system."""

from __future__ import annotations

import enum
import os
import posixpath
from dataclasses import dataclass
from datetime import datetime
from typing import Any


class FakeFileType(str, enum.Enum):
    """Kind of entry held by the fake file system."""

    FILE = "file"
    SYMLINK = "symlink"
    DIR = "dir"


def _join(path: str) -> str:
    """Clean a slash-separated path; an empty path stays empty."""
    if not path:
        return ""
    cleaned = posixpath.normpath(path)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def unified_path(path: str) -> str:
    """Return the registry key for ``path``: no drive, cleaned, slash-separated."""
    _, path = os.path.splitdrive(path)
    if os.sep != "/":
        path = path.replace(os.sep, "/")
    return _join(path)


@dataclass
class FakeFileStats:
    """Everything the fake file system knows about one path."""

    file_type: FakeFileType | None = None

    file_mode: int = 0
    flags: int = 0
    username: str = ""
    groupname: str = ""

    mod_time: datetime | None = None
    open: bool = False

    symlink_target: str = ""

    content: bytes = b""

    def string_contents(self) -> str:
        """Return the content decoded as UTF-8."""
        return self.content.decode()


@dataclass
class FakeFileInfo:
    """File information as seen when a fake file was stat'ed."""

    stats: FakeFileStats | None
    contents: bytes = b""

    def mode(self) -> int:
        return self.stats.file_mode

    def mod_time(self) -> datetime | None:
        return self.stats.mod_time

    def size(self) -> int:
        return len(self.contents)

    def is_dir(self) -> bool:
        return self.stats.file_type == FakeFileType.DIR


class FakeFile:
    """A handle on a path of a fake file system.

    ``fs`` must provide ``file_registry``, ``open_file_registry``,
    ``files_lock`` and ``get_or_create_file(path)``.
    """

    def __init__(self, path: str, fs: Any) -> None:
        self.path = path
        self.fs = fs

        self.stats: FakeFileStats | None = None

        self.write_err: BaseException | None = None
        self.contents: bytes = b""

        self.read_err: BaseException | None = None
        self.read_at_err: BaseException | None = None
        self.read_index = 0

        self.close_err: BaseException | None = None
        self.stat_err: BaseException | None = None

        existing = fs.file_registry.get(path)
        if existing is not None:
            self.contents = existing.content
            self.stats = existing
            self.stats.open = True

    @property
    def name(self) -> str:
        return self.path

    def __enter__(self) -> FakeFile:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def write(self, data: bytes) -> int:
        """Replace the file's content with ``data``."""
        if self.write_err is not None:
            raise self.write_err
        with self.fs.files_lock:
            stats = self.fs.get_or_create_file(self.path)
            stats.content = data
        self.contents = data
        return len(data)

    def read(self, size: int = -1) -> bytes:
        """Return the content once; later reads give ``b""`` until a seek."""
        if self.read_index >= len(self.contents):
            return b""
        data = self.contents if size is None or size < 0 else self.contents[:size]
        self.read_index = len(self.contents)
        if self.read_err is not None:
            raise self.read_err
        return data

    def read_at(self, size: int, offset: int) -> bytes:
        """Return up to ``size`` bytes starting at ``offset``."""
        data = self.contents[offset:]
        if size is not None and size >= 0:
            data = data[:size]
        if self.read_at_err is not None:
            raise self.read_at_err
        return data

    def write_at(self, data: bytes, offset: int) -> int:
        """Accept ``data`` without storing it."""
        return len(data)

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """Move the read position; only absolute positioning is supported."""
        if whence != os.SEEK_SET:
            raise ValueError('Invalid argument for "whence": only SeekStart is supported')
        self.read_index = offset
        return self.read_index

    def close(self) -> None:
        if self.stats is not None:
            self.stats.open = False
        self.fs.open_file_registry.remove(self.path)
        if self.close_err is not None:
            raise self.close_err

    def stat(self) -> FakeFileInfo:
        if self.stat_err is not None:
            raise self.stat_err
        return FakeFileInfo(stats=self.stats, contents=self.contents)


class FakeFileStatsRegistry:
    """File records keyed by unified path."""

    def __init__(self) -> None:
        self.files: dict[str, FakeFileStats] = {}

    def register(self, path: str, stats: FakeFileStats) -> None:
        self.files[unified_path(path)] = stats

    def get(self, path: str) -> FakeFileStats | None:
        return self.files.get(unified_path(path))

    def get_all(self) -> dict[str, FakeFileStats]:
        return self.files

    def remove(self, path: str) -> None:
        self.files.pop(unified_path(path), None)


class FakeFileRegistry:
    """Open file handles keyed by unified path."""

    def __init__(self) -> None:
        self.files: dict[str, FakeFile] = {}

    def register(self, path: str, file: FakeFile) -> None:
        self.files[unified_path(path)] = file

    def get(self, path: str) -> FakeFile | None:
        return self.files.get(unified_path(path))

    def remove(self, path: str) -> None:
        self.files.pop(unified_path(path), None)