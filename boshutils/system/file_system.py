"""Abstract file system operations and their option types."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import IO, Callable, Optional

WalkFunc = Callable[[str, Optional[os.stat_result], Optional[BaseException]], None]


@dataclass(frozen=True)
class StatOpts:
    """Options for stat calls; ``quiet`` suppresses logging."""

    quiet: bool = False


@dataclass(frozen=True)
class ReadOpts:
    """Options for reading files; ``quiet`` suppresses logging."""

    quiet: bool = False


@dataclass(frozen=True)
class ConvergeFileContentsOpts:
    """Options for converging file contents; ``dry_run`` writes nothing."""

    dry_run: bool = False


class FileSystem(ABC):
    """Operations on a file system, real or simulated."""

    @abstractmethod
    def home_dir(self, username: str) -> str:
        """Return the home directory of ``username``."""

    @abstractmethod
    def expand_path(self, path: str) -> str:
        """Expand a leading ``~`` and make ``path`` absolute."""

    @abstractmethod
    def mkdir_all(self, path: str, perm: int = 0o777) -> None:
        """Create ``path`` and its parents; existing dirs keep their permissions."""

    @abstractmethod
    def remove_all(self, path: str) -> None:
        """Remove a file or a directory tree."""

    @abstractmethod
    def chown(self, path: str, owner: str) -> None:
        """Change the owner of ``path``; ``owner`` is ``user`` or ``user:group``."""

    @abstractmethod
    def chmod(self, path: str, perm: int) -> None:
        """Change the permission bits of ``path``."""

    @abstractmethod
    def open_file(self, path: str, flags: int, perm: int = 0o666) -> IO:
        """Open ``path`` with ``os.O_*`` flags."""

    def write_file_string(self, path: str, content: str) -> None:
        """Write ``content`` as UTF-8 to ``path``."""
        self.write_file(path, content.encode())

    @abstractmethod
    def write_file(self, path: str, content: bytes) -> None:
        """Write ``content`` to ``path``, creating parent directories."""

    @abstractmethod
    def write_file_quietly(self, path: str, content: bytes) -> None:
        """Write ``content`` to ``path`` without logging."""

    @abstractmethod
    def converge_file_contents(
        self,
        path: str,
        content: bytes,
        opts: ConvergeFileContentsOpts | None = None,
    ) -> bool:
        """Make ``path`` hold ``content``; return whether it differed."""

    def read_file_string(self, path: str) -> str:
        """Read ``path`` and decode it as UTF-8."""
        return self.read_file(path).decode()

    def read_file(self, path: str) -> bytes:
        """Read the whole of ``path``."""
        return self.read_file_with_opts(path, ReadOpts())

    @abstractmethod
    def read_file_with_opts(self, path: str, opts: ReadOpts) -> bytes:
        """Read the whole of ``path`` with the given options."""

    @abstractmethod
    def file_exists(self, path: str) -> bool:
        """Tell whether something exists at ``path``."""

    def stat(self, path: str) -> os.stat_result:
        """Return information about ``path``, following symlinks."""
        return self.stat_with_opts(path, StatOpts())

    @abstractmethod
    def stat_with_opts(self, path: str, opts: StatOpts) -> os.stat_result:
        """Return information about ``path`` with the given options."""

    @abstractmethod
    def lstat(self, path: str) -> os.stat_result:
        """Return information about ``path`` without following symlinks."""

    @abstractmethod
    def rename(self, old_path: str, new_path: str) -> None:
        """Move ``old_path`` to ``new_path``, replacing what is there."""

    @abstractmethod
    def symlink(self, old_path: str, new_path: str) -> None:
        """Make ``new_path`` a symlink to ``old_path``, replacing what is there."""

    @abstractmethod
    def read_and_follow_link(self, symlink_path: str) -> str:
        """Return the path ``symlink_path`` finally resolves to."""

    @abstractmethod
    def readlink(self, symlink_path: str) -> str:
        """Return the target of ``symlink_path``."""

    @abstractmethod
    def copy_file(self, src_path: str, dst_path: str) -> None:
        """Copy a single file."""

    @abstractmethod
    def copy_dir(self, src_path: str, dst_path: str) -> None:
        """Copy a directory tree."""

    @abstractmethod
    def temp_file(self, prefix: str) -> IO:
        """Create a unique temporary file whose name starts with ``prefix``."""

    @abstractmethod
    def temp_dir(self, prefix: str) -> str:
        """Create a unique temporary directory whose name starts with ``prefix``."""

    @abstractmethod
    def change_temp_root(self, path: str) -> None:
        """Use ``path`` as the root for temporary files and directories."""

    @abstractmethod
    def glob(self, pattern: str) -> list[str]:
        """Return the paths matching a shell pattern."""

    @abstractmethod
    def recursive_glob(self, pattern: str) -> list[str]:
        """Return the paths matching a pattern that may contain ``**``."""

    @abstractmethod
    def walk(self, root: str, walk_func: WalkFunc) -> None:
        """Call ``walk_func(path, info, error)`` for every path under ``root``."""