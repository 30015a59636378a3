"""File system operations backed by the operating system."""

from __future__ import annotations

import getpass
import glob as _glob
import logging
import os
import shutil
import stat
import tempfile
from typing import IO, Any

from boshutils.system.file_system import (
    ConvergeFileContentsOpts,
    FileSystem,
    ReadOpts,
    StatOpts,
    WalkFunc,
)

_DEFAULT_LOGGER = logging.getLogger("boshutils.system")
_IS_WINDOWS = os.name == "nt"


class FileSystemError(OSError):
    """A file system operation failed."""


def _wrap(message: str, err: BaseException) -> FileSystemError:
    return FileSystemError(f"{message}: {err}")


def _mode_for(flags: int) -> str:
    access = flags & (os.O_RDONLY | os.O_WRONLY | os.O_RDWR)
    append = bool(flags & os.O_APPEND)
    if access == os.O_RDWR:
        return "a+b" if append else "r+b"
    if access == os.O_WRONLY:
        return "ab" if append else "wb"
    return "rb"


def _open(path: str, flags: int, perm: int) -> IO:
    flags |= getattr(os, "O_BINARY", 0)
    return open(path, _mode_for(flags), opener=lambda p, _f: os.open(p, flags, perm))


class OsFileSystem(FileSystem):
    """The real file system.

    With ``strict_temp_root`` set, temporary files and directories may only
    be created after a root has been chosen with :meth:`change_temp_root`.
    """

    def __init__(self, logger: Any = None, strict_temp_root: bool = False) -> None:
        self._logger = logger if logger is not None else _DEFAULT_LOGGER
        self._temp_root = ""
        self._requires_temp_root = strict_temp_root

    def _debug(self, message: str, *args: Any) -> None:
        self._logger.debug(message, *args)

    def _debug_details(self, message: str, details: bytes) -> None:
        with_details = getattr(self._logger, "debug_with_details", None)
        if with_details is not None:
            with_details(message, details)
        else:
            self._logger.debug("%s: %r", message, details)

    def home_dir(self, username: str) -> str:
        self._debug("Getting HomeDir for %s", username)
        if _IS_WINDOWS:
            current = getpass.getuser()
            if username and username.casefold() != current.casefold():
                raise FileSystemError(f"Failed to get user '{username}' home directory")
            directory = os.path.expanduser("~")
        else:
            directory = os.path.expanduser(f"~{username}")
            if directory.startswith("~"):
                raise FileSystemError(f"Failed to get user '{username}' home directory")
        self._debug("HomeDir is %s", directory)
        return directory

    def expand_path(self, path: str) -> str:
        self._debug("Expanding path for '%s'", path)
        if path.startswith("~"):
            home = os.path.expanduser("~")
            if home.startswith("~"):
                raise FileSystemError("Getting current user home dir: unknown home")
            path = os.path.join(home, path[1:].lstrip("/\\"))
        return os.path.abspath(path)

    def mkdir_all(self, path: str, perm: int = 0o777) -> None:
        self._debug("Making dir %s with perm %#o", path, perm)
        os.makedirs(path, perm, exist_ok=True)

    def remove_all(self, path: str) -> None:
        self._debug("Remove all %s", path)
        try:
            info = os.lstat(path)
        except FileNotFoundError:
            return
        if stat.S_ISDIR(info.st_mode):
            shutil.rmtree(path)
        else:
            os.remove(path)

    def chown(self, path: str, owner: str) -> None:
        self._debug("Chown %s to user %s", path, owner)
        if _IS_WINDOWS:
            return
        if owner == "":
            raise FileSystemError("Failed to lookup user ''")

        import pwd

        user, _, group_name = owner.partition(":")
        group: int | str
        if ":" not in owner:
            try:
                group = pwd.getpwnam(user).pw_gid
            except KeyError as err:
                raise _wrap(f"Failed to lookup user '{user}'", err) from err
        else:
            group = group_name

        try:
            shutil.chown(path, user, group)
        except (OSError, LookupError) as err:
            raise _wrap("Failed to chown", err) from err

    def chmod(self, path: str, perm: int) -> None:
        self._debug("Chmod %s to %#o", path, perm)
        os.chmod(path, perm)

    def open_file(self, path: str, flags: int, perm: int = 0o666) -> IO:
        return _open(path, flags, perm)

    def write_file_string(self, path: str, content: str) -> None:
        self.write_file(path, content.encode())

    def write_file(self, path: str, content: bytes) -> None:
        self._write(path, content, log=True)

    def write_file_quietly(self, path: str, content: bytes) -> None:
        self._write(path, content, log=False)

    def _write(self, path: str, content: bytes, log: bool) -> None:
        if log:
            self._debug("Writing %s", path)
        try:
            self.mkdir_all(os.path.dirname(path) or ".", 0o777)
        except OSError as err:
            raise _wrap("Creating dir to write file", err) from err

        try:
            file = _open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o666)
        except OSError as err:
            raise _wrap(f"Creating file {path}", err) from err

        with file:
            if log:
                self._debug_details("Write content", content)
            try:
                file.write(content)
            except OSError as err:
                raise _wrap(f"Writing content to file {path}", err) from err

    def converge_file_contents(
        self,
        path: str,
        content: bytes,
        opts: ConvergeFileContentsOpts | None = None,
    ) -> bool:
        converge = not (opts is not None and opts.dry_run)

        try:
            info = self.stat(path)
        except OSError:
            info = None
        if info is None or info.st_size != len(content):
            if converge:
                self.write_file(path, content)
            return True

        try:
            file = _open(path, os.O_CREAT | os.O_RDWR, 0o666)
        except OSError as err:
            raise _wrap(f"Creating file {path}", err) from err
        with file:
            try:
                existing = file.read()
            except OSError as err:
                raise _wrap(f"Reading file {path}", err) from err

        if existing == content:
            self._debug("Skipping writing %s because contents are identical", path)
            return False

        if converge:
            self._debug("File %s will be overwritten", path)
            self.write_file(path, content)
        return True

    def read_file_string(self, path: str) -> str:
        return self.read_file(path).decode()

    def read_file(self, path: str) -> bytes:
        return self.read_file_with_opts(path, ReadOpts())

    def read_file_with_opts(self, path: str, opts: ReadOpts) -> bytes:
        if not opts.quiet:
            self._debug("Reading file %s", path)
        try:
            file = _open(path, os.O_RDONLY, 0)
        except OSError as err:
            raise _wrap(f"Opening file {path}", err) from err
        with file:
            try:
                content = file.read()
            except OSError as err:
                raise _wrap(f"Reading file content {path}", err) from err
        if not opts.quiet:
            self._debug_details("Read content", content)
        return content

    def file_exists(self, path: str) -> bool:
        self._debug("Checking if file exists %s", path)
        try:
            self.stat(path)
        except FileNotFoundError:
            return False
        except OSError:
            return True
        return True

    def stat(self, path: str) -> os.stat_result:
        return self.stat_with_opts(path, StatOpts())

    def stat_with_opts(self, path: str, opts: StatOpts) -> os.stat_result:
        if not opts.quiet:
            self._debug("Stat '%s'", path)
        return os.stat(path)

    def lstat(self, path: str) -> os.stat_result:
        self._debug("Lstat '%s'", path)
        return os.lstat(path)

    def rename(self, old_path: str, new_path: str) -> None:
        self._debug("Renaming %s to %s", old_path, new_path)
        try:
            self.remove_all(new_path)
        except OSError:
            pass
        os.replace(old_path, new_path)

    def symlink(self, old_path: str, new_path: str) -> None:
        self._debug("Symlinking oldPath %s with newPath %s", old_path, new_path)
        source, target = old_path, new_path
        if _IS_WINDOWS:
            source, target = os.path.abspath(old_path), os.path.abspath(new_path)

        try:
            info = self.lstat(target)
        except OSError:
            info = None
        if info is not None:
            if stat.S_ISLNK(info.st_mode):
                try:
                    current = self.readlink(target)
                except OSError as err:
                    raise _wrap(f"Reading link for {target}", err) from err
                if os.path.normpath(source) == os.path.normpath(current):
                    return
            try:
                self.remove_all(target)
            except OSError as err:
                raise _wrap(f"Removing new path at {target}", err) from err

        containing_dir = os.path.dirname(target) or "."
        if not self.file_exists(containing_dir):
            try:
                self.mkdir_all(containing_dir, 0o700)
            except OSError:
                pass

        os.symlink(source, target, target_is_directory=os.path.isdir(source))

    def read_and_follow_link(self, symlink_path: str) -> str:
        return os.path.realpath(symlink_path, strict=True)

    def readlink(self, symlink_path: str) -> str:
        return os.readlink(symlink_path)

    def copy_file(self, src_path: str, dst_path: str) -> None:
        self._debug("Copying file '%s' to '%s'", src_path, dst_path)
        try:
            src = _open(src_path, os.O_RDONLY, 0)
        except OSError as err:
            raise _wrap("Opening source path", err) from err
        with src:
            try:
                src_info = self.stat(src_path)
            except OSError as err:
                raise _wrap("Stating source path", err) from err
            try:
                dst = _open(
                    dst_path,
                    os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
                    stat.S_IMODE(src_info.st_mode),
                )
            except OSError as err:
                raise _wrap("Creating destination file", err) from err
            with dst:
                try:
                    shutil.copyfileobj(src, dst)
                except OSError as err:
                    raise _wrap("Copying file", err) from err

    def copy_dir(self, src_path: str, dst_path: str) -> None:
        self._debug("Copying dir '%s' to '%s'", src_path, dst_path)
        try:
            source_info = self.stat(src_path)
        except OSError as err:
            raise _wrap(f"Reading dir stats for '{src_path}'", err) from err

        try:
            self.mkdir_all(dst_path, stat.S_IMODE(source_info.st_mode))
        except OSError as err:
            raise _wrap(f"Making destination dir '{dst_path}'", err) from err

        try:
            with os.scandir(src_path) as entries:
                children = [(entry.name, entry.is_dir(follow_symlinks=False)) for entry in entries]
        except OSError as err:
            raise _wrap(f"Listing contents of source dir '{src_path}'", err) from err

        for name, is_dir in children:
            child_src = os.path.join(src_path, name)
            child_dst = os.path.join(dst_path, name)
            if is_dir:
                try:
                    self.copy_dir(child_src, child_dst)
                except OSError as err:
                    raise _wrap(f"Copying sub-dir '{child_src}' to '{child_dst}'", err) from err
            else:
                try:
                    self.copy_file(child_src, child_dst)
                except OSError as err:
                    raise _wrap(f"Copying file '{child_src}' to '{child_dst}'", err) from err

    def temp_file(self, prefix: str) -> IO:
        self._debug("Creating temp file with prefix %s", prefix)
        if not self._temp_root and self._requires_temp_root:
            raise FileSystemError(
                "Set a temp directory root with ChangeTempRoot before making temp files"
            )
        return tempfile.NamedTemporaryFile(
            prefix=prefix, dir=self._temp_root or None, delete=False
        )

    def temp_dir(self, prefix: str) -> str:
        self._debug("Creating temp dir with prefix %s", prefix)
        if not self._temp_root and self._requires_temp_root:
            raise FileSystemError(
                "Set a temp directory root with ChangeTempRoot before making temp directories"
            )
        return tempfile.mkdtemp(prefix=prefix, dir=self._temp_root or None)

    def change_temp_root(self, path: str) -> None:
        self.mkdir_all(path, 0o777)
        self._temp_root = path

    def glob(self, pattern: str) -> list[str]:
        self._debug("Glob '%s'", pattern)
        return sorted(_glob.glob(pattern))

    def recursive_glob(self, pattern: str) -> list[str]:
        self._debug("RecursiveGlob '%s'", pattern)
        return sorted(_glob.glob(pattern, recursive=True))

    def walk(self, root: str, walk_func: WalkFunc) -> None:
        try:
            info = os.lstat(root)
        except OSError as err:
            walk_func(root, None, err)
            return
        self._walk(root, info, walk_func)

    def _walk(self, path: str, info: os.stat_result, walk_func: WalkFunc) -> None:
        if not stat.S_ISDIR(info.st_mode):
            walk_func(path, info, None)
            return

        try:
            names = sorted(os.listdir(path))
        except OSError as err:
            walk_func(path, info, err)
            return
        walk_func(path, info, None)

        for name in names:
            child = os.path.join(path, name)
            try:
                child_info = os.lstat(child)
            except OSError as err:
                walk_func(child, None, err)
                continue
            self._walk(child, child_info, walk_func)