import os
import threading
from datetime import datetime

import pytest

from boshutils.system.fakes.fake_files import (
    FakeFile,
    FakeFileInfo,
    FakeFileRegistry,
    FakeFileStats,
    FakeFileStatsRegistry,
    FakeFileType,
    unified_path,
)


class _Store:
    def __init__(self):
        self.file_registry = FakeFileStatsRegistry()
        self.open_file_registry = FakeFileRegistry()
        self.files_lock = threading.RLock()

    def get_or_create_file(self, path):
        stats = self.file_registry.get(path)
        if stats is None:
            stats = FakeFileStats()
            self.file_registry.register(path, stats)
        return stats


@pytest.fixture
def store():
    return _Store()


def test_unified_path_collapses_parent_reference():
    assert unified_path("foo/bar/..") == "foo"


def test_unified_path_keeps_empty_path_empty():
    assert unified_path("") == ""


@pytest.mark.parametrize("path", ["/a//b/../c", "x/./y", "//z", "C:/potato", "rel"])
def test_unified_path_is_idempotent(path):
    once = unified_path(path)
    assert unified_path(once) == once
    assert "//" not in once


def test_stats_registry_looks_up_equivalent_paths():
    registry = FakeFileStatsRegistry()
    stats = FakeFileStats(content=b"abc")
    registry.register("/a//b/", stats)
    assert registry.get("/a/b") is stats
    assert list(registry.get_all()) == [unified_path("/a/b")]
    registry.remove("/a/./b")
    assert registry.get("/a/b") is None
    assert registry.get_all() == {}


def test_stats_registry_remove_missing_is_harmless():
    registry = FakeFileStatsRegistry()
    registry.remove("/nothing")
    assert registry.get_all() == {}


def test_file_registry_register_get_remove(store):
    registry = FakeFileRegistry()
    handle = FakeFile("/x", store)
    registry.register("/x/../x", handle)
    assert registry.get("/x") is handle
    registry.remove("/x")
    assert registry.get("/x") is None


def test_string_contents_decodes_content():
    assert FakeFileStats(content=b"hello").string_contents() == "hello"


def test_new_file_picks_up_existing_stats(store):
    stats = FakeFileStats(file_type=FakeFileType.FILE, content=b"data")
    store.file_registry.register("/f", stats)
    handle = FakeFile("/f", store)
    assert handle.stats is stats
    assert handle.contents == b"data"
    assert stats.open is True
    assert handle.name == "/f"


def test_new_file_without_stats(store):
    handle = FakeFile("/missing", store)
    assert handle.stats is None
    assert handle.contents == b""


def test_write_replaces_registered_content(store):
    handle = FakeFile("/w", store)
    assert handle.write(b"first") == 5
    assert handle.write(b"second") == 6
    assert store.file_registry.get("/w").content == b"second"
    assert handle.contents == b"second"


def test_write_error_is_raised(store):
    handle = FakeFile("/w", store)
    handle.write_err = OSError("boom")
    with pytest.raises(OSError, match="boom"):
        handle.write(b"x")
    assert store.file_registry.get("/w") is None


def test_read_returns_content_once_until_seek(store):
    store.file_registry.register("/r", FakeFileStats(content=b"abc"))
    handle = FakeFile("/r", store)
    assert handle.read() == b"abc"
    assert handle.read() == b""
    assert handle.seek(0) == 0
    assert handle.read() == b"abc"


def test_read_error_is_raised(store):
    store.file_registry.register("/r", FakeFileStats(content=b"abc"))
    handle = FakeFile("/r", store)
    handle.read_err = OSError("bad read")
    with pytest.raises(OSError, match="bad read"):
        handle.read()


def test_read_at_returns_tail(store):
    store.file_registry.register("/r", FakeFileStats(content=b"abcdef"))
    handle = FakeFile("/r", store)
    assert handle.read_at(-1, 2) == b"abcdef"[2:]
    assert handle.read_at(2, 1) == b"abcdef"[1:3]


def test_read_at_error_is_raised(store):
    handle = FakeFile("/r", store)
    handle.read_at_err = OSError("bad")
    with pytest.raises(OSError, match="bad"):
        handle.read_at(1, 0)


def test_write_at_reports_length_without_storing(store):
    handle = FakeFile("/w", store)
    assert handle.write_at(b"xyz", 10) == 3
    assert store.file_registry.get("/w") is None


def test_seek_rejects_relative_whence(store):
    handle = FakeFile("/s", store)
    with pytest.raises(ValueError, match="only SeekStart is supported"):
        handle.seek(0, os.SEEK_CUR)


def test_close_marks_closed_and_unregisters(store):
    store.file_registry.register("/c", FakeFileStats())
    handle = FakeFile("/c", store)
    store.open_file_registry.register("/c", handle)
    handle.close()
    assert handle.stats.open is False
    assert store.open_file_registry.get("/c") is None


def test_close_error_is_raised(store):
    handle = FakeFile("/c", store)
    handle.close_err = OSError("close failed")
    with pytest.raises(OSError, match="close failed"):
        handle.close()


def test_context_manager_closes(store):
    store.file_registry.register("/c", FakeFileStats())
    with FakeFile("/c", store) as handle:
        assert handle.stats.open is True
    assert handle.stats.open is False


def test_stat_reports_stats(store):
    when = datetime(2020, 1, 2, 3, 4, 5)
    stats = FakeFileStats(
        file_type=FakeFileType.DIR, file_mode=0o750, mod_time=when, content=b"1234"
    )
    store.file_registry.register("/d", stats)
    info = FakeFile("/d", store).stat()
    assert info.is_dir() is True
    assert info.mode() == 0o750
    assert info.mod_time() == when
    assert info.size() == len(b"1234")


def test_stat_of_regular_file_is_not_dir():
    info = FakeFileInfo(stats=FakeFileStats(file_type=FakeFileType.FILE), contents=b"")
    assert info.is_dir() is False
    assert info.size() == 0


def test_stat_error_is_raised(store):
    handle = FakeFile("/e", store)
    handle.stat_err = OSError("no stat")
    with pytest.raises(OSError, match="no stat"):
        handle.stat()