# boshutils

Small building blocks for tools that run commands and touch the file system,
with fakes for use in tests.

## Install

```
pip install boshutils
pip install "boshutils[test]"   # with pytest for running the test suite
```

## What is inside

- `boshutils.system.commands` – the `Command` and `Result` dataclasses and the
  abstract `CmdRunner` and `Process` interfaces. `CmdRunner` provides
  `run_command`, `run_command_quietly` and `run_command_with_input` on top of
  `run_complex_command`; `Process.wait()` returns a
  `concurrent.futures.Future` that resolves to a `Result`.
- `boshutils.system.file_system` – the abstract `FileSystem` interface and the
  option types `StatOpts`, `ReadOpts` and `ConvergeFileContentsOpts`.
- `boshutils.system.os_file_system.OsFileSystem` – `FileSystem` on the real
  disk: `write_file`, `converge_file_contents`, `symlink`, `readlink`,
  `copy_file`, `copy_dir`, `temp_file`, `temp_dir`, `glob`, `recursive_glob`,
  `walk` and more. Failures are raised as `FileSystemError` (an `OSError`)
  or as the underlying `OSError`. Pass `strict_temp_root=True` to require
  `change_temp_root()` before any temporary file or directory is made.
- `boshutils.system.ip_helper.calculate_network_and_broadcast` – IPv4
  network, broadcast address and prefix length; IPv6 input gives
  `("", "", 0)`, unparsable input raises `ValueError`.
- `boshutils.uuid_generator` – the `Generator` interface and
  `UuidV4Generator`, which returns random version 4 UUID strings.
- `boshutils.work` – `Pool(count=...)` runs callables on a fixed number of
  worker threads; a worker stops taking tasks after one raises, and all
  raised errors come back together as a `MultiError`.
- Fakes for tests:
  - `boshutils.system.fakes.fake_cmd_runner` – `FakeCmdRunner` records every
    call and answers from results registered with `add_cmd_result`
    (`FakeCmdResult`, optionally `sticky`); `add_process` registers
    `FakeProcess` objects for `run_complex_command_async`.
  - `boshutils.system.fakes.fake_files` – in-memory file records
    (`FakeFileStats`, `FakeFileType`, `FakeFileInfo`), the `FakeFile` handle,
    the `FakeFileStatsRegistry` and `FakeFileRegistry` keyed by
    `unified_path(path)`.
  - `boshutils.fake_uuid_generator.FakeGenerator` – returns `fake-uuid-0`,
    `fake-uuid-1`, … or a fixed value or error.

## Examples

```python
from boshutils.system.ip_helper import calculate_network_and_broadcast

calculate_network_and_broadcast("192.168.195.6", "255.255.255.0")
# ("192.168.195.0", "192.168.195.255", 24)
```

```python
from boshutils.work import Pool, MultiError

def fail():
    raise RuntimeError("boom")

try:
    Pool(count=2).parallel_do(lambda: None, fail)
except MultiError as err:
    print(err.errors)
```

```python
from boshutils.system.fakes.fake_cmd_runner import FakeCmdResult, FakeCmdRunner

runner = FakeCmdRunner()
runner.add_cmd_result("foo bar", FakeCmdResult(stdout="nice"))
result = runner.run_command("foo", "bar")
assert result.stdout == "nice"
assert runner.run_commands == [["foo", "bar"]]
```

```python
import logging
from boshutils.system.os_file_system import OsFileSystem

fs = OsFileSystem(logging.getLogger("fs"))
path = fs.temp_dir("example-") + "/app.conf"
fs.write_file_string(path, "key=value")
assert fs.converge_file_contents(path, b"key=value") is False
```

## What the package does not do

- It has no runner that starts real programs: `CmdRunner` and `Process` are
  interfaces only, and `FakeCmdRunner` is the only implementation. Errors
  describing a failed command are whatever a runner puts in `Result.error`.
- It has no complete in-memory file system. `fake_files` supplies the
  records, handles and registries; `FakeFile` expects an object providing
  `file_registry`, `open_file_registry`, `files_lock` and
  `get_or_create_file(path)`, which you supply yourself.

## Tests

```
pytest
```