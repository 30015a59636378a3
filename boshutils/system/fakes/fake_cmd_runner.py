"""A command runner that records calls and returns canned results."""

from __future__ import annotations

import io
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import IO, Callable

from boshutils.system.commands import CmdRunner, Command, Process, Result


@dataclass
class FakeCmdResult:
    """A canned result; a sticky one is returned for every call."""

    stdout: str = ""
    stderr: str = ""
    exit_status: int = 0
    error: BaseException | None = None
    sticky: bool = False


@dataclass
class FakeProcess(Process):
    """A process whose outcome is set up in advance."""

    start_err: BaseException | None = None

    wait_future: Future | None = None
    waited: bool = False
    wait_result: Result = field(default_factory=Result)

    terminated_nicely: bool = False
    terminated_nicely_callback: Callable[[FakeProcess], None] | None = None
    terminate_nicely_kill_grace_period: float = 0.0
    terminate_nicely_err: BaseException | None = None

    stdout: IO | None = None
    stderr: IO | None = None

    def wait(self) -> Future:
        if self.waited:
            raise RuntimeError("Cannot wait() on process multiple times")
        self.waited = True
        self.wait_future = Future()
        if self.terminated_nicely_callback is None:
            self.wait_future.set_result(self.wait_result)
        return self.wait_future

    def terminate_nicely(self, kill_grace_period: float) -> None:
        self.terminate_nicely_kill_grace_period = kill_grace_period
        self.terminated_nicely = True
        if self.terminated_nicely_callback is not None:
            self.terminated_nicely_callback(self)
        if self.terminate_nicely_err is not None:
            raise self.terminate_nicely_err


def _write_to(target: IO, text: str) -> None:
    if isinstance(target, io.TextIOBase):
        target.write(text)
    else:
        target.write(text.encode())


class FakeCmdRunner(CmdRunner):
    """Records every command and answers from registered results."""

    def __init__(self) -> None:
        self._command_results: dict[str, list[FakeCmdResult]] = {}
        self._results_lock = threading.RLock()
        self._processes: dict[str, list[FakeProcess]] = {}
        self._processes_lock = threading.RLock()
        self._callbacks: dict[str, Callable[[], None]] = {}

        self.run_complex_commands: list[Command] = []
        self.run_commands: list[list[str]] = []
        self.run_commands_with_input: list[list[str]] = []
        self.run_commands_quietly: list[list[str]] = []

        self.command_exists_value = False
        self.available_commands: dict[str, bool] = {}

    def run_complex_command(self, cmd: Command) -> Result:
        with self._results_lock:
            self.run_complex_commands.append(cmd)
            run_cmd = [cmd.name, *cmd.args]
            self._run_callback(run_cmd)
            result = self._outputs_for(run_cmd)
            if cmd.stdout is not None:
                _write_to(cmd.stdout, result.stdout)
            if cmd.stderr is not None:
                _write_to(cmd.stderr, result.stderr)
            return result

    def run_complex_command_async(self, cmd: Command) -> Process:
        with self._processes_lock:
            self.run_complex_commands.append(cmd)
            run_cmd = [cmd.name, *cmd.args]
            self._run_callback(run_cmd)
            full_cmd = " ".join(run_cmd)

            processes = self._processes.get(full_cmd)
            if not processes:
                raise LookupError(f"Failed to find process for {full_cmd}")

            processes[0].stdout = cmd.stdout
            processes[0].stderr = cmd.stderr

            for proc in processes:
                if not proc.waited:
                    if proc.start_err is not None:
                        raise proc.start_err
                    return proc

            raise LookupError(f"Failed to find available process for {full_cmd}")

    def run_command(self, cmd_name: str, *args: str) -> Result:
        with self._results_lock:
            run_cmd = [cmd_name, *args]
            self.run_commands.append(run_cmd)
            self._run_callback(run_cmd)
            return self._outputs_for(run_cmd)

    def clear_command_history(self) -> None:
        with self._results_lock:
            self.run_commands = []
            self.run_commands_quietly = []
            self.run_commands_with_input = []

    def run_command_quietly(self, cmd_name: str, *args: str) -> Result:
        with self._results_lock:
            run_cmd = [cmd_name, *args]
            self.run_commands_quietly.append(run_cmd)
            self._run_callback(run_cmd)
            return self._outputs_for(run_cmd)

    def run_command_with_input(self, text: str, cmd_name: str, *args: str) -> Result:
        with self._results_lock:
            run_cmd = [text, cmd_name, *args]
            self.run_commands_with_input.append(run_cmd)
            self._run_callback(run_cmd)
            return self._outputs_for(run_cmd)

    def command_exists(self, cmd_name: str) -> bool:
        return self.command_exists_value or self.available_commands.get(cmd_name, False)

    def add_cmd_result(self, full_cmd: str, result: FakeCmdResult) -> None:
        with self._results_lock:
            self._command_results.setdefault(full_cmd, []).append(result)

    def add_process(self, full_cmd: str, process: FakeProcess) -> None:
        with self._processes_lock:
            self._processes.setdefault(full_cmd, []).append(process)

    def set_cmd_callback(self, full_cmd: str, callback: Callable[[], None]) -> None:
        self._callbacks[full_cmd] = callback

    def _outputs_for(self, run_cmd: list[str]) -> Result:
        full_cmd = " ".join(run_cmd)
        results = self._command_results.get(full_cmd)
        if not results:
            return Result(stdout="", stderr="", exit_status=-1, error=None)

        result = results[0]
        if not result.sticky:
            remaining = results[1:]
            if remaining:
                self._command_results[full_cmd] = remaining
            else:
                del self._command_results[full_cmd]

        return Result(
            stdout=result.stdout,
            stderr=result.stderr,
            exit_status=result.exit_status,
            error=result.error,
        )

    def _run_callback(self, run_cmd: list[str]) -> None:
        callback = self._callbacks.get(" ".join(run_cmd))
        if callback is not None:
            callback()