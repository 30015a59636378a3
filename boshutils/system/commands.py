"""Command descriptions, results and the abstract command runner."""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import IO


@dataclass
class Command:
    """Describes a program to run and how to run it."""

    name: str
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)
    use_isolated_env: bool = False

    working_dir: str | None = None

    # On Linux, when enabled, the child stays in the caller's process group.
    keep_attached: bool = False

    # Don't log stdout/stderr contents.
    quiet: bool = False

    stdin: IO | None = None

    # Output is captured into the Result unless custom writers are given.
    stdout: IO | None = None
    stderr: IO | None = None


@dataclass
class Result:
    """Outcome of a finished command.

    ``error`` holds the exception describing a failed run (for example a
    non-zero exit status), or ``None`` when the command succeeded.
    """

    stdout: str = ""
    stderr: str = ""
    exit_status: int = 0
    error: BaseException | None = None


class Process(ABC):
    """A started command."""

    @abstractmethod
    def wait(self) -> Future[Result]:
        """Return a future that resolves to the process result.

        Must be called only once.
        """

    @abstractmethod
    def terminate_nicely(self, kill_grace_period: float) -> None:
        """Ask the process to stop, killing it after ``kill_grace_period`` seconds.

        May be called several times, but only after :meth:`wait`.
        """


class CmdRunner(ABC):
    """Runs external commands.

    ``run_complex_command`` returns a Result whose ``error`` is ``None``
    when the command ran and exited with status zero, and is set when the
    command exited with a non-zero status or could not be run.
    """

    @abstractmethod
    def run_complex_command(self, cmd: Command) -> Result:
        """Run ``cmd`` to completion."""

    @abstractmethod
    def run_complex_command_async(self, cmd: Command) -> Process:
        """Start ``cmd`` and return the running process."""

    @abstractmethod
    def command_exists(self, cmd_name: str) -> bool:
        """Tell whether ``cmd_name`` can be found on the search path."""

    def run_command(self, cmd_name: str, *args: str) -> Result:
        """Run a program with arguments."""
        return self.run_complex_command(Command(name=cmd_name, args=list(args)))

    def run_command_quietly(self, cmd_name: str, *args: str) -> Result:
        """Run a program without logging its output."""
        return self.run_complex_command(
            Command(name=cmd_name, args=list(args), quiet=True)
        )

    def run_command_with_input(self, text: str, cmd_name: str, *args: str) -> Result:
        """Run a program feeding ``text`` to its standard input."""
        return self.run_complex_command(
            Command(name=cmd_name, args=list(args), stdin=io.StringIO(text))
        )