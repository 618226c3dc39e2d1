"""Utilities for executing toolchain commands with optional dry-run support."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Mapping, Sequence
import os
import re
import subprocess

from .console import Console

_ENV_VARIABLE_PATTERN = re.compile(r"\$(\w+)")


def substitute_environment(
    command: Sequence[str], env: Mapping[str, str] | None = None
) -> List[str]:
    """Replace the first ``$NAME`` reference in each argument with its environment value.

    Unset variables expand to an empty string. Only the first reference in an
    argument is expanded; later ones are left untouched.
    """

    source = os.environ if env is None else env
    return [
        _ENV_VARIABLE_PATTERN.sub(lambda match: source.get(match.group(1), ""), part, count=1)
        for part in command
    ]


def describe_command(executable: str, arguments: Sequence[str]) -> str:
    if not arguments:
        return executable
    return f'{executable} "' + '" "'.join(arguments) + '"'


@dataclass
class CommandResult:
    """Represents the outcome of an executed command."""

    command: Sequence[str]
    returncode: int
    stdout: str
    stderr: str
    streamed: bool = False


class ExecutionError(RuntimeError):
    """Raised when a blocking command exits with a non-zero status."""

    def __init__(self, result: CommandResult):
        message = f"{result.command[0] if result.command else 'command'} execution returned status code {result.returncode}"
        if not result.streamed and result.stderr:
            message = f"{message}\n{result.stderr}"
        super().__init__(message)
        self.result = result

    @property
    def returncode(self) -> int:
        return self.result.returncode

    @property
    def stderr(self) -> str:
        return self.result.stderr


class CommandRunner:
    """Abstract command runner interface.

    Each execution mode has its own entry point so callers state their intent:
    :meth:`execute` blocks with inherited stdio, :meth:`capture` blocks and
    returns stdout, :meth:`spawn` returns a live process handle.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console if console is not None else Console(level="info")

    def execute(self, command: Sequence[str], *, cwd: Path | str | None = None) -> None:
        raise NotImplementedError

    def capture(self, command: Sequence[str], *, cwd: Path | str | None = None) -> str:
        raise NotImplementedError

    def spawn(self, command: Sequence[str], *, cwd: Path | str | None = None) -> subprocess.Popen:
        raise NotImplementedError

    def format_command(self, command: Sequence[str]) -> str:
        if not command:
            return ""
        return describe_command(command[0], command[1:])

    def _prepare(self, command: Sequence[str], *, log: bool = True) -> List[str]:
        prepared = [command[0], *substitute_environment(command[1:])] if command else []
        if log:
            self.console.info(f"Executing Command: {self.format_command(prepared)}")
        return prepared


class SubprocessCommandRunner(CommandRunner):
    """Command runner that executes commands via :mod:`subprocess`.

    A command that cannot be started at all (missing executable, bad working
    directory) surfaces from the blocking modes as :class:`ExecutionError`
    with return code 127. :meth:`spawn` lets the :class:`OSError` propagate.
    """

    def _working_directory(self, cwd: Path | str | None) -> str:
        resolved = str(cwd) if cwd else os.getcwd()
        self.console.debug(f"Working directory: {resolved}")
        return resolved

    def _finalize(self, result: CommandResult) -> CommandResult:
        if result.returncode != 0:
            raise ExecutionError(result)
        return result

    @staticmethod
    def _launch_failure(command: Sequence[str], exc: OSError) -> ExecutionError:
        return ExecutionError(CommandResult(command=command, returncode=127, stdout="", stderr=str(exc)))

    def execute(self, command: Sequence[str], *, cwd: Path | str | None = None) -> None:
        prepared = self._prepare(command)
        try:
            process = subprocess.run(
                prepared,
                cwd=self._working_directory(cwd),
                check=False,
            )
        except OSError as exc:
            raise self._launch_failure(prepared, exc) from exc
        self._finalize(
            CommandResult(
                command=prepared,
                returncode=process.returncode,
                stdout="",
                stderr="",
                streamed=True,
            )
        )

    def capture(self, command: Sequence[str], *, cwd: Path | str | None = None) -> str:
        prepared = self._prepare(command)
        try:
            process = subprocess.run(
                prepared,
                cwd=self._working_directory(cwd),
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise self._launch_failure(prepared, exc) from exc
        result = self._finalize(
            CommandResult(
                command=prepared,
                returncode=process.returncode,
                stdout=process.stdout,
                stderr=process.stderr,
            )
        )
        return result.stdout

    def spawn(self, command: Sequence[str], *, cwd: Path | str | None = None) -> subprocess.Popen:
        prepared = self._prepare(command)
        return subprocess.Popen(prepared, cwd=self._working_directory(cwd))


@dataclass(slots=True)
class RecordedCommand:
    command: List[str]
    cwd: str | None
    mode: str


@dataclass(slots=True)
class RecordedProcess:
    """Process handle returned by dry-run spawns; it has always exited successfully."""

    args: List[str]
    returncode: int = 0
    pid: int | None = None

    def poll(self) -> int:
        return self.returncode

    def wait(self, timeout: float | None = None) -> int:
        return self.returncode

    def kill(self) -> None:
        return None

    def terminate(self) -> None:
        return None


class RecordingCommandRunner(CommandRunner):
    """Command runner that records commands instead of executing them."""

    def __init__(self, console: Console | None = None, *, captured_output: str = "") -> None:
        super().__init__(console if console is not None else Console(level="none"))
        self.commands: List[RecordedCommand] = []
        self.captured_output = captured_output

    def _record(self, command: Sequence[str], cwd: Path | str | None, mode: str) -> None:
        prepared = self._prepare(command, log=False)
        record = RecordedCommand(command=prepared, cwd=str(cwd) if cwd else None, mode=mode)
        self.commands.append(record)
        self.console.dry(self.describe_record(record))

    def describe_record(self, record: RecordedCommand, *, workspace: Path | None = None) -> str:
        parts: List[str] = []
        if record.mode != "execute":
            parts.append(f"({record.mode})")
        cwd = record.cwd or (str(workspace) if workspace else None)
        if cwd:
            parts.append(f"(cwd={cwd})")
        parts.append(self.format_command(record.command))
        return " ".join(parts)

    def execute(self, command: Sequence[str], *, cwd: Path | str | None = None) -> None:
        self._record(command, cwd, "execute")

    def capture(self, command: Sequence[str], *, cwd: Path | str | None = None) -> str:
        self._record(command, cwd, "capture")
        return self.captured_output

    def spawn(self, command: Sequence[str], *, cwd: Path | str | None = None) -> RecordedProcess:
        self._record(command, cwd, "spawn")
        return RecordedProcess(args=self.commands[-1].command)

    def arguments(self) -> List[List[str]]:
        """Return the recorded argument lists without the executable."""

        return [record.command[1:] for record in self.commands]

    def iter_commands(self) -> Iterable[RecordedCommand]:
        return iter(self.commands)

    def iter_formatted(self, *, workspace: Path | None = None) -> Iterable[str]:
        for record in self.commands:
            yield f"[dry-run] {self.describe_record(record, workspace=workspace)}"


__all__ = [
    "CommandResult",
    "CommandRunner",
    "ExecutionError",
    "RecordedCommand",
    "RecordedProcess",
    "RecordingCommandRunner",
    "SubprocessCommandRunner",
    "describe_command",
    "substitute_environment",
]
