"""Locate the dotnet executable and query its SDK version."""
from __future__ import annotations

from dataclasses import dataclass
import shutil

from core.command_runner import CommandRunner, ExecutionError, SubprocessCommandRunner
from core.console import Console

DEFAULT_COMMAND = "dotnet"


class CliNotFoundError(RuntimeError):
    """Raised when the dotnet executable cannot be located or queried."""


@dataclass(frozen=True, slots=True)
class CliInfo:
    version: str


@dataclass(frozen=True, slots=True)
class LoadedCLI:
    command: str
    info: CliInfo


def resolve_command(command: str | None = None) -> str:
    candidate = command or DEFAULT_COMMAND
    resolved = shutil.which(candidate)
    if resolved is None:
        raise CliNotFoundError(
            f"Unable to find '{candidate}'. Install the .NET SDK or point the command setting at it."
        )
    return resolved


def dotnet_factory(command: str | None = None, runner: CommandRunner | None = None) -> LoadedCLI:
    """Resolve ``command`` (default ``dotnet``) and read its version."""

    resolved = resolve_command(command)
    runner = runner if runner is not None else SubprocessCommandRunner(Console(level="none"))
    try:
        output = runner.capture([resolved, "--version"])
    except (ExecutionError, OSError) as exc:
        raise CliNotFoundError(f"Unable to query the version of '{resolved}': {exc}") from exc
    version = output.strip().splitlines()[0].strip() if output.strip() else ""
    if not version:
        raise CliNotFoundError(f"'{resolved} --version' printed no version")
    return LoadedCLI(command=resolved, info=CliInfo(version=version))


__all__ = [
    "CliInfo",
    "CliNotFoundError",
    "DEFAULT_COMMAND",
    "LoadedCLI",
    "dotnet_factory",
    "resolve_command",
]
