"""Shared core utilities for toolchain command execution and configuration."""

from .command_runner import (
    CommandResult,
    CommandRunner,
    ExecutionError,
    RecordedCommand,
    RecordedProcess,
    RecordingCommandRunner,
    SubprocessCommandRunner,
    describe_command,
    substitute_environment,
)
from .config_loader import (
    ConfigLoader,
    FILE_LOADERS,
    find_config_file,
    load_config_file,
    merge_mappings,
)
from .console import Console

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
    "ConfigLoader",
    "FILE_LOADERS",
    "find_config_file",
    "load_config_file",
    "merge_mappings",
    "Console",
]
