"""Client settings read from ``dotnet-driver`` configuration files and the environment."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping
import os

from core.config_loader import find_config_file, load_config_file, merge_mappings
from core.console import Console

from .factory import DEFAULT_COMMAND

CONFIG_STEM = "dotnet-driver"

ENVIRONMENT_OVERRIDES = {
    "DOTNET_DRIVER_COMMAND": "command",
    "DOTNET_DRIVER_LOG_LEVEL": "log_level",
}

_DEFAULTS: Dict[str, Any] = {
    "command": DEFAULT_COMMAND,
    "cwd": None,
    "log_level": "info",
    "dry_run": False,
}


@dataclass(slots=True)
class ClientSettings:
    command: str = DEFAULT_COMMAND
    cwd: Path | None = None
    log_level: str = "info"
    dry_run: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, base_dir: Path | None = None) -> "ClientSettings":
        unknown = {str(key) for key in data.keys() if str(key) not in _DEFAULTS}
        if unknown:
            joined = ", ".join(sorted(unknown))
            raise ValueError(f"Settings contain unknown keys: {joined}")

        merged = merge_mappings(_DEFAULTS, data)
        log_level = str(merged["log_level"]).lower()
        if log_level not in Console.LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'")

        cwd_value = merged["cwd"]
        cwd: Path | None = None
        if cwd_value:
            cwd = Path(str(cwd_value)).expanduser()
            if not cwd.is_absolute() and base_dir is not None:
                cwd = (base_dir / cwd).resolve()

        dry_run = merged["dry_run"]
        if not isinstance(dry_run, bool):
            raise TypeError("dry_run must be a boolean")

        return cls(
            command=str(merged["command"]),
            cwd=cwd,
            log_level=log_level,
            dry_run=dry_run,
        )

    def console(self) -> Console:
        return Console(level=self.log_level, dry_run=self.dry_run)


def load_settings(
    directory: Path | None = None,
    *,
    path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> ClientSettings:
    """Load settings from ``path`` or ``dotnet-driver.{toml,json,yaml,yml}`` in ``directory``.

    Environment variables listed in :data:`ENVIRONMENT_OVERRIDES` take precedence
    over file values.
    """

    directory = directory or Path.cwd()
    config_path = path if path is not None else find_config_file(directory, CONFIG_STEM)
    data: Dict[str, Any] = {}
    base_dir = directory
    if config_path is not None:
        data = dict(load_config_file(config_path))
        base_dir = config_path.parent

    environment = os.environ if env is None else env
    for variable, key in ENVIRONMENT_OVERRIDES.items():
        value = environment.get(variable)
        if value:
            data[key] = value

    return ClientSettings.from_mapping(data, base_dir=base_dir)


__all__ = ["CONFIG_STEM", "ClientSettings", "ENVIRONMENT_OVERRIDES", "load_settings"]
