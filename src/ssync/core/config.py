"""
ssync configuration management.

Provides centralized configuration with validation using Pydantic.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from ssync.core.errors import ConfigurationError

CONFIG_DIRECTORY_NAME = ".ssync"
DEFAULT_CHANGES = ["write", "remove", "chmod", "rename"]
KNOWN_CHANGES = ("write", "remove", "chmod", "create", "rename")


def parse_change_list(value: str | list[str]) -> list[str]:
    """Normalize a comma-separated (or list) set of change kinds."""
    items = value.split(",") if isinstance(value, str) else list(value)
    changes: list[str] = []
    for item in items:
        kind = item.strip().lower()
        if not kind:
            continue
        if kind not in KNOWN_CHANGES:
            raise ValueError(
                f"Unknown change kind '{item.strip()}' (expected one of: {', '.join(KNOWN_CHANGES)})"
            )
        if kind not in changes:
            changes.append(kind)
    return changes


class LoggingConfig(BaseModel):
    """Configuration for structured logging."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_enabled: bool = False
    console_enabled: bool = True
    json_format: bool = False
    log_directory: Path = Field(default_factory=lambda: Path.home() / CONFIG_DIRECTORY_NAME / "logs")

    @field_validator("log_directory", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        return Path(v).expanduser().resolve()


class TransferConfig(BaseModel):
    """Options passed to every rsync invocation."""

    rsync_path: str = "rsync"
    compress: bool = True
    verbose: bool = True
    progress: bool = True
    delete: bool = False
    extra_args: list[str] = Field(default_factory=list)


class WatchConfig(BaseModel):
    """Configuration for continuous synchronization."""

    enabled: bool = True
    changes: list[str] = Field(default_factory=lambda: list(DEFAULT_CHANGES))
    recursive: bool = True

    @field_validator("changes", mode="before")
    @classmethod
    def normalize_changes(cls, v: str | list[str]) -> list[str]:
        return parse_change_list(v)


class SsyncConfig(BaseModel):
    """Main ssync configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    transfer: TransferConfig = Field(default_factory=TransferConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)
    ignore_file_name: str = ".ssyncignore"

    @classmethod
    def load(cls, config_path: Path | None = None) -> SsyncConfig:
        """Load configuration from file or create default."""
        if config_path is None:
            config_path = Path.home() / CONFIG_DIRECTORY_NAME / "config.json"

        if not config_path.exists():
            return cls()

        try:
            with open(config_path) as f:
                data = json.load(f)
            return cls.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            raise ConfigurationError(f"Invalid configuration file {config_path}: {exc}") from exc

    def save(self, config_path: Path | None = None) -> None:
        """Save configuration to file."""
        if config_path is None:
            config_path = Path.home() / CONFIG_DIRECTORY_NAME / "config.json"

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2, default=str)

    def ensure_directories(self) -> None:
        """Create all required directories."""
        if self.logging.file_enabled:
            self.logging.log_directory.mkdir(parents=True, exist_ok=True)


def load_config(config_path: Path | None = None) -> SsyncConfig:
    """Load or create configuration."""
    config = SsyncConfig.load(config_path)
    config.ensure_directories()
    return config
