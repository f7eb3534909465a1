"""Configuration management for localhorst."""

import os
import shlex
import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import platformdirs
import yaml

DEFAULT_MIN_PORT = 3000
DEFAULT_MAX_PORT = 9000


class ConfigError(Exception):
    """Raised when the configuration file cannot be used."""

    pass


def default_opener() -> str:
    """Command used to open URLs in the default browser."""
    return "open" if sys.platform == "darwin" else "xdg-open"


@dataclass
class Settings:
    """Effective settings for a localhorst run."""

    min_port: int = DEFAULT_MIN_PORT
    max_port: int = DEFAULT_MAX_PORT
    editor: str = "code"
    opener: str = field(default_factory=default_opener)

    def with_range(self, min_port: int | None, max_port: int | None) -> "Settings":
        """Return a copy with the scan range overridden where given.

        Raises:
            ConfigError: If the resulting range is invalid
        """
        settings = Settings(
            min_port=self.min_port if min_port is None else min_port,
            max_port=self.max_port if max_port is None else max_port,
            editor=self.editor,
            opener=self.opener,
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        """Check port bounds and launcher commands.

        Raises:
            ConfigError: If a value is out of range or unusable
        """
        for name in ("min_port", "max_port"):
            value = getattr(self, name)
            if not 1 <= value <= 65535:
                raise ConfigError(f"{name} must be between 1 and 65535, got {value}")
        if self.min_port > self.max_port:
            raise ConfigError(
                f"min_port ({self.min_port}) must not exceed max_port ({self.max_port})"
            )
        for name in ("editor", "opener"):
            try:
                parts = shlex.split(getattr(self, name))
            except ValueError as e:
                raise ConfigError(f"{name} is not a valid command: {e}") from e
            if not parts:
                raise ConfigError(f"{name} must not be empty")


def get_config_path() -> Path:
    """Get the configuration file path.

    LOCALHORST_CONFIG overrides the platform default location.

    Returns:
        Path to config file (may not exist)
    """
    override = os.getenv("LOCALHORST_CONFIG")
    if override:
        return Path(override).expanduser()
    return Path(platformdirs.user_config_dir("localhorst", "localhorst")) / "config.yaml"


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from the YAML config file.

    A missing file yields the defaults.

    Args:
        path: Config file to read. Defaults to get_config_path().

    Returns:
        Settings instance

    Raises:
        ConfigError: If the file is unreadable, malformed, or has bad values
    """
    path = path or get_config_path()
    if not path.exists():
        return Settings()

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    if data is None:
        return Settings()
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping of settings")

    return _settings_from_mapping(data, path)


def _settings_from_mapping(data: dict[str, Any], path: Path) -> Settings:
    """Build Settings from a parsed YAML mapping."""
    known = {f.name: f for f in fields(Settings)}
    values: dict[str, Any] = {}

    for key, value in data.items():
        if key not in known:
            raise ConfigError(f"Unknown setting '{key}' in {path}")
        expected = int if key in ("min_port", "max_port") else str
        # bool is an int subclass; reject it explicitly
        if not isinstance(value, expected) or isinstance(value, bool):
            raise ConfigError(f"Setting '{key}' in {path} must be {expected.__name__}")
        values[key] = value

    settings = Settings(**values)
    settings.validate()
    return settings
