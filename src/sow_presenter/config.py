"""Configuration management for sow-presenter.

Handles loading, saving, and validating TOML configuration stored in:
- macOS: ~/.config/sow-presenter/config.toml
- Linux: ~/.config/sow-presenter/config.toml (XDG_CONFIG_HOME)
- Windows: %APPDATA%\\sow-presenter\\config.toml
"""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import tomllib
import tomli_w

from sow_presenter.core.chunker import DEFAULT_MAX_LINES_PER_SLIDE

# Dotted config keys ("section.key") mapped to PresenterConfig attributes
CONFIG_KEYS = {
    "database.path": "db_path",
    "presenter.max_lines_per_slide": "max_lines_per_slide",
    "presenter.subscriber_queue_size": "subscriber_queue_size",
    "bible.dir": "bible_dir",
    "bible.default_version": "default_bible_version",
    "server.host": "host",
    "server.port": "port",
    "logging.dir": "log_dir",
}


def get_config_dir() -> Path:
    """Get the platform-specific config directory.

    Returns:
        Path to the config directory for sow-presenter.
    """
    if sys.platform == "darwin" or sys.platform == "linux":
        xdg_config = os.environ.get("XDG_CONFIG_HOME")
        if xdg_config:
            return Path(xdg_config) / "sow-presenter"
        return Path.home() / ".config" / "sow-presenter"
    elif sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata) / "sow-presenter"
        return Path.home() / "AppData" / "Roaming" / "sow-presenter"
    else:
        return Path.home() / ".config" / "sow-presenter"


def get_config_path() -> Path:
    """Get the path to the config.toml file."""
    return get_config_dir() / "config.toml"


def get_default_db_path() -> Path:
    """Get the default database path."""
    return get_config_dir() / "db" / "presenter.db"


@dataclass
class PresenterConfig:
    """Configuration for sow-presenter.

    Attributes:
        db_path: Local SQLite database path
        max_lines_per_slide: Lines per slide used by every chunker call
        subscriber_queue_size: Payloads buffered per display before dropping
        bible_dir: Directory holding the Zefania XML bible files
        default_bible_version: Version used when a request names none
        host: Interface the service binds to
        port: Port the service listens on
        log_dir: Directory for session logs
    """

    # Local Database
    db_path: Path = field(default_factory=lambda: get_default_db_path())

    # Presenter
    max_lines_per_slide: int = DEFAULT_MAX_LINES_PER_SLIDE
    subscriber_queue_size: int = 64

    # Bible lookup
    bible_dir: Path = field(default_factory=lambda: get_config_dir() / "bibles")
    default_bible_version: str = "NVI"

    # Service
    host: str = "127.0.0.1"
    port: int = 8000

    # Logging
    log_dir: Path = field(default_factory=lambda: get_config_dir() / "logs")

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "PresenterConfig":
        """Load configuration from TOML file.

        Args:
            path: Path to config file (defaults to standard location)

        Returns:
            PresenterConfig instance with loaded values

        Raises:
            FileNotFoundError: If config file doesn't exist
        """
        if path is None:
            path = get_config_path()

        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "rb") as f:
            data = tomllib.load(f)

        config = cls()

        for key, attr in CONFIG_KEYS.items():
            section, name = key.split(".")
            if section in data and name in data[section]:
                config._assign(attr, data[section][name])

        return config

    def save(self, path: Optional[Path] = None) -> None:
        """Save configuration to TOML file.

        Args:
            path: Path to save config (defaults to standard location)
        """
        if path is None:
            path = get_config_path()

        path.parent.mkdir(parents=True, exist_ok=True)

        data: dict[str, dict[str, Any]] = {}
        for key, attr in CONFIG_KEYS.items():
            section, name = key.split(".")
            value = getattr(self, attr)
            data.setdefault(section, {})[name] = str(value) if isinstance(value, Path) else value

        with open(path, "wb") as f:
            tomli_w.dump(data, f)

    def get(self, key: str, default: Optional[Any] = None) -> Optional[Any]:
        """Get a configuration value by dotted key (e.g., "server.port").

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        attr = CONFIG_KEYS.get(key)
        if attr is None:
            return default

        value = getattr(self, attr)
        if isinstance(value, Path):
            return str(value)
        return value

    def set(self, key: str, value: str) -> None:
        """Set a configuration value by dotted key.

        Args:
            key: Configuration key (e.g., "presenter.max_lines_per_slide")
            value: Configuration value as a string

        Raises:
            ValueError: If the key is unknown or the value has the wrong type
        """
        attr = CONFIG_KEYS.get(key)
        if attr is None:
            raise ValueError(f"Invalid config key: {key}")
        self._assign(attr, value)

    def _assign(self, attr: str, value: Any) -> None:
        # Try to preserve type
        current = getattr(self, attr)
        if isinstance(current, bool):
            new_value = value if isinstance(value, bool) else str(value).lower() in ("true", "1", "yes")
        elif isinstance(current, int):
            new_value = int(value)
            if new_value < 1:
                raise ValueError(f"{attr} must be a positive integer")
        elif isinstance(current, Path):
            new_value = Path(value).expanduser()
        else:
            new_value = str(value)

        setattr(self, attr, new_value)

    def ensure_directories(self) -> None:
        """Ensure all configured directories exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.log_dir.mkdir(parents=True, exist_ok=True)


def ensure_config_exists(path: Optional[Path] = None) -> PresenterConfig:
    """Ensure config file exists, creating default if needed.

    Args:
        path: Path to config file (defaults to standard location)

    Returns:
        PresenterConfig instance
    """
    config_path = path or get_config_path()

    if config_path.exists():
        return PresenterConfig.load(config_path)

    config = PresenterConfig()
    config.save(config_path)
    return config
