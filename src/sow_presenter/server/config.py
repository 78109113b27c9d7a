"""Service configuration using pydantic-settings.

Environment variables (or a .env file) override values from the TOML
config for the service process.
"""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from sow_presenter.config import PresenterConfig, ensure_config_exists


class Settings(BaseSettings):
    """Presenter service configuration."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # TOML config location (defaults to the platform config dir)
    SOW_PRESENTER_CONFIG: Optional[Path] = None

    # Overrides for values in the TOML config
    SOW_PRESENTER_DB_PATH: Optional[Path] = None
    SOW_PRESENTER_HOST: Optional[str] = None
    SOW_PRESENTER_PORT: Optional[int] = None
    SOW_PRESENTER_LOG_DIR: Optional[Path] = None
    SOW_PRESENTER_BIBLE_DIR: Optional[Path] = None

    SOW_PRESENTER_LOG_LEVEL: str = "INFO"


def load_presenter_config(settings: Settings) -> PresenterConfig:
    """Build the effective config: TOML file first, then env overrides.

    Args:
        settings: Environment settings

    Returns:
        PresenterConfig for the service
    """
    if settings.SOW_PRESENTER_CONFIG is not None:
        path = settings.SOW_PRESENTER_CONFIG
        config = PresenterConfig.load(path) if path.exists() else PresenterConfig()
    else:
        config = ensure_config_exists()

    if settings.SOW_PRESENTER_DB_PATH is not None:
        config.db_path = settings.SOW_PRESENTER_DB_PATH
    if settings.SOW_PRESENTER_HOST:
        config.host = settings.SOW_PRESENTER_HOST
    if settings.SOW_PRESENTER_PORT:
        config.port = settings.SOW_PRESENTER_PORT
    if settings.SOW_PRESENTER_LOG_DIR is not None:
        config.log_dir = settings.SOW_PRESENTER_LOG_DIR
    if settings.SOW_PRESENTER_BIBLE_DIR is not None:
        config.bible_dir = settings.SOW_PRESENTER_BIBLE_DIR

    return config


settings = Settings()
