"""Runtime settings read from the environment."""

import os
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

CATALOG_ENV = "TIMEDIM_CATALOG"
DATA_DIR_ENV = "TIMEDIM_DATA_DIR"
TIMEZONE_ENV = "TIMEDIM_TIMEZONE"
DATE_FORMAT_ENV = "TIMEDIM_DATE_FORMAT"
LOG_LEVEL_ENV = "TIMEDIM_LOG_LEVEL"

DEFAULT_CATALOG_PATH = Path("config/catalog.yaml")
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S%z"


class Settings(BaseModel):
    """Service settings."""

    catalog_path: Path = DEFAULT_CATALOG_PATH
    data_dir: Path | None = None
    timezone: str = "UTC"
    date_format: str = Field(default=DEFAULT_DATE_FORMAT, min_length=1)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"


def _env(name: str) -> str | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings from ``TIMEDIM_*`` environment variables."""

    values: dict[str, str] = {}
    for field_name, env_name in (
        ("catalog_path", CATALOG_ENV),
        ("data_dir", DATA_DIR_ENV),
        ("timezone", TIMEZONE_ENV),
        ("date_format", DATE_FORMAT_ENV),
        ("log_level", LOG_LEVEL_ENV),
    ):
        raw = _env(env_name)
        if raw is not None:
            values[field_name] = raw
    return Settings.model_validate(values)


def clear_settings_cache() -> None:
    """Forget cached settings so the environment is read again."""

    get_settings.cache_clear()
