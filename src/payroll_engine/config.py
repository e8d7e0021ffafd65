import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .tax_tables import TaxConfiguration, default_configuration, load_tax_configuration

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    env: str = Field(default="dev", description="Deployment environment")
    app_name: str = "Payroll Engine API"
    log_level: str = "INFO"
    sentry_dsn: str | None = Field(default=None, description="Sentry DSN for error monitoring")
    tax_config_path: Path | None = Field(
        default=None,
        description="JSON file holding the tax configuration; statutory defaults are used when unset",
    )
    locale: str = "en-ZM"
    currency: str = "ZMW"

    model_config = SettingsConfigDict(env_prefix="PAYROLL_", extra="ignore")

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("tax_config_path", mode="before")
    @classmethod
    def blank_path_is_unset(cls, value: str | Path | None) -> str | Path | None:
        if isinstance(value, str) and not value.strip():
            return None
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings(_env_file=get_settings_env_file())


def get_settings_env_file(base_dir: Path | None = None) -> str | None:
    """Resolve environment-specific env file if it exists.

    Looked up in the working directory at call time unless ``base_dir`` is given.
    """
    base_dir = base_dir or Path.cwd()
    env = os.getenv("PAYROLL_ENV", "dev")
    env_file = base_dir / f".env.{env}"
    default_file = base_dir / ".env"
    if env_file.exists():
        return str(env_file)
    if default_file.exists():
        return str(default_file)
    return None


def get_tax_configuration(settings: Settings | None = None) -> TaxConfiguration:
    settings = settings or get_settings()
    if settings.tax_config_path is None:
        return default_configuration()
    return load_tax_configuration(settings.tax_config_path)
