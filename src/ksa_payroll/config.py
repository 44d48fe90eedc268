import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path.cwd()
PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    env: str = Field(default="dev", description="Deployment environment")
    log_level: str = "INFO"
    data_path: Path = Field(default=Path("data/store.json"), description="JSON entity store location")
    rate_table_dir: Path = Field(default=PACKAGE_DIR / "data" / "rate_tables")
    rate_table_version: str = "2024_v1"
    sentry_dsn: str | None = Field(default=None, description="Sentry DSN for error monitoring")

    model_config = SettingsConfigDict(env_prefix="KSA_PAYROLL_", extra="ignore")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalise_level(cls, value: str) -> str:
        return str(value).strip().upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(_env_file=get_settings_env_file())


def get_settings_env_file() -> str | None:
    """Resolve environment-specific env file if it exists."""
    env = os.getenv("KSA_PAYROLL_ENV", "dev")
    env_file = BASE_DIR / f".env.{env}"
    default_file = BASE_DIR / ".env"
    if env_file.exists():
        return str(env_file)
    if default_file.exists():
        return str(default_file)
    return None
