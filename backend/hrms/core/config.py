import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent

Role = Literal["admin", "hr", "employee"]


class Settings(BaseSettings):
    env: str = Field(default="dev", description="Deployment environment")
    app_name: str = "HR Portal API"
    database_url: str = Field(
        default=f"sqlite:///{BASE_DIR / 'hrms.db'}",
        description="SQLAlchemy database URL",
    )
    cors_origins: str = Field(default="", description="Comma separated list of allowed origins")
    log_level: str = "INFO"
    sentry_dsn: str | None = Field(default=None, description="Sentry DSN for error monitoring")
    otlp_endpoint: str | None = Field(default=None, description="OTLP endpoint for traces/metrics")

    secret_key: str = Field(default="dev-secret-change-me", description="JWT signing key")
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7

    timezone: str = Field(default="UTC", description="Wall-clock zone for check-in times")
    attendance_status_policy: Literal["always", "preserve_manual"] = "preserve_manual"

    company_name: str = "HR Portal"
    company_address: str = ""

    model_config = SettingsConfigDict(env_prefix="HRMS_", extra="ignore")

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_level(cls, value: str) -> str:
        return str(value).upper()

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    return Settings(_env_file=get_settings_env_file())


def get_settings_env_file() -> str | None:
    """Resolve environment-specific env file if it exists."""
    env = os.getenv("HRMS_ENV", "dev")
    env_file = BASE_DIR / f".env.{env}"
    default_file = BASE_DIR / ".env"
    if env_file.exists():
        return str(env_file)
    if default_file.exists():
        return str(default_file)
    return None


settings = get_settings()
