"""Environment-based configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from sqlalchemy.engine import URL


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def resolve_database_url() -> str:
    """Resolve DB connection string.

    Priority:
      1) DATABASE_URL (explicit)
      2) Build from DB_* env vars (MySQL)
      3) Fallback to local sqlite
    """

    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit

    host = os.getenv("DB_HOST")
    user = os.getenv("DB_USER")
    database = os.getenv("DB_NAME")

    if host and user and database:
        url = URL.create(
            drivername="mysql+pymysql",
            username=user,
            password=os.getenv("DB_PASSWORD") or None,
            host=host,
            port=_env_int("DB_PORT", 3306),
            database=database,
            query={"charset": "utf8mb4"},
        )
        return url.render_as_string(hide_password=False)

    return "sqlite:///./lottery.db"


@dataclass(frozen=True)
class BaseConfig:
    """Base configuration shared by all environments."""

    APP_ENV: str = os.getenv("APP_ENV", "development")
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    PORT: int = _env_int("PORT", 3000)

    DATABASE_URL: str = resolve_database_url()
    DB_POOL_SIZE: int = _env_int("DB_POOL_SIZE", 10)
    DB_MAX_OVERFLOW: int = _env_int("DB_MAX_OVERFLOW", 0)
    DB_POOL_TIMEOUT: int = _env_int("DB_POOL_TIMEOUT", 10)

    # "required" | "optional" | "ignored"
    PARTICIPANT_NAME_MODE: str = os.getenv("PARTICIPANT_NAME_MODE", "required").lower().strip()
    KEEP_PARTICIPANT_ON_EMPTY_DRAW: bool = _env_bool("KEEP_PARTICIPANT_ON_EMPTY_DRAW")
    RECORDS_DEFAULT_LIMIT: int = _env_int("RECORDS_DEFAULT_LIMIT", 50)


@dataclass(frozen=True)
class DevelopmentConfig(BaseConfig):
    """Development configuration."""

    DEBUG: bool = True


@dataclass(frozen=True)
class ProductionConfig(BaseConfig):
    """Production configuration."""

    DEBUG: bool = False


def get_config() -> type[BaseConfig]:
    """Resolve configuration class based on APP_ENV."""

    env = os.getenv("APP_ENV", "development").lower().strip()
    if env == "production":
        return ProductionConfig
    return DevelopmentConfig
