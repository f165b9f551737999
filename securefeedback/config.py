"""Application configuration for SecureFeedback."""

from __future__ import annotations

import os
from typing import Dict, Type

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


def _int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, ""))
    except ValueError:
        return default


class BaseConfig:
    """Base configuration loaded for all environments."""

    PORT = _int("PORT", 8080)
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    IS_PRODUCTION = False

    # Database connection; DATABASE_URL wins over the DB_* parts when set.
    DATABASE_URL = os.environ.get("DATABASE_URL")
    DB_SERVER = os.environ.get("DB_SERVER")
    DB_DATABASE = os.environ.get("DB_DATABASE")
    DB_USER = os.environ.get("DB_USER")
    DB_PASSWORD = os.environ.get("DB_PASSWORD")
    DB_PORT = _int("DB_PORT", 1433)
    DB_DRIVER = os.environ.get("DB_DRIVER", "ODBC Driver 18 for SQL Server")
    DB_POOL_MAX = _int("DB_POOL_MAX", 10)
    DB_POOL_MIN = _int("DB_POOL_MIN", 0)
    DB_IDLE_TIMEOUT_SECONDS = _int("DB_IDLE_TIMEOUT_SECONDS", 30)
    DB_CONNECT_ATTEMPTS = _int("DB_CONNECT_ATTEMPTS", 3)
    DB_RETRY_DELAY_SECONDS = float(os.environ.get("DB_RETRY_DELAY_SECONDS", "3"))

    MAX_CONTENT_LENGTH = _int("MAX_CONTENT_LENGTH", 1024 * 1024)

    RATELIMIT_DEFAULT = os.environ.get("RATELIMIT_DEFAULT", "200/hour")
    RATELIMIT_STORAGE_URI = os.environ.get("REDIS_URL", "memory://")
    RATELIMIT_ENABLED = _flag("RATELIMIT_ENABLED", "true")

    CORS_ALLOW_ORIGIN = os.environ.get("CORS_ALLOW_ORIGIN", "*")
    SECURITY_HEADERS = {
        "Content-Security-Policy": (
            "default-src 'self'; "
            "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com https://cdnjs.cloudflare.com; "
            "font-src 'self' https://fonts.gstatic.com https://cdnjs.cloudflare.com; "
            "script-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:; "
            "connect-src 'self'"
        ),
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "SAMEORIGIN",
        "Referrer-Policy": "no-referrer",
        "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
        "Cross-Origin-Opener-Policy": "same-origin",
        "Cross-Origin-Resource-Policy": "same-origin",
        "X-DNS-Prefetch-Control": "off",
        "X-Permitted-Cross-Domain-Policies": "none",
    }
    STATIC_CACHE_MAX_AGE = _int("STATIC_CACHE_MAX_AGE", 3600)


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    ENV = "development"


class TestingConfig(BaseConfig):
    TESTING = True
    ENV = "testing"
    # In-memory SQLite behind a StaticPool: one shared database per app.
    DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite://")
    DB_CONNECT_ATTEMPTS = 3
    DB_RETRY_DELAY_SECONDS = 0.0
    RATELIMIT_ENABLED = False


class ProductionConfig(BaseConfig):
    ENV = "production"
    IS_PRODUCTION = True


config_by_name: Dict[str, Type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def current_env_name() -> str:
    """Environment name from APP_ENV, falling back to NODE_ENV."""
    return (os.environ.get("APP_ENV") or os.environ.get("NODE_ENV") or "development").lower()
