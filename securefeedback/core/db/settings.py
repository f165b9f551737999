"""Database connection settings for the pool manager."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from sqlalchemy.engine import URL, make_url
from sqlalchemy.pool import StaticPool

_ENCRYPTION_QUERY = {"Encrypt": "yes", "TrustServerCertificate": "no"}
_ENCRYPTION_KEYS = {key.lower() for key in _ENCRYPTION_QUERY}


@dataclass(frozen=True)
class DatabaseSettings:
    """Connection target plus pool bounds.

    Encryption is not a field: SQL Server URLs always request an encrypted
    channel with certificate validation.
    """

    server: Optional[str] = None
    database: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    port: int = 1433
    driver: str = "ODBC Driver 18 for SQL Server"
    url_override: Optional[str] = None
    pool_max: int = 10
    # Informational only: SQLAlchemy pools open connections on demand.
    pool_min: int = 0
    idle_timeout_seconds: int = 30

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "DatabaseSettings":
        """Build settings from a Flask config (or any mapping with the DB_* keys)."""
        return cls(
            server=config.get("DB_SERVER"),
            database=config.get("DB_DATABASE"),
            user=config.get("DB_USER"),
            password=config.get("DB_PASSWORD"),
            port=int(config.get("DB_PORT") or 1433),
            driver=config.get("DB_DRIVER") or cls.driver,
            url_override=config.get("DATABASE_URL"),
            pool_max=int(config.get("DB_POOL_MAX") or 10),
            pool_min=int(config.get("DB_POOL_MIN") or 0),
            idle_timeout_seconds=int(config.get("DB_IDLE_TIMEOUT_SECONDS") or 30),
        )

    @property
    def encrypt(self) -> bool:
        return True

    def url(self) -> URL:
        if self.url_override:
            url = make_url(self.url_override)
            if url.get_backend_name() == "mssql":
                # ODBC keywords are case-insensitive; drop any spelling of them.
                overridden = [k for k in url.query if k.lower() in _ENCRYPTION_KEYS]
                url = url.difference_update_query(overridden).update_query_dict(
                    _ENCRYPTION_QUERY
                )
            return url
        return URL.create(
            "mssql+pyodbc",
            username=self.user,
            password=self.password,
            host=self.server,
            port=self.port,
            database=self.database,
            query={"driver": self.driver, **_ENCRYPTION_QUERY},
        )

    def engine_options(self) -> dict:
        url = self.url()
        backend = url.get_backend_name()
        if backend == "sqlite":
            if url.database in (None, "", ":memory:"):
                return {
                    "poolclass": StaticPool,
                    "connect_args": {"check_same_thread": False},
                }
            return {"pool_pre_ping": True, "connect_args": {"timeout": 30}}
        return {
            "pool_pre_ping": True,
            "pool_size": self.pool_max,
            "max_overflow": 0,
            "pool_recycle": self.idle_timeout_seconds,
        }

    def describe(self) -> str:
        """Connection target without credentials, for logs."""
        return self.url().render_as_string(hide_password=True)
