"""Lazily established, self-healing database connection pool."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from securefeedback.core.db.retry import RetryPolicy
from securefeedback.core.db.settings import DatabaseSettings

logger = logging.getLogger(__name__)

EngineFactory = Callable[..., Engine]


class Pool:
    """Handle over a SQLAlchemy engine that knows whether it is still usable."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self._connected = True

    @property
    def connected(self) -> bool:
        return self._connected

    def mark_disconnected(self) -> None:
        self._connected = False

    def close(self) -> None:
        self._connected = False
        self.engine.dispose()


class PoolManager:
    """
    Owns the single shared Pool for an application.

    acquire() is idempotent: it returns the cached pool while it reports
    itself connected, and otherwise builds a new one under the retry policy.
    """

    def __init__(
        self,
        settings: DatabaseSettings,
        retry_policy: Optional[RetryPolicy] = None,
        engine_factory: EngineFactory = create_engine,
    ):
        self.settings = settings
        self.retry_policy = retry_policy or RetryPolicy()
        self._engine_factory = engine_factory
        self._pool: Optional[Pool] = None
        self._lock = threading.Lock()

    @property
    def pool(self) -> Optional[Pool]:
        return self._pool

    def acquire(self) -> Pool:
        pool = self._pool
        if pool is not None and pool.connected:
            return pool
        with self._lock:
            if self._pool is not None and not self._pool.connected:
                logger.warning("Discarding disconnected database pool")
                self._discard()
            if self._pool is None:
                self._pool = self.retry_policy.call(
                    self._open, description="Database connection"
                )
                logger.info("Database pool established (%s)", self.settings.describe())
            return self._pool

    def close(self) -> None:
        with self._lock:
            self._discard()

    def _discard(self) -> None:
        pool, self._pool = self._pool, None
        if pool is None:
            return
        try:
            pool.close()
        except Exception:
            logger.exception("Error disposing database pool")

    def _open(self) -> Pool:
        engine = self._engine_factory(self.settings.url(), **self.settings.engine_options())
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception:
            engine.dispose()
            raise
        return Pool(engine)
