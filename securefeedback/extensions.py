"""Shared extensions for the SecureFeedback application."""

from __future__ import annotations

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from securefeedback.core.db.pool import PoolManager
from securefeedback.core.db.retry import RetryPolicy
from securefeedback.core.db.settings import DatabaseSettings

limiter = Limiter(
    key_func=get_remote_address, enabled=True, default_limits=["200 per hour"]
)


def build_pool_manager(config) -> PoolManager:
    """Pool manager configured from the app config."""
    policy = RetryPolicy(
        max_attempts=int(config.get("DB_CONNECT_ATTEMPTS", 3)),
        delay_seconds=float(config.get("DB_RETRY_DELAY_SECONDS", 3.0)),
    )
    return PoolManager(DatabaseSettings.from_mapping(config), retry_policy=policy)


def init_extensions(app, pool_manager: PoolManager | None = None) -> None:
    """Initialize all extensions with the Flask app."""
    app.extensions["pool_manager"] = pool_manager or build_pool_manager(app.config)
    limiter.enabled = app.config.get("RATELIMIT_ENABLED", True)
    limiter.default_limits = [app.config.get("RATELIMIT_DEFAULT", "200 per hour")]
    limiter.storage_uri = app.config.get("RATELIMIT_STORAGE_URI", "memory://")
    limiter.init_app(app)
