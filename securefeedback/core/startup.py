"""Database bootstrap run before the listener starts."""

from __future__ import annotations

import logging

from flask import Flask

from securefeedback.core.db.models import ensure_schema

logger = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the database cannot be prepared outside production."""


def initialize_database(app: Flask) -> bool:
    """
    Establish the pool and create the schema if it is missing.

    Returns True when the database is ready. In production a failure is
    logged and False is returned so the HTTP listener can still come up for
    health checks; in any other environment StartupError is raised.
    """
    manager = app.extensions["pool_manager"]
    try:
        pool = manager.acquire()
        logger.info("Database connection established")
        ensure_schema(pool)
        logger.info("Registrant table verified/created")
        return True
    except Exception as exc:
        logger.error("Error initializing database: %s", exc)
        if app.config.get("IS_PRODUCTION"):
            logger.warning("Continuing without database connection")
            return False
        raise StartupError("Database initialization failed") from exc
