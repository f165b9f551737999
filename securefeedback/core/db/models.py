"""Declarative base and schema bootstrap."""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase

from securefeedback.core.db.pool import Pool


class Base(DeclarativeBase):
    pass


def ensure_schema(pool: Pool) -> None:
    """Create any missing tables; existing tables are left untouched."""
    # Register mapped tables on the metadata before creating them.
    from securefeedback.domains.registrants.models import registrant_models  # noqa: F401

    Base.metadata.create_all(pool.engine, checkfirst=True)
