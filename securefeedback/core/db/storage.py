"""Storage-access boundary: run work against the pool, classify failures."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from sqlalchemy import exc as sa_exc
from sqlalchemy.orm import Session

from securefeedback.core.db.pool import PoolManager

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Unique-violation markers per driver: SQL Server 2627/2601, PostgreSQL 23505,
# MySQL 1062, SQLite message text.
_DUPLICATE_MARKERS = (
    "2627",
    "2601",
    "23505",
    "1062",
    "unique constraint",
    "duplicate key",
    "duplicate entry",
)


class ErrorKind(str, enum.Enum):
    DUPLICATE = "duplicate"
    CONNECTIVITY = "connectivity"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class StorageError:
    kind: ErrorKind
    exc: BaseException

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.exc}"


@dataclass(frozen=True)
class StorageResult(Generic[T]):
    """Either a value or a classified StorageError."""

    value: Optional[T] = None
    error: Optional[StorageError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "StorageResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, exc: BaseException) -> "StorageResult[T]":
        return cls(error=StorageError(kind=kind, exc=exc))


def _is_unique_violation(exc: sa_exc.IntegrityError) -> bool:
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code == "23505":
        return True
    message = str(orig if orig is not None else exc).lower()
    return any(marker in message for marker in _DUPLICATE_MARKERS)


def classify_error(exc: BaseException) -> ErrorKind:
    if isinstance(exc, sa_exc.IntegrityError):
        return ErrorKind.DUPLICATE if _is_unique_violation(exc) else ErrorKind.UNKNOWN
    if isinstance(exc, sa_exc.DBAPIError) and exc.connection_invalidated:
        return ErrorKind.CONNECTIVITY
    if isinstance(
        exc,
        (
            sa_exc.OperationalError,
            sa_exc.InterfaceError,
            sa_exc.DisconnectionError,
            sa_exc.TimeoutError,
            ConnectionError,
        ),
    ):
        return ErrorKind.CONNECTIVITY
    return ErrorKind.UNKNOWN


def run_in_session(
    manager: PoolManager,
    operation: Callable[[Session], T],
    description: str = "storage operation",
) -> StorageResult[T]:
    """
    Acquire the pool and run operation inside a session.
    Never raises: failures come back as a classified StorageResult.
    """
    try:
        pool = manager.acquire()
    except Exception as exc:
        logger.error("%s: database unavailable: %s", description, exc)
        return StorageResult.failure(ErrorKind.CONNECTIVITY, exc)

    try:
        with Session(pool.engine, expire_on_commit=False) as session:
            value = operation(session)
        return StorageResult.success(value)
    except Exception as exc:
        kind = classify_error(exc)
        if kind is ErrorKind.CONNECTIVITY:
            pool.mark_disconnected()
            logger.error("%s: lost database connection: %s", description, exc)
        elif kind is ErrorKind.UNKNOWN:
            logger.exception("%s failed", description)
        else:
            logger.info("%s rejected: %s", description, kind.value)
        return StorageResult.failure(kind, exc)
