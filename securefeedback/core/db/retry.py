"""Bounded retry with a fixed delay between attempts."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Runtime knobs for retrying a flaky call."""

    max_attempts: int = 3
    delay_seconds: float = 3.0
    retry_on: Tuple[Type[BaseException], ...] = (Exception,)
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay_seconds < 0:
            raise ValueError("delay_seconds must not be negative")

    def call(self, fn: Callable[[], T], description: str = "operation") -> T:
        """
        Invoke fn until it succeeds or attempts run out.
        Sleeps delay_seconds between attempts and re-raises the last failure.
        """
        attempt = 1
        while True:
            try:
                return fn()
            except self.retry_on as exc:
                if attempt >= self.max_attempts:
                    logger.error(
                        "%s failed after %s attempts: %s", description, attempt, exc
                    )
                    raise
                logger.warning(
                    "%s failed (attempt %s/%s): %s; retrying in %ss",
                    description,
                    attempt,
                    self.max_attempts,
                    exc,
                    self.delay_seconds,
                )
                self.sleep(self.delay_seconds)
                attempt += 1
