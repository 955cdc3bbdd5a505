from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar('T')


class RetryPolicy:
    def __init__(
        self,
        base_seconds: float = 0.2,
        max_attempts: int = 3,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.base_seconds = base_seconds
        self.max_attempts = max(1, int(max_attempts))
        self._sleep = sleep

    def delay(self, retry_count: int) -> float:
        return self.base_seconds * (2 ** retry_count)

    def should_retry(self, attempt: int) -> bool:
        return attempt < self.max_attempts

    def run(self, fn: Callable[[], T], *, is_transient: Callable[[Exception], bool], label: str = '') -> T:
        attempt = 1
        while True:
            try:
                return fn()
            except Exception as exc:
                if not is_transient(exc) or not self.should_retry(attempt):
                    raise
                delay = self.delay(attempt - 1)
                logger.warning('retrying label=%s attempt=%s delay=%.2f error=%s', label, attempt, delay, exc)
                self._sleep(delay)
                attempt += 1
