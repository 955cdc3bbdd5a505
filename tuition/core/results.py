from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from tuition.core.errors import AIHelperError, NotFoundError, StoreError, SyncValidationError


class Outcome(str, Enum):
    OK = 'ok'
    INVALID = 'invalid'
    NOT_FOUND = 'not_found'
    FAILED = 'failed'


@dataclass(frozen=True)
class OpResult:
    """Tagged result handed to the presentation layer instead of raising."""

    outcome: Outcome
    message: str = ''
    data: Any = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK

    @classmethod
    def success(cls, message: str = '', data: Any = None, **details: Any) -> 'OpResult':
        return cls(Outcome.OK, message, data, details=details)

    @classmethod
    def invalid(cls, message: str) -> 'OpResult':
        return cls(Outcome.INVALID, message)

    @classmethod
    def not_found(cls, message: str) -> 'OpResult':
        return cls(Outcome.NOT_FOUND, message)

    @classmethod
    def failed(cls, message: str, **details: Any) -> 'OpResult':
        return cls(Outcome.FAILED, message, details=details)


def result_from_error(exc: Exception, *, failure_message: str, logger: logging.Logger, event: str) -> OpResult:
    if isinstance(exc, SyncValidationError):
        return OpResult.invalid(str(exc))
    if isinstance(exc, NotFoundError):
        return OpResult.not_found(str(exc))
    if isinstance(exc, AIHelperError):
        logger.error('%s error=%s', event, exc)
        return OpResult.failed(str(exc))
    if isinstance(exc, StoreError):
        logger.error('%s operation=%s transient=%s error=%s', event, exc.operation, exc.transient, exc)
        return OpResult.failed(failure_message, operation=exc.operation)
    raise exc
