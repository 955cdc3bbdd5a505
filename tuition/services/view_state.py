from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from typing import Callable

from tuition.core.errors import AIHelperError, NotFoundError, StoreError, SyncValidationError
from tuition.core.results import OpResult, result_from_error
from tuition.core.time_provider import TimeProvider, default_time_provider
from tuition.store.client import StoreClient


logger = logging.getLogger(__name__)

HANDLED_ERRORS = (SyncValidationError, NotFoundError, StoreError, AIHelperError)


class ViewState:
    """Local snapshot of remote rows for one view.

    Writes are confirm-then-refresh: the snapshot only changes after a
    successful load, so a failed operation leaves the last good state.
    """

    def __init__(self, store: StoreClient, *, time_provider: TimeProvider = default_time_provider) -> None:
        self.store = store
        self.time_provider = time_provider
        self.loading = False
        self.saving = False

    def load(self) -> OpResult:
        raise NotImplementedError

    @contextmanager
    def _busy(self, flag: str | None) -> Iterator[None]:
        if flag is None:
            yield
            return
        setattr(self, flag, True)
        try:
            yield
        finally:
            setattr(self, flag, False)

    def _run(self, flag: str | None, event: str, failure_message: str, fn: Callable[[], OpResult]) -> OpResult:
        with self._busy(flag):
            try:
                return fn()
            except HANDLED_ERRORS as exc:
                return result_from_error(exc, failure_message=failure_message, logger=logger, event=event)

    def _confirmed(self, message: str, data=None) -> OpResult:
        """Refetch after a confirmed write; a failed refetch keeps the write's success."""
        refresh = self.load()
        return OpResult.success(message, data, refreshed=refresh.ok)


def require_text(value: str | None, message: str) -> str:
    text = (value or '').strip()
    if not text:
        raise SyncValidationError(message)
    return text


def require_date(value: date | str | None, message: str) -> date:
    if isinstance(value, date):
        return value
    text = (value or '').strip()
    if not text:
        raise SyncValidationError(message)
    try:
        return date.fromisoformat(text)
    except ValueError as exc:
        raise SyncValidationError(f'Invalid date: {text}') from exc
