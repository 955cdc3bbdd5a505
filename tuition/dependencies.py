from __future__ import annotations

from functools import lru_cache

from fastapi import HTTPException

from tuition.core.results import OpResult, Outcome
from tuition.core.time_provider import TimeProvider, default_time_provider
from tuition.db import SessionLocal
from tuition.services.ai_helper_service import AIHelperClient
from tuition.store.client import StoreClient


_STATUS_BY_OUTCOME = {
    Outcome.INVALID: 422,
    Outcome.NOT_FOUND: 404,
    Outcome.FAILED: 503,
}


@lru_cache
def get_store() -> StoreClient:
    return StoreClient(SessionLocal)


def get_time_provider() -> TimeProvider:
    return default_time_provider


def get_ai_client() -> AIHelperClient:
    return AIHelperClient()


def ensure_ok(result: OpResult, *, failed_status: int = 503) -> OpResult:
    if result.ok:
        return result
    status_code = failed_status if result.outcome is Outcome.FAILED else _STATUS_BY_OUTCOME[result.outcome]
    raise HTTPException(status_code=status_code, detail=result.message)
