from __future__ import annotations

import logging
import time
from contextvars import ContextVar

from fastapi import HTTPException
from fastapi.routing import APIRoute
from starlette.requests import Request

from tuition.config import settings


# Read by the slow-query listener in tuition.db; worker threads inherit it.
current_endpoint: ContextVar[str] = ContextVar('current_endpoint', default='background')

logger = logging.getLogger('tuition.request')


class EndpointNameRoute(APIRoute):
    """Tags the request with ``METHOD /path`` and logs handlers slower than ``metrics_slow_ms``."""

    def get_route_handler(self):
        handler = super().get_route_handler()
        label = f'{",".join(sorted(self.methods or ()))} {self.path}'

        async def timed_handler(request: Request):
            token = current_endpoint.set(label)
            started = time.perf_counter()
            status_code = 500
            try:
                response = await handler(request)
                status_code = response.status_code
                return response
            except HTTPException as exc:
                status_code = exc.status_code
                raise
            finally:
                duration_ms = (time.perf_counter() - started) * 1000.0
                if duration_ms >= settings.metrics_slow_ms:
                    logger.info('request_slow endpoint=%s status_code=%s duration_ms=%.2f', label, status_code, duration_ms)
                current_endpoint.reset(token)

        return timed_handler
