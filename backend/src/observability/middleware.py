"""HTTP middleware binding a correlation id to each request."""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .request_id import correlation_scope
from .logging_config import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuses the caller's X-Request-ID (or mints one) and echoes it back."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        route = f"{request.method} {request.url.path}"

        with correlation_scope(request.headers.get(REQUEST_ID_HEADER)) as request_id:
            started = time.perf_counter()
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(f"{route} failed after {_elapsed_ms(started):.1f}ms: {e}", exc_info=True)
                raise

            logger.info(f"{route} -> {response.status_code} ({_elapsed_ms(started):.1f}ms)")
            response.headers[REQUEST_ID_HEADER] = request_id
            return response


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
