# proptrack/middleware/correlation.py
"""
Request tracing for the reporting API.

Every request is tagged with a correlation ID taken from the caller
(``X-Correlation-ID``, then ``X-Request-ID``) or freshly generated. The
ID lives in the request context while the portfolio is computed, so log
lines written by the service carry it, and it is echoed back on the
response. The owner ID set by the routers is dropped at the same time.
"""

import logging
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from proptrack.utils.context import (
    clear_correlation_id,
    clear_owner_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"

# Checked in order, first non-empty value wins
INBOUND_HEADERS = (CORRELATION_ID_HEADER, REQUEST_ID_HEADER)


def resolve_correlation_id(request: Request) -> str:
    for header in INBOUND_HEADERS:
        value = request.headers.get(header)
        if value:
            return value
    return str(uuid.uuid4())


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Tags each request with a correlation ID and logs its outcome."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Response],
    ) -> Response:
        correlation_id = resolve_correlation_id(request)
        set_correlation_id(correlation_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                f"{request.method} {request.url.path} -> "
                f"{response.status_code} ({elapsed_ms:.1f} ms)"
            )
            return response
        finally:
            clear_owner_id()
            clear_correlation_id()
