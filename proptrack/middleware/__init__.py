# proptrack/middleware/__init__.py
"""
ASGI middleware for the Property Portfolio Tracker.

Usage:
    from proptrack.middleware import CorrelationIdMiddleware

    app.add_middleware(CorrelationIdMiddleware)
"""

from proptrack.middleware.correlation import (
    CorrelationIdMiddleware,
    CORRELATION_ID_HEADER,
    REQUEST_ID_HEADER,
)

__all__ = [
    "CorrelationIdMiddleware",
    "CORRELATION_ID_HEADER",
    "REQUEST_ID_HEADER",
]
