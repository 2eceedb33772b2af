# proptrack/utils/context.py
"""
Request context management.

Holds request-scoped values that log records are enriched with:
- Correlation ID for request tracing
- Owner ID of the portfolio being reported on

Uses contextvars so the values follow the request through threadpool
hand-offs and async/await calls.

Usage:
    from proptrack.utils.context import get_correlation_id, set_owner_id

    set_owner_id(42)
"""

from contextvars import ContextVar

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_owner_id_var: ContextVar[int | None] = ContextVar("owner_id", default=None)


# =============================================================================
# CORRELATION ID
# =============================================================================

def get_correlation_id() -> str | None:
    """Return the current request's correlation ID, or None if not set."""
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current request (called by middleware)."""
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    """Clear the correlation ID at the end of a request."""
    _correlation_id_var.set(None)


# =============================================================================
# PORTFOLIO OWNER
# =============================================================================

def get_owner_id() -> int | None:
    """Return the portfolio owner the current request reports on."""
    return _owner_id_var.get()


def set_owner_id(owner_id: int) -> None:
    _owner_id_var.set(owner_id)


def clear_owner_id() -> None:
    _owner_id_var.set(None)
