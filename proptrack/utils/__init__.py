# proptrack/utils/__init__.py
"""
Cross-cutting utilities.

- logging: Logging configuration with request context support
- context: Request-scoped correlation ID and portfolio owner

Usage:
    from proptrack.utils import setup_logging
    from proptrack.utils import get_correlation_id, set_correlation_id
"""

from proptrack.utils.context import (
    get_correlation_id,
    set_correlation_id,
    clear_correlation_id,
    get_owner_id,
    set_owner_id,
    clear_owner_id,
)
from proptrack.utils.logging import setup_logging

__all__ = [
    # Logging
    "setup_logging",
    # Context
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    "get_owner_id",
    "set_owner_id",
    "clear_owner_id",
]
