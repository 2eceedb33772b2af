# proptrack/routers/__init__.py
"""
API routers for the Property Portfolio Tracker.

- portfolio: Portfolio summary, per-property metrics and performers
"""

from proptrack.routers.portfolio import router as portfolio_router

__all__ = [
    "portfolio_router",
]
