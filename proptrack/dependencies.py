# proptrack/dependencies.py
"""
Dependency injection module for FastAPI services.

Provides singleton service instances shared across all requests, plus
request-scoped lookups used by the routers.

Services are lazily initialized on first use to avoid import-time side effects.

Usage in routers:
    from proptrack.dependencies import get_owner_or_404, get_portfolio_service

    @router.get("/{owner_id}/portfolio/summary")
    def get_summary(
        owner: User = Depends(get_owner_or_404),
        service: PortfolioService = Depends(get_portfolio_service),
    ):
        ...
"""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from proptrack.database import get_db
from proptrack.models import User
from proptrack.services.exceptions import OwnerNotFoundError
from proptrack.services.portfolio import PortfolioService

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON SERVICE INSTANCES
# =============================================================================

@lru_cache(maxsize=1)
def get_portfolio_service() -> PortfolioService:
    """
    Get the singleton PortfolioService instance.

    The service holds no per-call state, so one instance serves every
    request.
    """
    logger.debug("Initializing singleton PortfolioService")
    return PortfolioService()


# =============================================================================
# REQUEST-SCOPED LOOKUPS
# =============================================================================

def get_owner_or_404(
    owner_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """
    Dependency that fetches the portfolio owner.

    Authorization is the caller's concern; this only confirms the owner
    exists so an unknown id is a 404 rather than an empty portfolio.

    Raises:
        OwnerNotFoundError: If no user has this id (mapped to 404)
    """
    owner = db.get(User, owner_id)
    if owner is None:
        raise OwnerNotFoundError(owner_id)
    return owner


# =============================================================================
# CACHE MANAGEMENT
# =============================================================================

def clear_service_caches() -> None:
    """
    Clear all service caches.

    Useful for testing or when you need to reset state.
    """
    get_portfolio_service.cache_clear()
    logger.info("Cleared all service singleton caches")
