"""
Analytics API endpoints (admin only), mounted at /api/stats.
"""

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_analytics_service
from api.middleware.auth import require_admin
from shared.models import AuthenticatedUser

from .interfaces import IAnalyticsService
from .models import TopOwner, TopShortUrl, TrendPoint
from .service import MAX_DAYS, MIN_DAYS

router = APIRouter()

DAYS_QUERY = Query(default=30, ge=MIN_DAYS, le=MAX_DAYS, description="Trailing window in days")


@router.get("/trends/projects", response_model=list[TrendPoint])
async def project_trend(
    days: int = DAYS_QUERY,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IAnalyticsService = Depends(get_analytics_service),
) -> list[TrendPoint]:
    """Projects created per day."""
    return await service.project_trend(days)


@router.get("/trends/clicks", response_model=list[TrendPoint])
async def click_trend(
    days: int = DAYS_QUERY,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IAnalyticsService = Depends(get_analytics_service),
) -> list[TrendPoint]:
    """Redirects per day."""
    return await service.click_trend(days)


@router.get("/top/short-urls", response_model=list[TopShortUrl])
async def top_short_urls(
    days: int = DAYS_QUERY,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IAnalyticsService = Depends(get_analytics_service),
) -> list[TopShortUrl]:
    return await service.top_short_urls(days)


@router.get("/top/users", response_model=list[TopOwner])
async def top_owners(
    days: int = DAYS_QUERY,
    admin: AuthenticatedUser = Depends(require_admin),
    service: IAnalyticsService = Depends(get_analytics_service),
) -> list[TopOwner]:
    return await service.top_owners(days)
