"""
Analytics module interface.
"""

from typing import Protocol, runtime_checkable

from .models import TopOwner, TopShortUrl, TrendPoint


@runtime_checkable
class IAnalyticsService(Protocol):
    """
    Read-only aggregations over a trailing window of ``days`` days.

    The four queries are independent; each reflects the stores at the
    moment it ran.
    """

    async def project_trend(self, days: int = 30) -> list[TrendPoint]:
        ...

    async def click_trend(self, days: int = 30) -> list[TrendPoint]:
        ...

    async def top_short_urls(self, days: int = 30) -> list[TopShortUrl]:
        ...

    async def top_owners(self, days: int = 30) -> list[TopOwner]:
        ...
