"""
Analytics module.

Admin usage statistics: creation and click trends, top links, top owners.
"""

from .interfaces import IAnalyticsService
from .models import TopOwner, TopShortUrl, TrendPoint
from .exceptions import InvalidWindowError
from .service import AnalyticsService

__all__ = [
    "IAnalyticsService",
    "TopOwner",
    "TopShortUrl",
    "TrendPoint",
    "InvalidWindowError",
    "AnalyticsService",
]
