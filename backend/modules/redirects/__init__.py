"""
Redirects module.

Resolves short names to approved projects and records each visit.

Public API:
- IRedirectService, IAccessLogRepository: Interfaces
- RedirectService: Redirect resolution and visit recording
- InMemoryAccessLogRepository, AccessLogRepository: Storage backends
- AccessLog, VisitInfo: Models
"""

from .interfaces import IAccessLogRepository, IRedirectService
from .models import AccessLog, VisitInfo
from .exceptions import ShortUrlNotFoundError
from .repository import AccessLogRepository, InMemoryAccessLogRepository
from .service import RedirectService

__all__ = [
    # Interfaces
    "IAccessLogRepository",
    "IRedirectService",
    # Models
    "AccessLog",
    "VisitInfo",
    # Exceptions
    "ShortUrlNotFoundError",
    # Implementations
    "AccessLogRepository",
    "InMemoryAccessLogRepository",
    "RedirectService",
]
