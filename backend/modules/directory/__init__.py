"""
Directory module.

Looks people up in the organizational directory (Microsoft Graph) and
turns project owner identity keys into display records.

Public API:
- IDirectoryClient: Interface for directory backends
- GraphDirectoryClient, LocalDirectoryClient: Directory backends
- OwnerDirectoryService: Owner resolution, normalisation and search
- DirectoryProfile, OwnerInfo, UserSummary: Directory models
"""

from .interfaces import IDirectoryClient
from .models import DirectoryProfile, OwnerInfo, UserSummary, UNKNOWN_USER_NAME
from .exceptions import DirectoryUnavailableError
from .client import GraphDirectoryClient, LocalDirectoryClient
from .service import OwnerDirectoryService

__all__ = [
    # Interface
    "IDirectoryClient",
    # Models
    "DirectoryProfile",
    "OwnerInfo",
    "UserSummary",
    "UNKNOWN_USER_NAME",
    # Exceptions
    "DirectoryUnavailableError",
    # Implementations
    "GraphDirectoryClient",
    "LocalDirectoryClient",
    "OwnerDirectoryService",
]
