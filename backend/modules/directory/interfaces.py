"""
Directory module interface.

The directory capability resolves identity keys and search text to
organizational profiles. Anything that satisfies IDirectoryClient can be
handed to the OwnerDirectoryService, which is how tests substitute fakes.
"""

from typing import Protocol, Optional, runtime_checkable

from .models import DirectoryProfile


@runtime_checkable
class IDirectoryClient(Protocol):
    """Contract for a directory lookup backend."""

    async def find_by_query(self, text: str) -> list[DirectoryProfile]:
        """
        Prefix search over display name, email and principal name.

        Returns at most 20 profiles.

        Raises:
            DirectoryUnavailableError: If the directory cannot be reached
        """
        ...

    async def find_by_id(self, identity_key: str) -> Optional[DirectoryProfile]:
        """
        Look up one profile by identity key (or principal name).

        Returns:
            The profile, or None if the directory has no such user

        Raises:
            DirectoryUnavailableError: If the directory cannot be reached
        """
        ...
