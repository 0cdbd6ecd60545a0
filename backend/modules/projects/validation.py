"""
Field rules for project create and update requests.
"""

import re

from .exceptions import (
    InsufficientOwnersError,
    InvalidProjectNameError,
    InvalidShortNameError,
    InvalidTargetUrlError,
)

MIN_OWNERS = 2
MAX_SHORT_NAME_LENGTH = 64

SHORT_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

# https, dot-separated host labels ending in an alphabetic TLD, optional
# port, then nothing or a path/query/fragment
TARGET_URL_PATTERN = re.compile(
    r"^https://(?:[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?\.)+[A-Za-z]{2,}"
    r"(?::\d{1,5})?(?:[/?#]\S*)?$"
)

# Root-level service routes that a short link must not shadow
RESERVED_SHORT_NAMES = frozenset({"api", "health"})


def validate_name(name: str) -> str:
    if not name or not name.strip():
        raise InvalidProjectNameError()
    return name.strip()


def normalize_short_name(short_name: str) -> str:
    """Validate a short name and return its stored (lower-case) form."""
    value = (short_name or "").strip()
    if not value:
        raise InvalidShortNameError(short_name, "must not be empty")
    if len(value) > MAX_SHORT_NAME_LENGTH:
        raise InvalidShortNameError(
            short_name, f"must be at most {MAX_SHORT_NAME_LENGTH} characters"
        )
    if not SHORT_NAME_PATTERN.match(value):
        raise InvalidShortNameError(
            short_name, "only letters, digits, underscores and hyphens are allowed"
        )
    value = value.lower()
    if value in RESERVED_SHORT_NAMES:
        raise InvalidShortNameError(short_name, "this name is reserved")
    return value


def validate_target_url(target_url: str) -> str:
    value = (target_url or "").strip()
    if not TARGET_URL_PATTERN.match(value):
        raise InvalidTargetUrlError(target_url)
    return value


def validate_owner_count(owners: list[str]) -> None:
    if len(owners) < MIN_OWNERS:
        raise InsufficientOwnersError(len(owners), MIN_OWNERS)
