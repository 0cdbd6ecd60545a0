"""
Redirects module exceptions.
"""

from shared.exceptions import NotFoundError


class ShortUrlNotFoundError(NotFoundError):
    """
    Raised when a short name does not resolve to an approved project.

    Missing, pending and rejected projects all raise this same error so
    that anonymous callers cannot tell them apart.
    """

    def __init__(self, short_name: str):
        super().__init__(
            "Short URL not found",
            code="SHORT_URL_NOT_FOUND",
            details={"short_name": short_name},
        )
