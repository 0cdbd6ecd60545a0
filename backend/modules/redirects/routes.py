"""
Short link redirect endpoint.

Registered last at the root so that it only sees paths no other route
claims. Responses are deliberately minimal: a 302, or 404/500 with a fixed
message that never says whether a link exists but is unapproved.
"""

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse

from api.dependencies import get_redirect_service

from .exceptions import ShortUrlNotFoundError
from .interfaces import IRedirectService
from .models import VisitInfo

logger = logging.getLogger(__name__)

router = APIRouter()


def _client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


@router.get("/{short_name}", include_in_schema=False)
async def redirect_short_url(
    short_name: str,
    request: Request,
    background_tasks: BackgroundTasks,
    service: IRedirectService = Depends(get_redirect_service),
):
    try:
        project = await service.resolve(short_name)
    except ShortUrlNotFoundError:
        return JSONResponse(status_code=404, content={"message": "Short URL not found"})
    except Exception:
        logger.exception(f"Redirect lookup failed for {short_name!r}")
        return JSONResponse(status_code=500, content={"message": "Server error"})

    visit = VisitInfo(
        ip_address=_client_ip(request),
        user_agent=request.headers.get("user-agent"),
        referrer=request.headers.get("referer"),
    )
    background_tasks.add_task(service.record_visit, project.id, visit)
    return RedirectResponse(url=project.target_url, status_code=302)
