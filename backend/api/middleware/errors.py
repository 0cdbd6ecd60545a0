"""
Exception handlers.

Maps the shared exception hierarchy onto HTTP status codes so that routes
can let domain errors propagate.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.exceptions import (
    AkaError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)

from ..models.errors import ErrorResponse

logger = logging.getLogger(__name__)

# Checked in order; the first matching base class wins
STATUS_CODES: list[tuple[type[AkaError], int]] = [
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ValidationError, 400),
    (ConflictError, 409),
]


def status_code_for(exc: AkaError) -> int:
    for error_type, status_code in STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 500


async def aka_error_handler(request: Request, exc: AkaError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code == 500:
        logger.error(f"Unhandled {exc.code} on {request.method} {request.url.path}: {exc.message}")
        body = ErrorResponse(error="INTERNAL_ERROR", message="Internal server error")
        return JSONResponse(status_code=500, content=body.model_dump())

    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(status_code=status_code, content=exc.to_dict(), headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    body = ErrorResponse(
        error="VALIDATION_ERROR",
        message="Request validation failed",
        details={"errors": jsonable_errors(exc)},
    )
    return JSONResponse(status_code=400, content=body.model_dump())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unexpected error on {request.method} {request.url.path}")
    body = ErrorResponse(error="INTERNAL_ERROR", message="Internal server error")
    return JSONResponse(status_code=500, content=body.model_dump())


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AkaError, aka_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
