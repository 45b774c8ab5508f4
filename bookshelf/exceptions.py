"""Error taxonomy and the FastAPI handlers that translate it into responses.

Every failure leaving the API is rendered as ``{"message": ...}`` with exactly
one status code. Internal details of unexpected failures are logged, never
returned to the caller.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

GENERIC_SERVER_MESSAGE = "Server error"


class CatalogError(Exception):
    """Base exception for catalog errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = GENERIC_SERVER_MESSAGE

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CatalogError):
    """Missing or invalid input; the caller must fix the request."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthError(CatalogError):
    """Bad credentials, or a missing, expired or invalid token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class NotFound(CatalogError):
    """The id does not resolve to an existing record."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(CatalogError):
    """A unique value is already taken."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class ServerError(CatalogError):
    """Unexpected internal failure. The message is always generic."""

    def __init__(self):
        super().__init__(GENERIC_SERVER_MESSAGE)


def _describe_validation_errors(exc: RequestValidationError) -> str:
    """Summarize pydantic errors as one readable line."""
    parts = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query")]
        field = ".".join(location)
        message = error.get("msg", "invalid value")
        parts.append(f"{field}: {message}" if field else message)
    return "; ".join(parts) or ValidationError.default_message


async def catalog_exception_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Render a taxonomy error with its own status code."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
        headers=headers,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report schema violations in the body or query as 400."""
    message = _describe_validation_errors(exc)
    logger.info(f"Request validation error on {request.url.path}: {message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": message},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors such as unknown routes as {message}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log an unexpected failure and return a generic 500."""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": GENERIC_SERVER_MESSAGE},
    )


def add_exception_handlers(app: FastAPI) -> None:
    """Register the handlers that map every failure to a ``{message}`` body."""
    app.add_exception_handler(CatalogError, catalog_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
