"""API error taxonomy, response envelope helpers and exception handlers."""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from suvidha.services.localizer import Localizer

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base application error.

    `code` doubles as the translation key under "errors." in translations.json;
    `message` is the English fallback. `params` fill translation placeholders.
    """

    def __init__(self, message: str, code: str, http_status: int = 400, **params: Any):
        """Initialize error."""
        self.message = message
        self.code = code
        self.http_status = http_status
        self.params = params
        super().__init__(message)


class ValidationError(AppError):
    """Missing or malformed required fields."""

    def __init__(
        self, message: str = "Invalid request", code: str = "invalid_request", **params: Any
    ):
        super().__init__(message, code, status.HTTP_400_BAD_REQUEST, **params)


class UnauthorizedError(AppError):
    """Missing or invalid bearer token."""

    def __init__(self, message: str = "Unauthorized", code: str = "not_authorized"):
        super().__init__(message, code, status.HTTP_401_UNAUTHORIZED)


class ForbiddenError(AppError):
    """Authenticated, but wrong owner or role."""

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, "forbidden", status.HTTP_403_FORBIDDEN)


class NotFoundError(AppError):
    """Referenced entity does not exist."""

    def __init__(self, message: str, code: str):
        super().__init__(message, code, status.HTTP_404_NOT_FOUND)


class ConflictError(AppError):
    """Operation not allowed in the entity's current state."""

    def __init__(self, message: str, code: str, **params: Any):
        super().__init__(message, code, status.HTTP_409_CONFLICT, **params)


class InternalError(AppError):
    """Unexpected failure; details are logged, never returned."""

    def __init__(self, message: str = "Something went wrong. Please try again later."):
        super().__init__(message, "internal_error", status.HTTP_500_INTERNAL_SERVER_ERROR)


def success_response(data: Any = None, **extra: Any) -> dict[str, Any]:
    """Create the standard success envelope."""
    body: dict[str, Any] = {"success": True, "data": data}
    body.update({k: v for k, v in extra.items() if v is not None})
    return body


def error_response(error: AppError, localizer: Localizer) -> dict[str, Any]:
    """Create the standard error envelope with a localized message."""
    return {
        "success": False,
        "error": localizer.t(f"errors.{error.code}", default=error.message, **error.params),
    }


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    localizer = Localizer.from_request(request)
    if exc.http_status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info(
            "%s %s -> %d %s", request.method, request.url.path, exc.http_status, exc.code
        )
    return JSONResponse(status_code=exc.http_status, content=error_response(exc, localizer))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("%s %s -> 400 validation: %s", request.method, request.url.path, exc.errors())
    return await app_error_handler(request, ValidationError())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error in %s %s: %s", request.method, request.url.path, exc, exc_info=exc
    )
    localizer = Localizer.from_request(request)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response(InternalError(), localizer),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope-producing exception handlers on the app."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


__all__ = [
    "AppError",
    "ConflictError",
    "ForbiddenError",
    "InternalError",
    "NotFoundError",
    "UnauthorizedError",
    "ValidationError",
    "error_response",
    "register_exception_handlers",
    "success_response",
]
