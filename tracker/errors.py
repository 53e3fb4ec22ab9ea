# errors.py - domain exceptions and the handlers that turn them into JSON responses

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class TrackerError(Exception):
    """Base class for failures that map onto a client-facing status code."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TrackerError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(TrackerError):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(TrackerError):
    # Raised both when a resource is missing and when it belongs to someone else
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(TrackerError):
    status_code = status.HTTP_409_CONFLICT


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def tracker_error_handler(request: Request, exc: TrackerError) -> JSONResponse:
    return error_response(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Report the first failing field only, e.g. "Invalid purchasePrice: Field required"
    errors = exc.errors()
    if not errors:
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request")
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid {field}: {first.get('msg')}" if field else f"Invalid request: {first.get('msg')}"
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Full detail stays in the server log; the client only gets a generic message
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
