# newsroom/utils/errors.py
"""
Error types surfaced to API clients.

Every error renders as ``{"error": <message>}``; the handlers that do the
rendering are registered in newsroom/main.py.
"""
import logging

from fastapi import Request, status
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class RequestFailed(HTTPException):
    """Validation or store failure."""

    def __init__(self, message: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


class AuthorizationDenied(HTTPException):
    """Wrong role, or a status the caller may not set."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=message)


class NotFound(HTTPException):
    def __init__(self, message: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=message)


class NotAuthenticated(HTTPException):
    def __init__(self, message: str = "Not authenticated"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=message)


# ----------------------------------------------------
# HANDLERS
# ----------------------------------------------------
async def http_error_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        {"error": exc.detail}, status_code=exc.status_code, headers=exc.headers
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse({"error": message}, status_code=status.HTTP_400_BAD_REQUEST)


async def store_error_handler(request: Request, exc: SQLAlchemyError):
    # Driver message when there is one (e.g. UNIQUE constraint failed: ...)
    message = str(getattr(exc, "orig", None) or exc)
    logger.warning("Store error on %s %s: %s", request.method, request.url.path, message)
    return JSONResponse({"error": message}, status_code=status.HTTP_400_BAD_REQUEST)
