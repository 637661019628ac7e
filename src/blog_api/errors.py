# Error taxonomy and the centralized error responder
from datetime import datetime
from typing import Any, Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)


class BlogAPIError(Exception):
    """Base class for errors rendered by the error responder"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, detail: Any = None):
        self.message = message or self.message
        self.detail = detail
        super().__init__(self.message)


class RequestValidationFailed(BlogAPIError):
    """Malformed or missing input, raised before any mutation"""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid input"


class AuthenticationError(BlogAPIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class StorageError(BlogAPIError):
    """Photo file could not be written or removed"""

    message = "Photo storage failed"


class PersistenceError(BlogAPIError):
    """The database rejected or failed an operation"""

    message = "Database operation failed"


def _error_body(message: str, detail: Any = None) -> dict:
    body = {"message": message, "timestamp": datetime.now().isoformat()}
    if detail is not None:
        body["detail"] = detail
    return body


async def blog_api_error_handler(request: Request, exc: BlogAPIError) -> JSONResponse:
    log = logger.warning if exc.status_code < 500 else logger.error
    log("request_failed", path=request.url.path, error=type(exc).__name__, message=exc.message)

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    # Internal details of server errors stay in the logs
    detail = exc.detail if exc.status_code < 500 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.message, detail),
        headers=headers,
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON bodies and bad parameters are reported as 400, like schema failures"""
    logger.warning("request_failed", path=request.url.path, error="RequestValidationError")
    detail = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(RequestValidationFailed.message, detail),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request_failed", path=request.url.path, error=type(exc).__name__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(BlogAPIError.message),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error responder on the application"""
    app.add_exception_handler(BlogAPIError, blog_api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
