import logging
from typing import Any, Dict, Optional
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for every failure a service reports to the API surface."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, extra: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.extra = extra or {}


class InvalidInput(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class InvalidCredentials(Unauthorized):
    def __init__(self, message: str = "Invalid Password!"):
        super().__init__(message, extra={"accessToken": None})


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND


def error_response(status_code: int, error: Any, extra: Optional[Dict[str, Any]] = None) -> JSONResponse:
    content = {"success": False, "error": error}
    if extra:
        content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def _format_validation_error(error: Dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    return f"{location}: {error.get('msg')}" if location else error.get("msg", "")


async def app_error_handler(_: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__}: {exc.message}")
    return error_response(exc.status_code, exc.message, exc.extra)


async def validation_error_handler(_: Request, exc: RequestValidationError):
    messages = [_format_validation_error(error) for error in exc.errors()]
    return error_response(status.HTTP_400_BAD_REQUEST, messages)


async def integrity_error_handler(_: Request, exc: IntegrityError):
    logger.error(f"Integrity error: {exc.orig}")
    return error_response(status.HTTP_400_BAD_REQUEST, [f"Constraint violated: {exc.orig}"])


async def database_error_handler(_: Request, exc: SQLAlchemyError):
    logger.exception("Database error", exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Database error")


async def http_error_handler(_: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, exc.detail)


async def unhandled_error_handler(_: Request, exc: Exception):
    logger.exception("Unhandled error", exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server Error")


def register_exception_handlers(app: FastAPI):
    """Route every failure through the single JSON envelope."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
