"""
Error taxonomy and the handlers that turn it into HTTP responses
"""

import logging
from typing import Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors reported to API clients"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Internal Server Error"):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Malformed or missing input"""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Invalid request", errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.errors = errors or {}


class Unauthorized(AppError):
    """Missing, invalid, expired or mismatched credentials"""
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFound(AppError):
    """Missing file, directory or record"""
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(AppError):
    """Duplicate account"""
    status_code = status.HTTP_400_BAD_REQUEST


class StoreUnavailable(AppError):
    """The document store could not be reached"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def _field_name(loc) -> str:
    # ("body", "email") -> "email", ("query", "novelId") -> "novelId"
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or "request"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    body = {"detail": exc.message}
    headers = None
    if isinstance(exc, ValidationError) and exc.errors:
        body["errors"] = exc.errors
    if isinstance(exc, Unauthorized):
        headers = {"WWW-Authenticate": "Bearer"}
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=body, headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: Dict[str, str] = {}
    for err in exc.errors():
        errors.setdefault(_field_name(err.get("loc", ())), err.get("msg", "Invalid value"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request", "errors": errors},
    )


async def store_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.exception(f"Store error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=StoreUnavailable.status_code,
        content={"detail": "Internal Server Error"},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers on the application"""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(PyMongoError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
