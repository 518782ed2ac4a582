"""
VidHub error taxonomy and the handlers that render it as the standard
failure envelope ``{statusCode, message, success: false, errors: []}``.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base for every error that is surfaced to the caller as-is."""

    status_code: int = 400

    def __init__(self, message: str, errors: Optional[List[Any]] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []
        if status_code is not None:
            self.status_code = status_code


class InvalidArgument(ApiError):
    status_code = 400


class NotFound(ApiError):
    status_code = 404


class OperationFailed(ApiError):
    status_code = 400


class Forbidden(ApiError):
    status_code = 403


class Unauthorized(ApiError):
    status_code = 401


def parse_id(value: Optional[str], label: str) -> uuid.UUID:
    """Parse a path identifier, raising InvalidArgument when it is missing or malformed."""
    if value is None or not str(value).strip():
        raise InvalidArgument(f"{label} is missing")
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise InvalidArgument(f"Invalid {label} format")


def require_text(value: Optional[str], label: str) -> str:
    if value is None or not value.strip():
        raise InvalidArgument(f"{label} is required")
    return value.strip()


def error_body(status_code: int, message: str, errors: Optional[List[Any]] = None) -> dict:
    return {
        "statusCode": status_code,
        "message": message,
        "success": False,
        "errors": errors or [],
    }


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.status_code, exc.message, exc.errors))


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content=error_body(400, "Invalid request", errors))


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.status_code, str(exc.detail)))


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_body(500, "Internal server error"))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
