# bitacora/app/core/errors.py
"""
Global exception handlers.

Every failure leaves the API as
``{"success": false, "error": ..., "details"?: ..., "timestamp": ...}``
and is logged with the request method, URL and client IP first.
"""
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from bitacora.app.core.config import Settings
from bitacora.app.core.exceptions import AppError, Conflict

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, details: Optional[List[Any]] = None, headers=None) -> JSONResponse:
    content = {
        "success": False,
        "error": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def request_context(request: Request) -> dict:
    return {
        "method": request.method,
        "url": str(request.url),
        "ip": request.client.host if request.client else None,
    }


def _field_errors(exc: RequestValidationError) -> List[dict]:
    details = []
    for error in exc.errors():
        # Drop the "body"/"query" prefix, keep the field path
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        details.append({"field": ".".join(location), "message": error.get("msg", "Invalid value")})
    return details


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        level = logging.ERROR if exc.status_code >= 500 else logging.INFO
        logger.log(level, "%s: %s", type(exc).__name__, exc.message, extra=request_context(request))
        return error_response(exc.status_code, exc.message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = _field_errors(exc)
        logger.info("Validation failed: %s", details, extra=request_context(request))
        return error_response(400, "Invalid input data", details)

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        logger.warning("Integrity error: %s", exc.orig, extra=request_context(request))
        return error_response(Conflict.status_code, Conflict.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        logger.info("HTTP %s: %s", exc.status_code, exc.detail, extra=request_context(request))
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        if exc.status_code == 404 and exc.detail == "Not Found":
            message = f"Route {request.method} {request.url.path} not found"
        return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", extra=request_context(request))
        message = str(exc) if settings.is_development and str(exc) else "Internal server error"
        return error_response(500, message)
