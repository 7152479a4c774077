# bitacora/app/core/exceptions.py
"""
Application error taxonomy.

Every error carries the HTTP status it maps to and a user-facing message.
The global handlers in ``bitacora.app.core.errors`` turn them into the
``{success: false, error, details?, timestamp}`` envelope.
"""
from typing import Any, List, Optional


class AppError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[List[Any]] = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    message = "Invalid input data"


class BadRequest(AppError):
    status_code = 400
    message = "Bad request"


class Conflict(AppError):
    # Duplicate unique fields are reported as 400, not 409
    status_code = 400
    message = "A record with that value already exists"


class Unauthorized(AppError):
    status_code = 401
    message = "Unauthorized"


class Forbidden(AppError):
    status_code = 403
    message = "Access denied"


class InvalidToken(Forbidden):
    message = "Invalid token"


class ExpiredToken(Forbidden):
    message = "Token expired"


class NotFound(AppError):
    status_code = 404
    message = "Resource not found"


class NotFoundOrUnauthorized(NotFound):
    """Ownership mismatch reported exactly like a missing record."""

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found or not authorized")


# --- Upload policy rejections (all 400) ---

class UploadRejected(AppError):
    status_code = 400
    message = "File upload failed"


class PayloadTooLarge(UploadRejected):
    def __init__(self, max_size: int):
        megabytes = max_size / (1024 * 1024)
        super().__init__(f"File is too large. Maximum {megabytes:g}MB allowed")
        self.max_size = max_size


class TooManyFiles(UploadRejected):
    message = "Too many files. Only one file is allowed"


class UnexpectedField(UploadRejected):
    message = "Unexpected file field"


class UnsupportedMediaType(UploadRejected):
    def __init__(self, allowed: List[str]):
        super().__init__(f"File type not allowed. Allowed types: {', '.join(allowed)}")
        self.allowed = allowed


class InternalError(AppError):
    status_code = 500
    message = "Internal server error"
