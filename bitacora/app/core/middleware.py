# bitacora/app/core/middleware.py
"""HTTP middleware and the per-app rate limiter."""
import logging

from limits import parse
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware

from bitacora.app.core.config import Settings
from bitacora.app.core.errors import error_response, request_context

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
}

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds the standard hardening headers to every response."""

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    One app-wide window per client IP, checked before routing.

    The limiter's storage and strategy come from slowapi; the hit is made
    here so every request counts, whatever route it resolves to.
    """

    def __init__(self, app, limiter: Limiter, limit: str):
        super().__init__(app)
        self.limiter = limiter
        self.item = parse(limit)

    async def dispatch(self, request, call_next):
        if self.limiter.enabled:
            if not self.limiter.limiter.hit(self.item, get_remote_address(request)):
                logger.warning("Rate limit exceeded (%s)", self.item, extra=request_context(request))
                return error_response(429, RATE_LIMIT_MESSAGE)
        return await call_next(request)


def build_limiter(settings: Settings) -> Limiter:
    # In-process storage; one limiter per app instance
    return Limiter(
        key_func=get_remote_address,
        storage_uri="memory://",
        enabled=settings.RATE_LIMIT_ENABLED,
    )
