"""
CSRF Protection Middleware

Validates the Origin header of state-changing requests against the CORS allow-list.
"""

import logging
from typing import Callable
from urllib.parse import urlparse

from fastapi import Request, status
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

# State-changing HTTP methods that need CSRF protection
STATE_CHANGING_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


class CSRFProtectionMiddleware(BaseHTTPMiddleware):
    """Reject state-changing requests whose Origin (or Referer) is not allowed."""

    def __init__(self, app, allowed_origins: list[str]):
        super().__init__(app)
        self.allowed_origins = {origin.rstrip("/") for origin in allowed_origins}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method not in STATE_CHANGING_METHODS:
            return await call_next(request)

        origin = request.headers.get("Origin")

        # Requests without Origin (same-origin, curl) fall back to Referer
        if not origin:
            referer = request.headers.get("Referer")
            if referer:
                parsed = urlparse(referer)
                if parsed.scheme and parsed.netloc:
                    origin = f"{parsed.scheme}://{parsed.netloc}"

        if origin and origin.rstrip("/") not in self.allowed_origins:
            logger.warning(f"[CSRF] Rejected {request.method} {request.url.path} from origin: {origin}")
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={"detail": "Origin not allowed"},
            )

        return await call_next(request)
