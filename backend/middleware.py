"""
Request logging and session gate middleware
"""
import logging
import time
from typing import Callable, Iterable
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from security import SESSION_USER_KEY

logger = logging.getLogger(__name__)

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and elapsed time of every request"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        logger.info(f"{request.method} {request.url.path}")

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"Response: {response.status_code} ({elapsed_ms:.1f} ms)")
        return response

class SessionRequiredMiddleware(BaseHTTPMiddleware):
    """Answers 401 for /api calls without a session before any body is parsed"""

    def __init__(self, app, public_paths: Iterable[str] = (), prefix: str = "/api/"):
        super().__init__(app)
        self.public_paths = frozenset(public_paths)
        self.prefix = prefix

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if (
            request.method != "OPTIONS"
            and path.startswith(self.prefix)
            and path not in self.public_paths
            and request.session.get(SESSION_USER_KEY) is None
        ):
            logger.info(f"Rejected unauthenticated {request.method} {path}")
            return JSONResponse(status_code=401, content={"detail": "Not authenticated"})

        return await call_next(request)
