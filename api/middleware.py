"""
Access logging for the auth API.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)


def register_middleware(app: FastAPI) -> None:
    """Attach request timing and an access log line per request."""

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"

        # Authorization headers and bodies are never logged.
        client = request.client.host if request.client else "-"
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "%s %s %s -> %d (%.3fs)",
            client, request.method, request.url.path, response.status_code, elapsed,
        )
        return response
