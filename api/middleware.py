# ============================================================================
# File: api/middleware.py
# ============================================================================

import time
import uuid
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
LATENCY_HEADER = "X-API-Latency-ms"

# Probes hit these constantly; keep them out of the request log
QUIET_PATHS = ("/health",)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Per-request context for the console API.

    Injects:
    - request_id (taken from an incoming X-Request-ID, else generated)
    - api_latency_ms

    Every request except probes is logged once with its outcome.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        start_time = time.perf_counter()

        request.state.request_id = request_id

        try:
            response: Response = await call_next(request)
        except Exception:
            latency_ms = int((time.perf_counter() - start_time) * 1000)
            logger.exception(
                f"[{request_id}] {request.method} {request.url.path} raised after {latency_ms}ms"
            )
            raise

        latency_ms = int((time.perf_counter() - start_time) * 1000)

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[LATENCY_HEADER] = str(latency_ms)

        if request.url.path not in QUIET_PATHS:
            log = logger.info if response.status_code < 400 else logger.warning
            log(
                f"[{request_id}] {request.method} {request.url.path} -> "
                f"{response.status_code} ({latency_ms}ms)"
            )

        return response
