"""
FastAPI middleware for request correlation.

Propagates X-Request-ID into the logging context and logs each request
with its duration.
"""

import logging
import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from gcs_drive.common.logging_config import clear_request_id, set_request_id

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestTrackingMiddleware(BaseHTTPMiddleware):
    """Adds X-Request-ID to responses and logs request/response."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = set_request_id(request.headers.get(REQUEST_ID_HEADER) or None)
        start_time = time.time()

        logger.info(
            "Incoming request",
            extra={"extra_fields": {"method": request.method, "path": request.url.path}},
        )

        try:
            response = await call_next(request)
            duration_ms = (time.time() - start_time) * 1000

            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                "Request completed",
                extra={
                    "extra_fields": {
                        "status_code": response.status_code,
                        "duration_ms": round(duration_ms, 2),
                    }
                },
            )
            return response
        except Exception as e:
            logger.error(
                "Request failed",
                extra={"extra_fields": {"error": str(e), "error_type": type(e).__name__}},
            )
            raise
        finally:
            clear_request_id()
