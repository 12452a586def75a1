"""Access log line per request, tagged with a correlation id.

The id is stored on request.state before the handler runs, so the response
envelope and the error handler report the same id that appears here:

    INFO POST /api/v1/payments/confirm 200 231ms req_a1b2c3d4e5f6

A client-supplied X-Request-ID is honoured when present and echoed back.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.wm_common.response import new_request_id

logger = logging.getLogger("wm.access")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
        request.state.request_id = request_id

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "%s %s failed after %.0fms %s",
                request.method,
                request.url.path,
                (time.perf_counter() - started) * 1000,
                request_id,
            )
            raise

        logger.info(
            "%s %s %d %.0fms %s",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
            request_id,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
