"""Fixed-window rate limiting for money-moving endpoints.

Only POST requests under the limited prefixes are counted:
  - /api/v1/checkout   (cart validation)
  - /api/v1/payments   (payment confirmation)

Redis logic (one window per minute):
    count = INCR ratelimit:{client_ip}:{group}
    if count == 1: EXPIRE key 60
    if count > limit: 429

If Redis is unreachable the limiter fails open and logs a warning; a cache
outage must not block paid orders.
"""

import logging

from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from config.settings import settings
from src.wm_common.errors import RateLimitError
from src.wm_common.redis_client import get_redis
from src.wm_common.response import error_response

logger = logging.getLogger(__name__)

LIMITED_PREFIXES: tuple[str, ...] = ("/api/v1/checkout", "/api/v1/payments")
WINDOW_SECONDS = 60


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _endpoint_group(path: str) -> str | None:
    for prefix in LIMITED_PREFIXES:
        if path.startswith(prefix):
            return prefix.rsplit("/", 1)[-1]
    return None


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, limit: int | None = None) -> None:
        super().__init__(app)
        self._limit = limit if limit is not None else settings.RATE_LIMIT_PER_MINUTE

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        group = _endpoint_group(request.url.path)
        if request.method != "POST" or group is None:
            return await call_next(request)

        key = f"ratelimit:{_client_ip(request)}:{group}"
        try:
            redis = await get_redis()
            count = await redis.incr(key)
            if count == 1:
                await redis.expire(key, WINDOW_SECONDS)
        except RedisError as exc:
            logger.warning("Rate limiter unavailable, allowing request: %s", exc)
            return await call_next(request)

        if count > self._limit:
            err = RateLimitError()
            resp = error_response(err.code, err.message, err.category, request)
            return JSONResponse(
                status_code=err.http_status,
                content=resp.model_dump(),
                headers={"Retry-After": str(WINDOW_SECONDS)},
            )
        return await call_next(request)
