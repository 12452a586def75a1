"""Wholesale Market API.

    uvicorn src.main:app --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from sqlalchemy import text

from config.settings import settings
from src.wm_checkout.api.router import cart_router, checkout_router
from src.wm_common.database import engine
from src.wm_common.errors import AppError, InternalError
from src.wm_common.redis_client import close_redis, get_redis
from src.wm_common.response import error_response
from src.wm_gateway.middleware.rate_limit import RateLimitMiddleware
from src.wm_gateway.middleware.request_log import RequestLogMiddleware
from src.wm_order.api.router import router as order_router
from src.wm_order.api.router import seller_router
from src.wm_payment.api.router import router as payment_router
from src.wm_settlement.api.router import router as settlement_router

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # PostgreSQL is required; Redis only backs the rate limiter, which fails open.
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    try:
        await (await get_redis()).ping()
    except RedisError as exc:
        logger.warning("Redis unreachable at startup, rate limiting disabled: %s", exc)
    if not settings.TOSS_SECRET_KEY:
        logger.warning("TOSS_SECRET_KEY is empty; payment confirmation will be refused")
    logger.info(
        "Started: inventory_mode=%s fee_rate=%s payout_lead_days=%d",
        settings.INVENTORY_MODE,
        settings.PLATFORM_FEE_RATE,
        settings.PAYOUT_LEAD_BUSINESS_DAYS,
    )
    yield
    await engine.dispose()
    await close_redis()


app = FastAPI(title=settings.APP_NAME, version=VERSION, lifespan=lifespan)

# Starlette runs the last-added middleware first: request ids exist before limiting
app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, exc.category, request)
    return JSONResponse(status_code=exc.http_status, content=resp.model_dump())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    err = InternalError()
    resp = error_response(err.code, err.message, err.category, request)
    return JSONResponse(status_code=err.http_status, content=resp.model_dump())


for _router in (
    checkout_router,
    cart_router,
    payment_router,
    order_router,
    seller_router,
    settlement_router,
):
    app.include_router(_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": VERSION}
