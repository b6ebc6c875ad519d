"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.mt_admin.api.router import router as admin_router
from src.mt_common.database import engine
from src.mt_common.errors import AppError, InternalError, ValidationError
from src.mt_common.response import error_response
from src.mt_gateway.api.router import router as user_router
from src.mt_gateway.middleware.request_log import RequestLogMiddleware
from src.mt_ledger.api.router import router as ledger_router
from src.mt_notification.api.router import router as notification_router
from src.mt_payment.api.router import router as payment_router
from src.mt_submission.api.router import router as submission_router
from src.mt_task.api.router import router as task_router
from src.mt_withdrawal.api.router import router as withdrawal_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify the DB connection. Shutdown: dispose the pool."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_json(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(status_code=exc.http_status, content=resp.model_dump())


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _error_json(request, exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    detail = f"{location}: {first.get('msg', 'invalid input')}" if location else "Invalid input"
    return _error_json(request, ValidationError(detail))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_json(request, InternalError())


app.include_router(user_router, prefix="/api/v1")
app.include_router(ledger_router, prefix="/api/v1")
app.include_router(task_router, prefix="/api/v1")
app.include_router(submission_router, prefix="/api/v1")
app.include_router(withdrawal_router, prefix="/api/v1")
app.include_router(payment_router, prefix="/api/v1")
app.include_router(notification_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
