# src/thought_dump/main.py
"""Main entry point for the Thought Dump application."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from thought_dump.api.v1 import (
    admin_router,
    comments_router,
    posts_router,
    search_router,
    topics_router,
)
from thought_dump.core.errors import AppError
from thought_dump.core.logging import configure_logging
from thought_dump.core.rate_limit import FixedWindowLimiter, RateLimitMiddleware
from thought_dump.core.settings import settings
from thought_dump.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_429_TOO_MANY_REQUESTS: {"model": ErrorResponse},
}

_HTTP_CODES = {
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    status.HTTP_429_TOO_MANY_REQUESTS: "RATE_LIMITED",
}

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Anonymous topic board with toggle voting and trending feeds",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Per-address request limit
rate_limiter = FixedWindowLimiter(
    window_seconds=settings.rate_limit_window_ms / 1000,
    max_requests=settings.rate_limit_max_requests,
)
app.add_middleware(
    RateLimitMiddleware,
    limiter=rate_limiter,
    enabled=settings.rate_limit_enabled,
)

# Include API routers
app.include_router(posts_router, prefix="/api/v1", responses=_ERROR_RESPONSES)
app.include_router(comments_router, prefix="/api/v1", responses=_ERROR_RESPONSES)
app.include_router(topics_router, prefix="/api/v1", responses=_ERROR_RESPONSES)
app.include_router(search_router, prefix="/api/v1", responses=_ERROR_RESPONSES)
app.include_router(admin_router, prefix="/api/v1", responses=_ERROR_RESPONSES)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "%s %s -> %d (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


@app.exception_handler(AppError)
async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_body(include_details=settings.debug),
    )


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    body: dict[str, object] = {"message": "Invalid input data", "code": "VALIDATION_ERROR"}
    if settings.debug:
        body["details"] = exc.errors()
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)


@app.exception_handler(IntegrityError)
async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "A record with this value already exists", "code": "DUPLICATE_RECORD"},
    )


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _HTTP_CODES.get(exc.status_code, "HTTP_ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail), "code": code},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    body: dict[str, object] = {"message": "Internal Server Error", "code": "INTERNAL_ERROR"}
    if settings.debug:
        body["details"] = repr(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging(settings.log_level)
    if settings.uses_default_hash_secret:
        logger.warning(
            "HASH_SECRET is not set; voter ids are derived with the built-in default secret"
        )
    if not settings.admin_secret:
        logger.warning("ADMIN_SECRET is not set; admin sessions cannot be created")
    logger.info("%s %s started (%s)", settings.app_name, settings.app_version, settings.environment)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment,
    }


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("thought_dump.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
