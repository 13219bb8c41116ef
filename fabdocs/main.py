"""
FastAPI application factory and configuration.
"""

import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, UTC

import structlog
from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from .config.logging import configure_logging
from .config.observability import APP_UPTIME_SECONDS, record_request
from .routers import documents_router, metrics_router, system_router
from .utils.errors import ERROR_CODES, DomainError, error_payload

logger = logging.getLogger(__name__)

APP_START_TIME = datetime.now(UTC)

# Renders above this are logged as slow
SLOW_RESPONSE_MS = 2000


class ResponseTimeMiddleware(BaseHTTPMiddleware):
    """Record request latency metrics and expose them as a response header."""

    async def dispatch(self, request: Request, call_next):  # noqa: D401
        start_time = time.time()
        response = await call_next(request)
        duration_s = time.time() - start_time
        response_time_ms = duration_s * 1000
        response.headers["X-Response-Time"] = f"{response_time_ms:.1f}ms"

        record_request(request.method, request.url.path, getattr(response, "status_code", 0), duration_s)
        APP_UPTIME_SECONDS.set((datetime.now(UTC) - APP_START_TIME).total_seconds())

        if response_time_ms > SLOW_RESPONSE_MS:
            logger.info(
                "Slow response: %.1fms for %s %s",
                response_time_ms,
                request.method,
                request.url.path,
            )
        return response


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Generate a per-request ID and bind it into the structlog context."""

    async def dispatch(self, request: Request, call_next):  # noqa: D401
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")
        response.headers["X-Request-ID"] = request_id
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: ARG001
    """Application lifespan management."""
    configure_logging()
    logger.info("Starting up document export API...")
    yield
    logger.info("Shutting down document export API...")


def create_application() -> FastAPI:
    """Create and configure FastAPI application."""

    application_obj = FastAPI(
        title="Fabrication Document Export Service",
        description="Paginated PDF export for invoices, gate passes, client ledgers and quotations",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/api/v1/openapi.json",
        lifespan=lifespan
    )

    setup_middleware(application_obj)
    setup_exception_handlers(application_obj)
    setup_routes(application_obj)

    return application_obj


def setup_middleware(app: FastAPI) -> None:
    """Setup application middleware."""

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Request-ID"],
    )
    app.add_middleware(ResponseTimeMiddleware)
    app.add_middleware(RequestIDMiddleware)


def _sanitize(errors):
    """Make validation error details JSON serializable."""
    sanitized = []
    for err in errors:
        cleaned = {}
        for k, v in err.items():
            cleaned[k] = v if isinstance(v, (str, int, float, bool, list, dict, type(None))) else str(v)
        if isinstance(cleaned.get("ctx"), dict):
            cleaned["ctx"] = {k: str(v) for k, v in cleaned["ctx"].items()}
        sanitized.append(cleaned)
    return sanitized


def setup_exception_handlers(app: FastAPI) -> None:
    """Setup global exception handlers."""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle validation errors with standardized response."""
        return JSONResponse(
            status_code=422,
            content=error_payload(ERROR_CODES["validation"], "Request validation failed",
                                  details=_sanitize(exc.errors()), path=str(request.url.path)),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions with standardized response."""
        return JSONResponse(
            status_code=exc.status_code,
            content=error_payload(getattr(exc, "code", "HTTP_ERROR"), exc.detail,
                                  path=str(request.url.path)),
        )

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle Starlette HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content=error_payload("HTTP_ERROR", exc.detail, path=str(request.url.path)),
        )

    @app.exception_handler(DomainError)
    async def domain_exception_handler(request: Request, exc: DomainError):
        """Domain errors escaping a router are reported without internal detail."""
        logger.error("Unhandled domain error %s: %s", exc.code, exc.message)
        return JSONResponse(
            status_code=500,
            content=error_payload(exc.code, exc.message, path=str(request.url.path)),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error("Unhandled exception: %s", exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content=error_payload(ERROR_CODES["internal"], "An unexpected error occurred",
                                  path=str(request.url.path)),
        )


def setup_routes(app: FastAPI) -> None:
    """Setup application routes."""

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "status": "success",
            "data": {
                "message": "Fabrication Document Export Service",
                "version": "1.0.0",
                "docs": "/docs",
                "health": "/health"
            },
            "timestamp": time.time()
        }

    app.include_router(system_router)
    app.include_router(metrics_router)
    app.include_router(documents_router, prefix="/api/v1/documents", tags=["Documents"])


app = create_application()
