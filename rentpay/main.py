from __future__ import annotations

import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Optional

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import Settings, get_settings
from .endpoints.merchants import router as merchants_router
from .endpoints.payments import router as payments_router
from .exceptions import InternalError, RentPayError
from .identity import IdentityResolver, build_identity_resolver
from .logging_config import setup_logging
from .models import HealthResponse
from .processor import ProcessorClient
from .repositories import build_repositories
from .startup import create_tables

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, Any]:
    settings: Settings = app.state.settings
    logger.info(
        "application_startup",
        environment=settings.environment,
        storage_backend=settings.storage_backend,
        processor_base_url=settings.processor_base_url,
        processor_credentials=bool(settings.processor_secret_key),
    )

    if app.state.db_engine is not None:
        await create_tables(app.state.db_engine)
        logger.info("database_initialized")

    yield

    logger.info("application_shutdown")
    await app.state.processor.close()
    if app.state.db_engine is not None:
        await app.state.db_engine.dispose()


def create_app(
    settings: Optional[Settings] = None,
    processor: Optional[ProcessorClient] = None,
    identity_resolver: Optional[IdentityResolver] = None,
) -> FastAPI:
    """Build the application and its collaborators."""
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(title="RentPay API", version=__version__, lifespan=lifespan)

    account_directory, payment_ledger, db_engine = build_repositories(settings)
    app.state.settings = settings
    app.state.account_directory = account_directory
    app.state.payment_ledger = payment_ledger
    app.state.db_engine = db_engine
    app.state.identity_resolver = identity_resolver or build_identity_resolver(settings)
    app.state.processor = processor or ProcessorClient(
        base_url=settings.processor_base_url,
        secret_key=settings.processor_secret_key,
        timeout=settings.processor_timeout_seconds,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next: Any) -> Response:
        start_time = time.perf_counter()
        logger.info("request_received", method=request.method, path=request.url.path)
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            logger.info(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )

    @app.exception_handler(RentPayError)
    async def rentpay_error_handler(request: Request, exc: RentPayError) -> JSONResponse:
        logger.info(
            "request_rejected",
            path=request.url.path,
            status_code=exc.status_code,
            error=exc.message,
        )
        return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return JSONResponse(
                status_code=exc.status_code,
                content={"error": "Route not found", "path": request.url.path},
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
            exc_info=exc,
        )
        error = InternalError(
            "Internal server error",
            details=str(exc) if settings.is_development else "Something went wrong",
        )
        return JSONResponse(
            status_code=error.status_code,
            content={"error": error.message, "message": error.details},
        )

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(
            timestamp=datetime.now(timezone.utc),
            environment=settings.environment,
        )

    @app.get("/api/test")
    async def api_test() -> dict:
        return {
            "message": "Server is working with routes!",
            "routes": [
                "/health",
                "/api/test",
                "/api/payments/test",
                "/api/merchant-accounts/test",
            ],
        }

    app.include_router(payments_router)
    app.include_router(merchants_router)

    return app
