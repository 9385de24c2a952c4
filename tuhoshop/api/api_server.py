"""
FastAPI server for the storefront backend.

Serves the read-only catalog, accepts orders, contact messages and newsletter
sign-ups from the web shop and forwards them to the admin Telegram chat.
"""
from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Any

import anyio
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from tuhoshop import __version__
from tuhoshop.core.config import Settings, load_settings
from tuhoshop.core.exceptions import NotFoundException, TuhoShopException
from tuhoshop.core.sentry_integration import capture_exception
from tuhoshop.db import (
    AsyncCatalogRepository,
    AsyncContactRepository,
    AsyncOrderRepository,
    CatalogRepository,
    ContactRepository,
    Database,
    OrderRepository,
    create_database,
)
from tuhoshop.services.notifier import AdminNotifier, build_notifier

from .rate_limit import build_limiter
from .routes_catalog import router as catalog_router
from .routes_contact import router as contact_router
from .routes_orders import router as orders_router

logger = logging.getLogger(__name__)

DEV_ORIGINS = [
    "http://localhost:5000",
    "http://localhost:5173",
    "http://localhost:3000",
    "http://127.0.0.1:5000",
    "http://127.0.0.1:5173",
]

VALIDATION_MESSAGES = {
    "/api/orders": "Missing required order information",
    "/api/contact": "Invalid contact form data",
    "/api/newsletter": "Email is required",
    "/api/products": "Invalid pagination parameters",
    "/api/featured-products": "Invalid limit parameter",
}
FAILURE_MESSAGES = {
    "/api/orders": "Lỗi khi xử lý đơn hàng",
    "/api/contact": "Lỗi khi gửi thông tin liên hệ",
    "/api/newsletter": "Lỗi khi đăng ký nhận tin",
    "/api/products": "Failed to fetch products",
    "/api/featured-products": "Failed to fetch featured products",
}


def _validation_message(path: str) -> str:
    if path in VALIDATION_MESSAGES:
        return VALIDATION_MESSAGES[path]
    if path.startswith("/api/products/category/"):
        return "Invalid category ID"
    if path.startswith("/api/products/") and path.endswith("/images"):
        return "Invalid product ID"
    return "Invalid request data"


def _field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors to one entry per top-level body field."""
    errors: list[dict[str, str]] = []
    seen: set[str] = set()
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        if len(loc) > 1 and loc[0] == "body":
            field = loc[1]
        else:
            field = loc[-1] if loc else "body"
        if field in seen:
            continue
        seen.add(field)
        message = str(err.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({"field": field, "message": message})
    return errors


def create_api_app(
    settings: Settings | None = None,
    database: Database | None = None,
    notifier: AdminNotifier | None = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Loaded settings; read from the environment when omitted
        database: Existing database handle; created from settings when omitted
        notifier: Admin notifier; built from the Telegram settings when omitted
    """
    settings = settings or load_settings()
    owns_database = database is None
    if database is None:
        database = create_database(settings.database_url)
    if notifier is None:
        notifier = build_notifier(settings.telegram)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🚀 TUHOTUHO API starting...")
        if notifier.enabled and settings.telegram.announce_online:
            await notifier.announce_online()
        yield
        logger.info("👋 TUHOTUHO API shutting down...")
        await notifier.close()
        if owns_database:
            database.close()

    app = FastAPI(
        title="TUHOTUHO Shop API",
        description="Order intake and admin notifications for the TUHOTUHO web shop",
        version=__version__,
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    # Available immediately so the app also works without lifespan events
    app.state.settings = settings
    app.state.database = database
    app.state.notifier = notifier
    app.state.orders = AsyncOrderRepository(OrderRepository(database.session_factory))
    app.state.contacts = AsyncContactRepository(ContactRepository(database.session_factory))
    app.state.catalog = AsyncCatalogRepository(CatalogRepository(database.session_factory))

    app.state.limiter = build_limiter(settings.api)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    allowed_origins = list(settings.api.cors_origins)
    if settings.is_dev:
        allowed_origins.extend(o for o in DEV_ORIGINS if o not in allowed_origins)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Sentry-Trace", "Baggage"],
        expose_headers=["Content-Length", "Content-Type"],
    )

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Frame-Options"] = "SAMEORIGIN"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response

    @app.middleware("http")
    async def log_api_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        if request.url.path.startswith("/api"):
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                "%s %s %s in %.0fms",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
            )
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        message = _validation_message(request.url.path)
        errors = _field_errors(exc)
        logger.info("Rejected %s: %s", request.url.path, ", ".join(e["field"] for e in errors))
        return JSONResponse(
            status_code=400,
            content={"message": message, "errors": errors},
        )

    @app.exception_handler(NotFoundException)
    async def not_found_handler(request: Request, exc: NotFoundException):
        return JSONResponse(status_code=404, content={"message": exc.message, "errors": []})

    @app.exception_handler(TuhoShopException)
    async def storefront_error_handler(request: Request, exc: TuhoShopException):
        logger.error("Request %s failed: %s", request.url.path, exc.message, exc_info=exc)
        capture_exception(exc, request={"path": request.url.path, "method": request.method})
        message = FAILURE_MESSAGES.get(request.url.path, "Internal server error")
        return JSONResponse(status_code=500, content={"message": message, "errors": []})

    app.include_router(orders_router, prefix="/api")
    app.include_router(contact_router, prefix="/api")
    app.include_router(catalog_router, prefix="/api")

    @app.get("/health")
    async def health() -> dict[str, Any]:
        database_ok = await anyio.to_thread.run_sync(database.ping)
        return {
            "status": "ok" if database_ok else "degraded",
            "database": database_ok,
            "notifier": notifier.enabled,
        }

    return app


async def run_api_server(settings: Settings) -> None:
    """Run the API until the process is stopped."""
    app = create_api_app(settings)

    config = uvicorn.Config(
        app,
        host=settings.api.host,
        port=settings.api.port,
        log_level="info",
        access_log=False,
    )
    server = uvicorn.Server(config)

    logger.info(f"🌐 Starting TUHOTUHO API on http://{settings.api.host}:{settings.api.port}")
    await server.serve()
