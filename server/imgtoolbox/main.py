from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.endpoints import compress, generation, recognition, remove_bg, system
from .clients import VendorClients
from .core.config import Settings, get_settings
from .core.errors import ToolboxError

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Server error, please try again later."


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info("🚀 Starting image toolbox backend")
    logger.info(f"🌐 Server configured to run on {settings.host}:{settings.port}")
    if not settings.ark_configured:
        logger.warning("⚠️ ARK_API_KEY is not set: generation and recognition will fail")
    if not settings.remove_bg_configured:
        logger.warning("⚠️ REMOVE_BG_API_KEY is not set: background removal will fail")
    yield
    logger.info("🛑 Shutdown complete")


def _format_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    return f"Invalid request: {location}: {message}" if location else f"Invalid request: {message}"


def _register_exception_handlers(app: FastAPI) -> None:
    """Render every failure as ``{"error": message}``."""

    @app.exception_handler(ToolboxError)
    async def toolbox_error_handler(request: Request, exc: ToolboxError) -> JSONResponse:
        log = logger.warning if exc.status_code < 500 else logger.error
        log(f"❌ {request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _format_validation_error(exc)
        logger.warning(f"❌ {request.method} {request.url.path} -> 400: {message}")
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content={"error": SERVER_ERROR_MESSAGE})


def create_app(
    settings: Optional[Settings] = None,
    clients: Optional[VendorClients] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Explicit settings; defaults to the environment-loaded ones
        clients: Vendor clients; defaults to the HTTP clients built from ``settings``
    """
    settings = settings or get_settings()
    clients = clients or VendorClients.from_settings(settings)

    app = FastAPI(
        title=settings.app_name,
        description=settings.description,
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.clients = clients

    cors_origins = settings.cors_origins or ["http://localhost:3000"]

    # In debug mode, automatically add common localhost ports for development convenience
    if settings.debug:
        for port in (3000, 3001, 5173):
            origin = f"http://localhost:{port}"
            if origin not in cors_origins:
                cors_origins.append(origin)
    logger.info(f"🌐 CORS configured for origins: {cors_origins}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
        max_age=3600,
    )

    _register_exception_handlers(app)

    app.include_router(system.router)
    app.include_router(compress.router)
    app.include_router(generation.router)
    app.include_router(recognition.router)
    app.include_router(remove_bg.router)

    logger.info("✅ Routers registered:")
    logger.info("   - System: /api/health")
    logger.info("   - Compress: /api/compress")
    logger.info("   - Generation: /api/ai-generate")
    logger.info("   - Recognition: /api/recognition")
    logger.info("   - Remove background: /api/remove-bg")

    return app
