"""
Portfolio Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app(settings) validates configuration, builds every
       collaborator explicitly and stores it on `app.state`, then registers
       middleware, exception handlers and routers.
Who:   uvicorn (`uvicorn app.main:app`) and the test suite (create_app(Settings(...))).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐             │
    │  │  Req ID  │→│ Logging  │→│ GZip │→│ CORS │             │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘             │
    │                                                          │
    │  Routes:                                                 │
    │  /api/auth/*   /api/photos*   /api/categories            │
    │  /api/health   /uploads (local media backend only)       │
    │                                                          │
    │  app.state:                                              │
    │  settings, database, token_service, media_store,         │
    │  auth_service, photo_service, category_service           │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Construction (create_app):
        1. Validate configuration; ConfigurationError aborts construction
        2. Build database handle, token service, media store, services
    Startup (lifespan):
        1. Structured logging
        2. Production: process-level fault handlers
        3. Create tables, seed admin and categories
    Shutdown:
        1. Dispose database engine
"""

import asyncio
import logging
import os
import signal
import sys
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import Settings
from app.config import settings as default_settings
from app.database import Database
from app.exceptions import PortfolioError, ValidationError
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import auth, categories, health, photos
from app.services.auth_service import AuthService
from app.services.bootstrap import bootstrap_database
from app.services.category_service import CategoryService
from app.services.cloudinary_store import CloudinaryMediaStore
from app.services.image_validation import ImageValidator
from app.services.local_store import LocalMediaStore
from app.services.media_store import MediaStore
from app.services.password_hasher import password_hasher
from app.services.photo_service import PhotoService
from app.services.token_service import TokenService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Structured Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Passwords, hashes and tokens are never passed to any logger.
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Process-Level Fault Handling (production)
# ══════════════════════════════════════════════════════════════════════════

def _terminate_process() -> None:
    # SIGTERM lets uvicorn shut down; the platform restarts the container
    os.kill(os.getpid(), signal.SIGTERM)


def _handle_uncaught_exception(exc_type, exc_value, exc_traceback) -> None:
    logger.critical(
        "Uncaught exception, terminating process",
        exc_info=(exc_type, exc_value, exc_traceback),
    )
    _terminate_process()


def _handle_loop_exception(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    exc = context.get("exception")
    logger.critical(
        "Unhandled exception in event loop, terminating process: %s",
        context.get("message", "no message"),
        exc_info=(type(exc), exc, exc.__traceback__) if exc else None,
    )
    _terminate_process()


def install_fault_handlers() -> None:
    """
    Faults outside any request (background tasks, callbacks, threads that
    reach sys.excepthook) leave the process in an unknown state; log them at
    CRITICAL and exit instead of continuing.
    """
    sys.excepthook = _handle_uncaught_exception
    asyncio.get_running_loop().set_exception_handler(_handle_loop_exception)
    logger.info("Process fault handlers installed")


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings.log_level)
    logger.info("=" * 60)
    logger.info("Portfolio Backend %s starting up (%s)...", __version__, settings.environment)

    if settings.is_production:
        install_fault_handlers()
        for warning in settings.production_warnings():
            logger.warning("Configuration: %s", warning)

    await bootstrap_database(app.state.database, settings, password_hasher)

    logger.info("Media backend: %s", app.state.media_store.name)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Portfolio Backend shutting down...")
    await app.state.database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(message: str, code: str, details: Optional[dict] = None) -> dict:
    body = {"error": message, "code": code, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """
    Map exceptions to `{"error", "code", "request_id"}` bodies.

    Every PortfolioError carries its own status_code and code, so one handler
    covers the whole hierarchy. `context` is logged, never returned.
    """

    @app.exception_handler(PortfolioError)
    async def handle_portfolio_error(request: Request, exc: PortfolioError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.warning("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)

        details = exc.details if isinstance(exc, ValidationError) else None
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.message, exc.code, details),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query"))
        message = f"Invalid value for '{field}': {first.get('msg', 'invalid')}" if field else "Invalid request"
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), message)
        return JSONResponse(
            status_code=400,
            content=_error_body(message, "validation_error", {"field": field} if field else None),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        code = "not_found" if exc.status_code == 404 else "http_error"
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(exc.detail), code),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Stack trace goes to the log only."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        message = (
            "An unexpected error occurred. Please try again or contact support."
            if settings.is_production
            else f"Unexpected error: {type(exc).__name__}"
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(message, "internal_server_error"),
        )


# ══════════════════════════════════════════════════════════════════════════
# Collaborators
# ══════════════════════════════════════════════════════════════════════════

def build_media_store(settings: Settings) -> MediaStore:
    if settings.media_backend == "local":
        return LocalMediaStore(
            root=settings.local_media_root,
            public_base_url=settings.public_base_url,
        )
    return CloudinaryMediaStore(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        timeout=settings.media_timeout_seconds,
    )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    media_store: Optional[MediaStore] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Explicit configuration; defaults to the environment-loaded singleton.
        media_store: Replaces the backend selected by MEDIA_BACKEND (tests).

    Raises:
        ConfigurationError: JWT_SECRET missing, or Cloudinary credentials
            missing with MEDIA_BACKEND=cloudinary.
    """
    settings = settings or default_settings
    settings.validate_required()

    app = FastAPI(
        title="Portfolio API",
        description="Photography portfolio backend: public gallery and authenticated admin API.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Collaborators on app.state ────────────────────────────────────────
    token_service = TokenService(
        secret=settings.jwt_secret,
        ttl=timedelta(hours=settings.jwt_expires_hours),
        algorithm=settings.jwt_algorithm,
    )
    store = media_store or build_media_store(settings)

    app.state.settings = settings
    app.state.database = Database.from_settings(settings)
    app.state.token_service = token_service
    app.state.media_store = store
    app.state.auth_service = AuthService(token_service, password_hasher)
    app.state.photo_service = PhotoService(
        media_store=store,
        validator=ImageValidator(settings.max_file_size),
        folder=settings.media_folder,
        compensate_orphaned_media=settings.compensate_orphaned_media,
    )
    app.state.category_service = CategoryService()

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app, settings)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(photos.router)
    app.include_router(categories.router)
    app.include_router(health.router)

    if isinstance(store, LocalMediaStore):
        app.mount("/uploads", StaticFiles(directory=str(store.root)), name="uploads")

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `app.main:app`; construction fails fast on missing configuration
app = create_app()
