"""
MoodJourney Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
       Tests pass in their own Database gateway; production lets the
       lifespan build one from settings.
Who:   Called by uvicorn (`moodjourney.main:app`) and by the test suite.

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware:  Request ID → Logging → CORS            │
    │                                                      │
    │  Routes (under /api and /prod/api):                  │
    │  ┌────────────┐ ┌────────────────┐ ┌──────────────┐ │
    │  │ /v1/health │ │ /v1/users/...  │ │ /v1/moods/...│ │
    │  └────────────┘ └────────────────┘ └──────────────┘ │
    │                                                      │
    │  Static files: /prod and /  (mounted last)           │
    │                                                      │
    │  Exception Handlers:                                 │
    │  Validation→400 │ NotFound→404 │ Conflict→409 │ 500  │
    └──────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → build gateway from settings (if none injected)
              → connect + create tables. Any FatalStartupError propagates
              and uvicorn aborts startup.
    Shutdown: dispose the engine.
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from moodjourney import __version__
from moodjourney.config import settings
from moodjourney.database import Database
from moodjourney.exceptions import (
    ConflictError,
    InternalError,
    MoodJourneyError,
    NotFoundError,
    ValidationError,
)
from moodjourney.middleware.logging import RequestLoggingMiddleware
from moodjourney.middleware.request_id import RequestIDMiddleware, request_id_var
from moodjourney.routes import API_PREFIXES, build_api_router

logger = logging.getLogger(__name__)

STATIC_PREFIXES = ("/prod", "/")


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Called once at startup, before any other initialization.
    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Containers capture stdout
        ],
        force=True,
    )

    # uvicorn's access log duplicates RequestLoggingMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    if not settings.sql_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Connect the database gateway before serving, dispose it afterwards.

    Startup errors are not caught: a FatalStartupError here makes uvicorn
    report "Application startup failed" and exit non-zero.
    """
    setup_logging()
    logger.info("MoodJourney Backend %s starting up...", __version__)

    database: Optional[Database] = app.state.database
    if database is None:
        logger.info("Connecting to database at %s", settings.safe_database_target)
        database = Database.from_settings(settings)
        app.state.database = database

    await database.connect()
    logger.info("Server ready on %s:%d", settings.app_host, settings.app_port)

    yield

    logger.info("MoodJourney Backend shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": message,
            "request_id": request_id_var.get(""),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the failure envelope.

    Handler hierarchy:
        ValidationError         → 400
        RequestValidationError  → 400 (body could not be parsed into the schema)
        NotFoundError           → 404
        ConflictError           → 409
        InternalError           → 500 (context logged, never returned)
        MoodJourneyError (base) → 500
        HTTPException           → its own status (unknown route, wrong method)
        Exception (fallback)    → 500

    Security: stack traces and driver messages are logged server-side only.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """FastAPI's 422 becomes a plain 400: the body was not usable."""
        logger.warning(
            "[%s] Invalid request body: %s",
            request_id_var.get(""),
            [error.get("type") for error in exc.errors()],
        )
        return _error_response(400, "Invalid request body")

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        logger.warning("[%s] Conflict: %s", request_id_var.get(""), exc.message)
        return _error_response(409, exc.message)

    @app.exception_handler(InternalError)
    async def handle_internal_error(request: Request, exc: InternalError):
        logger.error(
            "[%s] Internal error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return _error_response(500, exc.message)

    @app.exception_handler(MoodJourneyError)
    async def handle_app_error(request: Request, exc: MoodJourneyError):
        logger.error("[%s] Application error: %s", request_id_var.get(""), exc.message)
        return _error_response(500, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "error": str(exc.detail),
                "request_id": request_id_var.get(""),
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error_response(500, "An unexpected error occurred")


# ══════════════════════════════════════════════════════════════════════════
# Static Assets
# ══════════════════════════════════════════════════════════════════════════

def mount_static(app: FastAPI, directory: str) -> None:
    """
    Serve the built frontend at /prod and at the root.

    Mounted after every API route: a mount at "/" matches any path, so it
    must be the last thing the router tries.
    """
    static_root = Path(directory)
    if not static_root.is_dir():
        logger.warning("Static directory %s not found; static files disabled", static_root)
        return

    for prefix in STATIC_PREFIXES:
        name = "static" if prefix == "/" else f"static{prefix.replace('/', '_')}"
        app.mount(prefix, StaticFiles(directory=str(static_root), html=True), name=name)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    database: Optional[Database] = None,
    static_dir: Optional[str] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database:   Gateway to use. None means "build from settings during
                    startup".
        static_dir: Directory of static assets; defaults to settings.static_dir.
    """
    app = FastAPI(
        title="MoodJourney API",
        description="Mood journaling backend: users and daily mood entries.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.database = database

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute: RequestID → Logging → CORS
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    # Same tree twice so the API answers both with and without the
    # deployment stage prefix
    api_router = build_api_router()
    for prefix in API_PREFIXES:
        app.include_router(api_router, prefix=prefix)

    mount_static(app, static_dir if static_dir is not None else settings.static_dir)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `moodjourney.main:app` to be importable
app = create_app()
