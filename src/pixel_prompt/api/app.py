"""
FastAPI application factory.

Creates and configures the FastAPI application with middleware, routes, and
the services shared by all requests.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import Settings, get_settings
from ..services.library import LibraryStore
from ..services.reaper import run_idle_reaper
from ..services.registry import SessionRegistry
from ..services.session import SessionLifecycle
from ..services.uploads import UploadIngestor
from ..utils.logging import configure_logging
from ..utils.rate_limiter import RateLimiter
from .middleware import error_handler_middleware
from .routes import generate, health, library, sessions, uploads

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager for startup/shutdown tasks.

    Creates the storage directories and runs the idle session reaper until
    shutdown.
    """
    settings: Settings = app.state.settings
    configure_logging(settings)

    # Startup
    for directory in (Path(settings.upload_root), Path(settings.config_dir)):
        directory.mkdir(parents=True, exist_ok=True)
    logger.info("Upload directory: %s", Path(settings.upload_root).resolve())
    logger.info("Config directory: %s", Path(settings.config_dir).resolve())

    shutdown_event = asyncio.Event()
    reaper_task = asyncio.create_task(
        run_idle_reaper(
            app.state.registry,
            interval_seconds=settings.session_cleanup_interval,
            max_idle=timedelta(seconds=settings.session_ttl),
            shutdown_event=shutdown_event,
        )
    )
    app.state.shutdown_event = shutdown_event
    app.state.reaper_task = reaper_task

    yield

    # Shutdown
    shutdown_event.set()
    await reaper_task


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Settings to use; defaults to the cached environment settings

    Returns:
        Configured FastAPI application instance

    Configuration:
        - CORS middleware for cross-origin requests
        - Error handling middleware for domain exceptions
        - One session registry per application, shared by the upload
          ingestor, the session lifecycle service, and the idle reaper
        - Interactive API docs at /docs and /redoc
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Pixel Prompt API",
        description="Session-scoped image uploads and prompt-driven image generation",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    registry = SessionRegistry()
    app.state.settings = settings
    app.state.registry = registry
    app.state.ingestor = UploadIngestor(
        registry,
        upload_root=settings.upload_root,
        max_file_size=settings.max_file_size,
        max_files=settings.max_files_per_upload,
    )
    app.state.lifecycle = SessionLifecycle(registry, upload_root=settings.upload_root)
    app.state.library = LibraryStore(settings)
    app.state.rate_limiter = RateLimiter(
        max_requests=settings.gemini_requests_per_minute, per_seconds=60
    )

    # CORS middleware - the browser client may be served from another port
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Error handling middleware
    app.middleware("http")(error_handler_middleware)

    # Register routes
    app.include_router(health.router)
    app.include_router(uploads.router)
    app.include_router(sessions.router)
    app.include_router(library.router)
    app.include_router(generate.router)

    return app
