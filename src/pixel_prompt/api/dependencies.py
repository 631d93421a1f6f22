"""
FastAPI dependency injection helpers.

The services are created once per application in create_app() and kept on
app.state; these dependencies hand them to the routes. Tests swap them with
app.dependency_overrides.
"""

from typing import Annotated, AsyncIterator

from fastapi import Depends, Header, Request

from ..clients.gemini import GeminiClient
from ..config import Settings
from ..services.library import LibraryStore
from ..services.registry import SessionRegistry
from ..services.session import SessionLifecycle
from ..services.uploads import UploadIngestor
from ..utils.rate_limiter import RateLimiter

DEFAULT_SESSION_ID = "default"


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_registry(request: Request) -> SessionRegistry:
    """Session registry shared by all routes."""
    return request.app.state.registry


def get_upload_ingestor(request: Request) -> UploadIngestor:
    """Upload ingestor bound to the application's registry."""
    return request.app.state.ingestor


def get_session_lifecycle(request: Request) -> SessionLifecycle:
    """Session lifecycle service bound to the application's registry."""
    return request.app.state.lifecycle


def get_library_store(request: Request) -> LibraryStore:
    """Settings and prompt library store."""
    return request.app.state.library


def get_rate_limiter(request: Request) -> RateLimiter:
    """Rate limiter shared by all generation requests."""
    return request.app.state.rate_limiter


async def get_gemini_client(
    settings: Annotated[Settings, Depends(get_app_settings)],
    rate_limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
) -> AsyncIterator[GeminiClient]:
    """
    Get a Gemini client for the duration of one request.

    Note:
        Creates a new HTTP client per request, but reuses the global
        rate limiter so the per-minute quota is shared.
    """
    async with GeminiClient(settings=settings, rate_limiter=rate_limiter) as client:
        yield client


def get_session_id(
    x_session_id: Annotated[str | None, Header()] = None,
) -> str:
    """
    Session id from the X-Session-Id header.

    Note:
        The id is an untrusted routing key chosen by the browser, not a
        credential. Requests without one share the "default" session.
    """
    return x_session_id or DEFAULT_SESSION_ID


def get_requested_folder(
    x_upload_folder: Annotated[str | None, Header()] = None,
) -> str | None:
    """Optional folder name from the X-Upload-Folder header."""
    return x_upload_folder or None
