"""
Upload session endpoints.

Fetch, rotate ("new-upload"), or clear the upload session of a browser.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from ...services.session import SessionLifecycle
from ..dependencies import get_session_lifecycle
from ..schemas import (
    NewUploadResponse,
    NewUploadSession,
    SessionFetchResponse,
    SessionResponse,
    SuccessResponse,
)

router = APIRouter(prefix="/api/session", tags=["sessions"])


@router.get("/{session_id}", response_model=SessionFetchResponse)
async def get_session(
    session_id: str,
    lifecycle: Annotated[SessionLifecycle, Depends(get_session_lifecycle)],
) -> SessionFetchResponse:
    """
    Get the state of an upload session.

    Does not create the session and does not count as activity. An unknown
    session returns "session": null rather than an error.
    """
    session = lifecycle.fetch_session(session_id)
    if session is None:
        return SessionFetchResponse(session=None, message="No active session found")
    return SessionFetchResponse(session=SessionResponse.from_record(session))


@router.post("/{session_id}/new-upload", response_model=NewUploadResponse)
async def new_upload(
    session_id: str,
    lifecycle: Annotated[SessionLifecycle, Depends(get_session_lifecycle)],
) -> NewUploadResponse:
    """
    Start a new upload folder for the session.

    Previously uploaded files stay on disk but are no longer listed.

    Example:
        POST /api/session/3f1c.../new-upload
        Response: {
            "success": true,
            "session": {
                "sessionId": "3f1c...",
                "currentFolder": "2025-01-31 09:20:03:551",
                "uploadedFiles": [],
                "createdAt": "2025-01-31T09:20:03.551000Z"
            },
            "message": "New upload session created"
        }
    """
    session = lifecycle.rotate(session_id)
    return NewUploadResponse(
        session=NewUploadSession(
            session_id=session.session_id,
            current_folder=session.current_folder,
            created_at=session.created_at,
        )
    )


@router.post("/{session_id}/clear", response_model=SuccessResponse)
async def clear_session(
    session_id: str,
    lifecycle: Annotated[SessionLifecycle, Depends(get_session_lifecycle)],
) -> SuccessResponse:
    """
    Delete the session's current folder and forget the session.

    Succeeds even if some files could not be deleted.
    """
    await lifecycle.clear(session_id)
    return SuccessResponse(message="Session and files cleared successfully")
