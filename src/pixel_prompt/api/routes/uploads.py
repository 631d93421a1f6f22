"""
Upload and download endpoints.

Images are stored per browser session under a timestamped folder and
renamed sequentially (image_1.png, image_2.jpg, ...).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse

from ...services.session import SessionLifecycle
from ...services.uploads import IncomingFile, UploadIngestor
from ..dependencies import (
    get_requested_folder,
    get_session_id,
    get_session_lifecycle,
    get_upload_ingestor,
)
from ..schemas import UploadedFileResponse, UploadResponse

router = APIRouter(prefix="/api", tags=["uploads"])


@router.post("/upload", response_model=UploadResponse)
async def upload_files(
    session_id: Annotated[str, Depends(get_session_id)],
    requested_folder: Annotated[str | None, Depends(get_requested_folder)],
    ingestor: Annotated[UploadIngestor, Depends(get_upload_ingestor)],
    files: Annotated[list[UploadFile] | None, File()] = None,
) -> UploadResponse:
    """
    Upload a batch of images into the session's current folder.

    Args:
        session_id: From the X-Session-Id header
        requested_folder: From the X-Upload-Folder header, used only when the
            session does not exist yet
        ingestor: Upload ingestor dependency
        files: Multipart "files" fields

    Raises:
        400: No files, too many files, file too large, or non-image file
        500: Storage failure

    Example:
        POST /api/upload  (X-Session-Id: 3f1c..., files=@cat.png)
        Response: {
            "success": true,
            "files": [{"originalName": "cat.png", "filename": "image_1.png", ...}],
            "uploadFolder": "2025-01-31 09:15:42:107",
            "sessionId": "3f1c...",
            "totalFilesInSession": 1
        }
    """
    uploads = files or []
    # count, declared sizes and types are known before any payload is read
    ingestor.validate_batch(uploads)

    incoming = []
    for upload in uploads:
        incoming.append(
            IncomingFile(
                filename=upload.filename or "",
                content_type=upload.content_type or "",
                data=await upload.read(ingestor.max_file_size + 1),
            )
        )

    result = await ingestor.ingest(session_id, requested_folder, incoming)
    session = ingestor.registry.get(session_id)
    total = len(session.uploaded_files) if session is not None else len(result.records)

    return UploadResponse(
        message=f"Successfully uploaded {len(result.records)} files",
        files=[UploadedFileResponse.from_record(r) for r in result.records],
        upload_folder=result.folder,
        session_id=session_id,
        total_files_in_session=total,
    )


@router.get("/download/{session_id}/{filename}")
async def download_file(
    session_id: str,
    filename: str,
    lifecycle: Annotated[SessionLifecycle, Depends(get_session_lifecycle)],
) -> FileResponse:
    """
    Download a stored upload as an attachment named after the original file.

    Raises:
        404: Session not found, file not recorded for the session, or file
            missing on disk
    """
    record, file_path = lifecycle.resolve_download(session_id, filename)
    return FileResponse(
        file_path,
        media_type=record.mime_type,
        filename=record.original_name or record.stored_name,
    )
