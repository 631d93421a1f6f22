"""
API request and response schemas.

These Pydantic models define the contract between the API and the browser
client. Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models.library import PromptEntry
from ..models.session import FileRecord, SessionRecord


class CamelModel(BaseModel):
    """Base model serializing fields with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    """
    Standardized error response format.

    Attributes:
        error: Human-readable error message
        code: Machine-readable error code (SNAKE_CASE)
        details: Optional additional context
    """

    error: str = Field(description="Human-readable error message")
    code: str = Field(description="Machine-readable error code")
    details: dict[str, str] | None = Field(
        default=None, description="Optional additional error context"
    )


class HealthCheckResponse(BaseModel):
    """
    Health check endpoint response.

    Attributes:
        status: Current service status
        version: API version
    """

    status: str = Field(description="Service status", examples=["healthy"])
    version: str = Field(description="API version", examples=["0.1.0"])


class UploadedFileResponse(CamelModel):
    """
    One stored upload as reported to the client.

    Attributes:
        original_name: Filename sent by the client
        filename: Canonical stored name ("image_<n><ext>")
        path: Storage path
        size: Size in bytes
        mimetype: Reported MIME type
        upload_folder: Folder the file was stored in
        session_id: Owning session
    """

    original_name: str
    filename: str = Field(examples=["image_1.png"])
    path: str
    size: int
    mimetype: str = Field(examples=["image/png"])
    upload_folder: str = Field(examples=["2025-01-31 09:15:42:107"])
    session_id: str

    @classmethod
    def from_record(cls, record: FileRecord) -> "UploadedFileResponse":
        return cls(
            original_name=record.original_name,
            filename=record.stored_name,
            path=record.path,
            size=record.size_bytes,
            mimetype=record.mime_type,
            upload_folder=record.folder,
            session_id=record.session_id,
        )


class UploadResponse(CamelModel):
    """
    Result of an upload batch.

    Attributes:
        success: Always True for a stored batch
        message: Summary message
        files: Records created by this batch
        upload_folder: Session folder the batch was stored in
        session_id: Session the batch belongs to
        total_files_in_session: Files recorded for the session so far
    """

    success: bool = True
    message: str
    files: list[UploadedFileResponse]
    upload_folder: str
    session_id: str
    total_files_in_session: int


class SessionResponse(CamelModel):
    """Full state of an upload session."""

    session_id: str
    current_folder: str
    uploaded_files: list[UploadedFileResponse]
    created_at: datetime
    last_activity: datetime
    total_files: int

    @classmethod
    def from_record(cls, session: SessionRecord) -> "SessionResponse":
        return cls(
            session_id=session.session_id,
            current_folder=session.current_folder,
            uploaded_files=[UploadedFileResponse.from_record(f) for f in session.uploaded_files],
            created_at=session.created_at,
            last_activity=session.last_activity,
            total_files=len(session.uploaded_files),
        )


class SessionFetchResponse(CamelModel):
    """
    Session lookup result.

    Attributes:
        success: Always True; an unknown session is not an error
        session: Session state, or None if no session is registered
        message: Set when no session was found
    """

    success: bool = True
    session: SessionResponse | None
    message: str | None = None


class NewUploadSession(CamelModel):
    """Freshly rotated session: new folder, no files yet."""

    session_id: str
    current_folder: str
    uploaded_files: list[UploadedFileResponse] = Field(default_factory=list)
    created_at: datetime


class NewUploadResponse(CamelModel):
    """Response from starting a new upload folder."""

    success: bool = True
    session: NewUploadSession
    message: str = "New upload session created"


class SuccessResponse(CamelModel):
    """Generic acknowledgement."""

    success: bool = True
    message: str


class PromptSavedResponse(CamelModel):
    """Response from saving a prompt to the library."""

    success: bool = True
    message: str = "Prompt saved successfully"
    prompt: PromptEntry


class InlineImagePayload(CamelModel):
    """Base64 image supplied inline with a generation request."""

    data: str = Field(min_length=1, description="Base64 image data without data URL prefix")
    mime_type: str = Field(default="image/png", examples=["image/png"])


class GenerateRequest(CamelModel):
    """
    Image generation or editing request.

    Attributes:
        prompt: Text prompt
        images: Inline input images (editing)
        session_id: Session whose uploads are referenced by filenames
        filenames: Stored filenames of session uploads to use as input images
    """

    prompt: str = Field(min_length=1, description="Text prompt")
    images: list[InlineImagePayload] = Field(default_factory=list)
    session_id: str | None = None
    filenames: list[str] = Field(default_factory=list)


class GenerateResponse(CamelModel):
    """Generated image as base64 data."""

    success: bool = True
    image_data: str
    mime_type: str
