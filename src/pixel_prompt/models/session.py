"""
Upload session models.

A session groups the images a browser uploaded under one timestamped
storage folder. Records live in memory only; the files live on disk.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field


class FileRecord(BaseModel):
    """
    Metadata for one stored upload.

    Attributes:
        original_name: Client-supplied filename (untrusted)
        stored_name: Canonical name on disk, e.g. "image_3.png"
        path: Storage path, e.g. "uploads/2025-01-01 12:00:00:000/image_3.png"
        size_bytes: Payload size as received
        mime_type: Content type reported by the client
        folder: Session folder that was current when the file was stored
        session_id: Owning session
    """

    original_name: str = Field(description="Client-supplied filename")
    stored_name: str = Field(description="Canonical stored filename")
    path: str = Field(description="Storage path of the file")
    size_bytes: int = Field(ge=0, description="File size in bytes")
    mime_type: str = Field(description="Reported MIME type")
    folder: str = Field(description="Folder the file was stored in")
    session_id: str = Field(description="Owning session identifier")


class SessionRecord(BaseModel):
    """
    In-memory state of one upload session.

    Attributes:
        session_id: Opaque client-supplied identifier, used only as a lookup key
        current_folder: Active storage folder ("YYYY-MM-DD HH:MM:SS:mmm", UTC)
        uploaded_files: Files uploaded in this session, in upload order
        created_at: Session creation timestamp
        last_activity: Last registry access (for idle eviction)
        next_sequence: Lowest "image_<n>" number this session will try next in
            current_folder, None before its first upload there
    """

    session_id: str = Field(description="Opaque session identifier")
    current_folder: str = Field(description="Active storage folder name")
    uploaded_files: list[FileRecord] = Field(
        default_factory=list, description="Uploaded file records"
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="Session creation timestamp"
    )
    last_activity: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="Last activity timestamp"
    )
    next_sequence: int | None = Field(
        default=None, description="Next sequence number in current_folder"
    )

    def idle_for(self, now: datetime | None = None) -> float:
        """Seconds elapsed since the last activity."""
        now = now or datetime.now(UTC)
        return (now - self.last_activity).total_seconds()

    def touch(self) -> None:
        """Update last_activity timestamp to current time."""
        self.last_activity = datetime.now(UTC)
