"""
Upload ingestion.

Stores a batch of uploaded images under the session's current folder with
sequential canonical names ("image_1.png", "image_2.jpg", ...).
"""

import asyncio
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Protocol

from ..models.session import FileRecord, SessionRecord
from ..utils.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    NoFilesError,
    StorageError,
    TooManyFilesError,
    ValidationError,
)
from .registry import SessionRegistry

logger = logging.getLogger(__name__)

STORED_NAME_PREFIX = "image_"


class UploadPart(Protocol):
    """Anything carrying the metadata checked by batch validation."""

    @property
    def filename(self) -> str | None: ...

    @property
    def content_type(self) -> str | None: ...

    @property
    def size(self) -> int | None: ...


@dataclass
class IncomingFile:
    """One file payload as received from the transport."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class IngestResult:
    """Folder the batch was stored in and the records created for it."""

    folder: str
    records: list[FileRecord] = field(default_factory=list)


def file_extension(filename: str) -> str:
    """Extension of the client filename including the dot, or "" if none."""
    return os.path.splitext(os.path.basename(filename))[1]


def count_stored_files(directory: Path) -> int:
    """Count entries in directory named with the canonical "image_" prefix."""
    try:
        return sum(1 for entry in directory.iterdir() if entry.name.startswith(STORED_NAME_PREFIX))
    except FileNotFoundError:
        return 0


def validate_folder_name(folder: str) -> str:
    """
    Check that a client-requested folder is a single path segment.

    Raises:
        ValidationError: If the name could escape the upload root
    """
    if (
        not folder
        or folder in (".", "..")
        or "/" in folder
        or "\\" in folder
        or "\x00" in folder
    ):
        raise ValidationError(f"Invalid upload folder '{folder}'", code="INVALID_FOLDER")
    return folder


class UploadIngestor:
    """
    Persists upload batches into session folders.

    Attributes:
        registry: Session registry shared with the lifecycle service
        upload_root: Directory containing all session folders
        max_file_size: Largest accepted file in bytes
        max_files: Largest accepted batch
    """

    def __init__(
        self,
        registry: SessionRegistry,
        upload_root: Path | str,
        max_file_size: int,
        max_files: int,
    ) -> None:
        self.registry = registry
        self.upload_root = Path(upload_root)
        self.max_file_size = max_file_size
        self.max_files = max_files

    def validate_batch(self, files: Sequence[UploadPart]) -> None:
        """
        Validate a whole batch before anything is written.

        Also accepts parts whose payload has not been read yet; a size of None
        is unknown and skipped until the data is available.

        Raises:
            NoFilesError: Empty batch
            TooManyFilesError: Batch larger than max_files
            FileTooLargeError: Any file larger than max_file_size
            InvalidFileTypeError: Any file whose MIME type is not image/*
        """
        if not files:
            raise NoFilesError()
        if len(files) > self.max_files:
            raise TooManyFilesError(self.max_files)
        for incoming in files:
            if incoming.size is not None and incoming.size > self.max_file_size:
                raise FileTooLargeError(incoming.filename or "", self.max_file_size)
        for incoming in files:
            if not (incoming.content_type or "").startswith("image/"):
                raise InvalidFileTypeError(incoming.filename or "")

    async def ingest(
        self,
        session_id: str,
        requested_folder: str | None,
        files: list[IncomingFile],
    ) -> IngestResult:
        """
        Store a batch of images for a session.

        Args:
            session_id: Client-supplied session identifier
            requested_folder: Folder to use if the session is created by this call
            files: Payloads in request order

        Returns:
            IngestResult with the session folder and the new file records

        Raises:
            ValidationError: Batch rejected, nothing was written
            StorageError: Directory creation or file write failed

        Note:
            Writes for one session are serialized by the registry's per-session
            lock. Files are created exclusively, so a folder shared with another
            session never has an existing file replaced.
        """
        if requested_folder is not None:
            validate_folder_name(requested_folder)
        self.validate_batch(files)

        async with self.registry.session_lock(session_id):
            session = self.registry.get_or_create(session_id, requested_folder)
            records = await asyncio.to_thread(self._store_batch, session, files)

        logger.info(
            "Session %s: Uploaded %d files to %s", session_id, len(records), session.current_folder
        )
        return IngestResult(folder=session.current_folder, records=records)

    def _store_batch(self, session: SessionRecord, files: list[IncomingFile]) -> list[FileRecord]:
        folder = session.current_folder
        directory = self.upload_root / folder
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to create upload folder '{folder}': {e}") from e

        # other sessions may write to the same folder
        sequence = max(session.next_sequence or 1, count_stored_files(directory) + 1)

        records = []
        for incoming in files:
            extension = file_extension(incoming.filename)
            while True:
                stored_name = f"{STORED_NAME_PREFIX}{sequence}{extension}"
                target = directory / stored_name
                try:
                    with open(target, "xb") as fh:
                        fh.write(incoming.data)
                    break
                except FileExistsError:
                    sequence += 1
                except OSError as e:
                    raise StorageError(f"Failed to store '{incoming.filename}': {e}") from e
            sequence += 1
            session.next_sequence = sequence
            record = FileRecord(
                original_name=incoming.filename,
                stored_name=stored_name,
                path=PurePosixPath(self.upload_root.name, folder, stored_name).as_posix(),
                size_bytes=incoming.size,
                mime_type=incoming.content_type,
                folder=folder,
                session_id=session.session_id,
            )
            # recorded as soon as it is on disk; a later failure leaves earlier files in place
            session.uploaded_files.append(record)
            records.append(record)
        return records
