"""
Session lifecycle service.

Handles fetching, rotating, and clearing upload sessions. Clearing deletes
the session folder from disk; idle eviction (see reaper) never does.
"""

import asyncio
import logging
from pathlib import Path

from ..models.session import FileRecord, SessionRecord
from ..utils.exceptions import FileRecordNotFoundError, SessionNotFoundError
from .registry import SessionRegistry

logger = logging.getLogger(__name__)


class SessionLifecycle:
    """
    Session operations exposed by the HTTP layer.

    Attributes:
        registry: Session registry shared with the upload ingestor
        upload_root: Directory containing all session folders
    """

    def __init__(self, registry: SessionRegistry, upload_root: Path | str) -> None:
        self.registry = registry
        self.upload_root = Path(upload_root)

    def fetch_session(self, session_id: str) -> SessionRecord | None:
        """
        Get a session without creating it.

        Returns:
            SessionRecord, or None if the session is not registered
        """
        return self.registry.get(session_id)

    def rotate(self, session_id: str) -> SessionRecord:
        """
        Start a new upload folder for a session.

        Drops the current registry entry and creates a fresh one with a new
        timestamped folder and no files.

        Note:
            Files stored under the previous folder stay on disk.
        """
        previous = self.registry.get(session_id)
        self.registry.delete(session_id)
        session = self.registry.get_or_create(session_id)
        if previous is not None:
            logger.info(
                "Session %s: rotated from %s to %s",
                session_id,
                previous.current_folder,
                session.current_folder,
            )
        return session

    async def clear(self, session_id: str) -> None:
        """
        Delete a session's current folder and its registry entry.

        File deletion is best effort: failures are logged and the registry
        entry is removed regardless.
        """
        if self.registry.get(session_id) is None:
            return
        async with self.registry.session_lock(session_id):
            session = self.registry.get(session_id)
            if session is None:
                return
            if session.current_folder:
                await asyncio.to_thread(self._delete_folder, self.upload_root / session.current_folder)
            self.registry.delete(session_id)
        logger.info("Cleared session: %s", session_id)

    def resolve_download(self, session_id: str, filename: str) -> tuple[FileRecord, Path]:
        """
        Find a stored file belonging to a session.

        Args:
            session_id: Session identifier
            filename: Stored (canonical) filename

        Returns:
            Tuple of the file record and its path on disk

        Raises:
            SessionNotFoundError: Session not registered
            FileRecordNotFoundError: Filename not recorded for the session, or
                missing on disk
        """
        session = self.registry.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)

        record = next((f for f in session.uploaded_files if f.stored_name == filename), None)
        if record is None:
            raise FileRecordNotFoundError()

        file_path = self.upload_root / record.folder / record.stored_name
        if not file_path.is_file():
            raise FileRecordNotFoundError("File not found on disk")
        return record, file_path

    def _delete_folder(self, folder_path: Path) -> int:
        """
        Remove all files in a folder and then the folder itself.

        Returns:
            Number of files deleted
        """
        try:
            entries = list(folder_path.iterdir())
        except FileNotFoundError:
            return 0
        except OSError as e:
            logger.error("Error listing folder %s: %s", folder_path, e)
            return 0

        deleted_count = 0
        for entry in entries:
            try:
                entry.unlink()
                deleted_count += 1
            except OSError as e:
                logger.warning("Error deleting file %s: %s", entry, e)

        try:
            folder_path.rmdir()
            logger.info("Deleted folder: %s", folder_path)
        except OSError as e:
            logger.error("Error deleting folder %s: %s", folder_path, e)
        return deleted_count
