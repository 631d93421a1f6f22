"""
Session registry.

In-memory mapping from session id to SessionRecord. One registry is created
per application and handed to the services that need it.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from threading import RLock

from ..models.session import SessionRecord
from .folders import new_folder_name

logger = logging.getLogger(__name__)


@dataclass
class _SessionLock:
    lock: asyncio.Lock
    users: int = 0


class SessionRegistry:
    """
    Thread-safe in-memory session store.

    Attributes:
        _sessions: Dictionary mapping session_id to SessionRecord
        _locks: Per-session asyncio locks, present only while some task holds
            or waits for them
        _lock: Guards both dictionaries
    """

    def __init__(self) -> None:
        self._sessions: dict[str, SessionRecord] = {}
        self._locks: dict[str, _SessionLock] = {}
        self._lock = RLock()

    def get_or_create(
        self, session_id: str, requested_folder: str | None = None
    ) -> SessionRecord:
        """
        Get a session, creating it on first touch.

        Args:
            session_id: Client-supplied session identifier
            requested_folder: Folder to use if the session has to be created

        Returns:
            The session record, with last_activity updated

        Note:
            requested_folder is ignored for an existing session; its folder only
            changes through rotation.
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                session = SessionRecord(
                    session_id=session_id,
                    current_folder=requested_folder or new_folder_name(),
                )
                self._sessions[session_id] = session
                logger.info(
                    "Created upload session %s with folder %s", session_id, session.current_folder
                )
            session.touch()
            return session

    def get(self, session_id: str) -> SessionRecord | None:
        """Look up a session without creating it or updating its activity time."""
        with self._lock:
            return self._sessions.get(session_id)

    def delete(self, session_id: str) -> None:
        """
        Remove a session entry.

        Note:
            Does not raise error if session doesn't exist. Never touches files.
        """
        with self._lock:
            self._sessions.pop(session_id, None)

    def sweep_idle(self, max_idle: timedelta, now: datetime | None = None) -> int:
        """
        Evict sessions idle for longer than max_idle.

        Args:
            max_idle: Maximum allowed time since last activity
            now: Reference time, defaults to the current time

        Returns:
            Number of sessions evicted

        Note:
            Only registry entries are removed. Uploaded files stay on disk.
        """
        now = now or datetime.now(UTC)
        limit = max_idle.total_seconds()
        with self._lock:
            idle_ids = [
                session_id
                for session_id, session in self._sessions.items()
                if session.idle_for(now) > limit
            ]
            for session_id in idle_ids:
                del self._sessions[session_id]
                logger.info("Cleaned up old session: %s", session_id)
        return len(idle_ids)

    @asynccontextmanager
    async def session_lock(self, session_id: str) -> AsyncIterator[None]:
        """
        Hold the lock serializing writes to one session.

        The lock exists independently of the session record so that it can be
        taken before the record is resolved or created. It is dropped once the
        last holder or waiter leaves, so unknown ids never accumulate locks.
        """
        with self._lock:
            entry = self._locks.get(session_id)
            if entry is None:
                entry = _SessionLock(asyncio.Lock())
                self._locks[session_id] = entry
            entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            with self._lock:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[session_id]

    def lock_count(self) -> int:
        """Get current number of session locks held or awaited."""
        with self._lock:
            return len(self._locks)

    def session_count(self) -> int:
        """Get current number of registered sessions."""
        with self._lock:
            return len(self._sessions)

