"""Upload session services."""

from .folders import new_folder_name
from .registry import SessionRegistry
from .session import SessionLifecycle
from .uploads import IncomingFile, IngestResult, UploadIngestor

__all__ = [
    "IncomingFile",
    "IngestResult",
    "SessionLifecycle",
    "SessionRegistry",
    "UploadIngestor",
    "new_folder_name",
]
