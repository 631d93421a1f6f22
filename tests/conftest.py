"""
Pytest configuration and shared fixtures.
"""

from pathlib import Path

import pytest

from pixel_prompt.config import Settings
from pixel_prompt.services.registry import SessionRegistry
from pixel_prompt.services.session import SessionLifecycle
from pixel_prompt.services.uploads import IncomingFile, UploadIngestor

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def make_image(name: str = "photo.png", mime: str = "image/png", data: bytes = PNG_BYTES) -> IncomingFile:
    """Build an upload payload."""
    return IncomingFile(filename=name, content_type=mime, data=data)


@pytest.fixture
def upload_root(tmp_path: Path) -> Path:
    """Empty upload root inside the test's temporary directory."""
    root = tmp_path / "uploads"
    root.mkdir()
    return root


@pytest.fixture
def settings(tmp_path: Path, upload_root: Path) -> Settings:
    """Settings pointing all storage at the temporary directory."""
    return Settings(
        upload_root=str(upload_root),
        config_dir=str(tmp_path / "config"),
        gemini_api_key=None,
        session_cleanup_interval=3600,
    )


@pytest.fixture
def registry() -> SessionRegistry:
    """Fresh, empty session registry."""
    return SessionRegistry()


@pytest.fixture
def ingestor(registry: SessionRegistry, upload_root: Path) -> UploadIngestor:
    """Upload ingestor with the default limits (20 files, 10 MiB)."""
    return UploadIngestor(
        registry,
        upload_root=upload_root,
        max_file_size=10 * 1024 * 1024,
        max_files=20,
    )


@pytest.fixture
def lifecycle(registry: SessionRegistry, upload_root: Path) -> SessionLifecycle:
    """Session lifecycle service sharing the registry with the ingestor."""
    return SessionLifecycle(registry, upload_root=upload_root)
