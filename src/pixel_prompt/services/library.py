"""
Settings and prompt library storage.

Both live as pretty-printed JSON files in the config directory:
settings.json for UI/application settings and Prompts.json for saved prompts.
"""

import json
import logging
import time
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..config import Settings
from ..models.library import PromptCreate, PromptEntry
from ..utils.exceptions import InvalidPromptError, PromptNotFoundError, StorageError

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"
PROMPTS_FILE = "Prompts.json"

SUPPORTED_GENERATION_FORMATS = ["image/jpeg", "image/png", "image/webp", "image/gif"]


def default_settings(settings: Settings) -> dict[str, Any]:
    """Settings returned when no settings.json has been saved yet."""
    return {
        "application": {
            "name": "Pixel Prompt",
            "version": "1.0.0",
            "description": "Spark Creativity, Pixel by Pixel",
        },
        "upload": {
            "maxFileSize": f"{settings.max_file_size // (1024 * 1024)}MB",
            "allowedTypes": [
                "image/jpeg",
                "image/jpg",
                "image/png",
                "image/gif",
                "image/webp",
                "image/svg+xml",
            ],
            "maxFiles": settings.max_files_per_upload,
        },
        "ui": {
            "theme": "orange",
            "primaryColor": "#ff6b35",
            "secondaryColor": "#e55a2b",
            "accentColor": "#fef9f7",
        },
        "features": {
            "dragAndDrop": True,
            "clickToUpload": True,
            "multipleFiles": True,
            "previewImages": True,
            "promptTextArea": True,
            "generateButton": True,
        },
        "security": {
            "validateFileTypes": True,
            "sanitizeFileNames": True,
            "preventPathTraversal": True,
            "maxUploadRate": "100MB/hour",
        },
        "development": {
            "port": settings.port,
            "enableLogging": True,
            "enableCors": True,
            "serveStaticFiles": True,
        },
    }


class LibraryStore:
    """
    JSON file store for settings and the prompt library.

    Attributes:
        settings: Application settings (generation block and defaults)
        config_dir: Directory holding the JSON files
    """

    def __init__(self, settings: Settings, config_dir: Path | str | None = None) -> None:
        self.settings = settings
        self.config_dir = Path(config_dir if config_dir is not None else settings.config_dir)

    @property
    def settings_path(self) -> Path:
        return self.config_dir / SETTINGS_FILE

    @property
    def prompts_path(self) -> Path:
        return self.config_dir / PROMPTS_FILE

    def read_settings(self) -> dict[str, Any]:
        """
        Load saved settings, or defaults if none were saved.

        The "nanoBanana" generation block always reflects the server
        configuration. The API key itself is never returned, only whether one
        is configured.
        """
        if self.settings_path.exists():
            stored = self._read_json(self.settings_path)
        else:
            stored = default_settings(self.settings)

        stored["nanoBanana"] = {
            "apiKeyConfigured": bool(self.settings.gemini_api_key),
            "model": self.settings.gemini_model,
            "maxImages": self.settings.gemini_max_input_images,
            "supportedFormats": SUPPORTED_GENERATION_FORMATS,
            "rateLimit": {
                "requestsPerMinute": self.settings.gemini_requests_per_minute,
            },
        }
        return stored

    def write_settings(self, values: dict[str, Any]) -> None:
        """Replace settings.json with the given values."""
        self._write_json(self.settings_path, values)

    def list_prompts(self) -> list[dict[str, Any]]:
        """Return all saved prompts, or an empty list if none exist."""
        if not self.prompts_path.exists():
            return []
        return self._read_json(self.prompts_path) or []

    def add_prompt(self, request: PromptCreate) -> PromptEntry:
        """
        Append a prompt to the library.

        Raises:
            InvalidPromptError: If name or prompt is missing or blank
        """
        if not (request.name or "").strip() or not (request.prompt or "").strip():
            raise InvalidPromptError("Name and prompt are required")

        prompts: list[dict[str, Any]] = []
        if self.prompts_path.exists():
            try:
                prompts = json.loads(self.prompts_path.read_text(encoding="utf-8")) or []
            except (OSError, ValueError) as e:
                logger.warning("Invalid prompts file, starting fresh: %s", e)
                prompts = []

        entry = PromptEntry(
            id=request.id or str(int(time.time() * 1000)),
            name=request.name.strip(),
            prompt=request.prompt.strip(),
            category=request.category or "Other",
            subject=request.subject or "",
            action=request.action or "",
            environment=request.environment or "",
            art_style=request.art_style or "",
            lighting=request.lighting or "",
            created_at=request.created_at or datetime.now(UTC).isoformat(),
        )
        prompts.append(entry.model_dump(by_alias=True))
        self._write_json(self.prompts_path, prompts)

        logger.info("Saved new prompt: %s (%s)", entry.name, entry.category)
        return entry

    def delete_prompt(self, prompt_id: str) -> None:
        """
        Remove a prompt by id.

        Raises:
            PromptNotFoundError: If there is no library or no prompt with that id
        """
        if not self.prompts_path.exists():
            raise PromptNotFoundError("No prompts found")

        prompts = self._read_json(self.prompts_path) or []
        remaining = [p for p in prompts if p.get("id") != prompt_id]
        if len(remaining) == len(prompts):
            raise PromptNotFoundError()

        self._write_json(self.prompts_path, remaining)
        logger.info("Deleted prompt with ID: %s", prompt_id)

    def _read_json(self, path: Path) -> Any:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to read {path.name}: {e}") from e

    def _write_json(self, path: Path, data: Any) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to write {path.name}: {e}") from e
