"""
Unit tests for API endpoints.

Tests cover:
- Upload endpoint (success shape, headers, error codes)
- Session endpoints (fetch, new-upload, clear)
- Download endpoint
- Settings and prompt library endpoints
- Generation endpoint with a mocked client
- Health check endpoint (response format)
"""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient
from starlette.datastructures import UploadFile

from pixel_prompt.api.app import create_app
from pixel_prompt.api.dependencies import get_gemini_client
from pixel_prompt.clients.gemini import GeminiClient
from pixel_prompt.config import Settings
from pixel_prompt.models.generation import GeneratedImage
from pixel_prompt.utils.exceptions import GenerationError
from tests.conftest import PNG_BYTES


@pytest.fixture
def mock_gemini_client():
    """Create a mock Gemini client."""
    client = Mock(spec=GeminiClient)
    client.generate_or_edit_image = AsyncMock(
        return_value=GeneratedImage(image_data="b3V0", mime_type="image/png")
    )
    return client


@pytest.fixture
def app(settings: Settings, mock_gemini_client):
    """Application bound to temporary storage with a mocked generation client."""
    app = create_app(settings)
    app.dependency_overrides[get_gemini_client] = lambda: mock_gemini_client
    return app


@pytest.fixture
def test_client(app) -> TestClient:
    return TestClient(app)


def png(name: str) -> tuple[str, tuple[str, bytes, str]]:
    return ("files", (name, PNG_BYTES, "image/png"))


class TestUploadEndpoint:
    """Test POST /api/upload."""

    def test_upload_success(self, test_client: TestClient) -> None:
        """Test response shape and camelCase fields."""
        response = test_client.post(
            "/api/upload",
            files=[png("a.png"), png("b.png")],
            headers={"X-Session-Id": "browser-1"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["sessionId"] == "browser-1"
        assert data["totalFilesInSession"] == 2
        assert data["message"] == "Successfully uploaded 2 files"
        first = data["files"][0]
        assert first["originalName"] == "a.png"
        assert first["filename"] == "image_1.png"
        assert first["mimetype"] == "image/png"
        assert first["size"] == len(PNG_BYTES)
        assert first["uploadFolder"] == data["uploadFolder"]
        assert first["sessionId"] == "browser-1"
        assert first["path"] == f"uploads/{data['uploadFolder']}/image_1.png"

    def test_upload_default_session(self, test_client: TestClient) -> None:
        """Test a request without X-Session-Id uses the default session."""
        response = test_client.post("/api/upload", files=[png("a.png")])

        assert response.status_code == 200
        assert response.json()["sessionId"] == "default"

    def test_upload_requested_folder(self, test_client: TestClient) -> None:
        """Test X-Upload-Folder names the folder of a new session."""
        response = test_client.post(
            "/api/upload",
            files=[png("a.png")],
            headers={"X-Session-Id": "s1", "X-Upload-Folder": "2024-02-02 02:02:02:002"},
        )

        assert response.json()["uploadFolder"] == "2024-02-02 02:02:02:002"

    def test_total_accumulates(self, test_client: TestClient) -> None:
        headers = {"X-Session-Id": "s1"}
        test_client.post("/api/upload", files=[png("a.png")], headers=headers)
        response = test_client.post("/api/upload", files=[png("b.png")], headers=headers)

        data = response.json()
        assert data["totalFilesInSession"] == 2
        assert data["files"][0]["filename"] == "image_2.png"

    def test_no_files(self, test_client: TestClient) -> None:
        """Test an upload without files returns NO_FILES."""
        response = test_client.post("/api/upload", data={"other": "x"})

        assert response.status_code == 400
        assert response.json()["code"] == "NO_FILES"
        assert response.json()["error"] == "No files uploaded"

    def test_non_image(self, test_client: TestClient) -> None:
        response = test_client.post(
            "/api/upload",
            files=[png("a.png"), ("files", ("b.txt", b"hello", "text/plain")), png("c.png")],
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_FILE_TYPE"

    def test_too_many_files(self, test_client: TestClient) -> None:
        response = test_client.post("/api/upload", files=[png(f"{i}.png") for i in range(21)])

        assert response.status_code == 400
        assert response.json()["code"] == "TOO_MANY_FILES"

    def test_file_too_large(self, test_client: TestClient) -> None:
        big = ("files", ("big.png", b"\x00" * (11 * 1024 * 1024), "image/png"))

        response = test_client.post("/api/upload", files=[big])

        assert response.status_code == 400
        assert response.json()["code"] == "FILE_TOO_LARGE"

    def test_oversized_part_rejected_before_read(
        self, test_client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test an oversized part is rejected from its declared size without being read."""
        read = AsyncMock(return_value=b"")
        monkeypatch.setattr(UploadFile, "read", read)
        big = ("files", ("big.png", b"\x00" * (11 * 1024 * 1024), "image/png"))

        response = test_client.post("/api/upload", files=[png("a.png"), big])

        assert response.status_code == 400
        assert response.json()["code"] == "FILE_TOO_LARGE"
        read.assert_not_awaited()

    def test_too_many_parts_rejected_before_read(
        self, test_client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        read = AsyncMock(return_value=b"")
        monkeypatch.setattr(UploadFile, "read", read)

        response = test_client.post("/api/upload", files=[png(f"{i}.png") for i in range(21)])

        assert response.json()["code"] == "TOO_MANY_FILES"
        read.assert_not_awaited()

    def test_invalid_folder_header(self, test_client: TestClient) -> None:
        response = test_client.post(
            "/api/upload", files=[png("a.png")], headers={"X-Upload-Folder": "../escape"}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_FOLDER"


class TestSessionEndpoints:
    """Test /api/session endpoints."""

    def test_fetch_unknown(self, test_client: TestClient) -> None:
        """Test unknown sessions return session null, not an error."""
        response = test_client.get("/api/session/nobody")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["session"] is None
        assert data["message"] == "No active session found"

    def test_fetch_after_upload(self, test_client: TestClient) -> None:
        upload = test_client.post(
            "/api/upload", files=[png("a.png")], headers={"X-Session-Id": "s1"}
        ).json()

        session = test_client.get("/api/session/s1").json()["session"]

        assert session["sessionId"] == "s1"
        assert session["currentFolder"] == upload["uploadFolder"]
        assert session["totalFiles"] == 1
        assert session["uploadedFiles"][0]["filename"] == "image_1.png"
        assert "createdAt" in session
        assert "lastActivity" in session

    def test_new_upload(self, test_client: TestClient) -> None:
        """Test rotation returns an empty session with a new folder."""
        response = test_client.post("/api/session/s1/new-upload")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["session"]["sessionId"] == "s1"
        assert data["session"]["uploadedFiles"] == []
        assert data["session"]["currentFolder"]
        assert data["session"]["createdAt"]
        assert data["message"] == "New upload session created"

    def test_clear(self, test_client: TestClient) -> None:
        test_client.post("/api/upload", files=[png("a.png")], headers={"X-Session-Id": "s1"})

        response = test_client.post("/api/session/s1/clear")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Session and files cleared successfully",
        }
        assert test_client.get("/api/session/s1").json()["session"] is None

    def test_clear_unknown_succeeds(self, test_client: TestClient) -> None:
        response = test_client.post("/api/session/nobody/clear")

        assert response.status_code == 200
        assert response.json()["success"] is True


class TestDownloadEndpoint:
    """Test GET /api/download/{session_id}/{filename}."""

    def test_download(self, test_client: TestClient) -> None:
        test_client.post("/api/upload", files=[png("holiday.png")], headers={"X-Session-Id": "s1"})

        response = test_client.get("/api/download/s1/image_1.png")

        assert response.status_code == 200
        assert response.content == PNG_BYTES
        assert response.headers["content-type"] == "image/png"
        assert 'filename="holiday.png"' in response.headers["content-disposition"]

    def test_unknown_session(self, test_client: TestClient) -> None:
        response = test_client.get("/api/download/nobody/image_1.png")

        assert response.status_code == 404
        assert response.json()["code"] == "SESSION_NOT_FOUND"

    def test_unknown_file(self, test_client: TestClient) -> None:
        test_client.post("/api/upload", files=[png("a.png")], headers={"X-Session-Id": "s1"})

        response = test_client.get("/api/download/s1/image_7.png")

        assert response.status_code == 404
        assert response.json()["code"] == "FILE_NOT_FOUND"


class TestLibraryEndpoints:
    """Test settings and prompt endpoints."""

    def test_settings_defaults(self, test_client: TestClient) -> None:
        data = test_client.get("/api/settings").json()

        assert data["application"]["name"] == "Pixel Prompt"
        assert data["nanoBanana"]["apiKeyConfigured"] is False

    def test_save_settings(self, test_client: TestClient) -> None:
        response = test_client.post("/api/settings", json={"ui": {"theme": "green"}})

        assert response.json() == {"success": True, "message": "Settings saved successfully"}
        assert test_client.get("/api/settings").json()["ui"] == {"theme": "green"}

    def test_prompt_roundtrip(self, test_client: TestClient) -> None:
        """Test save, list, and delete through the API."""
        assert test_client.get("/api/prompts").json() == []

        saved = test_client.post(
            "/api/prompts",
            json={"name": "Fox", "prompt": "A fox", "artStyle": "Ink", "category": "Animal"},
        ).json()
        prompt_id = saved["prompt"]["id"]

        assert saved["success"] is True
        assert saved["prompt"]["artStyle"] == "Ink"
        assert [p["id"] for p in test_client.get("/api/prompts").json()] == [prompt_id]

        deleted = test_client.delete(f"/api/prompts/{prompt_id}")
        assert deleted.json()["message"] == "Prompt deleted successfully"
        assert test_client.get("/api/prompts").json() == []

    def test_prompt_requires_name(self, test_client: TestClient) -> None:
        response = test_client.post("/api/prompts", json={"prompt": "A fox"})

        assert response.status_code == 400
        assert response.json()["error"] == "Name and prompt are required"

    def test_delete_missing_prompt(self, test_client: TestClient) -> None:
        response = test_client.delete("/api/prompts/nope")

        assert response.status_code == 404
        assert response.json()["code"] == "PROMPT_NOT_FOUND"


class TestGenerateEndpoint:
    """Test POST /api/generate."""

    def test_generate_from_text(self, test_client: TestClient, mock_gemini_client) -> None:
        response = test_client.post("/api/generate", json={"prompt": "a fox"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "imageData": "b3V0", "mimeType": "image/png"}
        mock_gemini_client.generate_or_edit_image.assert_awaited_once_with("a fox", [])

    def test_generate_with_session_files(self, test_client: TestClient, mock_gemini_client) -> None:
        """Test uploaded files are passed to the client as base64 images."""
        test_client.post("/api/upload", files=[png("a.png")], headers={"X-Session-Id": "s1"})

        response = test_client.post(
            "/api/generate",
            json={"prompt": "add snow", "sessionId": "s1", "filenames": ["image_1.png"]},
        )

        assert response.status_code == 200
        prompt, images = mock_gemini_client.generate_or_edit_image.await_args.args
        assert prompt == "add snow"
        assert len(images) == 1
        assert images[0].mime_type == "image/png"

    def test_filenames_require_session(self, test_client: TestClient) -> None:
        response = test_client.post(
            "/api/generate", json={"prompt": "x", "filenames": ["image_1.png"]}
        )

        assert response.status_code == 400

    def test_generation_failure(self, test_client: TestClient, mock_gemini_client) -> None:
        mock_gemini_client.generate_or_edit_image.side_effect = GenerationError("upstream broke")

        response = test_client.post("/api/generate", json={"prompt": "a fox"})

        assert response.status_code == 502
        assert response.json()["code"] == "GENERATION_ERROR"


class TestHealthEndpoint:
    """Test /health endpoint."""

    def test_health_check(self, test_client: TestClient) -> None:
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": "0.1.0"}
