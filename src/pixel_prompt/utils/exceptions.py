"""
Custom exceptions for the Pixel Prompt server.

These exceptions provide structured error handling for different failure scenarios.
"""


class PixelPromptError(Exception):
    """Base exception for all Pixel Prompt errors."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR") -> None:
        """
        Initialize exception with message and error code.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (SNAKE_CASE)
        """
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(PixelPromptError):
    """Raised when request data fails validation."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR") -> None:
        super().__init__(message, code=code)


class NoFilesError(ValidationError):
    """Raised when an upload request carries no files."""

    def __init__(self, message: str = "No files uploaded") -> None:
        super().__init__(message, code="NO_FILES")


class TooManyFilesError(ValidationError):
    """Raised when an upload batch exceeds the per-request file limit."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"Too many files (maximum {limit} per upload)", code="TOO_MANY_FILES")


class FileTooLargeError(ValidationError):
    """Raised when a single uploaded file exceeds the size limit."""

    def __init__(self, filename: str, limit: int) -> None:
        super().__init__(
            f"File too large: '{filename}' exceeds {limit} bytes", code="FILE_TOO_LARGE"
        )


class InvalidFileTypeError(ValidationError):
    """Raised when an uploaded file is not an image."""

    def __init__(self, filename: str) -> None:
        super().__init__(
            f"Only image files are allowed! Rejected '{filename}'", code="INVALID_FILE_TYPE"
        )


class InvalidPromptError(ValidationError):
    """Raised when a prompt or prompt library entry is malformed."""

    def __init__(self, message: str = "Valid prompt required") -> None:
        super().__init__(message, code="INVALID_PROMPT")


class NotFoundError(PixelPromptError):
    """Raised when a requested resource does not exist."""

    def __init__(self, message: str, code: str = "NOT_FOUND") -> None:
        super().__init__(message, code=code)


class SessionNotFoundError(NotFoundError):
    """Raised when an upload session is not registered."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session '{session_id}' not found", code="SESSION_NOT_FOUND")


class FileRecordNotFoundError(NotFoundError):
    """Raised when a stored file is not known to a session or missing on disk."""

    def __init__(self, message: str = "File not found") -> None:
        super().__init__(message, code="FILE_NOT_FOUND")


class PromptNotFoundError(NotFoundError):
    """Raised when a prompt library entry does not exist."""

    def __init__(self, message: str = "Prompt not found") -> None:
        super().__init__(message, code="PROMPT_NOT_FOUND")


class StorageError(PixelPromptError):
    """Raised when the upload storage cannot be read or written."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="STORAGE_ERROR")


class GenerationError(PixelPromptError):
    """Raised when the image generation API request fails."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="GENERATION_ERROR")


class GenerationConnectionError(GenerationError):
    """Raised when the image generation API cannot be reached."""

    def __init__(self, message: str = "Cannot connect to image generation API") -> None:
        super().__init__(message)
        self.code = "GENERATION_CONNECTION_FAILED"


class GenerationNotConfiguredError(GenerationError):
    """Raised when no API key is configured for image generation."""

    def __init__(self, message: str = "Image generation API key is not configured") -> None:
        super().__init__(message)
        self.code = "GENERATION_NOT_CONFIGURED"


class RateLimitedError(PixelPromptError):
    """Raised when the image generation API keeps rejecting requests as rate limited."""

    def __init__(self, message: str = "Too many requests to image generation API") -> None:
        super().__init__(message, code="RATE_LIMITED")
