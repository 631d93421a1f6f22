"""
FastAPI middleware for error handling and request processing.

Converts domain exceptions into appropriate HTTP responses.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from ..utils.exceptions import (
    GenerationConnectionError,
    GenerationError,
    GenerationNotConfiguredError,
    NotFoundError,
    PixelPromptError,
    RateLimitedError,
    StorageError,
    ValidationError,
)
from .schemas import ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: PixelPromptError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error.message, code=error.code).model_dump(),
    )


async def error_handler_middleware(request: Request, call_next):
    """
    Catch domain exceptions and convert them to HTTP error responses.

    Args:
        request: FastAPI request
        call_next: Next middleware/handler in chain

    Returns:
        Response or JSONResponse with error details

    Exception Mapping:
        - ValidationError subclasses → 400 Bad Request
        - NotFoundError subclasses → 404 Not Found
        - RateLimitedError → 429 Too Many Requests
        - GenerationNotConfiguredError, GenerationConnectionError → 503 Service Unavailable
        - GenerationError → 502 Bad Gateway
        - StorageError and other PixelPromptError → 500 Internal Server Error
    """
    try:
        response = await call_next(request)
        return response
    except ValidationError as e:
        return _error_response(status.HTTP_400_BAD_REQUEST, e)
    except NotFoundError as e:
        return _error_response(status.HTTP_404_NOT_FOUND, e)
    except RateLimitedError as e:
        return _error_response(status.HTTP_429_TOO_MANY_REQUESTS, e)
    except (GenerationNotConfiguredError, GenerationConnectionError) as e:
        return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, e)
    except GenerationError as e:
        logger.error("Image generation failed: %s", e.message)
        return _error_response(status.HTTP_502_BAD_GATEWAY, e)
    except StorageError as e:
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, e.message)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, e)
    except PixelPromptError as e:
        # Catch-all for other custom exceptions
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, e)
    except Exception:
        # Unexpected errors - don't expose internals
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                error="Internal server error",
                code="INTERNAL_SERVER_ERROR",
            ).model_dump(),
        )
