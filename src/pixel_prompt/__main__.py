"""
Application entry point.

Run with: python -m pixel_prompt
"""

import uvicorn

from .api.app import create_app
from .config import get_settings


def main() -> None:
    """Start the FastAPI application server."""
    settings = get_settings()

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
