"""
Client implementations for external services.

This package contains the Gemini image generation API client.
"""

from .gemini import GeminiClient

__all__ = ["GeminiClient"]
