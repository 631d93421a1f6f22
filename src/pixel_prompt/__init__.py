"""Pixel Prompt server: session-scoped image uploads and prompt-driven image generation."""

__version__ = "0.1.0"
