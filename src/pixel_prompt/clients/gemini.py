"""Gemini image generation API client."""

import asyncio
import logging
import types
from typing import Any

import httpx

from pixel_prompt.config import Settings
from pixel_prompt.models.generation import GeneratedImage, InlineImage
from pixel_prompt.utils.exceptions import (
    GenerationConnectionError,
    GenerationError,
    GenerationNotConfiguredError,
    InvalidPromptError,
    RateLimitedError,
)
from pixel_prompt.utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class GeminiClient:
    """Async HTTP client for Gemini image generation with retry logic and rate limiting."""

    def __init__(
        self,
        settings: Settings,
        rate_limiter: RateLimiter,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Create an httpx.AsyncClient from Settings unless one is supplied,
        and take the rate limiter by reference.
        """
        self.client = http_client or httpx.AsyncClient(
            base_url=settings.gemini_base_url,
            timeout=settings.gemini_timeout,
        )
        self.settings = settings
        self._rate_limiter = rate_limiter

    async def __aenter__(self) -> "GeminiClient":
        return self

    async def __aexit__(
            self,
            exc_type: type[BaseException] | None,
            exc_val: BaseException | None,
            exc_tb: types.TracebackType | None
    ) -> None:
        await self.aclose()

    @property
    def is_configured(self) -> bool:
        return bool(self.settings.gemini_api_key)

    async def _request(self, payload: dict[str, Any]) -> Any:
        if not self.is_configured:
            raise GenerationNotConfiguredError()

        endpoint = f"models/{self.settings.gemini_model}:generateContent"
        max_retries = self.settings.gemini_max_retries
        for attempt in range(max_retries + 1):
            try:
                await self._rate_limiter.acquire()
                response = await self.client.post(
                    endpoint,
                    json=payload,
                    headers={"x-goog-api-key": self.settings.gemini_api_key},
                )
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as e:
                await self._handle_status_error(e, attempt)
                continue
            except (httpx.ConnectError, httpx.TimeoutException, httpx.RequestError) as e:
                if attempt < max_retries:
                    logger.warning(
                        f"Connection error - retry attempt {attempt + 1}/{max_retries}"
                    )
                    await asyncio.sleep(self._calculate_backoff(attempt))
                    continue
                raise GenerationConnectionError() from e
            except ValueError as e:
                raise GenerationError("Invalid JSON response from image generation API") from e
        raise GenerationError("Maximum retries reached before response.")

    def _calculate_backoff(self, attempt_count: int) -> float:
        return self.settings.gemini_retry_delay * 2.0**attempt_count

    async def _handle_status_error(self, error: httpx.HTTPStatusError, attempt: int) -> None:
        status_code = error.response.status_code
        error_body = error.response.text
        max_retries = self.settings.gemini_max_retries
        if status_code == 429:
            if attempt < max_retries:
                logger.warning(f"Rate limited - retry attempt {attempt + 1}/{max_retries}")
                await asyncio.sleep(self._calculate_backoff(attempt))
            else:
                raise RateLimitedError() from error
        elif status_code >= 500:
            if attempt < max_retries:
                logger.warning(
                    f"Server error {status_code} - retry attempt {attempt + 1}/{max_retries}"
                )
                await asyncio.sleep(self._calculate_backoff(attempt))
            else:
                raise GenerationError(f"Error with status code {status_code}: {error_body}") from error
        else:
            raise GenerationError(f"Error with status code {status_code}: {error_body}") from error

    async def generate_image(self, prompt: str) -> GeneratedImage:
        """Generate an image from a text prompt."""
        text = self._clean_prompt(prompt)
        logger.info("Generating image with prompt: %s", text)
        response = await self._request({"contents": [{"parts": [{"text": text}]}]})
        return self._extract_image(response)

    async def edit_image(self, prompt: str, images: list[InlineImage]) -> GeneratedImage:
        """
        Edit or combine input images following a text prompt.

        The images are sent as inline parts ahead of the prompt text.
        """
        text = self._clean_prompt(prompt)
        if not images:
            raise InvalidPromptError("At least one image required for editing")
        if len(images) > self.settings.gemini_max_input_images:
            raise InvalidPromptError(
                f"Maximum {self.settings.gemini_max_input_images} images supported for editing"
            )

        parts: list[dict[str, Any]] = [
            {"inlineData": {"mimeType": image.mime_type, "data": image.data}} for image in images
        ]
        parts.append({"text": text})

        logger.info("Editing %d image(s) with prompt: %s", len(images), text)
        response = await self._request({"contents": [{"parts": parts}]})
        return self._extract_image(response)

    async def generate_or_edit_image(
        self, prompt: str, images: list[InlineImage] | None = None
    ) -> GeneratedImage:
        """Edit when input images are given, otherwise generate from text alone."""
        if images:
            return await self.edit_image(prompt, images)
        return await self.generate_image(prompt)

    def _clean_prompt(self, prompt: str) -> str:
        if not isinstance(prompt, str) or not prompt.strip():
            raise InvalidPromptError("Valid prompt required for image generation")
        return prompt.strip()

    def _extract_image(self, response: Any) -> GeneratedImage:
        # first inline image part of the first candidate
        try:
            parts = response["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as e:
            raise GenerationError("Invalid response structure from image generation API") from e

        for part in parts:
            inline = part.get("inlineData") if isinstance(part, dict) else None
            if inline and inline.get("data"):
                return GeneratedImage(
                    image_data=inline["data"],
                    mime_type=inline.get("mimeType") or "image/png",
                )
        raise GenerationError("No image data received from API")

    async def aclose(self) -> None:
        await self.client.aclose()
