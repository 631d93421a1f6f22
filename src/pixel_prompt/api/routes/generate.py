"""
Image generation endpoint.

Generates an image from a prompt, or edits input images given either inline
or as references to files uploaded in a session.
"""

import asyncio
import base64
from typing import Annotated

from fastapi import APIRouter, Depends

from ...clients.gemini import GeminiClient
from ...models.generation import InlineImage
from ...services.session import SessionLifecycle
from ...utils.exceptions import InvalidPromptError
from ..dependencies import get_gemini_client, get_session_lifecycle
from ..schemas import GenerateRequest, GenerateResponse

router = APIRouter(prefix="/api", tags=["generation"])


async def _load_session_images(
    lifecycle: SessionLifecycle, session_id: str, filenames: list[str]
) -> list[InlineImage]:
    images = []
    for filename in filenames:
        record, file_path = lifecycle.resolve_download(session_id, filename)
        data = await asyncio.to_thread(file_path.read_bytes)
        images.append(
            InlineImage(data=base64.b64encode(data).decode("ascii"), mime_type=record.mime_type)
        )
    return images


@router.post("/generate", response_model=GenerateResponse)
async def generate_image(
    request: GenerateRequest,
    gemini: Annotated[GeminiClient, Depends(get_gemini_client)],
    lifecycle: Annotated[SessionLifecycle, Depends(get_session_lifecycle)],
) -> GenerateResponse:
    """
    Generate or edit an image.

    Input images come from request.images, followed by the session uploads
    named in request.filenames. Without any input image the prompt alone is
    used to generate a new image.

    Raises:
        400: Blank prompt, filenames without sessionId, or too many images
        404: Referenced session or file not found
        429: Generation API rate limit exhausted
        502: Generation API error
        503: Generation API not configured or unreachable
    """
    images = [InlineImage(data=i.data, mime_type=i.mime_type) for i in request.images]
    if request.filenames:
        if not request.session_id:
            raise InvalidPromptError("sessionId is required when filenames are given")
        images.extend(
            await _load_session_images(lifecycle, request.session_id, request.filenames)
        )

    result = await gemini.generate_or_edit_image(request.prompt, images)
    return GenerateResponse(image_data=result.image_data, mime_type=result.mime_type)
