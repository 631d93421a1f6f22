"""
Settings and prompt library endpoints.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends

from ...models.library import PromptCreate
from ...services.library import LibraryStore
from ..dependencies import get_library_store
from ..schemas import PromptSavedResponse, SuccessResponse

router = APIRouter(prefix="/api", tags=["library"])


@router.get("/settings")
async def read_settings(
    library: Annotated[LibraryStore, Depends(get_library_store)],
) -> dict[str, Any]:
    """Saved settings, or built-in defaults when none were saved."""
    return library.read_settings()


@router.post("/settings", response_model=SuccessResponse)
async def save_settings(
    values: Annotated[dict[str, Any], Body()],
    library: Annotated[LibraryStore, Depends(get_library_store)],
) -> SuccessResponse:
    """Replace the saved settings."""
    library.write_settings(values)
    return SuccessResponse(message="Settings saved successfully")


@router.get("/prompts")
async def list_prompts(
    library: Annotated[LibraryStore, Depends(get_library_store)],
) -> list[dict[str, Any]]:
    """All saved prompts, oldest first."""
    return library.list_prompts()


@router.post("/prompts", response_model=PromptSavedResponse)
async def save_prompt(
    request: PromptCreate,
    library: Annotated[LibraryStore, Depends(get_library_store)],
) -> PromptSavedResponse:
    """
    Save a prompt to the library.

    Raises:
        400: Name or prompt missing

    Example:
        POST /api/prompts
        Body: {"name": "Neon fox", "prompt": "A fox in neon rain", "artStyle": "Cyberpunk"}
    """
    entry = library.add_prompt(request)
    return PromptSavedResponse(prompt=entry)


@router.delete("/prompts/{prompt_id}", response_model=SuccessResponse)
async def delete_prompt(
    prompt_id: str,
    library: Annotated[LibraryStore, Depends(get_library_store)],
) -> SuccessResponse:
    """
    Delete a prompt from the library.

    Raises:
        404: No library yet, or no prompt with that id
    """
    library.delete_prompt(prompt_id)
    return SuccessResponse(message="Prompt deleted successfully")
