"""Prompt library models."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PromptEntry(BaseModel):
    """
    A saved prompt with descriptive metadata.

    Serialized with camelCase keys ("artStyle", "createdAt") as stored in
    Prompts.json.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    prompt: str
    category: str = "Other"
    subject: str = ""
    action: str = ""
    environment: str = ""
    art_style: str = ""
    lighting: str = ""
    created_at: str


class PromptCreate(BaseModel):
    """Request body for saving a prompt. Only name and prompt are required."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str | None = None
    name: str | None = Field(default=None, description="Display name")
    prompt: str | None = Field(default=None, description="Prompt text")
    category: str | None = None
    subject: str | None = None
    action: str | None = None
    environment: str | None = None
    art_style: str | None = None
    lighting: str | None = None
    created_at: str | None = None
