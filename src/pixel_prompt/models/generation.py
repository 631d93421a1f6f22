"""Image generation request/result models."""

from pydantic import BaseModel, Field


class InlineImage(BaseModel):
    """
    A base64-encoded image sent to the generation API.

    Attributes:
        data: Base64 image payload without a data URL prefix
        mime_type: Image content type
    """

    data: str = Field(min_length=1, description="Base64 image data")
    mime_type: str = Field(default="image/png", description="Image MIME type")


class GeneratedImage(BaseModel):
    """
    Image returned by the generation API.

    Attributes:
        image_data: Base64 image payload
        mime_type: Image content type (defaults to image/png when not reported)
    """

    image_data: str = Field(description="Base64 image data")
    mime_type: str = Field(default="image/png", description="Image MIME type")
