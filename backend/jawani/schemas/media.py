"""Schemas for the generative media workflow."""
from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field

AspectRatio = Literal["1:1", "16:9", "9:16", "4:3", "3:4"]


class GenerationResult(BaseModel):
    image: str | None = Field(
        default=None, description="PNG data URL of the generated image"
    )
    text: str | None = Field(
        default=None, description="Text returned alongside or instead of the image"
    )


class IdeaPayload(BaseModel):
    """Structured JSON body the text model is asked to return."""

    ideas: List[str] | None = None


class IdeaListResponse(BaseModel):
    ideas: List[str] | None = Field(
        default=None, description="Short prompt or edit suggestions"
    )


class ImageListResponse(BaseModel):
    images: List[str] = Field(
        default_factory=list, description="Generated images as PNG data URLs"
    )


class PromptIdeaForm(BaseModel):
    product_name: str = ""
    product_position: str = ""
    additional_info: str = ""

    def has_text(self) -> bool:
        return bool(self.product_name or self.product_position or self.additional_info)


IDEAS_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "ideas": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
        }
    },
}

PROMPT_IDEAS_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "ideas": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": (
                "An array of 4 distinct and creative prompt ideas for product "
                "photography."
            ),
        }
    },
}
