"""Application-wide settings and Gemini client configuration helpers."""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CREATIVE_IDEAS_INSTRUCTION = (
    "You are a creative photo editing assistant. Analyze the following image and "
    "provide 3-4 distinct, creative ideas for how to edit it. Each idea should be a "
    "short, actionable sentence that can be used as a prompt for an AI image editor. "
    "Return the ideas as a JSON array of strings."
)

DEFAULT_REFERENCE_INSTRUCTION_TEMPLATE = (
    "Please fill the provided blank transparent canvas with a new image. Use the other "
    "reference images as strong inspiration for the style, mood, and subject matter. "
    'Follow this specific instruction for the content: "{prompt}". The final output '
    "must be a single, complete image that perfectly fits the dimensions of the "
    "initial blank canvas."
)

DEFAULT_PROMPT_IDEAS_IMAGE_TEMPLATE = (
    "You are an expert prompt writer for an AI image generator.\n"
    "Analyze the following image(s) closely. Based *only* on the visual information "
    "(style, subject, composition, lighting, colors), generate 4 distinct, creative, "
    "and detailed prompt ideas in English.\n"
    "The prompts should describe how to create a similar or inspired image.\n"
    'Return the ideas as a JSON object with a single key "ideas" which is an array '
    "of 4 strings."
)

DEFAULT_PROMPT_IDEAS_FORM_TEMPLATE = (
    "You are an expert prompt writer for an AI image generator, specializing in "
    "stunning product photography for small businesses (UMKM).\n"
    "Based on the following information, generate 4 distinct, creative, and detailed "
    "prompt ideas.\n"
    "The prompts should be in English.\n\n"
    'Product Name: "{product_name}"\n'
    'Product Position/Action: "{product_position}"\n'
    'Additional Details (style, background, mood, colors): "{additional_info}"\n\n'
    'Return the ideas as a JSON object with a single key "ideas" which is an array '
    "of 4 strings."
)


class Settings(BaseSettings):
    """Global application configuration."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    api_key: Optional[str] = Field(
        default=None, description="Gemini API key, read from API_KEY"
    )
    gemini_image_model: str = "gemini-2.5-flash-image-preview"
    gemini_text_model: str = "gemini-2.5-flash"
    imagen_model: str = "imagen-4.0-generate-001"
    gemini_request_timeout: float = 120.0

    creative_ideas_instruction: str = DEFAULT_CREATIVE_IDEAS_INSTRUCTION
    reference_instruction_template: str = DEFAULT_REFERENCE_INSTRUCTION_TEMPLATE
    prompt_ideas_image_template: str = DEFAULT_PROMPT_IDEAS_IMAGE_TEMPLATE
    prompt_ideas_form_template: str = DEFAULT_PROMPT_IDEAS_FORM_TEMPLATE

    max_images_per_request: int = 4
    upload_allowed_mime_prefixes: tuple[str, ...] = ("image/",)
    upload_max_bytes: int = 5 * 1024 * 1024

    # Login gate; the password may be configured as a PBKDF2 hash or plain text
    auth_username: Optional[str] = None
    auth_password_hash: Optional[str] = None
    auth_password_plain: Optional[str] = None
    auth_login_delay_seconds: float = 0.5

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


__all__ = ["Settings", "get_settings"]
