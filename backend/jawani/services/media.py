"""Generative media operations backed by Gemini and Imagen."""
from __future__ import annotations

import base64
import logging
import time
from typing import (
    Any,
    AsyncContextManager,
    Awaitable,
    Callable,
    List,
    Sequence,
    TypeVar,
    get_args,
)
from uuid import uuid4

from google.genai import types
from pydantic import ValidationError

from jawani.core.config import Settings
from jawani.schemas.media import (
    IDEAS_RESPONSE_SCHEMA,
    PROMPT_IDEAS_RESPONSE_SCHEMA,
    AspectRatio,
    GenerationResult,
    IdeaPayload,
    PromptIdeaForm,
)
from jawani.services.canvas import create_blank_canvas
from jawani.services.encoding import EncodedImage, UploadedImage, encode_image
from jawani.services.errors import (
    ConfigurationError,
    EmptyResultError,
    InvalidInputError,
    MediaServiceError,
    UpstreamError,
)
from jawani.services.gemini_client import async_gemini_client
from jawani.services.responses import normalize_response, to_png_data_url

logger = logging.getLogger(__name__)

T = TypeVar("T")

ClientFactory = Callable[[Settings], AsyncContextManager[Any]]

EDIT_ERROR_MESSAGE = "An unexpected error occurred while communicating with the AI."
IDEAS_ERROR_MESSAGE = "An unexpected error occurred while generating ideas."
GENERATE_ERROR_MESSAGE = "An unexpected error occurred while generating images."
REFERENCE_ERROR_MESSAGE = "An unexpected error occurred while generating the image."

EMPTY_PROMPT_MESSAGE = "Prompt cannot be empty."
MISSING_REFERENCES_MESSAGE = "Please provide at least one reference image."
MISSING_IDEA_INPUT_MESSAGE = (
    "Please provide some information or a reference image to generate ideas."
)
NO_IMAGES_MESSAGE = (
    "The AI did not generate any images. This might be due to the safety policy."
)
NO_REFERENCE_IMAGE_MESSAGE = "The AI could not generate an image from your request."
NO_PROMPT_IDEAS_MESSAGE = "The AI did not return valid prompt ideas. Please try again."

PNG_MIME_TYPE = "image/png"


class GenerativeMediaClient:
    """Stateless wrapper around the hosted image and text models.

    Every operation encodes its inputs, assembles an ordered part list, makes a
    single call and normalizes the answer. Failures surface as
    `MediaServiceError` subclasses; nothing is retried.
    """

    def __init__(
        self, settings: Settings, *, client_factory: ClientFactory | None = None
    ) -> None:
        if not settings.api_key:
            raise ConfigurationError("Missing Gemini credentials. Configure API_KEY.")
        self._settings = settings
        self._client_factory = client_factory or async_gemini_client

    async def edit_image(self, image: UploadedImage, prompt: str) -> GenerationResult:
        async def task() -> GenerationResult:
            parts = [encode_image(image).to_part(), types.Part.from_text(text=prompt)]
            response = await self._generate_content(
                model=self._settings.gemini_image_model,
                parts=parts,
                config=self._image_and_text_config(),
            )
            return normalize_response(response)

        return await self._execute(
            task, operation="edit_image", default_message=EDIT_ERROR_MESSAGE
        )

    async def edit_image_with_mask(
        self, image: UploadedImage, mask: UploadedImage | bytes, prompt: str
    ) -> GenerationResult:
        async def task() -> GenerationResult:
            parts = [
                encode_image(image).to_part(),
                encode_image(mask, PNG_MIME_TYPE).to_part(),
                types.Part.from_text(text=prompt),
            ]
            response = await self._generate_content(
                model=self._settings.gemini_image_model,
                parts=parts,
                config=self._image_and_text_config(),
            )
            return normalize_response(response)

        return await self._execute(
            task, operation="edit_image_with_mask", default_message=EDIT_ERROR_MESSAGE
        )

    async def get_creative_ideas(self, image: UploadedImage) -> List[str] | None:
        async def task() -> List[str] | None:
            parts = [
                types.Part.from_text(text=self._settings.creative_ideas_instruction),
                encode_image(image).to_part(),
            ]
            response = await self._generate_content(
                model=self._settings.gemini_text_model,
                parts=parts,
                config=self._json_config(IDEAS_RESPONSE_SCHEMA),
            )
            return _parse_ideas(response.text)

        return await self._execute(
            task, operation="get_creative_ideas", default_message=IDEAS_ERROR_MESSAGE
        )

    async def generate_images(
        self, prompt: str, number_of_images: int, aspect_ratio: AspectRatio
    ) -> List[str]:
        async def task() -> List[str]:
            if not prompt.strip():
                raise InvalidInputError(EMPTY_PROMPT_MESSAGE)
            if number_of_images < 1:
                raise InvalidInputError("At least one image must be requested.")
            if aspect_ratio not in get_args(AspectRatio):
                raise InvalidInputError(f"Unsupported aspect ratio {aspect_ratio!r}.")

            async with self._client_factory(self._settings) as client:
                response = await client.models.generate_images(
                    model=self._settings.imagen_model,
                    prompt=prompt,
                    config=types.GenerateImagesConfig(
                        number_of_images=number_of_images,
                        output_mime_type=PNG_MIME_TYPE,
                        aspect_ratio=aspect_ratio,
                    ),
                )

            images = [
                generated.image.image_bytes
                for generated in response.generated_images or []
                if generated.image is not None and generated.image.image_bytes
            ]
            if not images:
                raise EmptyResultError(NO_IMAGES_MESSAGE)
            return [
                to_png_data_url(base64.b64encode(data).decode("ascii"))
                for data in images
            ]

        return await self._execute(
            task, operation="generate_images", default_message=GENERATE_ERROR_MESSAGE
        )

    async def generate_image_with_reference(
        self, images: Sequence[UploadedImage], prompt: str, aspect_ratio: str
    ) -> List[str]:
        async def task() -> List[str]:
            if not images:
                raise InvalidInputError(MISSING_REFERENCES_MESSAGE)
            if not prompt.strip():
                raise InvalidInputError(EMPTY_PROMPT_MESSAGE)

            canvas = EncodedImage(
                data=create_blank_canvas(aspect_ratio), mime_type=PNG_MIME_TYPE
            )
            instruction = self._settings.reference_instruction_template.format(
                prompt=prompt
            )
            # The canvas goes first so the model takes its frame from it
            parts = [
                canvas.to_part(),
                *(encode_image(image).to_part() for image in images),
                types.Part.from_text(text=instruction),
            ]
            response = await self._generate_content(
                model=self._settings.gemini_image_model,
                parts=parts,
                config=self._image_and_text_config(),
            )
            result = normalize_response(response)
            if not result.image:
                raise EmptyResultError(result.text or NO_REFERENCE_IMAGE_MESSAGE)
            return [result.image]

        return await self._execute(
            task,
            operation="generate_image_with_reference",
            default_message=REFERENCE_ERROR_MESSAGE,
        )

    async def generate_prompt_ideas(
        self, form: PromptIdeaForm, reference_images: Sequence[UploadedImage]
    ) -> List[str]:
        async def task() -> List[str]:
            has_text = form.has_text()
            if not has_text and not reference_images:
                raise InvalidInputError(MISSING_IDEA_INPUT_MESSAGE)

            parts = [
                types.Part.from_text(
                    text=self._prompt_ideas_instruction(form, reference_images)
                ),
                *(encode_image(image).to_part() for image in reference_images),
            ]
            response = await self._generate_content(
                model=self._settings.gemini_text_model,
                parts=parts,
                config=self._json_config(PROMPT_IDEAS_RESPONSE_SCHEMA),
            )
            ideas = _parse_ideas(response.text)
            if ideas:
                return ideas
            raise EmptyResultError(NO_PROMPT_IDEAS_MESSAGE)

        return await self._execute(
            task, operation="generate_prompt_ideas", default_message=IDEAS_ERROR_MESSAGE
        )

    def _prompt_ideas_instruction(
        self, form: PromptIdeaForm, reference_images: Sequence[UploadedImage]
    ) -> str:
        if reference_images and not form.has_text():
            return self._settings.prompt_ideas_image_template
        return self._settings.prompt_ideas_form_template.format(
            product_name=form.product_name,
            product_position=form.product_position,
            additional_info=form.additional_info,
        )

    def _image_and_text_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            response_modalities=[types.Modality.IMAGE, types.Modality.TEXT]
        )

    def _json_config(self, schema: dict) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=schema,
        )

    async def _generate_content(
        self,
        *,
        model: str,
        parts: List[types.Part],
        config: types.GenerateContentConfig,
    ) -> types.GenerateContentResponse:
        logger.debug(
            "Submitting generate_content request to Gemini",
            extra={"model": model, "part_count": len(parts)},
        )
        async with self._client_factory(self._settings) as client:
            return await client.models.generate_content(
                model=model, contents=parts, config=config
            )

    async def _execute(
        self,
        task: Callable[[], Awaitable[T]],
        *,
        operation: str,
        default_message: str,
    ) -> T:
        operation_id = uuid4().hex
        started_at = time.perf_counter()
        logger.info(
            "Starting media operation",
            extra={"operation": operation, "operation_id": operation_id},
        )
        try:
            result = await task()
        except MediaServiceError:
            logger.exception(
                "Media operation failed",
                extra={"operation": operation, "operation_id": operation_id},
            )
            raise
        except Exception as exc:
            logger.exception(
                "Gemini %s call failed",
                operation,
                extra={"operation": operation, "operation_id": operation_id},
            )
            raise UpstreamError(
                str(exc) or default_message, operation=operation
            ) from exc

        logger.info(
            "Media operation completed",
            extra={
                "operation": operation,
                "operation_id": operation_id,
                "duration_ms": (time.perf_counter() - started_at) * 1000,
            },
        )
        return result


def _parse_ideas(text: str | None) -> List[str] | None:
    """Return the ``ideas`` list, or None when the body is empty or unusable."""

    if not text:
        return None
    try:
        payload = IdeaPayload.model_validate_json(text)
    except ValidationError:
        logger.warning("Failed to parse Gemini idea payload: %s", text[:500])
        return None
    return payload.ideas


__all__ = [
    "ClientFactory",
    "GenerativeMediaClient",
]
