"""Image editing and generation endpoints."""
from __future__ import annotations

import mimetypes
from typing import List, NoReturn

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from jawani.core.config import Settings, get_settings
from jawani.deps import get_media_client
from jawani.schemas.media import (
    AspectRatio,
    GenerationResult,
    IdeaListResponse,
    ImageListResponse,
    PromptIdeaForm,
)
from jawani.services.encoding import UploadedImage
from jawani.services.errors import (
    ConfigurationError,
    EmptyResultError,
    InvalidInputError,
    MediaServiceError,
)
from jawani.services.media import GenerativeMediaClient

router = APIRouter(prefix="/media", tags=["media"])

_ERROR_STATUS = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    EmptyResultError: status.HTTP_502_BAD_GATEWAY,
}


def _raise_http(exc: MediaServiceError) -> NoReturn:
    status_code = _ERROR_STATUS.get(type(exc), status.HTTP_502_BAD_GATEWAY)
    raise HTTPException(status_code=status_code, detail=exc.message) from exc


@router.post("/edit", response_model=GenerationResult, summary="Edit an image from a prompt")
async def edit_image(
    prompt: str = Form(..., description="Editing instruction"),
    image: UploadFile = File(..., description="Image to edit"),
    settings: Settings = Depends(get_settings),
    client: GenerativeMediaClient = Depends(get_media_client),
) -> GenerationResult:
    source = await _to_uploaded_image(image, settings=settings)
    try:
        return await client.edit_image(source, prompt)
    except MediaServiceError as exc:
        _raise_http(exc)


@router.post(
    "/edit-with-mask",
    response_model=GenerationResult,
    summary="Edit the masked region of an image",
)
async def edit_image_with_mask(
    prompt: str = Form(..., description="Editing instruction"),
    image: UploadFile = File(..., description="Image to edit"),
    mask: UploadFile = File(..., description="Mask marking the region to change"),
    settings: Settings = Depends(get_settings),
    client: GenerativeMediaClient = Depends(get_media_client),
) -> GenerationResult:
    source = await _to_uploaded_image(image, settings=settings)
    mask_image = await _to_uploaded_image(mask, settings=settings)
    try:
        return await client.edit_image_with_mask(source, mask_image, prompt)
    except MediaServiceError as exc:
        _raise_http(exc)


@router.post("/ideas", response_model=IdeaListResponse, summary="Suggest edits for an image")
async def get_creative_ideas(
    image: UploadFile = File(..., description="Image to analyse"),
    settings: Settings = Depends(get_settings),
    client: GenerativeMediaClient = Depends(get_media_client),
) -> IdeaListResponse:
    source = await _to_uploaded_image(image, settings=settings)
    try:
        ideas = await client.get_creative_ideas(source)
    except MediaServiceError as exc:
        _raise_http(exc)
    return IdeaListResponse(ideas=ideas)


@router.post("/generate", response_model=ImageListResponse, summary="Generate images from text")
async def generate_images(
    prompt: str = Form(..., description="Description of the image"),
    count: int = Form(1, ge=1, description="Number of images to generate"),
    aspect_ratio: AspectRatio = Form("1:1"),
    settings: Settings = Depends(get_settings),
    client: GenerativeMediaClient = Depends(get_media_client),
) -> ImageListResponse:
    if count > settings.max_images_per_request:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"At most {settings.max_images_per_request} images can be generated at once",
        )
    try:
        images = await client.generate_images(prompt, count, aspect_ratio)
    except MediaServiceError as exc:
        _raise_http(exc)
    return ImageListResponse(images=images)


@router.post(
    "/generate-with-reference",
    response_model=ImageListResponse,
    summary="Generate an image guided by reference images",
)
async def generate_image_with_reference(
    prompt: str = Form(..., description="Content instruction"),
    aspect_ratio: str = Form("1:1", description="Output ratio as W:H"),
    images: List[UploadFile] = File(..., description="1..N reference images"),
    settings: Settings = Depends(get_settings),
    client: GenerativeMediaClient = Depends(get_media_client),
) -> ImageListResponse:
    references = await _to_uploaded_images(images, settings=settings)
    if not references:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please provide at least one reference image.",
        )
    try:
        generated = await client.generate_image_with_reference(
            references, prompt, aspect_ratio
        )
    except MediaServiceError as exc:
        _raise_http(exc)
    return ImageListResponse(images=generated)


@router.post(
    "/prompt-ideas",
    response_model=IdeaListResponse,
    summary="Write prompt ideas from product details or references",
)
async def generate_prompt_ideas(
    product_name: str = Form(""),
    product_position: str = Form(""),
    additional_info: str = Form(""),
    images: List[UploadFile] | None = File(None, description="Optional reference images"),
    settings: Settings = Depends(get_settings),
    client: GenerativeMediaClient = Depends(get_media_client),
) -> IdeaListResponse:
    references = await _to_uploaded_images(images or [], settings=settings)
    form = PromptIdeaForm(
        product_name=product_name,
        product_position=product_position,
        additional_info=additional_info,
    )
    try:
        ideas = await client.generate_prompt_ideas(form, references)
    except MediaServiceError as exc:
        _raise_http(exc)
    return IdeaListResponse(ideas=ideas)


UPLOAD_READ_CHUNK_SIZE = 64 * 1024  # 64 KiB per chunk


async def _to_uploaded_image(file: UploadFile, *, settings: Settings) -> UploadedImage:
    uploads = await _to_uploaded_images([file], settings=settings)
    if not uploads:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File {file.filename or 'uploaded-image'} is empty",
        )
    return uploads[0]


async def _to_uploaded_images(
    files: List[UploadFile], *, settings: Settings
) -> List[UploadedImage]:
    uploads: List[UploadedImage] = []
    for file in files:
        content_type = _resolve_content_type(file)
        if content_type and not any(
            content_type.startswith(prefix)
            for prefix in settings.upload_allowed_mime_prefixes
        ):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"File {file.filename or 'uploaded-image'} is not a supported image format",
            )

        data = await _read_upload_bytes(file, limit=settings.upload_max_bytes)
        if not data:
            continue
        uploads.append(
            UploadedImage(
                filename=file.filename or "uploaded-image",
                content_type=content_type,
                data=data,
            )
        )
    return uploads


def _resolve_content_type(file: UploadFile) -> str | None:
    if file.content_type:
        return file.content_type
    guessed_type, _ = mimetypes.guess_type(file.filename or "")
    return guessed_type


async def _read_upload_bytes(file: UploadFile, *, limit: int) -> bytes:
    total = 0
    chunks: list[bytes] = []
    try:
        while True:
            remaining = limit - total
            if remaining <= 0:
                # one extra byte tells an exact-limit file from an oversized one
                if await file.read(1):
                    raise _payload_too_large(limit)
                break

            chunk = await file.read(min(UPLOAD_READ_CHUNK_SIZE, remaining))
            if not chunk:
                break

            total += len(chunk)
            chunks.append(chunk)
    finally:
        await file.close()

    return b"".join(chunks)


def _payload_too_large(limit: int) -> HTTPException:
    size_mb = limit / (1024 * 1024)
    if size_mb.is_integer():
        size_label = f"{int(size_mb)}MB"
    else:
        size_label = f"{size_mb:.1f}MB"
    return HTTPException(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        detail=f"Each image must be at most {size_label}",
    )
