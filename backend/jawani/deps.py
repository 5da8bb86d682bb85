"""FastAPI dependency helpers."""
from __future__ import annotations

from fastapi import Depends, HTTPException, status

from jawani.core.config import Settings, get_settings
from jawani.services.errors import ConfigurationError
from jawani.services.media import GenerativeMediaClient


def get_media_client(
    settings: Settings = Depends(get_settings),
) -> GenerativeMediaClient:
    """Provide a media client per request, built from the active settings."""

    try:
        return GenerativeMediaClient(settings)
    except ConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.message
        ) from exc
