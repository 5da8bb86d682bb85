"""Helpers for creating Gemini runtime clients."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from google import genai
from google.genai import types
from google.genai.client import AsyncClient

from jawani.core.config import Settings


@asynccontextmanager
async def async_gemini_client(settings: Settings) -> AsyncIterator[AsyncClient]:
    """Yield an async Gemini client configured from settings and ensure cleanup."""

    client = genai.Client(
        api_key=settings.api_key,
        http_options=types.HttpOptions(
            timeout=int(settings.gemini_request_timeout * 1000)
        ),
    )
    try:
        yield client.aio
    finally:
        await client.aio.aclose()
