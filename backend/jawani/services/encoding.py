"""Conversion of uploaded images into inline transport parts."""
from __future__ import annotations

import base64
from dataclasses import dataclass

from google.genai import types

DEFAULT_MIME_TYPE = "image/png"


@dataclass(slots=True)
class UploadedImage:
    """In-memory representation of an uploaded asset."""

    filename: str
    content_type: str | None
    data: bytes


@dataclass(frozen=True, slots=True)
class EncodedImage:
    """Base64 payload paired with the MIME type it is sent as."""

    data: str
    mime_type: str

    def to_part(self) -> types.Part:
        return types.Part.from_bytes(
            data=base64.b64decode(self.data), mime_type=self.mime_type
        )


def encode_image(
    source: UploadedImage | bytes, mime_type: str | None = None
) -> EncodedImage:
    """Encode ``source`` as base64 and resolve the MIME type to send it with.

    An explicit ``mime_type`` wins, then the upload's own content type, then PNG.
    The bytes are not inspected.
    """

    if isinstance(source, UploadedImage):
        raw = source.data
        source_type = source.content_type
    else:
        raw = bytes(source)
        source_type = None

    resolved = mime_type or source_type or DEFAULT_MIME_TYPE
    resolved = resolved.split(";")[0].strip() or DEFAULT_MIME_TYPE
    return EncodedImage(
        data=base64.b64encode(raw).decode("ascii"), mime_type=resolved
    )


__all__ = ["DEFAULT_MIME_TYPE", "EncodedImage", "UploadedImage", "encode_image"]
