"""Normalization of Gemini ``generate_content`` responses.

A response candidate carries an ordered list of parts. Each part is reduced to
either a `TextPart` or a `BinaryPart`; parts carrying neither payload (thought
signatures, function calls, empty parts) are skipped.

Selection policy: the first binary part becomes the image and the first text
part becomes the text. Any later part of the same kind is ignored, so a
response with several images still yields exactly one.
"""
from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any, Iterable, List, Union

from jawani.schemas.media import GenerationResult

NO_CONTENT_MESSAGE = "No content was generated. The request may have been blocked."

# The model may answer with JPEG, which has no alpha channel; labelling the
# payload as PNG makes clients render transparency correctly.
RESULT_IMAGE_MIME_TYPE = "image/png"


@dataclass(frozen=True, slots=True)
class TextPart:
    text: str


@dataclass(frozen=True, slots=True)
class BinaryPart:
    data: str
    mime_type: str | None = None


ResponsePart = Union[TextPart, BinaryPart]


def to_png_data_url(data: str) -> str:
    return f"data:{RESULT_IMAGE_MIME_TYPE};base64,{data}"


def _encode_payload(payload: bytes | str) -> str:
    if isinstance(payload, str):
        return payload
    return base64.b64encode(payload).decode("ascii")


def parse_parts(parts: Iterable[Any] | None) -> List[ResponsePart]:
    """Convert SDK parts into the `TextPart` / `BinaryPart` sum type, keeping order."""

    parsed: List[ResponsePart] = []
    for part in parts or []:
        inline = getattr(part, "inline_data", None)
        if inline is not None and inline.data:
            parsed.append(
                BinaryPart(data=_encode_payload(inline.data), mime_type=inline.mime_type)
            )
        text = getattr(part, "text", None)
        if text:
            parsed.append(TextPart(text=text))
    return parsed


def candidate_parts(response: Any) -> List[ResponsePart]:
    """Return the parsed parts of the first candidate, or an empty list."""

    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    content = getattr(candidates[0], "content", None)
    if content is None:
        return []
    return parse_parts(content.parts)


def normalize_parts(parts: Iterable[ResponsePart]) -> GenerationResult:
    image: str | None = None
    text: str | None = None
    for part in parts:
        if isinstance(part, BinaryPart):
            if image is None:
                image = to_png_data_url(part.data)
        elif isinstance(part, TextPart):
            if text is None:
                text = part.text
        else:
            raise TypeError(f"Unexpected response part {part!r}")

    if image is None and text is None:
        text = NO_CONTENT_MESSAGE
    return GenerationResult(image=image, text=text)


def normalize_response(response: Any) -> GenerationResult:
    """Reduce a ``generate_content`` response to a `GenerationResult`.

    Safety-filtered responses arrive without content; they produce the
    no-content message rather than an error.
    """

    return normalize_parts(candidate_parts(response))


__all__ = [
    "BinaryPart",
    "NO_CONTENT_MESSAGE",
    "ResponsePart",
    "TextPart",
    "candidate_parts",
    "normalize_parts",
    "normalize_response",
    "parse_parts",
    "to_png_data_url",
]
