"""Tests for response normalization."""
from __future__ import annotations

import base64

from google.genai import types

from jawani.services.responses import (
    NO_CONTENT_MESSAGE,
    BinaryPart,
    TextPart,
    normalize_parts,
    normalize_response,
    parse_parts,
)


def _response(*parts: types.Part) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=list(parts)))]
    )


def _image_part(data: bytes, mime_type: str = "image/jpeg") -> types.Part:
    return types.Part(inline_data=types.Blob(data=data, mime_type=mime_type))


def test_text_only_response() -> None:
    result = normalize_response(_response(types.Part(text="I cannot edit that")))

    assert result.image is None
    assert result.text == "I cannot edit that"


def test_binary_only_response_is_labelled_png() -> None:
    result = normalize_response(_response(_image_part(b"jpeg-bytes")))

    expected = base64.b64encode(b"jpeg-bytes").decode()
    assert result.image == f"data:image/png;base64,{expected}"
    assert result.text is None


def test_empty_response_uses_no_content_message() -> None:
    result = normalize_response(types.GenerateContentResponse(candidates=[]))

    assert result.image is None
    assert result.text == NO_CONTENT_MESSAGE


def test_candidate_without_content_uses_no_content_message() -> None:
    result = normalize_response(
        types.GenerateContentResponse(candidates=[types.Candidate(finish_reason="SAFETY")])
    )

    assert result.text == NO_CONTENT_MESSAGE


def test_image_and_text_are_both_returned() -> None:
    result = normalize_response(
        _response(types.Part(text="Here you go"), _image_part(b"png"))
    )

    assert result.text == "Here you go"
    assert result.image is not None


def test_first_image_and_first_text_win() -> None:
    result = normalize_response(
        _response(
            _image_part(b"first"),
            types.Part(text="one"),
            _image_part(b"second"),
            types.Part(text="two"),
        )
    )

    assert result.image == "data:image/png;base64," + base64.b64encode(b"first").decode()
    assert result.text == "one"


def test_parse_parts_skips_empty_parts() -> None:
    parsed = parse_parts([types.Part(), types.Part(text="hi"), _image_part(b"x", "image/png")])

    assert parsed == [
        TextPart(text="hi"),
        BinaryPart(data=base64.b64encode(b"x").decode(), mime_type="image/png"),
    ]


def test_normalize_parts_accepts_plain_sum_type_values() -> None:
    result = normalize_parts([TextPart(text="t"), BinaryPart(data="QUJD")])

    assert result.image == "data:image/png;base64,QUJD"
    assert result.text == "t"
