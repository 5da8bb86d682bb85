"""Tests for the transparent guide canvas."""
from __future__ import annotations

import base64
import runpy
import sys
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

from jawani.services.canvas import create_blank_canvas, parse_aspect_ratio
from jawani.services.errors import InvalidInputError


def _open(encoded: str) -> Image.Image:
    return Image.open(BytesIO(base64.b64decode(encoded)))


@pytest.mark.parametrize(
    ("ratio", "size"),
    [("1:1", (100, 100)), ("16:9", (1600, 900)), ("3:4", (300, 400)), ("21:9", (2100, 900))],
)
def test_canvas_dimensions_follow_ratio(ratio: str, size: tuple[int, int]) -> None:
    image = _open(create_blank_canvas(ratio))

    assert image.format == "PNG"
    assert image.size == size


def test_canvas_is_fully_transparent() -> None:
    image = _open(create_blank_canvas("4:3")).convert("RGBA")

    alpha_min, alpha_max = image.getchannel("A").getextrema()
    assert (alpha_min, alpha_max) == (0, 0)


def test_canvas_has_no_data_url_prefix() -> None:
    assert not create_blank_canvas("1:1").startswith("data:")


@pytest.mark.parametrize("ratio", ["", "16x9", "16:", ":9", "a:b", "1.5:1", "-1:2", "0:1", "1:0"])
def test_malformed_ratio_is_rejected(ratio: str) -> None:
    with pytest.raises(InvalidInputError):
        create_blank_canvas(ratio)


def test_parse_aspect_ratio() -> None:
    assert parse_aspect_ratio("9:16") == (9, 16)


def test_make_seed_canvas_script_writes_png(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    script = Path(__file__).resolve().parents[1] / "bin" / "make_seed_canvas.py"
    namespace = runpy.run_path(str(script))
    monkeypatch.setattr(sys, "argv", ["make_seed_canvas.py", "--ratio", "2:1", "--outdir", str(tmp_path)])

    assert namespace["main"]() == 0
    with Image.open(tmp_path / "canvas_2x1.png") as image:
        assert image.size == (200, 100)


def test_make_seed_canvas_script_rejects_bad_ratio(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    script = Path(__file__).resolve().parents[1] / "bin" / "make_seed_canvas.py"
    namespace = runpy.run_path(str(script))
    monkeypatch.setattr(sys, "argv", ["make_seed_canvas.py", "--ratio", "wide", "--outdir", str(tmp_path)])

    assert namespace["main"]() == 1
    assert not list(tmp_path.iterdir())
