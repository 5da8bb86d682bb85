"""Blank guide canvases used to anchor the frame of reference-guided generation.

The canvas is a fully transparent PNG whose pixel size is ``100*W x 100*H`` for a
``"W:H"`` ratio. The small base keeps the payload short while the model still
reads the intended proportions from it.
"""
from __future__ import annotations

import base64
import re
from io import BytesIO

from PIL import Image

from jawani.services.errors import InvalidInputError

CANVAS_UNIT_PX = 100

_RATIO_PATTERN = re.compile(r"^(\d+):(\d+)$")


def parse_aspect_ratio(aspect_ratio: str) -> tuple[int, int]:
    """Split ``"W:H"`` into positive integers or raise `InvalidInputError`."""

    match = _RATIO_PATTERN.match(aspect_ratio or "")
    if not match:
        raise InvalidInputError(
            f"Invalid aspect ratio {aspect_ratio!r}; expected the form W:H."
        )
    width, height = int(match.group(1)), int(match.group(2))
    if width <= 0 or height <= 0:
        raise InvalidInputError(
            f"Invalid aspect ratio {aspect_ratio!r}; both sides must be positive."
        )
    return width, height


def create_blank_canvas(aspect_ratio: str) -> str:
    """Return a transparent PNG for ``aspect_ratio`` as bare base64 (no data URL prefix)."""

    width, height = parse_aspect_ratio(aspect_ratio)
    canvas = Image.new(
        "RGBA", (width * CANVAS_UNIT_PX, height * CANVAS_UNIT_PX), (0, 0, 0, 0)
    )
    buffer = BytesIO()
    canvas.save(buffer, format="PNG")
    return base64.b64encode(buffer.getvalue()).decode("ascii")


__all__ = ["CANVAS_UNIT_PX", "create_blank_canvas", "parse_aspect_ratio"]
