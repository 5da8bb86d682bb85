#!/usr/bin/env python3
"""Write a blank transparent guide canvas for an aspect ratio.

Usage:
  python backend/bin/make_seed_canvas.py --ratio 16:9 [--outdir ./out]

Outputs canvas_<W>x<H>.png (100 px per ratio unit) in the outdir.
"""
from __future__ import annotations

import argparse
import base64
from pathlib import Path


def main() -> int:
    ap = argparse.ArgumentParser(description="Generate a transparent guide canvas")
    ap.add_argument("--ratio", required=True, help="Aspect ratio as W:H, e.g. 16:9")
    ap.add_argument("--outdir", default=".", help="Output directory")
    args = ap.parse_args()

    from jawani.services.canvas import create_blank_canvas, parse_aspect_ratio
    from jawani.services.errors import InvalidInputError

    try:
        width, height = parse_aspect_ratio(args.ratio)
        data = base64.b64decode(create_blank_canvas(args.ratio))
    except InvalidInputError as exc:
        print("ERROR:", exc.message)
        return 1

    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)
    out = outdir / f"canvas_{width}x{height}.png"
    out.write_bytes(data)
    print("Saved:", out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
