"""Palettes and nearest-color quantization."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, NamedTuple, Sequence

from .errors import PaletteError
from .glyph import PALETTE_INDEX_LIMIT


class RGBA(NamedTuple):
    r: int
    g: int
    b: int
    a: int = 255


Palette = List[RGBA]

DEFAULT_PALETTE_NAME = "default"

BUILTIN_PALETTES: Dict[str, Palette] = {
    # index 0 is the transparent background, 1-7 a light to dark ramp
    "default": [
        RGBA(0, 0, 0, 0),
        RGBA(255, 255, 255),
        RGBA(212, 212, 212),
        RGBA(168, 168, 168),
        RGBA(124, 124, 124),
        RGBA(0, 0, 0),
        RGBA(80, 80, 80),
        RGBA(40, 40, 40),
    ],
    "gold": [
        RGBA(0, 0, 0, 0),
        RGBA(0xF4, 0xE0, 0x20),
        RGBA(208, 192, 28),
        RGBA(168, 140, 16),
        RGBA(92, 48, 0),
        RGBA(0, 0, 0),
        RGBA(0, 0, 0, 0),
        RGBA(0, 0, 0, 0),
    ],
}


def nearest_palette_index(rgba: Sequence[int], palette: Sequence[Sequence[int]]) -> int:
    """
    Return the palette entry closest to ``rgba``.
    Distance is Euclidean over R, G, B and A with equal weight. Squared
    distances keep the same ordering, and the strict comparison makes ties
    resolve to the lowest index.
    """
    r, g, b, a = rgba
    best_idx = 0
    best_dist = float("inf")
    for i, (pr, pg, pb, pa) in enumerate(palette):
        dist = (r - pr) ** 2 + (g - pg) ** 2 + (b - pb) ** 2 + (a - pa) ** 2
        if dist < best_dist:
            best_idx = i
            best_dist = dist
    return best_idx


def validate_palette(entries: Sequence[Sequence[int]]) -> Palette:
    if len(entries) != PALETTE_INDEX_LIMIT:
        raise PaletteError(
            f"Palette must have exactly {PALETTE_INDEX_LIMIT} entries, got {len(entries)}"
        )
    palette: Palette = []
    for idx, entry in enumerate(entries):
        try:
            color = RGBA(*entry)
        except TypeError as exc:
            raise PaletteError(f"Palette entry {idx} must have 3 or 4 components") from exc
        if any(not (0 <= c <= 255) for c in color):
            raise PaletteError(f"Palette entry {idx} components must be between 0 and 255")
        palette.append(color)
    return palette


def parse_palette_json(text: str) -> Palette:
    """Parse an array of ``{"r", "g", "b", "a"}`` objects; ``a`` defaults to 255."""
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise PaletteError(f"Invalid palette JSON: {exc}") from exc

    if not isinstance(raw, list):
        raise PaletteError("Palette JSON must be an array of {r,g,b,a} objects")

    entries = []
    for idx, item in enumerate(raw):
        if not isinstance(item, dict):
            raise PaletteError(f"Palette entry {idx} must be an object")
        try:
            entries.append(
                (int(item["r"]), int(item["g"]), int(item["b"]), int(item.get("a", 255)))
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise PaletteError(f"Palette entry {idx} is invalid: {item!r}") from exc
    return validate_palette(entries)


def get_palette(name_or_path: str | Path | None = None) -> Palette:
    """Resolve a built-in palette name (case-insensitive) or a JSON palette file."""
    if name_or_path is None:
        return list(BUILTIN_PALETTES[DEFAULT_PALETTE_NAME])

    key = str(name_or_path).lower()
    if key in BUILTIN_PALETTES:
        return list(BUILTIN_PALETTES[key])

    path = Path(name_or_path)
    if not path.is_file():
        raise PaletteError(
            f"Unknown palette '{name_or_path}'. Use one of: {', '.join(BUILTIN_PALETTES)} "
            "or a path to a JSON file"
        )
    return parse_palette_json(path.read_text(encoding="utf-8"))


def palette_to_json(palette: Sequence[RGBA]) -> str:
    return json.dumps([color._asdict() for color in palette], indent=2)


def format_palette_text(palette: Sequence[RGBA]) -> str:
    entries = [f"{idx}: ({r},{g},{b},{a})" for idx, (r, g, b, a) in enumerate(palette)]
    return ", ".join(entries)
