"""Glyph value type shared by the codec, the packer and the facade."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .errors import FontValidationError

PALETTE_INDEX_LIMIT = 8
SPACE_CODE = 32
NBSP_CODE = 160
WHITESPACE_CODES = frozenset({SPACE_CODE, NBSP_CODE})


def _check_range(name: str, value: int, low: int, high: int) -> None:
    if not (low <= value <= high):
        raise FontValidationError(f"{name} must be between {low} and {high} (got {value})")


@dataclass
class FontGlyph:
    """One character bitmap plus the metrics stored in the font file.

    ``pixels`` is a row-major buffer of palette indices (0-7) holding exactly
    ``width * height`` entries. When omitted it is filled with zeros.
    ``atlas_x`` and ``atlas_y`` are written by :func:`war2fnt.atlas.pack_glyphs`.
    """

    char_code: int
    width: int
    height: int
    x_offset: int = 0
    y_offset: int = 0
    pixels: bytearray = field(default_factory=bytearray)
    atlas_x: int = 0
    atlas_y: int = 0

    def __post_init__(self) -> None:
        _check_range("char_code", self.char_code, 0, 255)
        _check_range("width", self.width, 0, 255)
        _check_range("height", self.height, 0, 255)
        _check_range("x_offset", self.x_offset, -128, 127)
        _check_range("y_offset", self.y_offset, -128, 127)

        total = self.width * self.height
        values = list(self.pixels)
        if not values:
            values = [0] * total
        if len(values) != total:
            raise FontValidationError(
                f"Glyph {self.char_code} expects {total} pixels, got {len(values)}"
            )
        validate_pixels(values)
        self.pixels = bytearray(values)

    @property
    def is_whitespace(self) -> bool:
        return self.char_code in WHITESPACE_CODES

    def pixel(self, x: int, y: int) -> int:
        return self.pixels[y * self.width + x]


def validate_pixels(pixels: Iterable[int]) -> None:
    """Reject palette indices outside ``0..7``."""
    for pos, value in enumerate(pixels):
        if not (0 <= value < PALETTE_INDEX_LIMIT):
            raise FontValidationError(
                f"Pixel {pos} has palette index {value}; expected 0-{PALETTE_INDEX_LIMIT - 1}"
            )


def make_space_glyph(width: int) -> FontGlyph:
    """Synthetic space used because the binary format never stores whitespace."""
    return FontGlyph(SPACE_CODE, width, 0)
