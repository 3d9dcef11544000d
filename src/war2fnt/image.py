"""Pillow helpers that move palette indices in and out of images."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Union

from PIL import Image

from .errors import FontValidationError, GlyphRegionError
from .glyph import PALETTE_INDEX_LIMIT
from .palette import RGBA, nearest_palette_index


@dataclass
class RGBASource:
    """Raw RGBA pixels (4 bytes per pixel, row-major)."""

    width: int
    height: int
    data: bytes

    def __post_init__(self) -> None:
        expected = self.width * self.height * 4
        if len(self.data) != expected:
            raise FontValidationError(
                f"RGBA data for {self.width}x{self.height} must be {expected} bytes, got {len(self.data)}"
            )

    @classmethod
    def from_image(cls, image: Image.Image) -> "RGBASource":
        rgba = image.convert("RGBA")
        return cls(rgba.width, rgba.height, rgba.tobytes())

    def rgba_at(self, x: int, y: int) -> tuple[int, int, int, int]:
        pos = (y * self.width + x) * 4
        r, g, b, a = self.data[pos : pos + 4]
        return r, g, b, a


ImageSource = Union[Image.Image, RGBASource]


def palette_image(
    pixels: bytes | bytearray, width: int, height: int, palette: Sequence[RGBA]
) -> Image.Image:
    """Build a mode ``P`` image; palette alpha goes into the transparency table."""
    if width and height:
        image = Image.frombytes("P", (width, height), bytes(pixels))
    else:
        image = Image.new("P", (width, height))
    flat: List[int] = []
    for r, g, b, _a in palette:
        flat.extend((r, g, b))
    image.putpalette(flat)
    image.info["transparency"] = bytes(color.a for color in palette)
    return image


def image_palette_colors(image: Image.Image) -> List[RGBA]:
    """RGBA entries of a mode ``P`` image, alpha taken from its transparency table."""
    raw = image.getpalette() or []
    transparency = image.info.get("transparency")
    colors: List[RGBA] = []
    for idx in range(len(raw) // 3):
        alpha = 255
        if isinstance(transparency, (bytes, bytearray)):
            if idx < len(transparency):
                alpha = transparency[idx]
        elif isinstance(transparency, int) and transparency == idx:
            alpha = 0
        colors.append(RGBA(raw[idx * 3], raw[idx * 3 + 1], raw[idx * 3 + 2], alpha))
    return colors


def _check_region(source_width: int, source_height: int, x: int, y: int, width: int, height: int) -> None:
    if x < 0 or y < 0 or x + width > source_width or y + height > source_height:
        raise GlyphRegionError(
            f"Region ({x},{y}) {width}x{height} lies outside the {source_width}x{source_height} image"
        )


def read_region(
    source: ImageSource,
    x: int,
    y: int,
    width: int,
    height: int,
    palette: Sequence[RGBA] | None = None,
) -> bytearray:
    """Return palette indices for a rectangle of ``source``.

    Indexed images give their indices directly. An index of 8 or more is
    matched against ``palette`` through the image's own color for it, and
    rejected when no palette is given. Other images and raw RGBA always need
    ``palette``.
    """
    if isinstance(source, Image.Image) and source.mode == "P":
        _check_region(source.width, source.height, x, y, width, height)
        region = bytearray(source.crop((x, y, x + width, y + height)).tobytes())
        image_colors = None
        for pos, value in enumerate(region):
            if value < PALETTE_INDEX_LIMIT:
                continue
            if palette is None:
                raise FontValidationError(
                    f"Image uses palette index {value}; fonts only allow 0-{PALETTE_INDEX_LIMIT - 1}"
                )
            if image_colors is None:
                image_colors = image_palette_colors(source)
            if value >= len(image_colors):
                raise FontValidationError(f"Image palette has no entry {value}")
            region[pos] = nearest_palette_index(image_colors[value], palette)
        return region

    if isinstance(source, Image.Image):
        if palette is None:
            raise FontValidationError(
                f"A palette is required to import {source.mode} images"
            )
        source = RGBASource.from_image(source)
    elif palette is None:
        raise FontValidationError("A palette is required to import raw RGBA data")

    _check_region(source.width, source.height, x, y, width, height)
    out = bytearray(width * height)
    for py in range(height):
        for px in range(width):
            out[py * width + px] = nearest_palette_index(source.rgba_at(x + px, y + py), palette)
    return out


def load_image(path: str | Path) -> Image.Image:
    with Image.open(path) as image:
        image.load()
        return image


def save_png(image: Image.Image, path: str | Path) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    image.save(target, format="PNG")
    return target
