"""File level workflows: per-glyph split/stitch and text rendering."""

from __future__ import annotations

import json
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Sequence

from PIL import Image

from .errors import FontFormatError, FontValidationError, GlyphRegionError
from .font import DEFAULT_CHAR_SPACING, Font
from .glyph import PALETTE_INDEX_LIMIT, SPACE_CODE, FontGlyph
from .image import load_image, palette_image, read_region, save_png
from .palette import RGBA, Palette, get_palette

METADATA_NAME = "metadata.json"


def glyph_file_name(char_code: int) -> str:
    return f"char_{char_code}.png"


def split_font(font: Font, output_dir: Path, palette: Sequence[RGBA]) -> List[Path]:
    """Write one PNG per visible glyph plus ``metadata.json``.

    Returns the written paths, metadata last.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    metadata = {"charSpacing": font.char_spacing, "glyphs": []}

    for glyph in font.glyphs:
        metadata["glyphs"].append(
            {
                "id": glyph.char_code,
                "xOffset": glyph.x_offset,
                "yOffset": glyph.y_offset,
                "width": glyph.width,
                "height": glyph.height,
            }
        )
        if glyph.width > 0 and glyph.height > 0:
            image = font.glyph_image(glyph, palette)
            written.append(save_png(image, output_dir / glyph_file_name(glyph.char_code)))

    meta_path = output_dir / METADATA_NAME
    meta_path.write_text(json.dumps(metadata, indent=2), encoding="utf-8")
    written.append(meta_path)
    return written


def _read_metadata(input_dir: Path) -> dict:
    meta_path = input_dir / METADATA_NAME
    if not meta_path.is_file():
        raise FontFormatError(f"Metadata not found in {input_dir}")
    try:
        metadata = json.loads(meta_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise FontFormatError(f"Invalid {METADATA_NAME}: {exc}") from exc
    if not isinstance(metadata, dict) or not isinstance(metadata.get("glyphs"), list):
        raise FontFormatError(f"{METADATA_NAME} must hold a 'glyphs' array")
    return metadata


def stitch_font(
    input_dir: Path,
    palette: Sequence[RGBA],
    char_spacing: int | None = None,
) -> Font:
    """Rebuild a font from the output of :func:`split_font`.

    Glyph PNG colors are matched against ``palette``; glyphs without an image
    keep blank pixels.
    """
    metadata = _read_metadata(input_dir)
    glyphs: List[FontGlyph] = []

    for entry in metadata["glyphs"]:
        try:
            char_code = int(entry["id"])
            width = int(entry.get("width", 0))
            height = int(entry.get("height", 0))
            x_offset = int(entry.get("xOffset", 0))
            y_offset = int(entry.get("yOffset", 0))
        except (KeyError, TypeError, ValueError) as exc:
            raise FontFormatError(f"Invalid glyph entry in {METADATA_NAME}: {entry!r}") from exc

        pixels = bytearray()
        image_path = input_dir / glyph_file_name(char_code)
        if image_path.is_file():
            image = load_image(image_path)
            try:
                pixels = read_region(image, 0, 0, width, height, palette)
            except GlyphRegionError as exc:
                raise GlyphRegionError(f"{image_path.name}: {exc}") from exc
        glyphs.append(FontGlyph(char_code, width, height, x_offset, y_offset, pixels))

    if char_spacing is None:
        char_spacing = int(metadata.get("charSpacing") or DEFAULT_CHAR_SPACING)
    return Font.from_glyphs(glyphs, char_spacing)


@dataclass
class TextSegment:
    text: str
    palette: str | None = None


def parse_text_segments(text: str, default_palette: str | None = None) -> List[TextSegment]:
    """Plain text, or a JSON object/array of ``{"text", "palette"}`` segments.

    Text that looks like JSON but fails to parse is rendered literally.
    """
    stripped = text.strip()
    if stripped.startswith(("[", "{")):
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError:
            parsed = None
        if parsed is not None:
            items = parsed if isinstance(parsed, list) else [parsed]
            segments = []
            for item in items:
                if not isinstance(item, dict) or not isinstance(item.get("text"), str):
                    raise FontFormatError(f"Text segment must have a 'text' string: {item!r}")
                segments.append(TextSegment(item["text"], item.get("palette") or default_palette))
            return segments
    return [TextSegment(text, default_palette)]


def _lookup_glyph(glyphs: Dict[int, FontGlyph], char: str) -> FontGlyph | None:
    glyph = glyphs.get(ord(char))
    if glyph is None:
        warnings.warn(f"No glyph for {char!r}; using space", UserWarning, stacklevel=3)
        glyph = glyphs.get(SPACE_CODE)
    return glyph


def render_text(font: Font, segments: Sequence[TextSegment], spacing: int | None = None) -> Image.Image:
    """Draw ``segments`` into a mode ``P`` image.

    Each distinct palette takes 8 consecutive entries of the output palette.
    Index 0 is treated as background and never drawn.
    """
    if spacing is None:
        spacing = font.char_spacing
    glyphs = font.glyph_map()

    placed = []
    total_width = 0
    for segment in segments:
        for char in segment.text:
            glyph = _lookup_glyph(glyphs, char)
            if glyph is None:
                continue
            placed.append((glyph, segment.palette or "default"))
            total_width += glyph.width + spacing

    if total_width <= 0 or font.header.max_height == 0:
        raise FontValidationError("Nothing to render (empty text or missing glyphs)")

    palette_names: List[str] = []
    for _glyph, name in placed:
        if name not in palette_names:
            palette_names.append(name)
    colors: Palette = []
    for name in palette_names:
        colors.extend(get_palette(name))

    height = font.header.max_height
    canvas = bytearray(total_width * height)
    cursor_x = 0
    for glyph, name in placed:
        base = palette_names.index(name) * PALETTE_INDEX_LIMIT
        for py in range(glyph.height):
            draw_y = glyph.y_offset + py
            if not (0 <= draw_y < height):
                continue
            for px in range(glyph.width):
                value = glyph.pixel(px, py)
                if value == 0:
                    continue
                draw_x = cursor_x + px
                if 0 <= draw_x < total_width:
                    canvas[draw_y * total_width + draw_x] = value + base
        cursor_x += glyph.width + spacing

    return palette_image(canvas, total_width, height, colors)
