"""Warcraft II bitmap font converter.

Reads and writes the game's ``.fnt`` files, packs their glyphs into an
indexed-color atlas and bridges to BMFont text descriptors. It can be invoked
through the CLI (``python -m war2fnt``) or imported as a library.
"""

from .atlas import AtlasLayout, build_atlas, estimate_atlas_width, pack_glyphs, render_atlas
from .bmfont import BMFontChar, encode_bmfont, parse_bmfont_chars
from .codec import FONT_MAGIC, FontHeader, decode_font, encode_font, recompute_header
from .errors import (
    FontFormatError,
    FontValidationError,
    GlyphRegionError,
    PaletteError,
    War2FontError,
)
from .font import Font, UnpackOptions
from .glyph import FontGlyph
from .image import RGBASource
from .palette import BUILTIN_PALETTES, RGBA, get_palette, nearest_palette_index
from .rle import decode_pixels, encode_pixels

__all__ = [
    "AtlasLayout",
    "BMFontChar",
    "BUILTIN_PALETTES",
    "FONT_MAGIC",
    "Font",
    "FontFormatError",
    "FontGlyph",
    "FontHeader",
    "FontValidationError",
    "GlyphRegionError",
    "PaletteError",
    "RGBA",
    "RGBASource",
    "UnpackOptions",
    "War2FontError",
    "build_atlas",
    "decode_font",
    "decode_pixels",
    "encode_bmfont",
    "encode_font",
    "encode_pixels",
    "estimate_atlas_width",
    "get_palette",
    "nearest_palette_index",
    "pack_glyphs",
    "parse_bmfont_chars",
    "recompute_header",
    "render_atlas",
]
