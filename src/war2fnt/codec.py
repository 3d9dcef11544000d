"""Binary reader and writer for Warcraft II ``.fnt`` files.

Layout (little endian)::

    0   4 bytes  magic "FONT"
    4   u8       low index   (first char code)
    5   u8       high index  (last char code)
    6   u8       max width
    7   u8       max height
    8   u32 * (high - low + 1)  absolute glyph offsets, 0 = absent
    ..  per glyph: u8 width, u8 height, i8 x offset, i8 y offset, RLE pixels
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from .errors import FontFormatError, FontValidationError
from .glyph import FontGlyph
from .rle import decode_pixels, encode_pixels

FONT_MAGIC = 0x544E4F46  # b"FONT" read as little endian int32
HEADER_SIZE = 8
OFFSET_SIZE = 4
GLYPH_HEADER_SIZE = 4

_HEADER = struct.Struct("<IBBBB")
_OFFSET = struct.Struct("<I")
_GLYPH_HEADER = struct.Struct("<BBbb")


@dataclass(frozen=True)
class FontHeader:
    low_index: int = 0
    high_index: int = 0
    max_width: int = 0
    max_height: int = 0

    @property
    def total_chars(self) -> int:
        return self.high_index - self.low_index + 1

    @property
    def data_start(self) -> int:
        return HEADER_SIZE + OFFSET_SIZE * self.total_chars


def sort_glyphs(glyphs: Iterable[FontGlyph]) -> List[FontGlyph]:
    """Return a new list ordered by char code; duplicates are rejected."""
    ordered = sorted(glyphs, key=lambda glyph: glyph.char_code)
    for prev, cur in zip(ordered, ordered[1:]):
        if prev.char_code == cur.char_code:
            raise FontValidationError(f"Duplicate glyph for char code {cur.char_code}")
    return ordered


def recompute_header(glyphs: Iterable[FontGlyph]) -> FontHeader:
    """Derive the header from a glyph set. An empty set gives the zero header."""
    ordered = sort_glyphs(glyphs)
    if not ordered:
        return FontHeader()
    return FontHeader(
        low_index=ordered[0].char_code,
        high_index=ordered[-1].char_code,
        max_width=max(glyph.width for glyph in ordered),
        max_height=max(glyph.height for glyph in ordered),
    )


def read_header(data: bytes | bytearray | memoryview) -> FontHeader:
    if len(data) < HEADER_SIZE:
        raise FontFormatError(f"File too short for a font header ({len(data)} bytes)")

    magic, low, high, max_width, max_height = _HEADER.unpack_from(data, 0)
    if magic != FONT_MAGIC:
        raise FontFormatError(
            f"Not a Warcraft II font. Expected magic 0x{FONT_MAGIC:08X}, got 0x{magic:08X}"
        )
    if high < low:
        raise FontFormatError(f"Invalid char range: high index {high} < low index {low}")
    return FontHeader(low, high, max_width, max_height)


def read_offsets(data: bytes | bytearray | memoryview, header: FontHeader) -> List[int]:
    if len(data) < header.data_start:
        raise FontFormatError(
            f"Offset table truncated: need {header.data_start} bytes, file has {len(data)}"
        )
    return [
        _OFFSET.unpack_from(data, HEADER_SIZE + OFFSET_SIZE * index)[0]
        for index in range(header.total_chars)
    ]


def read_glyph(data: bytes | bytearray | memoryview, char_code: int, offset: int) -> FontGlyph:
    if offset + GLYPH_HEADER_SIZE > len(data):
        raise FontFormatError(f"Glyph {char_code} offset {offset} is outside the file")

    width, height, x_offset, y_offset = _GLYPH_HEADER.unpack_from(data, offset)
    pixels, _ = decode_pixels(data, offset + GLYPH_HEADER_SIZE, width * height)
    return FontGlyph(char_code, width, height, x_offset, y_offset, pixels)


def decode_font(data: bytes | bytearray | memoryview) -> Tuple[FontHeader, List[FontGlyph]]:
    """Parse a ``.fnt`` buffer into its header and glyphs in char code order."""
    header = read_header(data)
    glyphs: List[FontGlyph] = []

    for index, offset in enumerate(read_offsets(data, header)):
        if offset == 0:
            continue
        char_code = header.low_index + index
        if offset < header.data_start:
            raise FontFormatError(
                f"Glyph {char_code} offset {offset} points into the header area"
            )
        glyphs.append(read_glyph(data, char_code, offset))

    return header, glyphs


def encode_glyph(glyph: FontGlyph) -> bytes:
    header = _GLYPH_HEADER.pack(glyph.width, glyph.height, glyph.x_offset, glyph.y_offset)
    return header + encode_pixels(glyph.pixels)


def encode_font(glyphs: Sequence[FontGlyph]) -> bytes:
    """Serialize glyphs into a ``.fnt`` buffer.

    The output depends only on the glyph set, never on its order.
    """
    ordered = sort_glyphs(glyphs)
    header = recompute_header(ordered)
    by_code = {glyph.char_code: glyph for glyph in ordered}

    offsets = bytearray()
    blocks = bytearray()
    position = header.data_start
    for char_code in range(header.low_index, header.high_index + 1):
        glyph = by_code.get(char_code)
        if glyph is None:
            offsets += _OFFSET.pack(0)
            continue
        offsets += _OFFSET.pack(position)
        block = encode_glyph(glyph)
        blocks += block
        position += len(block)

    head = _HEADER.pack(
        FONT_MAGIC,
        header.low_index,
        header.high_index,
        header.max_width,
        header.max_height,
    )
    return head + bytes(offsets) + bytes(blocks)
