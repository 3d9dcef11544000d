"""Run-length codec for glyph pixel streams.

Each byte encodes a run of transparent (index 0) pixels followed by at most
one explicit palette index::

    byte = skip * 8 + value

While decoding, every multiple of 8 stripped from the byte advances the
cursor by one zero pixel; the remainder (0-7) is then written as the next
pixel. The stream has no length field, the caller passes ``width * height``.
"""

from __future__ import annotations

from typing import Sequence, Tuple

from .errors import FontFormatError
from .glyph import PALETTE_INDEX_LIMIT, validate_pixels

MAX_SKIP = 31
# 31 skipped pixels followed by an explicit zero: 32 pixels in one byte
FULL_SKIP_BYTE = MAX_SKIP * PALETTE_INDEX_LIMIT


def decode_pixels(data: bytes | bytearray | memoryview, start: int, total: int) -> Tuple[bytearray, int]:
    """Decode ``total`` pixels from ``data`` beginning at ``start``.

    Returns the pixel buffer and the offset of the first unread byte.
    """
    pixels = bytearray(total)
    cursor = 0
    pos = start

    while cursor < total:
        if pos >= len(data):
            raise FontFormatError(
                f"Pixel stream truncated at byte {pos} ({cursor}/{total} pixels decoded)"
            )
        value = data[pos]
        pos += 1

        while value >= PALETTE_INDEX_LIMIT:
            value -= PALETTE_INDEX_LIMIT
            cursor += 1
            if cursor >= total:
                return pixels, pos

        pixels[cursor] = value
        cursor += 1

    return pixels, pos


def encode_pixels(pixels: Sequence[int]) -> bytes:
    """Compress a row-major buffer of palette indices."""
    validate_pixels(pixels)

    out = bytearray()
    skip = 0
    for value in pixels:
        if value == 0:
            skip += 1
            continue

        while skip > MAX_SKIP:
            out.append(FULL_SKIP_BYTE)
            skip -= MAX_SKIP + 1

        out.append(skip * PALETTE_INDEX_LIMIT + value)
        skip = 0

    # trailing zeros: each byte covers exactly ``count`` pixels
    while skip > 0:
        count = min(skip, MAX_SKIP + 1)
        out.append((count - 1) * PALETTE_INDEX_LIMIT)
        skip -= count

    return bytes(out)
