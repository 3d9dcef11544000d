import struct
from pathlib import Path

import pytest

from war2fnt import FontGlyph, encode_font


def make_sample_glyphs():
    return [
        FontGlyph(65, 3, 3, 0, 1, [0, 1, 0, 1, 2, 1, 3, 0, 3]),
        FontGlyph(66, 2, 3, 1, 0, [4, 4, 5, 0, 6, 7]),
        # 67 intentionally missing
        FontGlyph(68, 1, 2, -1, 2, [7, 0]),
    ]


def make_fnt_bytes(low, high, max_width, max_height, offsets, body=b""):
    return (
        b"FONT"
        + bytes([low, high, max_width, max_height])
        + b"".join(struct.pack("<I", offset) for offset in offsets)
        + body
    )


@pytest.fixture
def sample_glyphs():
    return make_sample_glyphs()


@pytest.fixture
def sample_fnt_path(tmp_path: Path) -> Path:
    path = tmp_path / "small.fnt"
    path.write_bytes(encode_font(make_sample_glyphs()))
    return path
