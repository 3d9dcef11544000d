"""Shelf packing of glyphs into a single indexed-color atlas."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

from .glyph import FontGlyph


@dataclass
class AtlasLayout:
    """Atlas size plus its row-major palette index buffer."""

    width: int = 0
    height: int = 0
    pixels: bytearray = field(default_factory=bytearray)

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height


def next_power_of_four(value: int) -> int:
    result = 1
    while result < value:
        result *= 4
    return result


def estimate_atlas_width(glyphs: Sequence[FontGlyph], spacing: int) -> int:
    """Smallest power of 4 covering the square root of the padded glyph area.

    The width is raised further when a single glyph is wider than that, so
    every glyph fits on a row of its own.
    """
    area = sum((glyph.width + spacing) * (glyph.height + spacing) for glyph in glyphs)
    widest = max((glyph.width for glyph in glyphs), default=0)
    return next_power_of_four(max(math.isqrt(area - 1) + 1 if area else 0, widest))


def pack_glyphs(glyphs: Sequence[FontGlyph], spacing: int) -> AtlasLayout:
    """Assign ``atlas_x``/``atlas_y`` to every glyph, in the order given.

    Returns an empty-buffer layout; fill it with :func:`render_atlas`.
    """
    atlas_width = estimate_atlas_width(glyphs, spacing)

    x = 0
    y = 0
    row_height = 0
    for glyph in glyphs:
        if x + glyph.width > atlas_width:
            x = 0
            y += row_height + spacing
            row_height = 0

        glyph.atlas_x = x
        glyph.atlas_y = y

        x += glyph.width + spacing
        row_height = max(row_height, glyph.height)

    return AtlasLayout(width=atlas_width, height=y + row_height)


def render_atlas(glyphs: Sequence[FontGlyph], layout: AtlasLayout) -> AtlasLayout:
    """Blit every visible glyph at its placement into a fresh buffer."""
    pixels = bytearray(layout.width * layout.height)

    for glyph in glyphs:
        if glyph.is_whitespace:
            continue
        for row in range(glyph.height):
            src = row * glyph.width
            dst = (glyph.atlas_y + row) * layout.width + glyph.atlas_x
            pixels[dst : dst + glyph.width] = glyph.pixels[src : src + glyph.width]

    return AtlasLayout(width=layout.width, height=layout.height, pixels=pixels)


def build_atlas(glyphs: Sequence[FontGlyph], spacing: int) -> AtlasLayout:
    return render_atlas(glyphs, pack_glyphs(glyphs, spacing))
