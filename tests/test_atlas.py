import random

from war2fnt import FontGlyph, build_atlas, estimate_atlas_width, pack_glyphs, render_atlas
from war2fnt.atlas import next_power_of_four


def _squares(count, size=3):
    return [FontGlyph(65 + i, size, size, pixels=[i % 7 + 1] * size * size) for i in range(count)]


def _is_power_of_four(value):
    while value > 1 and value % 4 == 0:
        value //= 4
    return value == 1


def test_next_power_of_four():
    assert [next_power_of_four(v) for v in (0, 1, 2, 4, 5, 16, 17, 64, 65)] == [
        1, 1, 4, 4, 16, 16, 64, 64, 256,
    ]


def test_estimate_width():
    # 4 * (3+1)^2 = 64 -> sqrt 8 -> 16
    assert estimate_atlas_width(_squares(4), 1) == 16
    assert estimate_atlas_width([], 1) == 1


def test_estimate_width_covers_widest_glyph():
    wide = FontGlyph(65, 20, 1, pixels=[1] * 20)
    # area 21 * 2 = 42 -> 7 -> 16, but the glyph itself needs 20
    assert estimate_atlas_width([wide], 1) == 64


def test_shelf_placement_wraps_rows():
    glyphs = _squares(5)
    layout = pack_glyphs(glyphs, 1)
    assert layout.width == 16
    assert [(g.atlas_x, g.atlas_y) for g in glyphs] == [
        (0, 0), (4, 0), (8, 0), (12, 0), (0, 4),
    ]
    assert layout.height == 7


def test_row_height_tracks_tallest_glyph():
    glyphs = [
        FontGlyph(65, 2, 5, pixels=[1] * 10),
        FontGlyph(66, 2, 2, pixels=[1] * 4),
        FontGlyph(67, 30, 1, pixels=[1] * 30),
    ]
    layout = pack_glyphs(glyphs, 2)
    assert layout.width == 64
    assert [(g.atlas_x, g.atlas_y) for g in glyphs] == [(0, 0), (4, 0), (8, 0)]
    assert layout.height == 5


def test_render_blits_pixels_and_skips_whitespace():
    glyphs = [
        FontGlyph(32, 2, 1, pixels=[5, 5]),
        FontGlyph(65, 2, 2, pixels=[1, 2, 3, 4]),
        FontGlyph(160, 1, 1, pixels=[6]),
    ]
    layout = build_atlas(glyphs, 0)
    assert layout.width == 4
    assert [(g.atlas_x, g.atlas_y) for g in glyphs] == [(0, 0), (2, 0), (0, 2)]
    assert layout.height == 3
    assert list(layout.pixels) == [
        0, 0, 1, 2,
        0, 0, 3, 4,
        0, 0, 0, 0,
    ]


def test_render_is_idempotent():
    glyphs = _squares(6)
    layout = pack_glyphs(glyphs, 1)
    first = render_atlas(glyphs, layout)
    second = render_atlas(glyphs, layout)
    assert first == second


def test_random_layouts_do_not_overlap():
    rng = random.Random(7)
    for _ in range(30):
        spacing = rng.randint(0, 3)
        glyphs = [
            FontGlyph(code, rng.randint(0, 40), rng.randint(0, 40))
            for code in rng.sample(range(256), rng.randint(1, 40))
        ]
        layout = pack_glyphs(glyphs, spacing)
        assert _is_power_of_four(layout.width)

        rects = [
            (g.atlas_x, g.atlas_y, g.atlas_x + g.width + spacing, g.atlas_y + g.height + spacing)
            for g in glyphs
        ]
        for i, a in enumerate(rects):
            assert a[0] + glyphs[i].width <= layout.width
            assert a[1] + glyphs[i].height <= layout.height
            for b in rects[i + 1 :]:
                overlap = a[0] < b[2] and b[0] < a[2] and a[1] < b[3] and b[1] < a[3]
                assert not overlap
