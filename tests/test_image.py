import pytest
from PIL import Image

from war2fnt import FontValidationError, GlyphRegionError, RGBASource, get_palette
from war2fnt.image import image_palette_colors, load_image, palette_image, read_region, save_png


def _indexed(width, height, values):
    return palette_image(bytes(values), width, height, get_palette())


def test_palette_image_carries_alpha():
    image = _indexed(2, 1, [0, 1])
    assert image.mode == "P"
    colors = image_palette_colors(image)
    assert colors[:8] == get_palette()


def test_read_region_from_indexed_image():
    image = _indexed(3, 2, [0, 1, 2, 3, 4, 5])
    assert list(read_region(image, 1, 0, 2, 2)) == [1, 2, 4, 5]


def test_read_region_quantizes_with_palette():
    palette = get_palette()
    image = Image.new("RGBA", (2, 1))
    image.putpixel((0, 0), tuple(palette[3]))
    image.putpixel((1, 0), (250, 250, 250, 255))
    assert list(read_region(image, 0, 0, 2, 1, palette)) == [3, 1]


def test_raw_rgba_source():
    palette = get_palette()
    data = bytes(palette[2]) + bytes(palette[5])
    source = RGBASource(2, 1, data)
    assert list(read_region(source, 0, 0, 2, 1, palette)) == [2, 5]


def test_raw_rgba_requires_palette():
    source = RGBASource(1, 1, bytes(4))
    with pytest.raises(FontValidationError):
        read_region(source, 0, 0, 1, 1)
    with pytest.raises(FontValidationError):
        read_region(Image.new("RGBA", (1, 1)), 0, 0, 1, 1)


def test_raw_rgba_length_checked():
    with pytest.raises(FontValidationError):
        RGBASource(2, 2, bytes(4))


def test_region_outside_image():
    image = _indexed(2, 2, [0, 0, 0, 0])
    with pytest.raises(GlyphRegionError):
        read_region(image, 1, 1, 2, 1)
    with pytest.raises(LookupError):
        read_region(RGBASource(1, 1, bytes(4)), 0, 0, 1, 2, get_palette())


def test_indexed_values_above_seven_rejected():
    image = Image.new("P", (1, 1), 9)
    with pytest.raises(FontValidationError):
        read_region(image, 0, 0, 1, 1)


def test_png_save_and_load_keeps_indices(tmp_path):
    image = _indexed(4, 2, [0, 1, 2, 3, 4, 5, 6, 7])
    path = save_png(image, tmp_path / "nested" / "atlas.png")
    loaded = load_image(path)
    assert loaded.mode == "P"
    assert list(read_region(loaded, 0, 0, 4, 2)) == [0, 1, 2, 3, 4, 5, 6, 7]
    assert image_palette_colors(loaded)[0].a == 0


def test_read_region_keeps_indices_when_palette_given():
    gold = get_palette("gold")
    image = palette_image(bytes([5, 6, 7]), 3, 1, gold)
    # 6 and 7 share the color of 0 in gold; indices are read, not colors
    assert list(read_region(image, 0, 0, 3, 1, gold)) == [5, 6, 7]


def test_read_region_maps_high_indices_through_image_colors():
    palette = get_palette()
    image = Image.new("P", (2, 1))
    flat = [0] * (10 * 3)
    flat[9 * 3 : 9 * 3 + 3] = palette[3][:3]
    image.putpalette(flat)
    image.putpixel((0, 0), 5)
    image.putpixel((1, 0), 9)
    assert list(read_region(image, 0, 0, 2, 1, palette)) == [5, 3]
