import pytest

from war2fnt import BMFontChar, FontFormatError, encode_bmfont, parse_bmfont_chars


def _sample_text():
    chars = [
        BMFontChar(id=65, x=0, y=0, width=3, height=3, xoffset=0, yoffset=1, xadvance=4),
        BMFontChar(id=66, x=4, y=0, width=2, height=3, xoffset=-1, yoffset=0, xadvance=3),
    ]
    info = {"face": "small", "size": 3, "bold": False, "padding": (0, 0, 0, 0), "spacing": (1, 1)}
    common = {"lineHeight": 3, "base": 3, "scaleW": 16, "scaleH": 3, "pages": 1, "packed": False}
    return encode_bmfont(chars, info, common, ["small.png"])


def test_encode_layout():
    lines = _sample_text().splitlines()
    assert lines == [
        'info face="small" size=3 bold=0 padding=0,0,0,0 spacing=1,1',
        "common lineHeight=3 base=3 scaleW=16 scaleH=3 pages=1 packed=0",
        'page id=0 file="small.png"',
        "chars count=2",
        "char id=65 x=0 y=0 width=3 height=3 xoffset=0 yoffset=1 xadvance=4 page=0 chnl=15",
        "char id=66 x=4 y=0 width=2 height=3 xoffset=-1 yoffset=0 xadvance=3 page=0 chnl=15",
    ]
    assert _sample_text().endswith("\n")


def test_encode_without_chars():
    text = encode_bmfont([], {"face": "x"}, {"pages": 1}, ["x.png"])
    assert text.splitlines()[-1] == "chars count=0"


def test_parse_reads_char_lines_only():
    chars = parse_bmfont_chars(_sample_text())
    assert [c.id for c in chars] == [65, 66]
    assert chars[1] == BMFontChar(
        id=66, x=4, y=0, width=2, height=3, xoffset=-1, yoffset=0, xadvance=3, page=0, chnl=15
    )


def test_parse_tolerates_extra_keys_and_windows_newlines():
    text = "info face=\"a b\"\r\nchar id=7   x=1 y=2 width=3 height=4 letter=\"q\"\r\n"
    (char,) = parse_bmfont_chars(text)
    assert (char.id, char.x, char.y, char.width, char.height) == (7, 1, 2, 3, 4)
    assert char.xoffset == 0


def test_parse_rejects_non_integer_values():
    with pytest.raises(FontFormatError):
        parse_bmfont_chars("char id=65 width=abc")


def test_parse_requires_id():
    with pytest.raises(FontFormatError):
        parse_bmfont_chars("char x=1 y=2")
