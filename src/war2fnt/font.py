"""Font facade tying the codec, the atlas packer and the BMFont bridge together."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

from PIL import Image

from . import atlas as _atlas
from .bmfont import BMFontChar, encode_bmfont, parse_bmfont_chars
from .codec import FontHeader, decode_font, encode_font, recompute_header, sort_glyphs
from .errors import FontValidationError
from .glyph import SPACE_CODE, FontGlyph, make_space_glyph
from .image import ImageSource, palette_image, read_region
from .palette import RGBA, get_palette

DEFAULT_CHAR_SPACING = 1


@dataclass
class UnpackOptions:
    """Fields written into the BMFont descriptor when exporting a font."""

    font_name: str
    page_file: str | None = None
    info_spacing: tuple[int, int] = (1, 1)
    stretch_h: int = 100
    extra_info: dict = field(default_factory=dict)

    @property
    def resolved_page_file(self) -> str:
        return self.page_file or f"{self.font_name}.png"


class Font:
    """A decoded or assembled font plus its derived header and atlas.

    Instances are built through the ``from_*`` constructors. Header and
    atlas are only recomputed by :meth:`refresh` and :meth:`to_fnt_bytes`.
    """

    def __init__(self, glyphs: Sequence[FontGlyph], char_spacing: int = DEFAULT_CHAR_SPACING):
        if char_spacing < 0:
            raise FontValidationError("Character spacing must be zero or greater")
        self.char_spacing = char_spacing
        self.glyphs: List[FontGlyph] = list(glyphs)
        self.header = FontHeader()
        self.atlas = _atlas.AtlasLayout()

    @classmethod
    def from_fnt_bytes(cls, data: bytes, char_spacing: int = DEFAULT_CHAR_SPACING) -> "Font":
        header, glyphs = decode_font(data)
        # the format never stores whitespace, so a space is always synthesized
        if not any(glyph.char_code == SPACE_CODE for glyph in glyphs):
            glyphs.append(make_space_glyph(header.max_width))

        font = cls(glyphs, char_spacing)
        font.header = header
        font.rebuild_atlas()
        # atlas placement follows file order; everything else sees code order
        font.glyphs = sorted(font.glyphs, key=lambda glyph: glyph.char_code)
        return font

    @classmethod
    def from_glyphs(cls, glyphs: Iterable[FontGlyph], char_spacing: int = DEFAULT_CHAR_SPACING) -> "Font":
        font = cls(sort_glyphs(glyphs), char_spacing)
        font.refresh()
        return font

    @classmethod
    def from_bmfont(
        cls,
        descriptor: str,
        image_source: ImageSource,
        palette: Sequence[RGBA] | None = None,
        char_spacing: int = DEFAULT_CHAR_SPACING,
    ) -> "Font":
        """Import glyphs described by ``char`` lines from an atlas image.

        Indexed images keep their palette indices 0-7 as they are; ``palette``
        only maps indices of 8 or more. Other images and raw RGBA sources are
        quantized to ``palette``.
        """
        if not isinstance(image_source, Image.Image) and palette is None:
            raise FontValidationError("A palette is required when importing raw RGBA data")

        glyphs = []
        for char in parse_bmfont_chars(descriptor):
            if char.width == 0 or char.height == 0:
                continue
            pixels = read_region(image_source, char.x, char.y, char.width, char.height, palette)
            glyphs.append(
                FontGlyph(char.id, char.width, char.height, char.xoffset, char.yoffset, pixels)
            )
        return cls.from_glyphs(glyphs, char_spacing)

    def refresh(self) -> None:
        """Recompute the header and the atlas from the current glyphs."""
        self.header = recompute_header(self.glyphs)
        self.rebuild_atlas()

    def rebuild_atlas(self) -> None:
        self.atlas = _atlas.build_atlas(self.glyphs, self.char_spacing)

    def to_fnt_bytes(self) -> bytes:
        self.header = recompute_header(self.glyphs)
        return encode_font(self.glyphs)

    def glyph(self, char_code: int) -> FontGlyph:
        for glyph in self.glyphs:
            if glyph.char_code == char_code:
                return glyph
        raise KeyError(char_code)

    def glyph_map(self) -> dict[int, FontGlyph]:
        return {glyph.char_code: glyph for glyph in self.glyphs}

    @property
    def atlas_size(self) -> tuple[int, int]:
        return self.atlas.size

    def bmfont_chars(self) -> List[BMFontChar]:
        return [
            BMFontChar(
                id=glyph.char_code,
                x=glyph.atlas_x,
                y=glyph.atlas_y,
                width=glyph.width,
                height=glyph.height,
                xoffset=glyph.x_offset,
                yoffset=glyph.y_offset,
                xadvance=glyph.width + self.char_spacing,
                page=0,
                chnl=15,
            )
            for glyph in self.glyphs
        ]

    def to_bmfont(self, options: UnpackOptions) -> str:
        """Describe the current atlas as a BMFont text descriptor."""
        info = {
            "face": options.font_name,
            "size": self.header.max_height,
            "bold": False,
            "italic": False,
            "charset": "",
            "unicode": False,
            "stretchH": options.stretch_h,
            "smooth": False,
            "aa": 0,
            "padding": (0, 0, 0, 0),
            "spacing": options.info_spacing,
            "outline": 0,
        }
        info.update(options.extra_info)
        common = {
            "lineHeight": self.header.max_height,
            "base": self.header.max_height,
            "scaleW": self.atlas.width,
            "scaleH": self.atlas.height,
            "pages": 1,
            "packed": False,
            "alphaChnl": 0,
            "redChnl": 0,
            "greenChnl": 0,
            "blueChnl": 0,
        }
        return encode_bmfont(self.bmfont_chars(), info, common, [options.resolved_page_file])

    def atlas_image(self, palette: Sequence[RGBA] | None = None) -> Image.Image:
        colors = palette if palette is not None else get_palette()
        return palette_image(self.atlas.pixels, self.atlas.width, self.atlas.height, colors)

    def glyph_image(self, glyph: FontGlyph, palette: Sequence[RGBA] | None = None) -> Image.Image:
        colors = palette if palette is not None else get_palette()
        return palette_image(glyph.pixels, glyph.width, glyph.height, colors)

    def __len__(self) -> int:
        return len(self.glyphs)

    def __repr__(self) -> str:
        return f"Font(glyphs={len(self.glyphs)}, header={self.header!r}, atlas={self.atlas.size})"
