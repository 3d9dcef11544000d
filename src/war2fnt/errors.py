"""Exceptions raised by the font codec and its helpers."""


class War2FontError(Exception):
    """Base class for every error raised by this package."""


class FontFormatError(War2FontError, ValueError):
    """Raised when binary or descriptor input is malformed."""


class FontValidationError(War2FontError, ValueError):
    """Raised when caller supplied values fall outside the format's domain."""


class PaletteError(FontValidationError):
    """Raised for unknown palette names and malformed palette files."""


class GlyphRegionError(War2FontError, LookupError):
    """Raised when a glyph region lies outside its source image."""
