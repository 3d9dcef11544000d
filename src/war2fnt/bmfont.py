"""AngelCode BMFont text descriptor support.

Only the parts needed to describe a single-page atlas are produced, and only
``char`` lines are read back.
"""

from __future__ import annotations

import shlex
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Iterable, List, Mapping, Sequence

import jinja2

from .errors import FontFormatError


@dataclass
class BMFontChar:
    id: int
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0
    xoffset: int = 0
    yoffset: int = 0
    xadvance: int = 0
    page: int = 0
    chnl: int = 15


_CHAR_FIELDS = [f.name for f in fields(BMFontChar)]

bmfont_template = """\
info {{ info|bmf_pairs }}
common {{ common|bmf_pairs }}
{% for page in pages -%}
page id={{ loop.index0 }} file="{{ page }}"
{% endfor -%}
chars count={{ chars|length }}
{% for char in chars -%}
char {{ char|bmf_pairs }}
{% endfor -%}
"""


def _to_str(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, (list, tuple)):
        return ",".join(_to_str(item) for item in value)
    return str(int(value))


def _bmf_pairs(values: Mapping[str, Any]) -> str:
    return " ".join(f"{key}={_to_str(value)}" for key, value in values.items())


_environment = jinja2.Environment(keep_trailing_newline=True)
_environment.filters["bmf_pairs"] = _bmf_pairs


def encode_bmfont(
    chars: Iterable[BMFontChar],
    info: Mapping[str, Any],
    common: Mapping[str, Any],
    pages: Sequence[str],
) -> str:
    """Render a text descriptor (``info``, ``common``, ``page`` and ``char`` lines)."""
    template = _environment.from_string(bmfont_template)
    return template.render(
        info=info,
        common=common,
        pages=list(pages),
        chars=[asdict(char) for char in chars],
    )


def _parse_pairs(line: str) -> Dict[str, str]:
    try:
        items = shlex.split(line)
    except ValueError as exc:
        raise FontFormatError(f"Malformed descriptor line: {line!r}") from exc
    pairs = {}
    for item in items:
        key, sep, value = item.partition("=")
        if sep:
            pairs[key] = value
    return pairs


def parse_bmfont_chars(text: str) -> List[BMFontChar]:
    """Read every ``char`` line. Missing keys default to the record defaults."""
    chars: List[BMFontChar] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped.startswith("char "):
            continue

        values: Dict[str, int] = {}
        for key, raw in _parse_pairs(stripped[len("char ") :]).items():
            if key not in _CHAR_FIELDS:
                continue
            try:
                values[key] = int(raw, 10)
            except ValueError as exc:
                raise FontFormatError(
                    f"Line {lineno}: value for '{key}' is not an integer: {raw!r}"
                ) from exc

        if "id" not in values:
            raise FontFormatError(f"Line {lineno}: char entry without id")
        chars.append(BMFontChar(**values))
    return chars
