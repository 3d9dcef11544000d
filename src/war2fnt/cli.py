"""Command line interface for the Warcraft II font converter."""

from __future__ import annotations

import argparse
import sys
import warnings
from pathlib import Path

from .errors import War2FontError
from .font import DEFAULT_CHAR_SPACING, Font, UnpackOptions
from .image import load_image, save_png
from .palette import BUILTIN_PALETTES, format_palette_text, get_palette
from .tools import parse_text_segments, render_text, split_font, stitch_font


def _read_font(path: Path, spacing: int = DEFAULT_CHAR_SPACING) -> Font:
    if not path.is_file():
        raise War2FontError(f"File not found: {path}")
    return Font.from_fnt_bytes(path.read_bytes(), spacing)


def _non_negative(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError("spacing must be zero or greater")
    return value


def cmd_info(args: argparse.Namespace) -> None:
    font = _read_font(args.file)
    header = font.header
    codes = sorted(glyph.char_code for glyph in font.glyphs)

    print(f"Font Info: {args.file.name}")
    print("-----------------------------------")
    print(f"Max Width:      {header.max_width}px")
    print(f"Max Height:     {header.max_height}px")
    print(f"Glyph Count:    {len(codes)}")
    if codes:
        print(f"Code Range:     {codes[0]} - {codes[-1]}")
    print("-----------------------------------")


def cmd_unpack(args: argparse.Namespace) -> None:
    font_name = args.name or args.file.stem
    palette = get_palette(args.palette)
    font = _read_font(args.file, args.spacing)
    output_dir: Path = args.output
    output_dir.mkdir(parents=True, exist_ok=True)

    print(f"unpacking {args.file}")
    options = UnpackOptions(font_name=font_name)
    fnt_path = output_dir / f"{font_name}.fnt"
    fnt_path.write_text(font.to_bmfont(options), encoding="utf-8")
    print(f"wrote {fnt_path}")

    width, height = font.atlas_size
    if width == 0 or height == 0:
        print(f"Warning: atlas is empty ({width}x{height}); no PNG written")
        return
    png_path = save_png(font.atlas_image(palette), output_dir / options.resolved_page_file)
    print(f"wrote {png_path}")


def cmd_pack(args: argparse.Namespace) -> None:
    for path in (args.fnt, args.image):
        if not path.is_file():
            raise War2FontError(f"File not found: {path}")

    print(f"packing {args.fnt} and {args.image}")
    descriptor = args.fnt.read_text(encoding="utf-8")
    image = load_image(args.image)
    palette = None
    if args.palette is not None or image.mode != "P":
        palette = get_palette(args.palette)
    font = Font.from_bmfont(descriptor, image, palette)

    output: Path = args.output or args.fnt.parent / "out.fnt"
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(font.to_fnt_bytes())
    print(f"wrote {output}")


def cmd_split(args: argparse.Namespace) -> None:
    palette = get_palette(args.palette)
    font = _read_font(args.file)
    print(f"splitting {args.file} into {args.output}")
    written = split_font(font, args.output, palette)
    print(f"wrote {len(written)} files for {len(font.glyphs)} glyphs")


def cmd_stitch(args: argparse.Namespace) -> None:
    palette = get_palette(args.palette)
    print(f"stitching glyphs from {args.dir}")
    font = stitch_font(args.dir, palette)
    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_bytes(font.to_fnt_bytes())
    print(f"wrote {args.output}")


def cmd_render(args: argparse.Namespace) -> None:
    font = _read_font(args.file, args.spacing)
    segments = parse_text_segments(args.text, args.palette)
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        image = render_text(font, segments, args.spacing)
    for warning in caught:
        print(f"Warning: {warning.message}")
    target = save_png(image, args.output)
    print(f"wrote {target}")


def build_parser() -> argparse.ArgumentParser:
    palette_help = (
        "Built-in palette name or path to a JSON file (array of {r,g,b,a}).\n"
        + "\n".join(f"{name}: {format_palette_text(colors)}" for name, colors in BUILTIN_PALETTES.items())
    )

    parser = argparse.ArgumentParser(
        prog="war2fnt",
        description="Convert Warcraft II .fnt fonts to and from BMFont descriptors and PNG atlases.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("info", help="Show information about a Warcraft II .fnt file")
    p.add_argument("file", type=Path, help="Path to the Warcraft II .fnt file")
    p.set_defaults(func=cmd_info)

    p = sub.add_parser(
        "unpack",
        help="Convert a Warcraft II .fnt file to a BMFont descriptor and PNG atlas",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    p.add_argument("file", type=Path, help="Path to the Warcraft II .fnt file")
    p.add_argument("-o", "--output", type=Path, default=Path("."), help="Output directory")
    p.add_argument("-n", "--name", help="Font name used in the descriptor and file names")
    p.add_argument(
        "-s", "--spacing", type=_non_negative, default=DEFAULT_CHAR_SPACING,
        help="Character spacing in the atlas",
    )
    p.add_argument("-p", "--palette", help=palette_help)
    p.set_defaults(func=cmd_unpack)

    p = sub.add_parser(
        "pack",
        help="Convert a BMFont descriptor and PNG atlas back to Warcraft II .fnt",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    p.add_argument("fnt", type=Path, help="Path to the BMFont text descriptor")
    p.add_argument("image", type=Path, help="Path to the PNG atlas")
    p.add_argument(
        "-p", "--palette",
        help=palette_help
        + "\nIndexed PNGs always keep their palette indices 0-7; the palette maps any\n"
        + "higher index and quantizes RGB(A) PNGs (default palette if omitted).",
    )
    p.add_argument("-o", "--output", type=Path, help="Output file (default: out.fnt next to the descriptor)")
    p.set_defaults(func=cmd_pack)

    p = sub.add_parser(
        "split",
        help="Extract each glyph into its own PNG plus metadata.json",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    p.add_argument("file", type=Path, help="Path to the Warcraft II .fnt file")
    p.add_argument("-o", "--output", type=Path, required=True, help="Output directory")
    p.add_argument("-p", "--palette", help=palette_help)
    p.set_defaults(func=cmd_split)

    p = sub.add_parser(
        "stitch",
        help="Combine glyph PNGs and metadata.json into a Warcraft II .fnt file",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    p.add_argument("dir", type=Path, help="Directory containing glyph PNGs and metadata.json")
    p.add_argument("-p", "--palette", required=True, help=palette_help)
    p.add_argument("-o", "--output", type=Path, required=True, help="Output .fnt path")
    p.set_defaults(func=cmd_stitch)

    p = sub.add_parser(
        "render",
        help="Render text with a Warcraft II .fnt file",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    p.add_argument("file", type=Path, help="Path to the Warcraft II .fnt file")
    p.add_argument(
        "text",
        help='Text to render, or JSON segments: \'[{"text": "Hello ", "palette": "gold"}]\'',
    )
    p.add_argument("-o", "--output", type=Path, default=Path("out.png"), help="Output PNG path")
    p.add_argument("-p", "--palette", help=palette_help)
    p.add_argument(
        "-s", "--spacing", type=_non_negative, default=DEFAULT_CHAR_SPACING,
        help="Extra spacing between characters",
    )
    p.set_defaults(func=cmd_render)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        args.func(args)
        return 0
    except (War2FontError, OSError) as exc:
        print(exc, file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
