from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .codec import UnsupportedFormatError, format_for_path, save_image
from .config import DEFAULT_FONT_SIZE, DEFAULT_MARGIN, DEFAULT_THEME, DEFAULT_WIDTH, RenderConfigError
from .fonts import FontConfig
from .png_export import RenderOptions, render_markdown_to_image
from .theme import theme_by_name


def _read_input(path: str) -> str:
    if not path:
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="md2png", description="Render Markdown into a PNG or JPEG image.")
    ap.add_argument("--in", dest="input", default="", help="Input Markdown file (default: stdin)")
    ap.add_argument("--out", default="out.png", help="Output image file (.png or .jpg)")
    ap.add_argument("--width", type=int, default=DEFAULT_WIDTH, help="Output image width in pixels")
    ap.add_argument("--margin", type=int, default=DEFAULT_MARGIN, help="Margin in pixels")
    ap.add_argument("--pt", type=float, default=DEFAULT_FONT_SIZE, help="Base font size in points (paragraph)")
    ap.add_argument("--theme", default=DEFAULT_THEME, help="Theme: light|dark")
    ap.add_argument("--font", default="", help="Path to TTF for regular text")
    ap.add_argument("--fontbold", default="", help="Path to TTF for bold text")
    ap.add_argument("--fontmono", default="", help="Path to TTF for mono/code")
    ap.add_argument("--base-dir", default="", help="Directory for relative image paths (default: input file's directory)")
    ap.add_argument("--no-link-footnotes", action="store_true", help="Do not list link destinations as footnotes")
    ap.add_argument("--image-footnotes", action="store_true", help="List image destinations as footnotes")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        format_for_path(args.out)
        theme = theme_by_name(args.theme)
        markdown = _read_input(args.input)
        if args.base_dir:
            base_dir = Path(args.base_dir)
        elif args.input:
            base_dir = Path(args.input).resolve().parent
        else:
            base_dir = Path.cwd()
        opts = RenderOptions(
            width=args.width,
            margin=args.margin,
            base_font_size=args.pt,
            theme=theme,
            font_config=FontConfig(
                regular_path=args.font or None,
                bold_path=args.fontbold or None,
                mono_path=args.fontmono or None,
                size=args.pt,
            ),
            link_footnotes=not args.no_link_footnotes,
            image_footnotes=args.image_footnotes,
            base_dir=base_dir,
        )
        image = render_markdown_to_image(markdown, opts)
        save_image(image, args.out)
    except (RenderConfigError, UnsupportedFormatError, OSError) as e:
        print(f"md2png: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
