"""Markdown to raster image renderer."""
from __future__ import annotations

from .codec import UnsupportedFormatError, encode_image, save_image
from .config import RenderConfigError
from .document import NodeKind, parse_markdown
from .fonts import FontConfig, FontError, FontFace, FontSet, load_fonts
from .footnotes import FootnoteRegistry
from .images import ImageResolveError, ImageResolver, UnsupportedSchemeError
from .png_export import RenderOptions, render, render_markdown_to_image
from .theme import DARK_THEME, LIGHT_THEME, Theme, ThemeError, theme_by_name

__all__ = [
    "DARK_THEME",
    "FontConfig",
    "FontError",
    "FontFace",
    "FontSet",
    "FootnoteRegistry",
    "ImageResolveError",
    "ImageResolver",
    "LIGHT_THEME",
    "NodeKind",
    "RenderConfigError",
    "RenderOptions",
    "Theme",
    "ThemeError",
    "UnsupportedFormatError",
    "UnsupportedSchemeError",
    "encode_image",
    "load_fonts",
    "parse_markdown",
    "render",
    "render_markdown_to_image",
    "save_image",
    "theme_by_name",
]
