from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

import httpx
from markdown_it.tree import SyntaxTreeNode
from PIL import Image

from .canvas import Canvas
from .config import DEFAULT_FONT_SIZE, DEFAULT_MARGIN, DEFAULT_THEME, DEFAULT_WIDTH, PX_PER_PT, REMOTE_TIMEOUT_S
from .document import parse_markdown
from .fonts import FontConfig, FontSet, complete_fonts, load_fonts
from .footnotes import FootnoteRegistry
from .images import ImageResolver
from .logging_utils import get_logger
from .renderer import BlockRenderer, RenderContext
from .theme import Theme, resolve_theme
from .tokens import TokenCollector

log = get_logger(__name__)


@dataclass
class RenderOptions:
    width: int = DEFAULT_WIDTH
    margin: int = DEFAULT_MARGIN
    base_font_size: float = DEFAULT_FONT_SIZE
    theme: Theme | str = DEFAULT_THEME
    fonts: FontSet | None = None
    font_config: FontConfig | None = None
    link_footnotes: bool = True
    image_footnotes: bool = False
    base_dir: Path | str | None = None
    remote_timeout: float = REMOTE_TIMEOUT_S
    transport: httpx.BaseTransport | None = None
    confine_to_base_dir: bool = False
    allow_remote_images: bool = True


def _resolve_fonts(opts: RenderOptions, size_pt: float) -> FontSet:
    fonts = opts.fonts
    if fonts is None and opts.font_config is not None:
        fonts = load_fonts(replace(opts.font_config, size=size_pt))
    return complete_fonts(fonts, size_pt)


def build_context(opts: RenderOptions, resolver: ImageResolver | None) -> RenderContext:
    """Validate options and build the fresh per-render state.

    Theme and font problems raise here, before anything is drawn.
    """
    width = opts.width if opts.width > 0 else DEFAULT_WIDTH
    margin = opts.margin if opts.margin > 0 else DEFAULT_MARGIN
    size_pt = opts.base_font_size if opts.base_font_size > 0 else DEFAULT_FONT_SIZE
    theme = resolve_theme(opts.theme)
    fonts = _resolve_fonts(opts, size_pt)
    base_px = size_pt * PX_PER_PT

    registry = FootnoteRegistry()
    canvas = Canvas(width, margin, theme, fonts, base_px)
    collector = TokenCollector(
        fonts,
        theme,
        registry=registry,
        resolver=resolver,
        link_footnotes=opts.link_footnotes,
        image_footnotes=opts.image_footnotes,
    )
    return RenderContext(canvas=canvas, collector=collector, base_size=base_px, registry=registry)


def render(tree: SyntaxTreeNode, options: RenderOptions | None = None) -> Image.Image:
    opts = options or RenderOptions()
    base_dir = Path(opts.base_dir) if opts.base_dir is not None else Path.cwd()
    with ImageResolver(
        base_dir=base_dir,
        timeout_s=opts.remote_timeout,
        transport=opts.transport,
        confine_local=opts.confine_to_base_dir,
        allow_remote=opts.allow_remote_images,
    ) as resolver:
        ctx = build_context(opts, resolver)
        BlockRenderer(ctx).render(tree)
    image = ctx.canvas.finish()
    log.info(
        "Rendered %dx%d image (%d footnotes, %d images)",
        image.width,
        image.height,
        len(ctx.registry),
        len(resolver.cache),
    )
    return image


def render_markdown_to_image(markdown: str, options: RenderOptions | None = None) -> Image.Image:
    return render(parse_markdown(markdown), options)
