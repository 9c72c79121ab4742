from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path

from PIL import ImageFont

from .config import FONT_DIR, PX_PER_PT, RenderConfigError
from .logging_utils import get_logger

log = get_logger(__name__)

# Candidate files per role, searched in MD2PNG_FONT_DIR and then on the system font path.
_DEFAULT_FONTS = {
    "regular": ("DejaVuSans.ttf", "LiberationSans-Regular.ttf", "Arial.ttf"),
    "bold": ("DejaVuSans-Bold.ttf", "LiberationSans-Bold.ttf", "Arial Bold.ttf"),
    "mono": ("DejaVuSansMono.ttf", "LiberationMono-Regular.ttf", "Courier New.ttf"),
}


class FontError(RenderConfigError):
    pass


@dataclass(frozen=True)
class FontFace:
    """A loaded face together with the pixel size it was rasterized at."""

    font: ImageFont.FreeTypeFont = field(compare=False)
    base_size: float
    name: str = ""


@dataclass(frozen=True)
class FontSet:
    regular: FontFace | None = None
    bold: FontFace | None = None
    mono: FontFace | None = None

    def is_complete(self) -> bool:
        return self.regular is not None and self.bold is not None and self.mono is not None


@dataclass(frozen=True)
class FontConfig:
    regular_path: str | None = None
    bold_path: str | None = None
    mono_path: str | None = None
    size: float = 16.0


def _load_face(source: str | Path, size_px: float) -> FontFace:
    try:
        font = ImageFont.truetype(str(source), size_px)
    except OSError as e:
        raise FontError(f"Failed to load font {source}: {e}") from e
    return FontFace(font=font, base_size=size_px, name=Path(str(source)).name)


def _builtin_face(size_px: float) -> FontFace:
    font = ImageFont.load_default(size=size_px)
    if not isinstance(font, ImageFont.FreeTypeFont):
        raise FontError("Pillow was built without FreeType support; pass explicit font paths")
    return FontFace(font=font, base_size=size_px, name="pillow-default")


def _default_face(role: str, size_px: float) -> FontFace:
    candidates = _DEFAULT_FONTS.get(role, ())
    if FONT_DIR is not None:
        for filename in candidates:
            path = FONT_DIR / filename
            if path.exists():
                return _load_face(path, size_px)
    for filename in candidates:
        try:
            return _load_face(filename, size_px)
        except FontError:
            continue
    log.info("No system font found for %s role; using Pillow's built-in face", role)
    return _builtin_face(size_px)


def _explicit_or_default(path: str | None, role: str, size_px: float) -> FontFace:
    if path:
        if not Path(path).exists():
            raise FontError(f"Font file not found: {path}")
        return _load_face(path, size_px)
    return _default_face(role, size_px)


def load_fonts(cfg: FontConfig) -> FontSet:
    size_px = (cfg.size if cfg.size > 0 else 16.0) * PX_PER_PT
    return FontSet(
        regular=_explicit_or_default(cfg.regular_path, "regular", size_px),
        bold=_explicit_or_default(cfg.bold_path, "bold", size_px),
        mono=_explicit_or_default(cfg.mono_path, "mono", size_px),
    )


def complete_fonts(fonts: FontSet | None, size_pt: float) -> FontSet:
    """Fill any unset role with the bundled default for that role."""
    fonts = fonts or FontSet()
    if fonts.is_complete():
        return fonts
    size_px = size_pt * PX_PER_PT
    return replace(
        fonts,
        regular=fonts.regular or _default_face("regular", size_px),
        bold=fonts.bold or _default_face("bold", size_px),
        mono=fonts.mono or _default_face("mono", size_px),
    )
