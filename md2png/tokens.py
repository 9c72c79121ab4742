from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it.tree import SyntaxTreeNode
from PIL import Image

from .document import NodeKind, is_autolink, is_strong, node_kind
from .fonts import FontFace, FontSet
from .footnotes import FootnoteRegistry
from .images import ImageResolveError, ImageResolver
from .logging_utils import get_logger
from .theme import RGB, Theme

log = get_logger(__name__)

FOOTNOTE_MARKER_SCALE = 0.75
CODE_SPAN_SCALE = 0.95


@dataclass(frozen=True)
class TextToken:
    text: str
    face: FontFace
    size: float
    color: RGB
    underline: bool = False


@dataclass(frozen=True)
class LineBreakToken:
    pass


@dataclass(frozen=True)
class ImageToken:
    image: Image.Image = field(compare=False)
    centered: bool = True


StyledToken = TextToken | LineBreakToken | ImageToken

LINE_BREAK = LineBreakToken()


def _plain_text(node: SyntaxTreeNode) -> str:
    parts: list[str] = []
    for child in node.children:
        kind = node_kind(child)
        if kind in (NodeKind.TEXT, NodeKind.CODE_SPAN):
            parts.append(child.content)
        elif kind is NodeKind.LINE_BREAK:
            parts.append(" ")
        else:
            parts.append(_plain_text(child))
    return "".join(parts)


class TokenCollector:
    """Flattens inline nodes into styled tokens, registering footnotes on the way."""

    def __init__(
        self,
        fonts: FontSet,
        theme: Theme,
        *,
        registry: FootnoteRegistry,
        resolver: ImageResolver | None = None,
        link_footnotes: bool = True,
        image_footnotes: bool = False,
    ) -> None:
        self.fonts = fonts
        self.theme = theme
        self.registry = registry
        self.resolver = resolver
        self.link_footnotes = link_footnotes
        self.image_footnotes = image_footnotes

    def collect(
        self,
        node: SyntaxTreeNode,
        face: FontFace | None,
        size: float,
        color: RGB,
        underline: bool = False,
        out: list[StyledToken] | None = None,
    ) -> list[StyledToken]:
        if out is None:
            out = []
        face = face or self.fonts.regular
        children = node.children
        for i, child in enumerate(children):
            kind = node_kind(child)
            if kind is NodeKind.TEXT:
                self._text(child.content, face, size, color, underline, out)
            elif kind is NodeKind.LINE_BREAK:
                out.append(LINE_BREAK)
            elif kind is NodeKind.PARAGRAPH:
                self.collect(child, face, size, color, underline, out)
                if i < len(children) - 1:
                    out.append(LINE_BREAK)
            elif kind is NodeKind.EMPHASIS:
                next_face = face
                if is_strong(child) and self.fonts.bold is not None:
                    next_face = self.fonts.bold
                self.collect(child, next_face, size, color, underline, out)
            elif kind is NodeKind.LINK:
                self._link(child, face, size, color, out)
            elif kind is NodeKind.IMAGE:
                self._image(child, face, size, color, out)
            elif kind is NodeKind.CODE_SPAN:
                mono = self.fonts.mono or face
                if child.content:
                    out.append(TextToken(child.content, mono, size * CODE_SPAN_SCALE, color, underline))
            elif kind is NodeKind.CODE_BLOCK:
                self._text(child.content.rstrip("\n"), self.fonts.mono or face, size * CODE_SPAN_SCALE, color, underline, out)
            elif child.children:
                self.collect(child, face, size, color, underline, out)
        return out

    def _text(self, text: str, face: FontFace, size: float, color: RGB, underline: bool, out: list[StyledToken]) -> None:
        if not text:
            return
        parts = text.split("\n")
        for i, part in enumerate(parts):
            if part:
                out.append(TextToken(part, face, size, color, underline))
            if i < len(parts) - 1:
                out.append(LINE_BREAK)

    def _footnote_marker(self, destination: str, face: FontFace, size: float, color: RGB, out: list[StyledToken]) -> None:
        index = self.registry.register(destination)
        out.append(TextToken(f"[{index}]", face, size * FOOTNOTE_MARKER_SCALE, color))

    def _link(self, node: SyntaxTreeNode, face: FontFace, size: float, color: RGB, out: list[StyledToken]) -> None:
        href = str(node.attrs.get("href") or "")
        if node.children:
            self.collect(node, face, size, self.theme.link, True, out)
        elif is_autolink(node):
            out.append(TextToken(href, face, size, self.theme.link, True))
        if self.link_footnotes and href.strip():
            self._footnote_marker(href, face, size, color, out)

    def _image(self, node: SyntaxTreeNode, face: FontFace, size: float, color: RGB, out: list[StyledToken]) -> None:
        src = str(node.attrs.get("src") or "").strip()
        alt = _plain_text(node).strip()
        image: Image.Image | None = None
        if self.resolver is not None and src:
            try:
                image = self.resolver.resolve(src)
            except ImageResolveError as e:
                log.warning("Image unavailable (%s): %s", src, e)
        if image is not None:
            out.append(ImageToken(image, centered=True))
        elif alt:
            out.append(TextToken(alt, face, size, color))
        else:
            out.append(TextToken(src or "[image]", face, size, self.theme.warning))
        if self.image_footnotes and src:
            self._footnote_marker(src, face, size, color, out)
