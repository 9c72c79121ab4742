from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from PIL import Image, ImageDraw, ImageFont

from .fonts import FontFace, FontSet
from .metrics import measure
from .theme import RGB, Theme
from .tokens import ImageToken, LineBreakToken, StyledToken
from .wrap import split_preserving_spaces, wrap_lines

LINE_HEIGHT = 1.5
UNDERLINE_OFFSET = 0.15
IMAGE_GAP = 8
CODE_PADDING = 10
QUOTE_BAR_WIDTH = 4
RULE_THICKNESS = 2
MIN_CONTENT_HEIGHT = 50
_INITIAL_HEIGHT = 2048


@dataclass
class Word:
    text: str
    face: FontFace
    size: float
    color: RGB
    underline: bool
    width: float


@dataclass
class TextLine:
    words: list[Word]
    left: float
    size: float
    height: int


@dataclass
class ImageLine:
    image: Image.Image = field(repr=False)
    left: int
    width: int
    height: int
    box_height: int


@dataclass
class BlankLine:
    height: int


Line = TextLine | ImageLine | BlankLine


@dataclass(frozen=True)
class LineMetrics:
    top: int
    baseline: int
    height: int


class Canvas:
    """Append-only drawing surface with a single downward-moving cursor."""

    def __init__(
        self,
        width: int,
        margin: int,
        theme: Theme,
        fonts: FontSet,
        base_size: float,
        *,
        initial_height: int = _INITIAL_HEIGHT,
    ) -> None:
        self.width = width
        self.margin = margin
        self.theme = theme
        self.fonts = fonts
        self.base_size = base_size
        self.cursor_y = margin
        self.image = Image.new("RGB", (width, max(initial_height, margin * 2 + MIN_CONTENT_HEIGHT)), theme.background)
        self._draw = ImageDraw.Draw(self.image)
        self._variants: dict[tuple[int, float], ImageFont.FreeTypeFont] = {}

    @property
    def content_right(self) -> int:
        return self.width - self.margin

    def line_height(self, size: float) -> int:
        height = int(size * LINE_HEIGHT + 0.5)
        if height <= 0:
            height = int(self.base_size * LINE_HEIGHT + 0.5)
        return height

    def advance(self, px: float) -> None:
        self.cursor_y += max(0, int(px))

    def _reserve(self, bottom: int) -> None:
        if bottom <= self.image.height:
            return
        new_height = max(bottom + _INITIAL_HEIGHT // 2, self.image.height * 2)
        grown = Image.new("RGB", (self.width, new_height), self.theme.background)
        grown.paste(self.image, (0, 0))
        self.image = grown
        self._draw = ImageDraw.Draw(self.image)

    def _variant(self, face: FontFace, size: float) -> ImageFont.FreeTypeFont:
        if size == face.base_size:
            return face.font
        key = (id(face.font), round(size, 2))
        font = self._variants.get(key)
        if font is None:
            font = face.font.font_variant(size=round(size, 2))
            self._variants[key] = font
        return font

    # ---- primitives ----

    def fill_rect(self, x0: float, y0: float, x1: float, y1: float, color: RGB) -> None:
        x0, y0, x1, y1 = int(round(x0)), int(round(y0)), int(round(x1)), int(round(y1))
        if x1 <= x0 or y1 <= y0:
            return
        self._reserve(y1)
        self._draw.rectangle((x0, y0, x1 - 1, y1 - 1), fill=color)

    def draw_text(self, x: float, baseline: float, text: str, face: FontFace, size: float, color: RGB) -> None:
        self._reserve(int(baseline + size) + 1)
        self._draw.text((x, baseline), text, font=self._variant(face, size), fill=color, anchor="ls")

    def draw_hrule(self) -> None:
        y = self.cursor_y + 4
        self.fill_rect(self.margin, y, self.content_right, y + RULE_THICKNESS, self.theme.rule)
        self.cursor_y = y + 10

    def draw_quote_bar(self, left: int, top: int, height: int) -> None:
        self.fill_rect(left, top, left + QUOTE_BAR_WIDTH, top + height, self.theme.quote_bar)

    def code_block_baseline(self, size: float) -> int:
        return self.cursor_y + CODE_PADDING + round(size)

    def draw_code_block(self, text: str, left: int, right: int, size: float) -> None:
        mono = self.fonts.mono or self.fonts.regular
        top = self.cursor_y
        lines = wrap_lines(mono, size, text, right - left - 2 * CODE_PADDING)
        line_height = self.line_height(size)
        height = len(lines) * line_height + 2 * CODE_PADDING
        self.fill_rect(left, top, right, top + height, self.theme.code_background)
        y = top + CODE_PADDING
        for ln in lines:
            if ln:
                self.draw_text(left + CODE_PADDING, y + round(size), ln, mono, size, self.theme.foreground)
            y += line_height
        self.cursor_y = top + height + 6

    # ---- token lines ----

    def layout_tokens(
        self,
        tokens: Sequence[StyledToken],
        left: float,
        right: float,
        hang_left: float | None = None,
    ) -> list[Line]:
        """Group styled tokens into visual lines without drawing anything.

        The first line starts at ``left``; later lines start at ``hang_left``
        when given.
        """
        hang = left if hang_left is None else hang_left
        lines: list[Line] = []
        words: list[Word] = []
        width = 0.0
        max_size = 0.0

        def line_left() -> float:
            return left if not lines else hang

        def limit() -> float:
            return right - line_left()

        def add(text: str, face: FontFace, size: float, color: RGB, underline: bool, w: float) -> None:
            nonlocal width, max_size
            words.append(Word(text, face, size, color, underline, w))
            width += w
            max_size = max(max_size, size)

        def flush(force: bool) -> None:
            nonlocal words, width, max_size
            if not words:
                if force:
                    lines.append(BlankLine(self.line_height(self.base_size)))
                return
            size = max_size or self.base_size
            lines.append(TextLine(words, line_left(), size, self.line_height(size)))
            words = []
            width = 0.0
            max_size = 0.0

        for tok in tokens:
            if isinstance(tok, LineBreakToken):
                flush(True)
                continue
            if isinstance(tok, ImageToken):
                flush(False)
                lines.append(self._image_line(tok, line_left(), right))
                continue
            face = tok.face or self.fonts.regular
            for seg in split_preserving_spaces(tok.text):
                seg_w = measure(face, tok.size, seg)
                if seg[0].isspace():
                    if words:
                        add(seg, face, tok.size, tok.color, tok.underline, seg_w)
                    continue
                if width + seg_w > limit() and words:
                    flush(False)
                if seg_w <= limit():
                    add(seg, face, tok.size, tok.color, tok.underline, seg_w)
                    continue
                piece = ""
                for ch in seg:
                    if piece and measure(face, tok.size, piece + ch) > limit():
                        add(piece, face, tok.size, tok.color, tok.underline, measure(face, tok.size, piece))
                        flush(False)
                        piece = ch
                    else:
                        piece += ch
                add(piece, face, tok.size, tok.color, tok.underline, measure(face, tok.size, piece))
        flush(False)
        return lines

    def _image_line(self, tok: ImageToken, left: float, right: float) -> ImageLine:
        avail = max(1, int(right - left))
        w, h = tok.image.size
        if w > avail:
            h = max(1, int(round(h * avail / w)))
            w = avail
        x = int(left)
        if tok.centered and w < avail:
            x += (avail - w) // 2
        return ImageLine(tok.image, x, w, h, h + IMAGE_GAP)

    def lines_height(self, lines: Sequence[Line]) -> int:
        return sum(line.box_height if isinstance(line, ImageLine) else line.height for line in lines)

    def paint_lines(self, lines: Sequence[Line], top: int) -> list[LineMetrics]:
        metrics: list[LineMetrics] = []
        y = top
        for line in lines:
            if isinstance(line, BlankLine):
                metrics.append(LineMetrics(y, y + round(self.base_size), line.height))
                y += line.height
            elif isinstance(line, ImageLine):
                self._paste(line, y)
                metrics.append(LineMetrics(y, y + line.height, line.box_height))
                y += line.box_height
            else:
                baseline = y + round(line.size)
                self._paint_words(line, baseline)
                metrics.append(LineMetrics(y, baseline, line.height))
                y += line.height
        return metrics

    def _paint_words(self, line: TextLine, baseline: int) -> None:
        x = line.left
        for word in line.words:
            self.draw_text(x, baseline, word.text, word.face, word.size, word.color)
            if word.underline and word.text.strip():
                uy = baseline + max(1, round(word.size * UNDERLINE_OFFSET))
                self.fill_rect(x, uy, x + word.width, uy + 1, word.color)
            x += word.width

    def _paste(self, line: ImageLine, top: int) -> None:
        img = line.image
        if img.size != (line.width, line.height):
            img = img.resize((line.width, line.height), Image.Resampling.LANCZOS)
        self._reserve(top + line.height)
        if img.mode == "RGBA":
            self.image.paste(img, (line.left, top), img)
        else:
            self.image.paste(img, (line.left, top))

    def first_baseline(self, lines: Sequence[Line], top: int) -> int:
        """Baseline that paint_lines would give the first of ``lines`` at ``top``."""
        if not lines or isinstance(lines[0], BlankLine):
            return top + round(self.base_size)
        if isinstance(lines[0], ImageLine):
            return top + lines[0].height
        return top + round(lines[0].size)

    def draw_lines(self, lines: Sequence[Line]) -> list[LineMetrics]:
        metrics = self.paint_lines(lines, self.cursor_y)
        self.cursor_y += self.lines_height(lines)
        return metrics

    def draw_token_lines(
        self,
        tokens: Sequence[StyledToken],
        left: float,
        right: float,
        hang_left: float | None = None,
    ) -> list[LineMetrics]:
        return self.draw_lines(self.layout_tokens(tokens, left, right, hang_left))

    def draw_marker(
        self,
        tokens: Sequence[StyledToken],
        left: float,
        right: float,
        baseline: int | None = None,
    ) -> list[LineMetrics]:
        """Paint tokens without moving the cursor.

        The first line sits on ``baseline`` when given, else at the cursor.
        """
        lines = self.layout_tokens(tokens, left, right)
        top = self.cursor_y
        if baseline is not None:
            top = baseline - self.first_baseline(lines, 0)
        return self.paint_lines(lines, top)

    def used_height(self) -> int:
        return max(self.cursor_y + self.margin, self.margin + MIN_CONTENT_HEIGHT)

    def finish(self) -> Image.Image:
        height = self.used_height()
        self._reserve(height)
        return self.image.crop((0, 0, self.width, height))
