from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it.tree import SyntaxTreeNode

from .canvas import Canvas
from .document import NodeKind, describe_node, heading_level, is_tight_list, list_start, node_kind
from .footnotes import FootnoteRegistry
from .logging_utils import get_logger
from .tables import build_table, draw_table, first_row_baseline
from .tokens import StyledToken, TextToken, TokenCollector

log = get_logger(__name__)

HEADING_SCALES = {1: 1.9, 2: 1.6, 3: 1.4, 4: 1.25, 5: 1.15}
LIST_INDENT_STEP = 1.5
LIST_MARKER_AREA = 2.2
MARKER_GAP = " " * 4
BULLET = "•"
QUOTE_INDENT = 16
CODE_SCALE = 0.95
FOOTNOTE_SCALE = 0.85
UNSUPPORTED_SCALE = 0.9


@dataclass
class ListContext:
    indent: int
    marker_area: int
    content_left: int
    ordered: bool
    counter: int
    tight: bool


@dataclass
class ListItemContext:
    marker: str
    drawn: bool = False


@dataclass
class RenderContext:
    """Mutable state for one render pass."""

    canvas: Canvas
    collector: TokenCollector
    base_size: float
    registry: FootnoteRegistry
    list_stack: list[ListContext] = field(default_factory=list)
    item_stack: list[ListItemContext] = field(default_factory=list)


class BlockRenderer:
    def __init__(self, ctx: RenderContext) -> None:
        self.ctx = ctx
        self.canvas = ctx.canvas
        self.collector = ctx.collector
        self.base = ctx.base_size
        self._handlers = {
            NodeKind.HEADING: self._heading,
            NodeKind.PARAGRAPH: self._paragraph,
            NodeKind.LIST: self._list,
            NodeKind.LIST_ITEM: self._list_item,
            NodeKind.TABLE: self._table,
            NodeKind.CODE_BLOCK: self._code_block,
            NodeKind.QUOTE: self._quote,
            NodeKind.THEMATIC_BREAK: self._thematic_break,
        }

    def render(self, root: SyntaxTreeNode) -> None:
        for child in root.children:
            self.render_block(child)
        self._footnotes()

    def render_block(self, node: SyntaxTreeNode) -> None:
        handler = self._handlers.get(node_kind(node), self._unsupported)
        handler(node)

    # ---- list state ----

    def current_list(self) -> ListContext | None:
        return self.ctx.list_stack[-1] if self.ctx.list_stack else None

    def current_item(self) -> ListItemContext | None:
        return self.ctx.item_stack[-1] if self.ctx.item_stack else None

    def _push_list(self, node: SyntaxTreeNode) -> ListContext:
        level = len(self.ctx.list_stack)
        step = int(self.base * LIST_INDENT_STEP)
        marker_area = int(self.base * LIST_MARKER_AREA)
        indent = self.canvas.margin + level * step
        ctx = ListContext(
            indent=indent,
            marker_area=marker_area,
            content_left=indent + marker_area,
            ordered=node.type == "ordered_list",
            counter=list_start(node),
            tight=is_tight_list(node),
        )
        self.ctx.list_stack.append(ctx)
        return ctx

    def _pop_list(self) -> None:
        if self.ctx.list_stack:
            self.ctx.list_stack.pop()
        self.canvas.advance(self.base * 0.5)

    def _begin_item(self) -> ListItemContext | None:
        ctx = self.current_list()
        if ctx is None:
            return None
        marker = BULLET
        if ctx.ordered:
            marker = f"{ctx.counter}."
            ctx.counter += 1
        item = ListItemContext(marker)
        self.ctx.item_stack.append(item)
        return item

    def _end_item(self) -> None:
        ctx = self.current_list()
        item = self.current_item()
        if item is None:
            return
        if ctx is not None and not item.drawn:
            self._draw_marker(item, ctx)
            self.canvas.advance(self.base * 1.2)
        self.ctx.item_stack.pop()
        self.canvas.advance(self.base * (0.45 if ctx is not None and ctx.tight else 0.75))

    def _marker_token(self, text: str) -> TextToken:
        fonts = self.collector.fonts
        return TextToken(text, fonts.regular, self.base, self.collector.theme.foreground)

    def _draw_marker(self, item: ListItemContext, ctx: ListContext, baseline: int | None = None) -> None:
        token = self._marker_token(item.marker)
        self.canvas.draw_marker([token], ctx.indent, ctx.indent + ctx.marker_area, baseline)
        item.drawn = True

    def ensure_list_marker(self, baseline: int | None = None) -> None:
        """Paint a pending item marker on the first content line's ``baseline``."""
        ctx = self.current_list()
        item = self.current_item()
        if ctx is None or item is None or item.drawn:
            return
        self._draw_marker(item, ctx, baseline)

    def _content_left(self) -> int:
        ctx = self.current_list()
        return ctx.content_left if ctx is not None else self.canvas.margin

    def _block_left(self, baseline: int | None = None) -> int:
        self.ensure_list_marker(baseline)
        return self._content_left()

    def _leading_marker(self, tokens: list[StyledToken]) -> tuple[int, int | None]:
        """Prefix the pending item marker; returns (left, hang_left) for the block."""
        ctx = self.current_list()
        if ctx is None:
            return self.canvas.margin, None
        item = self.current_item()
        if item is not None and not item.drawn:
            tokens.append(self._marker_token(item.marker))
            tokens.append(self._marker_token(MARKER_GAP))
            item.drawn = True
            return ctx.indent, ctx.content_left
        return ctx.content_left, None

    # ---- blocks ----

    def _heading(self, node: SyntaxTreeNode) -> None:
        level = heading_level(node)
        size = self.base * HEADING_SCALES.get(level, HEADING_SCALES[5])
        tokens: list[StyledToken] = []
        left, hang = self._leading_marker(tokens)
        fonts = self.collector.fonts
        self.collector.collect(node, fonts.bold or fonts.regular, size, self.collector.theme.foreground, out=tokens)
        self.canvas.advance(self.base * 0.6)
        self.canvas.draw_token_lines(tokens, left, self.canvas.content_right, hang)
        self.canvas.advance(self.base * 0.75)

    def _paragraph(self, node: SyntaxTreeNode) -> None:
        content = self.collector.collect(node, self.collector.fonts.regular, self.base, self.collector.theme.foreground)
        if not content:
            return
        tokens: list[StyledToken] = []
        left, hang = self._leading_marker(tokens)
        tokens.extend(content)
        self.canvas.draw_token_lines(tokens, left, self.canvas.content_right, hang)
        if self.current_list() is not None:
            self.canvas.advance(self.base * 0.6)
        else:
            self.canvas.advance(self.base * 1.5)

    def _list(self, node: SyntaxTreeNode) -> None:
        self.canvas.advance(self.base * 0.3)
        self.ensure_list_marker(self.canvas.cursor_y + round(self.base))
        self._push_list(node)
        for item in node.children:
            self.render_block(item)
        self._pop_list()

    def _list_item(self, node: SyntaxTreeNode) -> None:
        if self._begin_item() is None:
            self._unsupported(node)
            return
        for child in node.children:
            self.render_block(child)
        self._end_item()

    def _code_block(self, node: SyntaxTreeNode) -> None:
        text = node.content or ""
        if text.endswith("\n"):
            text = text[:-1]
        size = self.base * CODE_SCALE
        self.canvas.advance(4)
        left = self._block_left(self.canvas.code_block_baseline(size))
        self.canvas.draw_code_block(text, left, self.canvas.content_right, size)

    def _quote(self, node: SyntaxTreeNode) -> None:
        left = self._content_left()
        start = self.canvas.cursor_y
        tokens = self.collector.collect(node, self.collector.fonts.regular, self.base, self.collector.theme.foreground)
        if not tokens:
            self.ensure_list_marker()
            return
        self.canvas.advance(2)
        lines = self.canvas.layout_tokens(tokens, left + QUOTE_INDENT, self.canvas.content_right)
        self.ensure_list_marker(self.canvas.first_baseline(lines, self.canvas.cursor_y))
        self.canvas.draw_lines(lines)
        self.canvas.advance(6)
        self.canvas.draw_quote_bar(left, start + 2, self.canvas.cursor_y - start - 2)

    def _thematic_break(self, node: SyntaxTreeNode) -> None:
        self.canvas.draw_hrule()

    def _table(self, node: SyntaxTreeNode) -> None:
        model = build_table(node, self.collector, self.base)
        if model.column_count == 0:
            return
        self.canvas.advance(self.base * 0.6)
        left = self._block_left(first_row_baseline(self.canvas))
        draw_table(self.canvas, model, left, self.canvas.content_right)
        self.canvas.advance(self.base * 0.8)

    def _unsupported(self, node: SyntaxTreeNode) -> None:
        kind = describe_node(node)
        log.info("Unsupported block: %s", kind)
        left = self._content_left()
        token = TextToken(
            f"unsupported: {kind}",
            self.collector.fonts.regular,
            self.base * UNSUPPORTED_SCALE,
            self.collector.theme.warning,
        )
        lines = self.canvas.layout_tokens([token], left, self.canvas.content_right)
        self.ensure_list_marker(self.canvas.first_baseline(lines, self.canvas.cursor_y))
        self.canvas.draw_lines(lines)
        self.canvas.advance(self.base)

    def _footnotes(self) -> None:
        entries = self.ctx.registry.entries()
        if not entries:
            return
        self.canvas.advance(self.base * 0.5)
        self.canvas.draw_hrule()
        fonts = self.collector.fonts
        color = self.collector.theme.foreground
        for index, destination in entries:
            token = TextToken(f"[{index}] {destination}", fonts.regular, self.base * FOOTNOTE_SCALE, color)
            self.canvas.draw_token_lines([token], self.canvas.margin, self.canvas.content_right)
