from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it.tree import SyntaxTreeNode

from .canvas import Canvas
from .tokens import StyledToken, TokenCollector

CELL_PADDING = 6
MIN_COLUMN_WIDTH = 48
BORDER = 1

Cell = list[StyledToken]


@dataclass
class TableModel:
    header: list[Cell] | None = None
    rows: list[list[Cell]] = field(default_factory=list)

    @property
    def column_count(self) -> int:
        counts = [len(row) for row in self.rows]
        if self.header is not None:
            counts.append(len(self.header))
        return max(counts, default=0)


def _rows(node: SyntaxTreeNode) -> list[SyntaxTreeNode]:
    return [child for child in node.children if child.type == "tr"]


def build_table(node: SyntaxTreeNode, collector: TokenCollector, size: float) -> TableModel:
    model = TableModel()
    fonts = collector.fonts
    fg = collector.theme.foreground
    for section in node.children:
        if section.type == "thead":
            for tr in _rows(section):
                cells = [collector.collect(cell, fonts.bold or fonts.regular, size, fg) for cell in tr.children]
                if model.header is None:
                    model.header = cells
                else:
                    model.rows.append(cells)
        elif section.type == "tbody":
            for tr in _rows(section):
                model.rows.append([collector.collect(cell, fonts.regular, size, fg) for cell in tr.children])
    return model


def column_widths(total: int, count: int) -> list[int]:
    if count <= 0:
        return []
    width = max(MIN_COLUMN_WIDTH, total // count)
    return [width] * count


def first_row_baseline(canvas: Canvas) -> int:
    """Baseline of a base-size line in the first row drawn at the cursor."""
    return canvas.cursor_y + BORDER + CELL_PADDING + round(canvas.base_size)


def draw_table(canvas: Canvas, model: TableModel, left: int, right: int) -> None:
    cols = model.column_count
    if cols == 0:
        return
    widths = column_widths(right - left, cols)
    theme = canvas.theme
    table_right = left + sum(widths)
    rows: list[tuple[list[Cell], bool]] = []
    if model.header is not None:
        rows.append((model.header, True))
    rows.extend((row, False) for row in model.rows)

    top = canvas.cursor_y
    canvas.fill_rect(left, top, table_right, top + BORDER, theme.rule)
    y = top + BORDER
    for cells, is_header in rows:
        padded = list(cells) + [[] for _ in range(cols - len(cells))]
        laid_out = []
        x = left
        for tokens, width in zip(padded, widths):
            cell_left = x + CELL_PADDING
            cell_right = x + width - CELL_PADDING
            laid_out.append(canvas.layout_tokens(tokens, cell_left, cell_right))
            x += width
        content = max((canvas.lines_height(lines) for lines in laid_out), default=0)
        row_height = max(content, canvas.line_height(canvas.base_size)) + 2 * CELL_PADDING
        if is_header:
            canvas.fill_rect(left, y, table_right, y + row_height, theme.code_background)
        for lines in laid_out:
            canvas.paint_lines(lines, y + CELL_PADDING)
        y += row_height
        canvas.fill_rect(left, y, table_right, y + BORDER, theme.rule)
        y += BORDER

    x = left
    for width in widths:
        canvas.fill_rect(x, top, x + BORDER, y, theme.rule)
        x += width
    canvas.fill_rect(table_right - BORDER, top, table_right, y, theme.rule)
    canvas.cursor_y = y
