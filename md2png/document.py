from __future__ import annotations

from enum import Enum

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode
from mdit_py_plugins.container import container_plugin

# Any "::: <name>" fence becomes a container_directive node.
DIRECTIVE_CONTAINER = "directive"


class NodeKind(Enum):
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST = "list"
    LIST_ITEM = "list_item"
    TABLE = "table"
    CODE_BLOCK = "code_block"
    QUOTE = "quote"
    THEMATIC_BREAK = "thematic_break"
    TEXT = "text"
    LINE_BREAK = "line_break"
    EMPHASIS = "emphasis"
    LINK = "link"
    IMAGE = "image"
    CODE_SPAN = "code_span"
    UNSUPPORTED = "unsupported"


_KINDS = {
    "heading": NodeKind.HEADING,
    "paragraph": NodeKind.PARAGRAPH,
    "bullet_list": NodeKind.LIST,
    "ordered_list": NodeKind.LIST,
    "list_item": NodeKind.LIST_ITEM,
    "table": NodeKind.TABLE,
    "code_block": NodeKind.CODE_BLOCK,
    "fence": NodeKind.CODE_BLOCK,
    "blockquote": NodeKind.QUOTE,
    "hr": NodeKind.THEMATIC_BREAK,
    "text": NodeKind.TEXT,
    "softbreak": NodeKind.LINE_BREAK,
    "hardbreak": NodeKind.LINE_BREAK,
    "em": NodeKind.EMPHASIS,
    "strong": NodeKind.EMPHASIS,
    "link": NodeKind.LINK,
    "image": NodeKind.IMAGE,
    "code_inline": NodeKind.CODE_SPAN,
}


def node_kind(node: SyntaxTreeNode) -> NodeKind:
    return _KINDS.get(node.type, NodeKind.UNSUPPORTED)


def describe_node(node: SyntaxTreeNode) -> str:
    if node.type.startswith("container_"):
        name = str(node.info or "").strip().split(" ", 1)[0]
        return f"{node.type[len('container_'):]} {name}".strip()
    return node.type


def is_strong(node: SyntaxTreeNode) -> bool:
    return node.type == "strong" or len(node.markup or "") >= 2


def is_autolink(node: SyntaxTreeNode) -> bool:
    return node.markup in {"autolink", "linkify"}


def heading_level(node: SyntaxTreeNode) -> int:
    tag = node.tag or ""
    if tag.startswith("h") and tag[1:].isdigit():
        return int(tag[1:])
    return 2


def list_start(node: SyntaxTreeNode) -> int:
    raw = node.attrs.get("start") if node.attrs else None
    if raw is None:
        return 1
    try:
        start = int(raw)
    except (TypeError, ValueError):
        return 1
    return start if start > 0 else 1


def is_tight_list(node: SyntaxTreeNode) -> bool:
    # markdown-it hides the paragraph tokens of tight list items.
    for item in node.children:
        for child in item.children:
            if child.type == "paragraph" and not child.hidden:
                return False
    return True


def _accept_any_directive(params: str, *args) -> bool:
    return bool(params.strip())


def _raw_link(url: str) -> str:
    return url


def _build_markdown_parser() -> MarkdownIt:
    md = MarkdownIt("commonmark", {"html": False})
    # Destinations stay as written: they key footnotes and name files on disk.
    md.normalizeLink = _raw_link
    md.enable(["table", "strikethrough"])
    md.use(container_plugin, DIRECTIVE_CONTAINER, validate=_accept_any_directive)
    return md


_MD_PARSER: MarkdownIt | None = None


def _get_markdown_parser() -> MarkdownIt:
    global _MD_PARSER
    if _MD_PARSER is None:
        _MD_PARSER = _build_markdown_parser()
    return _MD_PARSER


def parse_markdown(text: str) -> SyntaxTreeNode:
    tokens = _get_markdown_parser().parse(str(text or ""))
    return SyntaxTreeNode(tokens)
