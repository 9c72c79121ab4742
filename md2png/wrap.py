from __future__ import annotations

from .fonts import FontFace
from .metrics import measure


def split_preserving_spaces(text: str) -> list[str]:
    """Split ``text`` into alternating whitespace / non-whitespace runs."""
    if not text:
        return []
    parts: list[str] = []
    buf = [text[0]]
    in_space = text[0].isspace()
    for ch in text[1:]:
        if ch.isspace() == in_space:
            buf.append(ch)
            continue
        parts.append("".join(buf))
        buf = [ch]
        in_space = ch.isspace()
    parts.append("".join(buf))
    return parts


def break_token(face: FontFace | None, size: float, token: str, max_width: float) -> list[str]:
    """Hard-break an unbroken token by character so every piece fits ``max_width``."""
    pieces: list[str] = []
    piece = ""
    for ch in token:
        if piece and measure(face, size, piece + ch) > max_width:
            pieces.append(piece)
            piece = ch
        else:
            piece += ch
    if piece:
        pieces.append(piece)
    return pieces


def wrap_lines(face: FontFace | None, size: float, text: str, max_width: float) -> list[str]:
    hard_lines = text.split("\n")
    if max_width <= 0:
        return hard_lines
    lines: list[str] = []
    for hard in hard_lines:
        if not hard:
            lines.append("")
            continue
        current = ""
        width = 0.0
        for tok in split_preserving_spaces(hard):
            w = measure(face, size, tok)
            if tok[0].isspace() or width + w <= max_width:
                current += tok
                width += w
                continue
            if current:
                lines.append(current)
                current = ""
                width = 0.0
            if w <= max_width:
                current = tok
                width = w
                continue
            pieces = break_token(face, size, tok, max_width)
            lines.extend(pieces[:-1])
            current = pieces[-1]
            width = measure(face, size, current)
        lines.append(current)
    return lines
