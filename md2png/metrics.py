from __future__ import annotations

from .fonts import FontFace


def measure(face: FontFace | None, size: float, text: str) -> float:
    """Advance width of ``text`` in pixels when set at ``size``.

    Widths come from the face's base rasterization and scale linearly, so the
    same number is used for wrapping decisions and for advancing the pen.
    """
    if face is None or not text:
        return 0.0
    width = float(face.font.getlength(text))
    base = face.base_size if face.base_size > 0 else size
    if base <= 0:
        base = 1.0
    if size <= 0:
        size = base
    if size != base:
        width *= size / base
    return width
