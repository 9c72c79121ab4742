from __future__ import annotations

import io
from pathlib import Path

from PIL import Image

JPEG_QUALITY = 92

_EXTENSIONS = {
    ".png": "png",
    ".jpg": "jpeg",
    ".jpeg": "jpeg",
}

MEDIA_TYPES = {
    "png": "image/png",
    "jpeg": "image/jpeg",
}


class UnsupportedFormatError(RuntimeError):
    pass


def format_for_path(path: Path | str) -> str:
    ext = Path(path).suffix.lower()
    fmt = _EXTENSIONS.get(ext)
    if fmt is None:
        raise UnsupportedFormatError(f"unsupported output extension: {ext or '(none)'}")
    return fmt


def _write(image: Image.Image, fp, fmt: str) -> None:
    if fmt == "png":
        image.save(fp, format="PNG")
    elif fmt == "jpeg":
        image.convert("RGB").save(fp, format="JPEG", quality=JPEG_QUALITY)
    else:
        raise UnsupportedFormatError(f"unsupported output format: {fmt}")


def encode_image(image: Image.Image, fmt: str = "png") -> bytes:
    buf = io.BytesIO()
    _write(image, buf, fmt.lower())
    return buf.getvalue()


def save_image(image: Image.Image, path: Path | str) -> Path:
    out = Path(path)
    fmt = format_for_path(out)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("wb") as f:
        _write(image, f, fmt)
    return out
