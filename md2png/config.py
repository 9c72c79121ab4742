from __future__ import annotations

import os
from pathlib import Path


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


DEFAULT_WIDTH = _env_int("MD2PNG_WIDTH", 1024)
DEFAULT_MARGIN = _env_int("MD2PNG_MARGIN", 48)
DEFAULT_FONT_SIZE = _env_float("MD2PNG_FONT_SIZE", 16.0)
DEFAULT_THEME = os.getenv("MD2PNG_THEME", "light")

REMOTE_TIMEOUT_S = _env_float("MD2PNG_REMOTE_TIMEOUT", 15.0)

FONT_DIR = Path(os.environ["MD2PNG_FONT_DIR"]) if os.getenv("MD2PNG_FONT_DIR") else None
BASE_DIR = Path(os.getenv("MD2PNG_BASE_DIR") or Path.cwd())

LOG_LEVEL = os.getenv("MD2PNG_LOG_LEVEL", "INFO").upper()

# The HTTP service only reads images under BASE_DIR; remote fetches are opt-in.
SERVICE_REMOTE_IMAGES = str(os.getenv("MD2PNG_SERVICE_REMOTE_IMAGES") or "").strip().lower() in ("1", "true", "yes", "y")

# Pixels per typographic point (96 DPI raster).
PX_PER_PT = 96.0 / 72.0


class RenderConfigError(RuntimeError):
    pass
