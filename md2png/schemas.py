from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from .config import DEFAULT_FONT_SIZE, DEFAULT_MARGIN, DEFAULT_WIDTH


class RenderRequest(BaseModel):
    markdown: str
    width: int = Field(default=DEFAULT_WIDTH, ge=64, le=8192)
    margin: int = Field(default=DEFAULT_MARGIN, ge=1, le=1024)
    base_font_size: float = Field(default=DEFAULT_FONT_SIZE, gt=0, le=256)
    theme: Literal["light", "dark"] = "light"
    link_footnotes: bool = True
    image_footnotes: bool = False
    format: Literal["png", "jpeg"] = "png"


class HealthResponse(BaseModel):
    status: str
    default_width: int
    base_dir: str
