from __future__ import annotations

import functools

from fastapi import FastAPI, HTTPException, Response

from .codec import MEDIA_TYPES, UnsupportedFormatError, encode_image
from .config import BASE_DIR, DEFAULT_WIDTH, SERVICE_REMOTE_IMAGES, RenderConfigError
from .fonts import FontSet, complete_fonts
from .logging_utils import get_logger
from .png_export import RenderOptions, render_markdown_to_image
from .schemas import HealthResponse, RenderRequest

log = get_logger(__name__)

app = FastAPI(title="md2png")


@functools.lru_cache(maxsize=16)
def _shared_fonts(size_pt: float) -> FontSet:
    # Faces are read-only during rendering, so requests share them.
    return complete_fonts(None, size_pt)


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", default_width=DEFAULT_WIDTH, base_dir=str(BASE_DIR))


@app.post("/render")
def render_endpoint(req: RenderRequest) -> Response:
    try:
        opts = RenderOptions(
            width=req.width,
            margin=req.margin,
            base_font_size=req.base_font_size,
            theme=req.theme,
            fonts=_shared_fonts(req.base_font_size),
            link_footnotes=req.link_footnotes,
            image_footnotes=req.image_footnotes,
            base_dir=BASE_DIR,
            confine_to_base_dir=True,
            allow_remote_images=SERVICE_REMOTE_IMAGES,
        )
        image = render_markdown_to_image(req.markdown, opts)
        body = encode_image(image, req.format)
    except (RenderConfigError, UnsupportedFormatError) as e:
        log.exception("Render failed")
        raise HTTPException(status_code=400, detail=str(e)) from e
    return Response(content=body, media_type=MEDIA_TYPES[req.format])
