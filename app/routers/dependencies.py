from functools import lru_cache
from typing import Optional

from fastapi import Query

from app.config import Settings, get_settings
from app.models.request import RenderMode, RenderRequest, Viewport
from app.services.dispatcher import ScreenshotUploader
from app.services.url_validation import normalize_url

DEGRADED_HEADER = "X-Render-Degraded"


def target_url(
    url: Optional[str] = Query(
        default=None,
        description="Page to render. ``https://`` is assumed when no scheme is given.",
        examples=["example.com", "https://example.com/pricing"],
    ),
) -> str:
    """Validate the ``url`` query parameter before any browser is launched."""
    return normalize_url(url)


@lru_cache()
def get_uploader() -> ScreenshotUploader:
    return ScreenshotUploader(get_settings())


def build_render_request(url: str, mode: RenderMode, settings: Settings) -> RenderRequest:
    viewport = Viewport(
        width=settings.viewport_width,
        height=settings.viewport_height,
        device_scale_factor=settings.device_scale_factor,
    )
    return RenderRequest(url=url, viewport=viewport, mode=mode)


def degraded_headers(degraded: bool) -> dict:
    return {DEGRADED_HEADER: "true"} if degraded else {}
