from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RenderMode(str, Enum):
    SCREENSHOT = "screenshot"
    SCRAPE = "scrape"


class Viewport(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int = Field(default=1920, gt=0)
    height: int = Field(default=1080, gt=0)
    device_scale_factor: float = Field(default=1, gt=0)


class RenderRequest(BaseModel):
    """A single page render, built once the ``url`` parameter is validated."""

    model_config = ConfigDict(frozen=True)

    url: str
    viewport: Viewport = Viewport()
    mode: RenderMode
    """Rendering path for the target URL.

    ``"screenshot"``
        Full-page PNG capture; every sub-resource is loaded.

    ``"scrape"``
        Structured content extraction; images, fonts and media are blocked
        before navigation starts.
    """
