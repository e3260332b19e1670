"""One render pipeline shared by the screenshot and scrape endpoints."""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from app.config import get_settings
from app.errors import CaptureError
from app.models.content import ExtractedContent
from app.models.request import RenderMode, RenderRequest
from app.services.browser_manager import build_session_provider
from app.services.extractor import ContentExtractor, build_extractor
from app.services.navigation import NavigationController
from app.services.resource_filter import ResourceFilter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScreenshotArtifact:
    png: bytes
    degraded: bool = False


@dataclass(frozen=True)
class ScrapeResult:
    content: ExtractedContent
    degraded: bool = False


class RenderService:
    def __init__(self, provider, navigator: NavigationController, extractor: ContentExtractor) -> None:
        self.provider = provider
        self.navigator = navigator
        self.extractor = extractor

    async def render(self, request: RenderRequest) -> Union[ScreenshotArtifact, ScrapeResult]:
        """Run *request* in its own browser session.

        The session is closed before this returns or raises, so the caller
        never holds a live browser while sending its response.
        """
        async with self.provider.session(request.viewport) as session:
            page = session.page
            resource_filter = None
            if request.mode is RenderMode.SCRAPE:
                # Installed before goto so early requests are filtered too.
                resource_filter = ResourceFilter()
                await resource_filter.install(page)

            ready = await session.guard(self.navigator.prepare(page, request.url))
            degraded = not ready

            if request.mode is RenderMode.SCREENSHOT:
                png = await session.guard(self._capture(page, request.url))
                logger.info("Captured %d byte screenshot of %s", len(png), request.url)
                return ScreenshotArtifact(png=png, degraded=degraded)

            content = await session.guard(self.extractor.extract(page))
            resource_filter.log_summary(request.url)
            return ScrapeResult(content=content, degraded=degraded)

    async def _capture(self, page: Page, url: str) -> bytes:
        try:
            return await page.screenshot(full_page=True, type="png")
        except PlaywrightError as exc:
            raise CaptureError(str(exc), url=url) from exc


@lru_cache()
def get_render_service() -> RenderService:
    settings = get_settings()
    return RenderService(
        provider=build_session_provider(settings),
        navigator=NavigationController(settings),
        extractor=build_extractor(settings.extraction_backend),
    )
