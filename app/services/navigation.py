"""Loads a URL into a page and waits until a client-rendered app has settled.

Both endpoints go through :meth:`NavigationController.prepare`:

1. ``goto`` waiting for network idle; on failure, ``goto`` again waiting
   only for ``DOMContentLoaded``.
2. Poll the readiness probe (document complete and no known app root marked
   ``aria-busy``). A timeout here is logged and ignored.
3. Scroll to the bottom and back, then pause, so lazy and animated content
   gets a chance to render.
"""

import asyncio
import logging

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from app.config import Settings
from app.errors import NavigationError, ReadinessTimeout

logger = logging.getLogger(__name__)

STRICT_WAIT = "networkidle"
FALLBACK_WAIT = "domcontentloaded"

# Component-framework root marker plus the two conventional container ids.
APP_ROOT_SELECTORS = ("[data-reactroot]", "#root", "#app")

READINESS_PROBE_JS = """
(selectors) => {
  if (document.readyState !== "complete") {
    return false;
  }
  return selectors.every((selector) => {
    const el = document.querySelector(selector);
    return !el || !el.hasAttribute("aria-busy");
  });
}
"""

SCROLL_SETTLE_JS = """
() => {
  window.scrollTo(0, document.body ? document.body.scrollHeight : 0);
  window.scrollTo(0, 0);
}
"""


class NavigationController:
    def __init__(self, settings: Settings) -> None:
        self.navigation_timeout_ms = settings.navigation_timeout_ms
        self.readiness_timeout_ms = settings.readiness_timeout_ms
        self.settle_delay_ms = settings.settle_delay_ms

    async def prepare(self, page: Page, url: str) -> bool:
        """Navigate, wait for readiness and settle the layout.

        Returns:
            ``True`` when the readiness probe passed, ``False`` when it timed
            out and the page is used as-is.

        Raises:
            NavigationError: if both navigation strategies fail.
        """
        await self.navigate(page, url)
        try:
            await self.wait_until_ready(page)
            ready = True
        except ReadinessTimeout as exc:
            logger.warning("%s for %s. Proceeding with current DOM state", exc, url)
            ready = False
        await self.settle(page)
        return ready

    async def navigate(self, page: Page, url: str) -> None:
        try:
            await page.goto(url, wait_until=STRICT_WAIT, timeout=self.navigation_timeout_ms)
            return
        except PlaywrightError as exc:
            logger.warning(
                "Initial navigation attempt failed for %s: %s. Retrying with %s...",
                url,
                exc,
                FALLBACK_WAIT,
            )

        try:
            await page.goto(url, wait_until=FALLBACK_WAIT, timeout=self.navigation_timeout_ms)
        except PlaywrightError as exc:
            logger.error("Fallback navigation failed for %s: %s", url, exc)
            raise NavigationError(str(exc), url=url) from exc

    async def wait_until_ready(self, page: Page) -> None:
        """Poll the readiness probe.

        Raises:
            ReadinessTimeout: if the probe does not pass in time.
        """
        try:
            await page.wait_for_function(
                READINESS_PROBE_JS,
                arg=list(APP_ROOT_SELECTORS),
                timeout=self.readiness_timeout_ms,
            )
        except PlaywrightError as exc:
            raise ReadinessTimeout(
                f"Wait for app content timed out after {self.readiness_timeout_ms} ms ({exc})",
                url=page.url,
            ) from exc

    async def settle(self, page: Page) -> None:
        await page.evaluate(SCROLL_SETTLE_JS)
        await asyncio.sleep(self.settle_delay_ms / 1000)
