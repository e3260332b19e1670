"""Headless Chromium lifecycle: launch with retries, per-request sessions, teardown."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Optional, TypeVar

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from app.config import Settings
from app.errors import LaunchError, SessionLostError
from app.models.request import Viewport

logger = logging.getLogger(__name__)

T = TypeVar("T")

LAUNCH_ARGS = [
    # --no-sandbox is required when running as root inside a container
    # (Docker drops the user namespace needed by Chromium's sandbox).
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--disable-gpu",
    "--window-size=1920,1080",
    "--disable-web-security",
    "--disable-features=IsolateOrigins,site-per-process",
    "--no-zygote",
    "--single-process",
    "--no-first-run",
    "--disable-infobars",
    "--disable-notifications",
    "--disable-extensions",
    "--disable-sync",
    "--no-default-browser-check",
    "--ignore-certificate-errors",
    "--ignore-certificate-errors-spki-list",
    "--force-color-profile=srgb",
]


async def launch_browser(playwright: Playwright, settings: Settings) -> Browser:
    """Launch headless Chromium, retrying with linear backoff.

    Attempt *n* that fails waits ``launch_backoff_ms * n`` before the next one.

    Raises:
        LaunchError: after ``launch_max_attempts`` failures; chained to the
            last underlying error and carrying its message.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            browser = await playwright.chromium.launch(
                headless=True,
                args=LAUNCH_ARGS,
                timeout=settings.launch_timeout_ms,
            )
        except PlaywrightError as exc:
            logger.warning(
                "Browser launch attempt %d/%d failed: %s",
                attempt,
                settings.launch_max_attempts,
                exc,
            )
            if attempt >= settings.launch_max_attempts:
                logger.error("Giving up on browser launch after %d attempts", attempt)
                raise LaunchError(str(exc)) from exc
            await asyncio.sleep(settings.launch_backoff_ms * attempt / 1000)
            continue

        logger.info("Browser launched on attempt %d", attempt)
        return browser


class BrowserSession:
    """One browser process plus the single page used for one request.

    A crashed render target or a dropped control channel marks the session
    as lost: pending :meth:`guard` calls fail with :class:`SessionLostError`
    and teardown starts immediately.
    """

    def __init__(self, browser: Browser) -> None:
        self.browser = browser
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None
        self._lost = asyncio.Event()
        self._lost_reason = ""
        self._close_task: Optional[asyncio.Task] = None
        browser.on("disconnected", self._on_disconnected)

    async def open_page(self, viewport: Viewport, user_agent: str, timeout_ms: int) -> Page:
        self.context = await self.browser.new_context(
            viewport={"width": viewport.width, "height": viewport.height},
            device_scale_factor=viewport.device_scale_factor,
            user_agent=user_agent,
        )
        page = await self.context.new_page()
        page.set_default_timeout(timeout_ms)
        page.set_default_navigation_timeout(timeout_ms)
        page.on("crash", self._on_crash)
        page.on("pageerror", self._on_page_error)
        self.page = page
        return page

    @property
    def lost(self) -> bool:
        return self._lost.is_set()

    @property
    def closed(self) -> bool:
        return self._close_task is not None

    async def guard(self, work: Awaitable[T]) -> T:
        """Await *work*, abandoning it if the session is lost first."""
        if self.lost:
            if asyncio.iscoroutine(work):
                work.close()
            raise SessionLostError(self._lost_reason)

        task = asyncio.ensure_future(work)
        watcher = asyncio.ensure_future(self._lost.wait())
        try:
            done, _ = await asyncio.wait({task, watcher}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            watcher.cancel()
            if not task.done():
                task.cancel()
                await asyncio.wait({task})

        if task in done:
            return task.result()
        raise SessionLostError(self._lost_reason)

    async def close(self) -> None:
        """Close page, context and browser. Safe to call more than once."""
        if self._close_task is None:
            self._close_task = asyncio.ensure_future(self._teardown())
        await asyncio.shield(self._close_task)

    async def _teardown(self) -> None:
        for name, resource in (("page", self.page), ("context", self.context), ("browser", self.browser)):
            if resource is None:
                continue
            try:
                await resource.close()
            except Exception as exc:
                logger.error("Error closing %s: %s", name, exc)
        logger.debug("Browser session closed")

    def _mark_lost(self, reason: str) -> None:
        if self.lost:
            return
        self._lost_reason = reason
        self._lost.set()
        if self._close_task is None:
            self._close_task = asyncio.ensure_future(self._teardown())

    def _on_crash(self, page: Page) -> None:
        logger.error("Render target crashed: %s", page.url)
        self._mark_lost("Browser target crashed")

    def _on_disconnected(self, browser: Browser) -> None:
        # Our own teardown also fires "disconnected".
        if self.closed:
            return
        logger.error("Browser disconnected")
        self._mark_lost("Browser disconnected")

    def _on_page_error(self, error: PlaywrightError) -> None:
        logger.error("Page error: %s", error)


class DirectSessionProvider:
    """Launches a fresh browser for every request, with no concurrency cap."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    @asynccontextmanager
    async def session(self, viewport: Viewport) -> AsyncIterator[BrowserSession]:
        async with async_playwright() as playwright:
            browser = await launch_browser(playwright, self._settings)
            session = BrowserSession(browser)
            try:
                await session.open_page(
                    viewport,
                    user_agent=self._settings.user_agent,
                    timeout_ms=self._settings.navigation_timeout_ms,
                )
                yield session
            finally:
                await session.close()


class BoundedSessionProvider(DirectSessionProvider):
    """Same launch-per-request sessions, at most *max_sessions* alive at once."""

    def __init__(self, settings: Settings, max_sessions: int) -> None:
        super().__init__(settings)
        self.max_sessions = max_sessions
        self._slots = asyncio.Semaphore(max_sessions)

    @asynccontextmanager
    async def session(self, viewport: Viewport) -> AsyncIterator[BrowserSession]:
        if self._slots.locked():
            logger.info("All %d browser sessions busy; waiting for a free slot", self.max_sessions)
        async with self._slots:
            async with super().session(viewport) as session:
                yield session


def build_session_provider(settings: Settings) -> DirectSessionProvider:
    if settings.max_concurrent_sessions > 0:
        return BoundedSessionProvider(settings, settings.max_concurrent_sessions)
    return DirectSessionProvider(settings)
