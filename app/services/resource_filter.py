import logging

from playwright.async_api import Page, Route

logger = logging.getLogger(__name__)

BLOCKED_RESOURCE_TYPES = frozenset({"image", "font", "media"})


class ResourceFilter:
    """Aborts image, font and media requests; lets everything else through.

    Must be installed before the first ``goto`` so early requests are covered.
    """

    def __init__(self, blocked_types=BLOCKED_RESOURCE_TYPES) -> None:
        self.blocked_types = frozenset(blocked_types)
        self.aborted = 0
        self.allowed = 0

    async def install(self, page: Page) -> None:
        await page.route("**/*", self.handle)

    async def handle(self, route: Route) -> None:
        if route.request.resource_type in self.blocked_types:
            self.aborted += 1
            await route.abort()
            return
        self.allowed += 1
        await route.continue_()

    def log_summary(self, url: str) -> None:
        logger.info(
            "Resource filter for %s: %d blocked, %d allowed", url, self.aborted, self.allowed
        )
