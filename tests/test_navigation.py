"""Tests for the two-stage navigation, readiness probe and settle step."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from app.config import Settings
from app.errors import NavigationError, ReadinessTimeout
from app.services.navigation import (
    APP_ROOT_SELECTORS,
    READINESS_PROBE_JS,
    SCROLL_SETTLE_JS,
    NavigationController,
)


def _page():
    page = MagicMock()
    page.url = "https://example.com/app"
    page.goto = AsyncMock()
    page.wait_for_function = AsyncMock()
    page.evaluate = AsyncMock()
    return page


@pytest.fixture
def controller():
    return NavigationController(Settings(settle_delay_ms=0))


class TestNavigate:
    @pytest.mark.asyncio
    async def test_strict_wait_succeeds(self, controller):
        page = _page()

        await controller.navigate(page, "https://example.com/app")

        page.goto.assert_awaited_once_with(
            "https://example.com/app", wait_until="networkidle", timeout=60_000
        )

    @pytest.mark.asyncio
    async def test_falls_back_to_domcontentloaded(self, controller):
        page = _page()
        page.goto.side_effect = [PlaywrightTimeoutError("Timeout 60000ms exceeded."), None]

        await controller.navigate(page, "https://example.com/app")

        assert page.goto.await_count == 2
        second = page.goto.await_args_list[1]
        assert second.kwargs == {"wait_until": "domcontentloaded", "timeout": 60_000}

    @pytest.mark.asyncio
    async def test_both_strategies_failing_raises(self, controller):
        page = _page()
        page.goto.side_effect = [
            PlaywrightTimeoutError("Timeout 60000ms exceeded."),
            PlaywrightError("net::ERR_NAME_NOT_RESOLVED"),
        ]

        with pytest.raises(NavigationError, match="ERR_NAME_NOT_RESOLVED") as info:
            await controller.navigate(page, "https://example.com/app")

        assert info.value.url == "https://example.com/app"
        assert info.value.status_code == 500


class TestReadiness:
    @pytest.mark.asyncio
    async def test_probe_checks_app_roots(self, controller):
        page = _page()

        await controller.wait_until_ready(page)

        page.wait_for_function.assert_awaited_once_with(
            READINESS_PROBE_JS, arg=list(APP_ROOT_SELECTORS), timeout=20_000
        )
        assert APP_ROOT_SELECTORS == ("[data-reactroot]", "#root", "#app")

    @pytest.mark.asyncio
    async def test_probe_timeout_raises_readiness_timeout(self, controller):
        page = _page()
        page.wait_for_function.side_effect = PlaywrightTimeoutError("Timeout 20000ms exceeded.")

        with pytest.raises(ReadinessTimeout):
            await controller.wait_until_ready(page)


class TestPrepare:
    @pytest.mark.asyncio
    async def test_ready_page(self, controller):
        page = _page()

        assert await controller.prepare(page, "https://example.com/app") is True
        page.evaluate.assert_awaited_once_with(SCROLL_SETTLE_JS)

    @pytest.mark.asyncio
    async def test_busy_app_root_degrades_but_continues(self, controller):
        page = _page()
        page.wait_for_function.side_effect = PlaywrightTimeoutError("Timeout 20000ms exceeded.")

        ready = await controller.prepare(page, "https://example.com/app")

        assert ready is False
        page.evaluate.assert_awaited_once_with(SCROLL_SETTLE_JS)

    @pytest.mark.asyncio
    async def test_fallback_navigation_then_readiness(self, controller):
        page = _page()
        page.goto.side_effect = [PlaywrightTimeoutError("Timeout 60000ms exceeded."), None]

        assert await controller.prepare(page, "https://example.com/app") is True
        page.wait_for_function.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_navigation_failure_skips_readiness(self, controller):
        page = _page()
        page.goto.side_effect = PlaywrightError("net::ERR_CONNECTION_REFUSED")

        with pytest.raises(NavigationError):
            await controller.prepare(page, "https://example.com/app")

        page.wait_for_function.assert_not_awaited()
        page.evaluate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_settle_pauses_after_scrolling(self):
        page = _page()
        controller = NavigationController(Settings(settle_delay_ms=1000))

        with patch("app.services.navigation.asyncio.sleep", new=AsyncMock()) as sleep:
            await controller.settle(page)

        page.evaluate.assert_awaited_once_with(SCROLL_SETTLE_JS)
        sleep.assert_awaited_once_with(1.0)
