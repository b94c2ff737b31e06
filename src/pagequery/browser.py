"""Playwright page runtime.

The lifespan owns the Playwright driver, browser and page. Tool handlers only
see ``PlaywrightPage``, which implements BrowserPageProtocol and turns
Playwright errors into PageQueryError.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import structlog
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from pagequery.errors import ErrorCode, PageQueryError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from playwright.async_api import Page

    from pagequery.config import BrowserSettings

log = structlog.get_logger()


class PlaywrightPage:
    """A Playwright ``Page`` seen through BrowserPageProtocol."""

    def __init__(self, page: Page) -> None:
        self._page = page

    @property
    def url(self) -> str:
        return self._page.url

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        """Run a script in the page. Raises PageQueryError on any runtime failure."""
        try:
            return await self._page.evaluate(expression, arg)
        except PlaywrightError as exc:
            raise PageQueryError(
                code=ErrorCode.EVALUATION_FAILED,
                message=exc.message,
                suggestion=(
                    "Check the selector syntax. If the page was closed or navigated, "
                    "navigate again before querying."
                ),
                recoverable=False,
            ) from exc

    async def goto(self, url: str) -> str:
        """Navigate and wait for the load event. Returns the final URL."""
        try:
            await self._page.goto(url, wait_until="load")
        except PlaywrightError as exc:
            raise PageQueryError(
                code=ErrorCode.NAVIGATION_FAILED,
                message=f"Navigation to {url} failed: {exc.message}",
                suggestion="Check the URL and that the site is reachable, then retry.",
                recoverable=True,
            ) from exc
        return self._page.url

    async def title(self) -> str:
        return await self._page.title()


@asynccontextmanager
async def open_browser(settings: BrowserSettings) -> AsyncGenerator[PlaywrightPage, None]:
    """Launch a browser with a single page and close everything on exit."""
    async with async_playwright() as playwright:
        browser_type = getattr(playwright, settings.browser_type)
        browser = await browser_type.launch(headless=settings.headless)
        try:
            context = await browser.new_context(
                viewport={"width": settings.viewport_width, "height": settings.viewport_height}
            )
            context.set_default_navigation_timeout(settings.navigation_timeout_seconds * 1000)
            page = await context.new_page()
            log.info(
                "browser_started",
                browser_type=settings.browser_type,
                headless=settings.headless,
            )
            yield PlaywrightPage(page)
        finally:
            await browser.close()
            log.info("browser_stopped")
