"""Integration test fixtures.

The engine and tool handlers run against FakeDocument pages and an isolated
QueryCache with a settable clock; page and cache fixtures come from
tests/conftest.py. ``browser_page`` runs the in-page scripts in headless
Chromium and skips when no browser is installed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from pagequery.errors import ErrorCode, PageQueryError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from playwright.async_api import Page

    from tests.fakes import FakeDocument


@pytest.fixture()
def invalid_selector_error() -> PageQueryError:
    """What PlaywrightPage raises for a selector the browser cannot parse."""
    return PageQueryError(
        code=ErrorCode.EVALUATION_FAILED,
        message="SyntaxError: 'li[' is not a valid selector.",
        suggestion="Check the selector syntax.",
        recoverable=False,
    )


@pytest.fixture()
def broken_page(list_page: FakeDocument, invalid_selector_error: PageQueryError) -> FakeDocument:
    list_page.fail_with = invalid_selector_error
    return list_page


@pytest.fixture()
async def browser_page() -> AsyncGenerator[Page, None]:
    """A blank headless Chromium page at the default 1280x720 viewport."""
    from playwright.async_api import Error as PlaywrightError
    from playwright.async_api import async_playwright

    async with async_playwright() as p:
        try:
            browser = await p.chromium.launch(headless=True)
        except PlaywrightError as exc:
            pytest.skip(f"Chromium is not available: {exc.message}")
        page = await browser.new_page(viewport={"width": 1280, "height": 720})
        yield page
        await browser.close()
