"""Integration tests running the in-page scripts in headless Chromium.

FakeDocument answers the engine's scripts in Python; these tests load real
markup with ``page.set_content`` and send the same queries through
PlaywrightPage, so the JavaScript in pagequery.scripts is what runs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from pagequery.browser import PlaywrightPage
from pagequery.errors import ErrorCode, PageQueryError
from pagequery.models.tools import QueryDomInput
from pagequery.query import query_dom
from pagequery.scripts import REF_ATTRIBUTE

if TYPE_CHECKING:
    from playwright.async_api import Page

LIST_HTML = "<ul>" + "".join(f'<li class="item">Item {n}</li>' for n in range(1, 26)) + "</ul>"

FORM_HTML = (
    "<p>Please submit the form</p>"
    "<button>Submit</button>"
    '<script>var label = "submit";</script>'
    '<input type="submit" value="Go">'
    "<div>Outer <span>submit</span></div>"
)

_COUNT_REFS_JS = f"() => document.querySelectorAll('[{REF_ATTRIBUTE}]').length"
_COUNT_PARKED_JS = "() => Object.keys(window.__pagequeryMatches || {}).length"


async def _load(page: Page, html: str) -> PlaywrightPage:
    await page.set_content(html)
    return PlaywrightPage(page)


# ---------------------------------------------------------------------------
# Selector script
# ---------------------------------------------------------------------------


class TestSelectorScript:
    async def test_last_page_of_results(self, browser_page: Page) -> None:
        document = await _load(browser_page, LIST_HTML)

        result = await query_dom(
            document, QueryDomInput(selector="li", limit=10, offset=20), cache=None
        )

        assert result["total_count"] == 25
        assert result["returned_count"] == 5
        assert result["has_more"] is False
        assert [el["index"] for el in result["elements"]] == [20, 21, 22, 23, 24]
        assert result["elements"][0]["text_content"] == "Item 21"
        assert result["elements"][0]["attributes"]["class"] == "item"

    async def test_only_returned_slice_is_tagged(self, browser_page: Page) -> None:
        document = await _load(browser_page, LIST_HTML)

        await query_dom(document, QueryDomInput(selector="li", limit=3), cache=None)

        assert await browser_page.evaluate(_COUNT_REFS_JS) == 3

    async def test_refs_are_reused_across_queries(self, browser_page: Page) -> None:
        document = await _load(browser_page, LIST_HTML)

        first = await query_dom(document, QueryDomInput(selector="li", limit=3), cache=None)
        second = await query_dom(document, QueryDomInput(selector="li", limit=3), cache=None)

        first_refs = [el["ref"] for el in first["elements"]]
        assert all(ref.startswith("query-") for ref in first_refs)
        assert [el["ref"] for el in second["elements"]] == first_refs

    async def test_visibility_uses_the_viewport(self, browser_page: Page) -> None:
        document = await _load(
            browser_page,
            '<button>Top</button><button style="display:block; margin-top:2000px">Below</button>'
            '<button style="display:none">Hidden</button>',
        )

        result = await query_dom(document, QueryDomInput(selector="button"), cache=None)

        assert [el["is_visible"] for el in result["elements"]] == [True, False, False]

    async def test_truncation_keeps_whole_characters(self, browser_page: Page) -> None:
        document = await _load(browser_page, "<p>  ab\N{GRINNING FACE}cd  </p>")

        result = await query_dom(
            document, QueryDomInput(selector="p", max_text_length=3), cache=None
        )

        assert result["elements"][0]["text_content"] == "ab\N{GRINNING FACE}"

    async def test_invalid_selector_is_an_evaluation_error(self, browser_page: Page) -> None:
        document = await _load(browser_page, LIST_HTML)

        with pytest.raises(PageQueryError) as exc_info:
            await query_dom(document, QueryDomInput(selector="li["), cache=None)

        assert exc_info.value.code == ErrorCode.EVALUATION_FAILED
        assert exc_info.value.recoverable is False


# ---------------------------------------------------------------------------
# Search scripts
# ---------------------------------------------------------------------------


class TestSearchScripts:
    async def test_ranking_against_rendered_markup(self, browser_page: Page) -> None:
        document = await _load(browser_page, FORM_HTML)

        result = await query_dom(document, QueryDomInput(search_text="submit"), cache=None)

        ordered = [
            (el["tag_name"], el["text_content"], el["relevance_score"])
            for el in result["elements"]
        ]
        assert ordered == [
            ("button", "Submit", 115),
            ("span", "submit", 105),
            ("p", "Please submit the form", 35),
            ("input", "", 5),
        ]
        assert result["total_count"] == 4

    async def test_parked_nodes_are_released(self, browser_page: Page) -> None:
        document = await _load(browser_page, FORM_HTML)

        await query_dom(document, QueryDomInput(search_text="submit", limit=1), cache=None)
        await query_dom(document, QueryDomInput(search_text="checkout"), cache=None)

        assert await browser_page.evaluate(_COUNT_PARKED_JS) == 0

    async def test_refs_only_assigned_to_returned_page(self, browser_page: Page) -> None:
        document = await _load(browser_page, FORM_HTML)

        result = await query_dom(
            document, QueryDomInput(search_text="submit", limit=1), cache=None
        )

        assert result["elements"][0]["ref"].startswith("search-0-")
        assert await browser_page.evaluate(_COUNT_REFS_JS) == 1

    async def test_search_reuses_selector_refs(self, browser_page: Page) -> None:
        document = await _load(browser_page, LIST_HTML)

        selected = await query_dom(document, QueryDomInput(selector="li", limit=3), cache=None)
        found = await query_dom(
            document, QueryDomInput(search_text="Item 2", limit=1), cache=None
        )

        assert found["elements"][0]["text_content"] == "Item 2"
        assert found["elements"][0]["ref"] == selected["elements"][1]["ref"]
