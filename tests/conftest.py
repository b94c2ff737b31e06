"""Shared test fixtures for the pagequery test suite."""

from __future__ import annotations

import pytest

from pagequery.cache import QueryCache
from pagequery.config import Settings
from pagequery.state import AppState
from tests.fakes import FakeClock, FakeDocument, FakeElement


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def cache(clock: FakeClock) -> QueryCache:
    return QueryCache(max_age_seconds=60, max_entries=100, clock=clock)


@pytest.fixture()
def list_page() -> FakeDocument:
    """A page with 25 list items and a little surrounding markup."""
    elements = [
        FakeElement("html", rect=(0, 0, 1280, 2000)),
        FakeElement("body", rect=(0, 0, 1280, 2000)),
        FakeElement("ul", attributes=[("id", "items")], rect=(0, 0, 600, 1000)),
    ]
    elements += [
        FakeElement(
            "li",
            direct_text=f"Item {n}",
            attributes=[("class", "item"), ("data-n", str(n))],
            rect=(n * 40, 0, 600, 40),
        )
        for n in range(25)
    ]
    return FakeDocument(elements, url="https://example.com/list")


@pytest.fixture()
def form_page() -> FakeDocument:
    """A page whose weaker 'submit' match precedes the exact one in DOM order."""
    return FakeDocument(
        [
            FakeElement("p", direct_text="Please submit the form", rect=(10, 0, 400, 20)),
            FakeElement("div", direct_text="Submitted forms are archived", rect=(40, 0, 400, 20)),
            FakeElement("script", direct_text="submit()"),
            FakeElement("input", attributes=[("type", "submit"), ("value", "Go")], rect=(70, 0, 80, 30)),
            FakeElement("span", direct_text="Submit", rect=(0, 0, 0, 0)),
            FakeElement("button", direct_text="Submit", rect=(100, 0, 80, 30)),
        ],
        url="https://example.com/form",
    )


@pytest.fixture()
def app_state(cache: QueryCache, list_page: FakeDocument) -> AppState:
    """AppState wired with an isolated cache and the fake list page."""
    return AppState(settings=Settings(), cache=cache, page=list_page)
