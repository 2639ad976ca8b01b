"""Shared pytest fixtures: fake Playwright pages and sessions.

The fakes answer `page.evaluate` by matching the script constants from
`tiktok_scraper_pkg.selectors`, so tests exercise the real pipeline code
without a browser or network.
"""
from __future__ import annotations

import copy
import sys
from pathlib import Path
from typing import List, Optional

import pytest
from playwright.async_api import Error as PlaywrightError

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tiktok_scraper_pkg.selectors import (  # noqa: E402
    COUNT_ITEMS_JS,
    HAS_POST_LIST_JS,
    SCROLL_TO_BOTTOM_JS,
    SNAPSHOT_ITEMS_JS,
)

FIXED_TS = "2024-05-01T12:00:00.000Z"


class FakePage:
    """Scripted stand-in for `playwright.async_api.Page`.

    `counts` is returned one value per measurement; once exhausted the last
    value repeats, like a page that has nothing more to load.
    """

    def __init__(
        self,
        counts: Optional[List[int]] = None,
        items: Optional[List[dict]] = None,
        has_list: bool = True,
        goto_error: Optional[BaseException] = None,
        scroll_error_at: Optional[int] = None,
    ) -> None:
        self.counts = list(counts or [0])
        self.items = items or []
        self.has_list = has_list
        self.goto_error = goto_error
        self.scroll_error_at = scroll_error_at
        self.goto_calls: List[dict] = []
        self.waits: List[int] = []
        self.count_calls = 0
        self.scrolls = 0
        self.closed = False

    async def goto(self, url, wait_until=None, timeout=None):
        self.goto_calls.append({"url": url, "wait_until": wait_until, "timeout": timeout})
        if self.goto_error is not None:
            raise self.goto_error

    async def wait_for_timeout(self, ms):
        self.waits.append(ms)

    async def evaluate(self, script, arg=None):
        if script == HAS_POST_LIST_JS:
            return self.has_list
        if script == COUNT_ITEMS_JS:
            value = self.counts[min(self.count_calls, len(self.counts) - 1)]
            self.count_calls += 1
            return value
        if script == SCROLL_TO_BOTTOM_JS:
            self.scrolls += 1
            if self.scroll_error_at is not None and self.scrolls >= self.scroll_error_at:
                raise PlaywrightError("Target page, context or browser has been closed")
            return None
        if script == SNAPSHOT_ITEMS_JS:
            return copy.deepcopy(self.items)
        raise AssertionError(f"unexpected script: {script!r}")

    async def screenshot(self, path, full_page=False):
        Path(path).write_bytes(b"")

    async def content(self):
        return "<html><body></body></html>"

    async def close(self):
        self.closed = True


class FakeSession:
    def __init__(self, page: FakePage) -> None:
        self.page = page
        self.close_calls = 0

    async def close(self):
        self.close_calls += 1
        await self.page.close()


def make_item(
    n: int,
    href: Optional[str] = "default",
    src: Optional[str] = "default",
    titles: Optional[list] = None,
    stats: Optional[list] = None,
    strong: Optional[list] = None,
) -> dict:
    """Snapshot entry shaped like the output of SNAPSHOT_ITEMS_JS."""
    return {
        "href": f"https://www.tiktok.com/@someone/video/{7000 + n}" if href == "default" else (href or ""),
        "src": f"https://p16-sign.tiktokcdn.com/thumb_{n}.jpeg" if src == "default" else (src or ""),
        "titles": titles if titles is not None else [f"clip number {n}", None],
        "stats": stats or [],
        "strong": strong or [],
    }


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_TS


@pytest.fixture
def session_factory_for():
    """Build a session factory around a page; the session is exposed for asserts."""

    def _make(page: FakePage):
        session = FakeSession(page)

        async def factory(headless=None):
            return session

        factory.session = session
        return factory

    return _make
