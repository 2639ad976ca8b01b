"""Playwright session helpers for the profile scraper.

The scraper owns exactly one browser session per run. `open_session` builds
it and `BrowserSession.close` tears every layer down, so callers only need a
single `finally`.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, Route
from playwright.async_api import async_playwright

from .config import BLOCKED_RESOURCE_TYPES, HEADLESS, USER_AGENT

log = logging.getLogger(__name__)

VIEWPORT = {"width": 1366, "height": 768}


async def launch_browser(playwright: Playwright, headless: bool = True) -> Browser:
    """Launch Chromium with the flags needed for containers and CI runners."""
    return await playwright.chromium.launch(
        headless=headless,
        args=[
            "--no-sandbox",
            "--disable-setuid-sandbox",
            "--disable-dev-shm-usage",
            "--disable-accelerated-2d-canvas",
            "--no-first-run",
            "--no-zygote",
            "--disable-gpu",
            "--window-size=1366,768",
        ],
    )


async def new_context(browser: Browser, user_agent: Optional[str] = None) -> BrowserContext:
    """Create a desktop-sized context with a fixed desktop user agent."""
    return await browser.new_context(
        user_agent=user_agent or USER_AGENT,
        viewport=VIEWPORT,
        locale="en-US",
    )


async def block_resource_types(page: Page, resource_types: Iterable[str] = BLOCKED_RESOURCE_TYPES) -> None:
    """Abort requests for the given resource types; everything else continues.

    Blocking images does not affect extraction since thumbnails are read from
    the `src` attribute, not from the loaded bytes.
    """
    blocked = frozenset(resource_types)
    if not blocked:
        return

    async def _handle(route: Route):
        if route.request.resource_type in blocked:
            await route.abort()
        else:
            await route.continue_()

    await page.route("**/*", _handle)


@dataclass
class BrowserSession:
    playwright: Optional[Playwright] = None
    browser: Optional[Browser] = None
    context: Optional[BrowserContext] = None
    page: Optional[Page] = None

    async def close(self) -> None:
        """Close page, context, browser and driver, tolerating partial setup."""
        for label, closer in (
            ("page", self.page.close if self.page else None),
            ("context", self.context.close if self.context else None),
            ("browser", self.browser.close if self.browser else None),
            ("playwright", self.playwright.stop if self.playwright else None),
        ):
            if closer is None:
                continue
            try:
                await closer()
            except Exception as e:
                log.warning("Failed to close %s: %s", label, e)
        self.page = self.context = self.browser = self.playwright = None


async def open_session(headless: Optional[bool] = None) -> BrowserSession:
    """Start Playwright and return a session with one ready page.

    If any step fails the layers built so far are closed before the error
    propagates.
    """
    session = BrowserSession()
    try:
        session.playwright = await async_playwright().start()
        session.browser = await launch_browser(
            session.playwright, headless=HEADLESS if headless is None else headless
        )
        session.context = await new_context(session.browser)
        session.page = await session.context.new_page()
        await block_resource_types(session.page)
    except BaseException:
        await session.close()
        raise
    return session
