import logging
from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .config import NAV_TIMEOUT_MS, SETTLE_MS, profile_url
from .errors import NavigationTimeout, NetworkUnavailable, ProfileNotFound
from .selectors import HAS_POST_LIST_JS, POST_LIST_MARKERS

log = logging.getLogger(__name__)


async def navigate_to_profile(
    page: Page,
    username: str,
    timeout_ms: int = NAV_TIMEOUT_MS,
    settle_ms: int = SETTLE_MS,
    logger: Optional[logging.Logger] = None,
) -> Page:
    """Open the profile page and confirm a post list rendered.

    One attempt only. Waits for network idle, then a fixed settle interval
    for client-side rendering, then checks for any known post-list marker.

    Raises `NavigationTimeout` when the load exceeds `timeout_ms`,
    `NetworkUnavailable` on connection-level failures and `ProfileNotFound`
    when no marker is present (missing or private profile).
    """
    logger = logger or log
    url = profile_url(username)
    logger.info("Navigating to profile @%s (%s)", username, url)

    try:
        await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
    except PlaywrightTimeoutError as e:
        raise NavigationTimeout(f"Navigation timeout after {timeout_ms} ms: {url}", cause=e) from e
    except PlaywrightError as e:
        if "net::ERR_" in str(e):
            raise NetworkUnavailable(str(e), cause=e) from e
        raise

    await page.wait_for_timeout(settle_ms)

    if not await page.evaluate(HAS_POST_LIST_JS, POST_LIST_MARKERS):
        raise ProfileNotFound(f"Profile not found or private: @{username}")

    logger.info("Profile @%s loaded", username)
    return page
