"""Scroll-driven loading of the profile grid.

The grid is lazy-loaded and the endpoint never says it is exhausted, so
completion is inferred from the item count: the loop stops after
`STALL_LIMIT` consecutive measurements without growth, or at a hard
iteration cap for pages that keep changing.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from playwright.async_api import Page

from .config import MAX_SCROLLS, SCROLL_DELAY_MS, STALL_LIMIT
from .selectors import COUNT_ITEMS_JS, ITEM_SELECTOR, SCROLL_TO_BOTTOM_JS

log = logging.getLogger(__name__)


class LoadState(str, Enum):
    LOADING = "loading"
    STALLED = "stalled"
    DONE = "done"


class StallTracker:
    """Pure state machine behind the scroll loop.

    Call `observe(count)` once per measurement and `advance()` once the
    scroll for that iteration has been issued.
    """

    def __init__(self, max_iterations: int = MAX_SCROLLS, stall_limit: int = STALL_LIMIT) -> None:
        if max_iterations < 1:
            raise ValueError("max_iterations must be >= 1")
        self.max_iterations = max_iterations
        self.stall_limit = stall_limit
        self.previous_count = 0
        self.last_count = 0
        self.stall_count = 0
        self.iterations = 0
        self.state = LoadState.LOADING

    @property
    def done(self) -> bool:
        return self.state is LoadState.DONE

    def observe(self, count: int) -> LoadState:
        if self.done:
            return self.state
        if count == self.previous_count:
            self.stall_count += 1
        else:
            self.stall_count = 0
        self.last_count = count
        self.state = LoadState.STALLED if self.stall_count else LoadState.LOADING
        return self.state

    def advance(self) -> LoadState:
        if self.done:
            return self.state
        self.previous_count = self.last_count
        self.iterations += 1
        if self.stall_count >= self.stall_limit or self.iterations >= self.max_iterations:
            self.state = LoadState.DONE
        return self.state

    def abort(self) -> None:
        self.state = LoadState.DONE


@dataclass
class PaginationReport:
    iterations: int
    final_count: int
    stalled: bool
    aborted: bool = False
    counts: List[int] = field(default_factory=list)


async def count_items(page: Page, selector: str = ITEM_SELECTOR) -> int:
    return int(await page.evaluate(COUNT_ITEMS_JS, selector))


async def load_all_items(
    page: Page,
    delay_ms: int = SCROLL_DELAY_MS,
    max_iterations: int = MAX_SCROLLS,
    selector: str = ITEM_SELECTOR,
    logger: Optional[logging.Logger] = None,
) -> PaginationReport:
    """Scroll to the bottom until the item count stops growing.

    Any error inside an iteration ends the loop with whatever was
    loaded so far instead of failing the run.
    """
    logger = logger or log
    tracker = StallTracker(max_iterations=max_iterations)
    counts: List[int] = []
    aborted = False
    logger.info("Scrolling to load videos (max %d scrolls, %d ms delay)", max_iterations, delay_ms)

    while not tracker.done:
        try:
            current = await count_items(page, selector)
            counts.append(current)
            tracker.observe(current)
            logger.info("Videos loaded: %d (stall %d/%d)", current, tracker.stall_count, tracker.stall_limit)

            await page.evaluate(SCROLL_TO_BOTTOM_JS)
            await page.wait_for_timeout(delay_ms)
            tracker.advance()
        except Exception as e:
            logger.warning("Scroll interrupted, keeping %d loaded videos: %s", tracker.last_count, e)
            tracker.abort()
            aborted = True

    report = PaginationReport(
        iterations=tracker.iterations,
        final_count=tracker.last_count,
        stalled=tracker.stall_count >= tracker.stall_limit,
        aborted=aborted,
        counts=counts,
    )
    logger.info("Scrolling finished after %d scrolls with %d videos", report.iterations, report.final_count)
    return report
