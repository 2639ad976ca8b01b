#!/usr/bin/env python3
"""
TikTok Profile Scraper - CLI

Loads every video on a public TikTok profile by scrolling the grid until it
stops growing, extracts per-video metadata and saves it as JSON and CSV.

Usage:
    python scraper.py <USERNAME> [OPTIONS]

Example:
    python scraper.py charlidamelio
    python scraper.py @charlidamelio --output-dir data --max-scrolls 20
    python scraper.py https://www.tiktok.com/@charlidamelio --headless false --debug
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from tiktok_scraper_pkg import scraper_logging
from tiktok_scraper_pkg.browser import BrowserSession, open_session
from tiktok_scraper_pkg.config import (
    MAX_SCROLLS,
    NAV_TIMEOUT_MS,
    OUTPUT_DIR,
    PLACEHOLDER_USERNAME,
    SCROLL_DELAY_MS,
    SETTLE_MS,
    TIKTOK_USERNAME,
)
from tiktok_scraper_pkg.errors import WriteFailure, classify_error
from tiktok_scraper_pkg.extraction import extract_items
from tiktok_scraper_pkg.models import ScrapeRequest, ScrapeResult, normalize_username, utc_timestamp
from tiktok_scraper_pkg.navigation import navigate_to_profile
from tiktok_scraper_pkg.pagination import load_all_items
from tiktok_scraper_pkg.response import build_error, build_response
from tiktok_scraper_pkg.writers import write_csv, write_json

log = logging.getLogger("tiktok_scraper")

SessionFactory = Callable[..., Awaitable[BrowserSession]]


def save_outputs(
    result: ScrapeResult, output_dir: str, logger: Optional[logging.Logger] = None
) -> Tuple[Dict[str, str], List[str]]:
    """Run both writers; a failing format is logged and does not stop the other."""
    logger = logger or log
    files: Dict[str, str] = {}
    errors: List[str] = []
    for fmt, writer in (("json", write_json), ("csv", write_csv)):
        try:
            files[fmt] = str(writer(result, output_dir, logger=logger))
        except WriteFailure as e:
            logger.error("Error saving %s: %s", fmt.upper(), e)
            errors.append(str(e))
    return files, errors


async def scrape_profile(
    data: ScrapeRequest,
    session_factory: Optional[SessionFactory] = None,
    logger: Optional[logging.Logger] = None,
    clock: Optional[Callable[[], str]] = None,
) -> dict:
    """
    Scrape every video of the requested profile and save the outputs.

    Args:
        data: ScrapeRequest with the profile and loop settings
        session_factory: coroutine returning a BrowserSession; defaults to a
            fresh Playwright Chromium session
        logger: logger used by every stage
        clock: returns the `extractedAt` stamp for each record

    Returns:
        Summary dictionary (see `response.build_response` / `build_error`).
        Failures are reported in the summary, never raised.
    """
    logger = logger or log
    session_factory = session_factory or open_session
    debug_msg: List[str] = []
    session = None

    try:
        logger.info("Starting scrape of profile @%s", data.profile_id)
        session = await session_factory(headless=data.headless)
        page = session.page

        await navigate_to_profile(
            page,
            data.profile_id,
            timeout_ms=data.navigation_timeout_ms,
            settle_ms=data.settle_ms,
            logger=logger,
        )
        scraper_logging.add_debug(debug_msg, "Navigator:ok")

        report = await load_all_items(
            page,
            delay_ms=data.iteration_delay_ms,
            max_iterations=data.max_iterations,
            logger=logger,
        )
        scraper_logging.add_debug(
            debug_msg,
            f"Pagination:{report.iterations}x{report.final_count}" + (":aborted" if report.aborted else ""),
        )

        records = await extract_items(page, clock=clock, logger=logger)
        scraper_logging.add_debug(debug_msg, f"Extractor:{len(records)}")
        result = ScrapeResult(profile_id=data.profile_id, extracted_at=utc_timestamp(), items=records)

        debug_files = None
        if data.debug and not records:
            debug_files = await scraper_logging.save_debug_files(page, data.output_dir, "no_results")

        files: Dict[str, str] = {}
        write_errors: List[str] = []
        if data.write_files:
            files, write_errors = save_outputs(result, data.output_dir, logger)

        logger.info("Scraping complete: %d videos extracted", result.total_count)
        return build_response(data, result, files, debug_msg, write_errors, debug_files)

    except Exception as e:
        error = classify_error(e)
        logger.error("Scraping failed [%s]: %s", error.kind, error)
        logger.error("Hint: %s", error.hint)
        scraper_logging.add_debug(debug_msg, f"Error:{error.kind}")
        return build_error(data, error, debug_msg)

    finally:
        if session is not None:
            await session.close()
            logger.info("Browser closed")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="TikTok Profile Scraper - Save every video of a profile to JSON and CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s charlidamelio
  %(prog)s @charlidamelio --output-dir data --max-scrolls 20
  %(prog)s https://www.tiktok.com/@charlidamelio --headless false --debug
        """
    )
    parser.add_argument(
        "username",
        nargs="?",
        default=TIKTOK_USERNAME,
        help="TikTok username, @handle or profile URL (default: $TIKTOK_USERNAME)"
    )
    parser.add_argument(
        "--output-dir",
        "-o",
        default=OUTPUT_DIR,
        help=f"Directory for the JSON and CSV files (default: {OUTPUT_DIR})"
    )
    parser.add_argument(
        "--scroll-delay",
        type=int,
        default=SCROLL_DELAY_MS,
        help=f"Delay after each scroll in milliseconds (default: {SCROLL_DELAY_MS})"
    )
    parser.add_argument(
        "--max-scrolls",
        type=int,
        default=MAX_SCROLLS,
        help=f"Maximum number of scrolls (default: {MAX_SCROLLS})"
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=NAV_TIMEOUT_MS,
        help=f"Navigation timeout in milliseconds (default: {NAV_TIMEOUT_MS})"
    )
    parser.add_argument(
        "--settle",
        type=int,
        default=SETTLE_MS,
        help=f"Wait after navigation for client-side rendering, in ms (default: {SETTLE_MS})"
    )
    parser.add_argument(
        "--headless",
        type=lambda x: x.lower() in ("true", "1", "yes"),
        default=None,
        help="Run browser in headless mode (default: $SCRAPER_HEADLESS or true)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Verbose logs; save a screenshot and HTML when no videos are found"
    )
    parser.add_argument(
        "--strict-exit",
        action="store_true",
        help="Exit with status 1 when the scrape fails (default: always 0)"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point. Returns the process exit status."""
    args = build_parser().parse_args(argv)
    scraper_logging.configure_logging("DEBUG" if args.debug else scraper_logging.LOG_LEVEL)

    username = normalize_username(args.username or "")
    if not username or username == PLACEHOLDER_USERNAME:
        log.error("Please provide a TikTok username (argument or TIKTOK_USERNAME)")
        return 1

    try:
        request_data = ScrapeRequest(
            profile_id=username,
            output_dir=args.output_dir,
            iteration_delay_ms=args.scroll_delay,
            max_iterations=args.max_scrolls,
            navigation_timeout_ms=args.timeout,
            settle_ms=args.settle,
            headless=args.headless,
            debug=args.debug,
        )
    except ValueError as e:
        log.error("Invalid options: %s", e)
        return 1

    try:
        result = asyncio.run(scrape_profile(request_data))
    except KeyboardInterrupt:
        log.warning("Interrupted by user")
        return 130

    summary = {k: v for k, v in result.items() if k != "videos"}
    print(json.dumps(summary, indent=2))

    if "error" in result:
        log.error("Scraping failed: %s", result["error"])
        return 1 if args.strict_exit else 0
    log.info("Done: %d videos saved", result["total_videos"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
