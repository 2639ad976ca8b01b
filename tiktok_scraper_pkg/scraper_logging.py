import logging
import time
from pathlib import Path
from typing import List, Optional

from .config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure console logging once for CLI and API entry points."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def add_debug(debug_list: List[str], tag: str) -> None:
    """Append a debug tag to the in-flight list.

    Tags are short and structured (`Stage:detail`) so the response shows the
    path a run took without dumping page content.
    """
    debug_list.append(tag)


async def save_debug_files(page, directory: str, prefix: str = "debug") -> Optional[dict]:
    """Save a full-page screenshot and the page HTML for diagnostics.

    Returns the written paths, or None if the page could not be captured.
    Only used when a run is started with `debug` enabled.
    """
    try:
        ts = int(time.time())
        base = Path(directory)
        base.mkdir(parents=True, exist_ok=True)
        screenshot_path = base / f"{prefix}_{ts}.png"
        html_path = base / f"{prefix}_{ts}.html"
        await page.screenshot(path=str(screenshot_path), full_page=True)
        html_path.write_text(await page.content(), encoding="utf-8")
        return {"screenshot": str(screenshot_path), "html": str(html_path)}
    except Exception as e:
        logging.getLogger(__name__).warning("Could not save debug files: %s", e)
        return None
