import logging
import re
from typing import Callable, Dict, List, Optional, Tuple

from playwright.async_api import Page
from pydantic import ValidationError

from .errors import ExtractionItemError
from .models import NOT_AVAILABLE, ItemRecord, utc_timestamp
from .selectors import SNAPSHOT_ITEMS_JS, snapshot_args

log = logging.getLogger(__name__)

_DIGITS_RE = re.compile(r"[0-9]+")


def _title_at(position: int) -> Callable[[dict], Optional[str]]:
    def lookup(raw: dict) -> Optional[str]:
        titles = raw.get("titles") or []
        if position >= len(titles):
            return None
        text = (titles[position] or "").strip()
        return text or None
    return lookup


# Ordered lookups; the first non-empty value wins.
TITLE_STRATEGIES: List[Tuple[str, Callable[[dict], Optional[str]]]] = [
    ("desc", _title_at(0)),
    ("legacy_caption", _title_at(1)),
]


def resolve_title(raw: dict, index: int) -> Tuple[str, str]:
    """Return (title, strategy name); falls back to a positional placeholder."""
    for name, lookup in TITLE_STRATEGIES:
        value = lookup(raw)
        if value:
            return value, name
    return f"Item {index + 1}", "placeholder"


def _looks_like_count(text: str) -> bool:
    return "k" in text or "m" in text or bool(_DIGITS_RE.fullmatch(text))


def classify_stats(stats: List[dict]) -> Dict[str, str]:
    """Assign `.video-count` values by the icon markup just before them.

    Only counts that have a preceding sibling are considered. A `heart` icon
    marks likes, `comment` marks comments, anything else is views. Later
    matches overwrite earlier ones.
    """
    found: Dict[str, str] = {}
    for stat in stats:
        text = (stat.get("text") or "").lower()
        marker = stat.get("marker")
        if not _looks_like_count(text) or marker is None:
            continue
        if "heart" in marker:
            found["likes"] = text
        elif "comment" in marker:
            found["comments"] = text
        else:
            found["views"] = text
    return found


def resolve_stats(raw: dict) -> Tuple[Dict[str, str], Dict[str, str]]:
    """Return (values, strategy names) for likes, comments and views.

    Tier 1 classifies counts by icon. Tier 2 then overwrites likes and
    comments with the first two `<strong>` texts whenever there are at least
    two of them, regardless of what tier 1 found. The override is purely
    positional; tier 1 values for those two fields are discarded.
    """
    values = {"likes": NOT_AVAILABLE, "comments": NOT_AVAILABLE, "views": NOT_AVAILABLE}
    resolved = {k: "default" for k in values}

    for key, text in classify_stats(raw.get("stats") or []).items():
        values[key] = text
        resolved[key] = "icon_marker"

    strong = raw.get("strong") or []
    if len(strong) >= 2:
        values["likes"] = strong[0] or NOT_AVAILABLE
        values["comments"] = strong[1] or NOT_AVAILABLE
        resolved["likes"] = resolved["comments"] = "emphasis_position"

    return values, resolved


def build_record(raw: dict, index: int, extracted_at: Optional[str] = None) -> Optional[ItemRecord]:
    """Map one snapshot entry to an `ItemRecord`.

    Returns None when the link or the thumbnail is missing. Raises
    `ExtractionItemError` when the entry itself is malformed.
    """
    if not isinstance(raw, dict):
        raise ExtractionItemError(f"item {index}: expected an object, got {type(raw).__name__}")
    href = raw.get("href") or ""
    src = raw.get("src") or ""
    if not isinstance(href, str) or not isinstance(src, str):
        raise ExtractionItemError(f"item {index}: link or image is not a string")
    if not href or not src:
        return None

    try:
        title, title_source = resolve_title(raw, index)
        stats, stat_sources = resolve_stats(raw)
        return ItemRecord(
            url=href,
            title=title,
            thumbnail=src,
            likes=stats["likes"],
            comments=stats["comments"],
            views=stats["views"],
            extractedAt=extracted_at or utc_timestamp(),
            resolved_by={"url": "first_link", "thumbnail": "first_image", "title": title_source, **stat_sources},
        )
    except (AttributeError, TypeError, ValidationError) as e:
        raise ExtractionItemError(f"item {index}: {e}", cause=e) from e


def extract_records(
    snapshot: List[dict],
    clock: Optional[Callable[[], str]] = None,
    logger: Optional[logging.Logger] = None,
) -> List[ItemRecord]:
    """Build records for every usable item, keeping DOM order.

    `clock` returns the `extractedAt` stamp for each record; it defaults to
    the current UTC time.
    """
    logger = logger or log
    clock = clock or utc_timestamp
    records: List[ItemRecord] = []
    for index, raw in enumerate(snapshot):
        try:
            record = build_record(raw, index, clock())
        except ExtractionItemError as e:
            logger.warning("Skipping video entry: %s", e)
            continue
        if record is None:
            logger.debug("Item %d has no link or thumbnail, skipped", index + 1)
            continue
        records.append(record)
    return records


async def snapshot_items(page: Page) -> List[dict]:
    snapshot = await page.evaluate(SNAPSHOT_ITEMS_JS, snapshot_args())
    return list(snapshot or [])


async def extract_items(
    page: Page,
    clock: Optional[Callable[[], str]] = None,
    logger: Optional[logging.Logger] = None,
) -> List[ItemRecord]:
    """Snapshot the loaded grid once and extract every record from it."""
    logger = logger or log
    logger.info("Extracting video data...")
    snapshot = await snapshot_items(page)
    logger.info("Found %d video elements", len(snapshot))
    records = extract_records(snapshot, clock=clock, logger=logger)
    logger.info("Extracted %d videos", len(records))
    return records
