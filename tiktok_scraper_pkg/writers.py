"""JSON and CSV output for a finished scrape.

The two writers are independent: each creates the output directory itself
and reports its own `WriteFailure`.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import WriteFailure
from .models import ItemRecord, ScrapeResult

log = logging.getLogger(__name__)

CSV_HEADER = ["URL", "Title", "Thumbnail", "Likes", "Comments", "Views", "ExtractedAt"]


def build_payload(result: ScrapeResult) -> Dict[str, Any]:
    return {
        "profile": result.profile_id,
        "totalVideos": result.total_count,
        "extractedAt": result.extracted_at,
        "videos": [item.model_dump(by_alias=True) for item in result.items],
    }


def quote_title(title: str) -> str:
    return '"' + title.replace('"', '""') + '"'


def csv_row(item: ItemRecord) -> str:
    """Only the title is quoted; other fields are written as-is.

    A comma or quote in any other field shifts the columns of that row.
    """
    return ",".join([
        item.resource_url,
        quote_title(item.title),
        item.thumbnail_url,
        item.like_count,
        item.comment_count,
        item.view_count,
        item.extracted_at,
    ])


def render_csv(result: ScrapeResult) -> str:
    lines: List[str] = [",".join(CSV_HEADER)]
    lines.extend(csv_row(item) for item in result.items)
    return "\n".join(lines)


def _write(path: Path, content: str, fmt: str) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise WriteFailure(f"Could not write {fmt} to {path}: {e}", cause=e) from e
    return path


def json_path(output_dir: str, profile_id: str) -> Path:
    return Path(output_dir) / f"{profile_id}_videos.json"


def csv_path(output_dir: str, profile_id: str) -> Path:
    return Path(output_dir) / f"{profile_id}_videos.csv"


def write_json(result: ScrapeResult, output_dir: str, logger: Optional[logging.Logger] = None) -> Path:
    logger = logger or log
    content = json.dumps(build_payload(result), indent=2, ensure_ascii=False)
    path = _write(json_path(output_dir, result.profile_id), content, "JSON")
    logger.info("Saved JSON: %s", path)
    return path


def write_csv(result: ScrapeResult, output_dir: str, logger: Optional[logging.Logger] = None) -> Path:
    logger = logger or log
    path = _write(csv_path(output_dir, result.profile_id), render_csv(result), "CSV")
    logger.info("Saved CSV: %s", path)
    return path
