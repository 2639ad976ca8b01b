from typing import Any, Dict, List, Optional

from .errors import ScraperError
from .models import ScrapeRequest, ScrapeResult


def build_response(
    req: ScrapeRequest,
    result: ScrapeResult,
    files: Dict[str, str],
    debug_msgs: List[str],
    write_errors: Optional[List[str]] = None,
    debug_files: Optional[dict] = None,
) -> Dict[str, Any]:
    """Summarize a completed run for the CLI and the HTTP API.

    `videos` is the full record list in the JSON output's key format;
    `files` maps each written format to its path.
    """
    resp = {
        "profile": req.profile_id,
        "found": result.total_count > 0,
        "total_videos": result.total_count,
        "extracted_at": result.extracted_at,
        "videos": [i.model_dump(by_alias=True) for i in result.items],
        "files": files,
        "debug": " | ".join(debug_msgs),
    }
    if write_errors:
        resp["write_errors"] = write_errors
    if debug_files:
        resp["debug_files"] = debug_files
    return resp


def build_error(req: ScrapeRequest, error: ScraperError, debug_msgs: List[str]) -> Dict[str, Any]:
    """Failure summary; `error_kind` is the classified error kind."""
    return {
        "profile": req.profile_id,
        "found": False,
        "error": str(error),
        "error_kind": error.kind,
        "hint": error.hint,
        "debug": " | ".join(debug_msgs),
    }
