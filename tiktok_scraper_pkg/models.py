import re
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import MAX_SCROLLS, NAV_TIMEOUT_MS, OUTPUT_DIR, SCROLL_DELAY_MS, SETTLE_MS

NOT_AVAILABLE = "N/A"

_PROFILE_URL_RE = re.compile(r"tiktok\.com/@([^/?#]+)", re.I)
USERNAME_RE = re.compile(r"[A-Za-z0-9_.]{1,24}")


def normalize_username(value: str) -> str:
    """Reduce `@user`, `user` or a full profile URL to the bare username."""
    value = (value or "").strip()
    m = _PROFILE_URL_RE.search(value)
    if m:
        value = m.group(1)
    return value.lstrip("@").strip().strip("/")


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a `Z` suffix."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class _ScrapeOptions(BaseModel):
    profile_id: str
    iteration_delay_ms: int = Field(SCROLL_DELAY_MS, ge=0)
    max_iterations: int = Field(MAX_SCROLLS, ge=1)
    navigation_timeout_ms: int = Field(NAV_TIMEOUT_MS, gt=0)
    settle_ms: int = Field(SETTLE_MS, ge=0)
    headless: Optional[bool] = None
    debug: bool = False
    write_files: bool = True

    @field_validator("profile_id")
    @classmethod
    def _normalize_profile(cls, v: str) -> str:
        username = normalize_username(v)
        if not username:
            raise ValueError("profile_id must not be empty")
        if not USERNAME_RE.fullmatch(username):
            raise ValueError(f"not a TikTok username: {username!r}")
        return username


class ScrapeRequest(_ScrapeOptions):
    """Run configuration for one profile scrape.

    Defaults come from the environment (see `config.py`); the CLI overrides
    them per run.
    """
    output_dir: str = OUTPUT_DIR


class ScrapeApiRequest(_ScrapeOptions):
    """Request body for the HTTP API.

    Output always goes to the configured `OUTPUT_DIR`; unknown fields,
    including `output_dir`, are rejected.
    """
    model_config = ConfigDict(extra="forbid")

    def to_request(self) -> ScrapeRequest:
        return ScrapeRequest(**self.model_dump())


class ItemRecord(BaseModel):
    """One video entry from the profile grid.

    Field aliases are the keys written to the JSON output. `resolved_by`
    records which lookup strategy produced each field and is never
    serialized.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    resource_url: str = Field(alias="url")
    title: str
    thumbnail_url: str = Field(alias="thumbnail")
    like_count: str = Field(NOT_AVAILABLE, alias="likes")
    comment_count: str = Field(NOT_AVAILABLE, alias="comments")
    view_count: str = Field(NOT_AVAILABLE, alias="views")
    extracted_at: str = Field(alias="extractedAt")
    resolved_by: Dict[str, str] = Field(default_factory=dict, exclude=True)

    @field_validator("resource_url", "thumbnail_url")
    @classmethod
    def _required(cls, v: str) -> str:
        if not v:
            raise ValueError("required field is empty")
        return v


class ScrapeResult(BaseModel):
    """Ordered records for one profile; `total_count` is always derived."""
    model_config = ConfigDict(frozen=True)

    profile_id: str
    extracted_at: str
    items: List[ItemRecord] = Field(default_factory=list)

    @property
    def total_count(self) -> int:
        return len(self.items)
