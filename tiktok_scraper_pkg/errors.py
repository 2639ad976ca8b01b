"""Typed failures raised by the scraper stages.

Each error carries a `kind` used by the top-level driver to pick the
message shown to the user. Stages raise these; only the driver matches on
`kind`.
"""
from typing import Optional


class ScraperError(Exception):
    kind = "unknown"
    hint = "Unexpected failure, re-run with --debug for details"

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class ProfileNotFound(ScraperError):
    kind = "profile_not_found"
    hint = "Username does not exist or the profile is private"


class NavigationTimeout(ScraperError):
    kind = "navigation_timeout"
    hint = "Timed out loading the profile, TikTok may be throttling requests"


class NetworkUnavailable(ScraperError):
    kind = "network_unavailable"
    hint = "Check your internet connection"


class ExtractionItemError(ScraperError):
    kind = "extraction_item"
    hint = "A video entry had unexpected markup and was skipped"


class WriteFailure(ScraperError):
    kind = "write_failure"
    hint = "Check that the output directory is writable"


# Checked in order; the first matching pattern wins.
_MESSAGE_PATTERNS = [
    ("net::err_internet_disconnected", NetworkUnavailable),
    ("net::err_", NetworkUnavailable),
    ("navigation timeout", NavigationTimeout),
    ("timeout", NavigationTimeout),
    ("profile not found", ProfileNotFound),
    ("private", ProfileNotFound),
]


def classify_error(exc: BaseException) -> ScraperError:
    """Map any exception onto one of the typed errors.

    Typed errors pass through unchanged. Anything else is matched by its
    message, falling back to a plain `ScraperError`.
    """
    if isinstance(exc, ScraperError):
        return exc
    message = str(exc)
    lowered = message.lower()
    for pattern, error_cls in _MESSAGE_PATTERNS:
        if pattern in lowered:
            return error_cls(message, cause=exc)
    return ScraperError(message or exc.__class__.__name__, cause=exc)
