import os


TIKTOK_USERNAME = os.environ.get("TIKTOK_USERNAME", "")
PLACEHOLDER_USERNAME = "username_here"
PROFILE_URL_TEMPLATE = os.environ.get("TIKTOK_PROFILE_URL", "https://www.tiktok.com/@{username}")

OUTPUT_DIR = os.environ.get("SCRAPER_OUTPUT_DIR", "tiktok_data")
SCROLL_DELAY_MS = int(os.environ.get("SCRAPER_SCROLL_DELAY_MS", "2000"))
MAX_SCROLLS = int(os.environ.get("SCRAPER_MAX_SCROLLS", "50"))
STALL_LIMIT = 3
NAV_TIMEOUT_MS = int(os.environ.get("SCRAPER_NAV_TIMEOUT_MS", "30000"))
SETTLE_MS = int(os.environ.get("SCRAPER_SETTLE_MS", "3000"))
HEADLESS = os.environ.get("SCRAPER_HEADLESS", "true").lower() in ["1", "true", "yes"]
BLOCKED_RESOURCE_TYPES = [
    t.strip()
    for t in os.environ.get("SCRAPER_BLOCKED_RESOURCES", "stylesheet,font,image").split(",")
    if t.strip()
]
LOG_LEVEL = os.environ.get("SCRAPER_LOG_LEVEL", "INFO").upper()
USER_AGENT = os.environ.get(
    "SCRAPER_USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)


def profile_url(username: str) -> str:
    return PROFILE_URL_TEMPLATE.format(username=username)
