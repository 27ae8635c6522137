"""Runtime settings, read once from the environment."""

import os

from relays import load_relays


def _flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


USER_AGENT = os.environ.get("WPTD_USER_AGENT", "Mozilla/5.0 (compatible; WPThemeDetector/1.0)")

DIRECT_TIMEOUT = float(os.environ.get("WPTD_DIRECT_TIMEOUT", "10"))
MIN_BODY_LENGTH = int(os.environ.get("WPTD_MIN_BODY_LENGTH", "100"))
RELAYS = load_relays(os.environ.get("WPTD_RELAYS"))

MAX_RETRIES = int(os.environ.get("WPTD_MAX_RETRIES", "2"))
RETRY_BACKOFF = float(os.environ.get("WPTD_RETRY_BACKOFF", "1.0"))

CACHE_TTL = float(os.environ.get("WPTD_CACHE_TTL", "300"))
CACHE_SIZE = int(os.environ.get("WPTD_CACHE_SIZE", "100"))

BACKGROUND_DETAILS = _flag("WPTD_BACKGROUND_DETAILS")

LOG_LEVEL = os.environ.get("WPTD_LOG_LEVEL", "INFO").upper()
