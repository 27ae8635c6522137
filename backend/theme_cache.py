"""In-memory, time-expiring cache of detection results keyed by normalized URL."""

import time
from typing import Callable, Dict, List, Optional, Tuple

from models import DetectionResult


def normalize_url(url: str) -> str:
    """Default the scheme to https and drop fragment, query and trailing slashes."""
    url = url.strip()
    if not url.lower().startswith(("http://", "https://")):
        url = f"https://{url}"
    url = url.split("#", 1)[0].split("?", 1)[0]
    return url.rstrip("/")


class ResultCache:
    """Entries expire after ``ttl`` seconds; past ``max_entries`` the oldest insert is evicted.

    Values are copied on the way in and on the way out so no caller can
    mutate what another caller receives. All methods are synchronous, which
    keeps each mutation atomic on the event loop.
    """

    def __init__(self, ttl: float = 300, max_entries: int = 100, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[str, Tuple[DetectionResult, float]] = {}

    def get(self, url: str) -> Optional[DetectionResult]:
        key = normalize_url(url)
        entry = self._entries.get(key)
        if entry is None:
            return None
        result, created = entry
        if self._clock() - created >= self.ttl:
            del self._entries[key]
            return None
        return result.model_copy(deep=True)

    def set(self, url: str, result: DetectionResult) -> None:
        key = normalize_url(url)
        # re-insert so an overwritten key counts as the newest entry
        self._entries.pop(key, None)
        self._entries[key] = (result.model_copy(deep=True), self._clock())
        if len(self._entries) > self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]

    def replace(self, url: str, result: DetectionResult) -> bool:
        """Swap the value of a live entry in place, keeping its timestamp and position."""
        key = normalize_url(url)
        entry = self._entries.get(key)
        if entry is None or self._clock() - entry[1] >= self.ttl:
            return False
        self._entries[key] = (result.model_copy(deep=True), entry[1])
        return True

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> dict:
        entries: List[str] = list(self._entries)
        return {"size": len(entries), "entries": entries}

    def __len__(self) -> int:
        return len(self._entries)


class NullCache:
    """Cache that never stores anything."""

    def get(self, url: str) -> Optional[DetectionResult]:
        return None

    def set(self, url: str, result: DetectionResult) -> None:
        pass

    def replace(self, url: str, result: DetectionResult) -> bool:
        return False

    def clear(self) -> None:
        pass

    def stats(self) -> dict:
        return {"size": 0, "entries": []}

    def __len__(self) -> int:
        return 0
