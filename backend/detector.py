"""Theme detection service: cache, fetch with retry, presence check, cascade and plugin scan."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Set

import config
from detection import paths, presence
from detection.cascade import DetectionCascade, merge_details
from fetcher import FetchError, FetchOrchestrator
from models import DetectionResult, ThemeInfo
from theme_cache import ResultCache, normalize_url

logger = logging.getLogger(__name__)

NOT_WORDPRESS = "This doesn't appear to be a WordPress site. No WordPress indicators found."
THEME_UNIDENTIFIED = (
    "WordPress site detected but theme could not be identified. The theme may be heavily customized."
)
GENERIC_FAILURE = "Failed to analyze website"


class ThemeDetector:
    def __init__(
        self,
        fetcher=None,
        cache=None,
        cascade: Optional[DetectionCascade] = None,
        max_retries: int = config.MAX_RETRIES,
        retry_backoff: float = config.RETRY_BACKOFF,
        background_details: bool = config.BACKGROUND_DETAILS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.fetcher = fetcher if fetcher is not None else FetchOrchestrator()
        self.cache = cache if cache is not None else ResultCache(config.CACHE_TTL, config.CACHE_SIZE)
        self.cascade = cascade if cascade is not None else DetectionCascade(self.fetcher)
        self.max_retries = max_retries
        self.retry_backoff = retry_backoff
        self.background_details = background_details
        self._sleep = sleep
        self._pending: Set[asyncio.Task] = set()

    async def detect_theme(self, url: str) -> DetectionResult:
        """Detect the theme of ``url``. Never raises; failures come back as a failed result."""
        try:
            return await self._detect(normalize_url(url))
        except FetchError as e:
            return DetectionResult.fail(str(e))
        except Exception as e:
            logger.exception("Unexpected error while analyzing %s", url)
            return DetectionResult.fail(str(e) or GENERIC_FAILURE)

    async def _detect(self, site_url: str) -> DetectionResult:
        cached = self.cache.get(site_url)
        if cached is not None:
            logger.info("Cache hit for %s", site_url)
            return cached

        body = await self._fetch_with_retry(site_url)

        if not presence.is_wordpress(body):
            logger.info("No WordPress indicators on %s", site_url)
            return self._store(site_url, DetectionResult.fail(NOT_WORDPRESS))

        outcome = await self.cascade.run(site_url, body, fetch_details=not self.background_details)
        if not outcome.name:
            logger.info("WordPress detected on %s but no theme identified", site_url)
            return self._store(site_url, DetectionResult.fail(THEME_UNIDENTIFIED))

        info = ThemeInfo(
            **outcome.fields,
            detection_method=outcome.detection_method,
            plugins=paths.scan_plugins(body),
            wordpress_version=presence.wordpress_version(body),
            is_wordpress=True,
        )
        result = self._store(site_url, DetectionResult.ok(info))
        logger.info("Detected theme %r on %s via %s", info.name, site_url, info.detection_method)

        if outcome.stylesheet_url:
            self._schedule_details(site_url, outcome.stylesheet_url, result)
        return result

    async def _fetch_with_retry(self, url: str) -> str:
        attempt = 0
        while True:
            try:
                return await self.fetcher.fetch_text(url)
            except FetchError as e:
                attempt += 1
                if attempt > self.max_retries:
                    raise
                delay = attempt * self.retry_backoff
                logger.warning("Fetch of %s failed (%s), retry %d/%d in %.1fs", url, e, attempt, self.max_retries, delay)
                await self._sleep(delay)

    def _store(self, site_url: str, result: DetectionResult) -> DetectionResult:
        self.cache.set(site_url, result)
        return result.model_copy(deep=True)

    def _schedule_details(self, site_url: str, stylesheet_url: str, result: DetectionResult) -> None:
        task = asyncio.create_task(self._apply_details(site_url, stylesheet_url, result))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _apply_details(self, site_url: str, stylesheet_url: str, result: DetectionResult) -> None:
        try:
            details = await self.cascade.fetch_details(stylesheet_url)
            if not details:
                return
            data = result.data.model_dump()
            merge_details(data, details)
            if self.cache.replace(site_url, DetectionResult.ok(ThemeInfo(**data))):
                logger.info("Added stylesheet details for %s", site_url)
        except Exception:
            logger.exception("Background theme details failed for %s", site_url)

    async def wait_for_background(self) -> None:
        """Wait for any deferred stylesheet enrichment to finish."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    def clear_cache(self) -> None:
        self.cache.clear()

    def cache_stats(self) -> dict:
        return self.cache.stats()
