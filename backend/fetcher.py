"""Fetch orchestrator: direct GET first, then an ordered list of relay endpoints."""

import asyncio
import logging
from typing import List, Optional, Sequence

import aiohttp

import config
from relays import Relay

logger = logging.getLogger(__name__)

KIND_HINTS = {
    "timeout": "The website took too long to respond.",
    "blocked": "The website refused the request (access blocked or cross-origin restricted).",
    "network": "A network error occurred while contacting the website.",
    "http": "The website returned an error status.",
    "empty": "The website returned an empty or truncated response.",
}


class FetchError(Exception):
    """Every fetch avenue failed. ``kind`` classifies the last failure."""

    def __init__(self, last_error: str, kind: str = "network"):
        self.last_error = last_error
        self.kind = kind
        hint = KIND_HINTS.get(kind, KIND_HINTS["network"])
        super().__init__(
            f"Unable to access this website. {hint} "
            f"Direct fetch and all relay methods failed. Error: {last_error}"
        )


class _AttemptFailed(Exception):
    def __init__(self, message: str, kind: str):
        super().__init__(message)
        self.kind = kind


def _classify(exc: BaseException) -> str:
    if isinstance(exc, _AttemptFailed):
        return exc.kind
    if isinstance(exc, asyncio.TimeoutError):
        return "timeout"
    return "network"


def _describe(exc: BaseException) -> str:
    if isinstance(exc, asyncio.TimeoutError):
        return "Request timed out"
    return str(exc) or type(exc).__name__


def _status_failure(status: int) -> _AttemptFailed:
    kind = "blocked" if status in (401, 403, 451) else "http"
    return _AttemptFailed(f"HTTP {status}", kind)


class FetchOrchestrator:
    def __init__(
        self,
        relays: Optional[Sequence[Relay]] = None,
        direct_timeout: float = config.DIRECT_TIMEOUT,
        min_length: int = config.MIN_BODY_LENGTH,
        user_agent: str = config.USER_AGENT,
    ):
        self.relays: List[Relay] = list(config.RELAYS if relays is None else relays)
        self.direct_timeout = direct_timeout
        self.min_length = min_length
        self.headers = {
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
            "Cache-Control": "no-cache",
        }

    async def fetch_text(self, url: str) -> str:
        """Return the body of ``url`` as text, or raise FetchError once every avenue failed."""
        last_exc: Optional[BaseException] = None
        async with aiohttp.ClientSession(headers=self.headers) as session:
            try:
                return await self._fetch_direct(session, url)
            except (aiohttp.ClientError, asyncio.TimeoutError, _AttemptFailed) as e:
                logger.debug("Direct fetch of %s failed: %s", url, _describe(e))
                last_exc = e

            for i, relay in enumerate(self.relays, start=1):
                logger.debug("Trying relay %d/%d (%s) for %s", i, len(self.relays), relay.name, url)
                try:
                    body = await self._fetch_relay(session, relay, url)
                except (aiohttp.ClientError, asyncio.TimeoutError, _AttemptFailed, ValueError) as e:
                    logger.debug("Relay %s failed for %s: %s", relay.name, url, _describe(e))
                    last_exc = e
                    continue
                logger.info("Relay %s returned %d characters for %s", relay.name, len(body), url)
                return body

        kind = _classify(last_exc) if last_exc else "network"
        message = _describe(last_exc) if last_exc else "Unknown error"
        logger.warning("All fetch methods failed for %s (%s): %s", url, kind, message)
        raise FetchError(message, kind)

    async def _fetch_direct(self, session: aiohttp.ClientSession, url: str) -> str:
        timeout = aiohttp.ClientTimeout(total=self.direct_timeout)
        async with session.get(url, timeout=timeout, allow_redirects=True, ssl=False) as resp:
            if not 200 <= resp.status < 300:
                raise _status_failure(resp.status)
            return await resp.text(errors="replace")

    async def _fetch_relay(self, session: aiohttp.ClientSession, relay: Relay, url: str) -> str:
        timeout = aiohttp.ClientTimeout(total=relay.timeout)
        async with session.get(relay.build_url(url), timeout=timeout, allow_redirects=True) as resp:
            if not 200 <= resp.status < 300:
                raise _status_failure(resp.status)
            if relay.mode == "json":
                data = await resp.json(content_type=None)
                body = data.get(relay.payload_field) if isinstance(data, dict) else None
            else:
                body = await resp.text(errors="replace")

        if not isinstance(body, str) or len(body) <= self.min_length:
            size = len(body) if isinstance(body, str) else 0
            raise _AttemptFailed(f"{relay.name} returned an empty or truncated response ({size} characters)", "empty")
        return body
