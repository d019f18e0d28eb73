import asyncio, time
from enum import Enum
from typing import Awaitable, Callable, Dict, Optional

import httpx

from .extractors import HeuristicExtractor, ListingExtractor
from .log import get_logger
from .models import CacheEntry, Catalog

logger = get_logger(__name__)

# Browser-like headers so the source page does not serve a bot wall
HEADERS: Dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/124 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate, br",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Sec-Fetch-User": "?1",
    "Cache-Control": "max-age=0",
}


class UpstreamError(Exception):
    """The source page could not be fetched (terminal status, exhausted retries, network)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AttemptOutcome(Enum):
    SUCCESS = "success"
    RETRYABLE = "retryable"
    TERMINAL = "terminal"


def classify_status(status_code: int) -> AttemptOutcome:
    """406 and 5xx are worth retrying; any other non-2xx is final."""
    if status_code == 406 or status_code >= 500:
        return AttemptOutcome.RETRYABLE
    if 200 <= status_code < 300:
        return AttemptOutcome.SUCCESS
    return AttemptOutcome.TERMINAL


# Source Page Fetcher
class Fetcher:
    """
    GET a page with retry + backoff.

    Features:
      - Browser-like headers
      - Per-attempt timeout
      - Retries 406 / 5xx / network errors, waiting backoff * attempt between tries
      - Other non-2xx statuses fail immediately
      - Raises UpstreamError once attempts run out (no wait after the last one)
    """

    def __init__(
        self,
        attempts: int = 3,
        backoff: float = 3.0,
        timeout: float = 20.0,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.attempts = max(1, attempts)
        self.backoff = backoff
        self.timeout = timeout
        self.headers = dict(HEADERS if headers is None else headers)
        self._transport = transport
        self._sleep = sleep

    def delay_for(self, attempt: int) -> float:
        return self.backoff * attempt

    async def fetch(self, url: str) -> str:
        timeout = httpx.Timeout(self.timeout)

        async with httpx.AsyncClient(
            timeout=timeout,
            headers=self.headers,
            follow_redirects=True,
            transport=self._transport,
        ) as c:
            attempt = 1
            while True:
                is_last = attempt >= self.attempts

                try:
                    r = await c.get(url)
                except httpx.HTTPError as e:
                    if is_last:
                        raise UpstreamError(
                            f"Network error after {attempt} attempts: {e!r}"
                        ) from e
                    logger.warning("Network error (attempt %d), retrying: %r", attempt, e)
                    await self._sleep(self.delay_for(attempt))
                    attempt += 1
                    continue

                outcome = classify_status(r.status_code)

                if outcome is AttemptOutcome.SUCCESS:
                    return r.text

                if outcome is AttemptOutcome.TERMINAL:
                    raise UpstreamError(f"HTTP {r.status_code}", status_code=r.status_code)

                # Retryable status
                if is_last:
                    raise UpstreamError(
                        f"HTTP {r.status_code} after {attempt} attempts",
                        status_code=r.status_code,
                    )
                logger.warning("Attempt %d: received %d, retrying", attempt, r.status_code)
                await self._sleep(self.delay_for(attempt))
                attempt += 1


def catalog_loader(
    url: str,
    fetcher: Fetcher,
    extractor: Optional[ListingExtractor] = None,
) -> Callable[[], Awaitable[Catalog]]:
    """Bind fetch + extract for one source page into a zero-arg loader for the cache."""
    extractor = extractor or HeuristicExtractor()

    async def load() -> Catalog:
        html = await fetcher.fetch(url)
        return extractor.extract(html)

    return load


# Catalog Cache
class CatalogCache:
    """
    Process-wide catalog snapshot with TTL and stale fallback.

    - Fresh snapshot -> returned as is, no network
    - Expired / missing -> one shared refresh; concurrent callers await it
    - Refresh fails -> previous snapshot if there is one, else the error propagates

    A snapshot from a successful scrape counts even when it holds zero
    listings.
    """

    def __init__(
        self,
        loader: Callable[[], Awaitable[Catalog]],
        ttl: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._loader = loader
        self.ttl = ttl
        self._clock = clock
        self._entry: Optional[CacheEntry] = None
        self._inflight: Optional["asyncio.Task[Catalog]"] = None

    @property
    def entry(self) -> Optional[CacheEntry]:
        return self._entry

    async def get_or_refresh(self, now: Optional[float] = None) -> Catalog:
        now = self._clock() if now is None else now

        entry = self._entry
        if entry is not None and entry.is_fresh(now):
            logger.debug("Using cached catalog (%d listings)", len(entry.catalog))
            return entry.catalog

        if self._inflight is None:
            self._inflight = asyncio.create_task(self._refresh(now))
        else:
            logger.debug("Joining in-flight catalog refresh")

        # shield: a cancelled caller must not cancel everyone else's refresh
        return await asyncio.shield(self._inflight)

    async def _refresh(self, now: float) -> Catalog:
        try:
            logger.info("Fetching live catalog")
            try:
                catalog = await self._loader()
            except Exception as e:
                logger.error("Catalog refresh failed: %r", e)
                stale = self._entry
                if stale is None:
                    raise
                logger.warning(
                    "Using stale catalog (%d listings) due to refresh failure",
                    len(stale.catalog),
                )
                return stale.catalog

            self._entry = CacheEntry(catalog=tuple(catalog), fetched_at=now, ttl=self.ttl)
            logger.info("Catalog refreshed: %d listings", len(self._entry.catalog))
            return self._entry.catalog
        finally:
            self._inflight = None
