"""
Sticker set repository
Fetches the remote sticker catalog and caches it for a configured TTL
"""

import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Tuple

import httpx
import structlog
from pydantic import ValidationError

from .errors import CatalogError, CatalogParseError, CatalogTransportError
from .models import DEFAULT_STICKER_SET, CatalogDocument, StickerSet

logger = structlog.get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StickerCatalogFetcher:
    """
    Downloads and parses the remote sticker catalog
    Every failure degrades to the default empty sticker set
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        # Transport defaults apply, a single attempt per fetch
        self.client = client or httpx.AsyncClient()

    async def close(self) -> None:
        """Close HTTP client"""
        await self.client.aclose()

    async def _download(self, config_uri: str) -> StickerSet:
        try:
            response = await self.client.get(config_uri)
        except httpx.HTTPError as e:
            raise CatalogTransportError(
                f"GET {config_uri} failed: {e}", config_uri=config_uri
            ) from e

        if not response.is_success:
            raise CatalogTransportError(
                f"GET {config_uri} returned {response.status_code}: {response.reason_phrase}",
                config_uri=config_uri,
                status_code=response.status_code,
            )

        try:
            document = CatalogDocument.model_validate_json(response.text)
        except (ValidationError, ValueError) as e:
            raise CatalogParseError(
                f"Response from GET {config_uri} could not be parsed properly",
                config_uri=config_uri,
                status_code=response.status_code,
            ) from e

        return document.to_sticker_set()

    async def fetch(self, config_uri: Optional[str]) -> StickerSet:
        """Fetch the catalog at config_uri, or the default set on any failure"""
        if config_uri is None:
            logger.info(
                "ConfigUri was not a valid absolute URI; default sticker set will be used"
            )
            return DEFAULT_STICKER_SET

        try:
            sticker_set = await self._download(config_uri)
        except CatalogParseError as e:
            logger.error(
                "Sticker catalog could not be parsed; default sticker set will be used",
                config_uri=config_uri,
                error=str(e.__cause__ or e),
            )
            return DEFAULT_STICKER_SET
        except CatalogError as e:
            logger.error(
                "Sticker catalog request failed; default sticker set will be used",
                config_uri=config_uri,
                status_code=e.status_code,
                error=str(e),
            )
            return DEFAULT_STICKER_SET

        logger.info(
            "Fetched sticker catalog",
            config_uri=config_uri,
            sticker_count=len(sticker_set.stickers),
        )
        return sticker_set


class StickerSetRepository:
    """
    Process-wide sticker set cache

    Only a successfully fetched set is cached. The lock covers the TTL check
    and the cache write, never the network fetch, so concurrent misses may
    each fetch and the last successful write wins.
    """

    def __init__(
        self,
        fetcher: StickerCatalogFetcher,
        config_uri: Optional[str],
        ttl_minutes: int,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.fetcher = fetcher
        self.config_uri = config_uri
        self.ttl = timedelta(minutes=ttl_minutes)
        self._clock = clock
        self._lock = threading.Lock()
        self._cached_sticker_set: Optional[StickerSet] = None
        self._cached_at: Optional[datetime] = None

    @property
    def cached_sticker_set(self) -> Optional[StickerSet]:
        with self._lock:
            return self._cached_sticker_set

    @property
    def cached_at(self) -> Optional[datetime]:
        with self._lock:
            return self._cached_at

    def snapshot(self) -> Tuple[Optional[StickerSet], Optional[datetime]]:
        """Cached set and its fetch time, read together"""
        with self._lock:
            return self._cached_sticker_set, self._cached_at

    def _get_fresh(self) -> Optional[StickerSet]:
        with self._lock:
            if self._cached_sticker_set is None:
                return None
            if self._clock() - self._cached_at < self.ttl:
                return self._cached_sticker_set
            return None

    def _store(self, sticker_set: StickerSet) -> None:
        with self._lock:
            self._cached_sticker_set = sticker_set
            self._cached_at = self._clock()

    async def get_sticker_set(self) -> StickerSet:
        """Return the cached sticker set, fetching a new one when stale"""
        cached = self._get_fresh()
        if cached is not None:
            logger.debug("Returning cached sticker set", name=cached.name)
            return cached

        sticker_set = await self.fetcher.fetch(self.config_uri)
        if sticker_set.is_default:
            # Failed or unconfigured fetches never touch the cache slot
            return sticker_set

        self._store(sticker_set)
        return sticker_set
