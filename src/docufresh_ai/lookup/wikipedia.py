"""Wikipedia REST client with a TTL summary cache."""

from __future__ import annotations

import logging
import re
import time
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

import httpx

from docufresh_ai.config import LookupConfig
from docufresh_ai.types import SearchResult, SummaryRecord

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_HTML_TAG = re.compile(r"<[^>]*>")


class WikipediaClient:
    """Fetches summaries and search results from Wikipedia.

    Lookups never raise: a failed summary fetch returns a degraded record and
    a failed search returns an empty list. Summaries are cached per
    normalized topic for `LookupConfig.cache_ttl_seconds`.
    """

    def __init__(
        self,
        config: LookupConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or LookupConfig()
        self._cache: dict[str, tuple[float, SummaryRecord]] = {}
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=self.config.timeout_seconds,
            headers={
                "User-Agent": self.config.user_agent,
                "Accept": "application/json",
            },
            transport=transport,
        )

    async def get_summary(self, topic: str) -> SummaryRecord:
        normalized = self.normalize_topic(topic)

        cached = self._get_cached(normalized)
        if cached is not None:
            return cached

        url = f"{self.config.base_url}/page/summary/{quote(normalized, safe='')}"
        try:
            response = await self._client.get(url)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(f"Wikipedia fetch error for '{topic}': {exc}")
            return _degraded_record(topic)

        if not isinstance(data, dict):
            logger.warning(f"Unexpected Wikipedia summary payload for '{topic}'")
            return _degraded_record(topic)

        record = _record_from_payload(data, topic)
        self._cache[normalized] = (time.monotonic(), record)
        return record

    async def get_fact(self, topic: str) -> str:
        summary = await self.get_summary(topic)
        return summary.extract or f"Information about {topic} not available"

    async def get_fact_with_fallback(self, topic: str) -> str:
        """Return the extract for `topic`, searching for a better title on a miss."""
        summary = await self.get_summary(topic)
        if not summary.is_degraded and summary.extract:
            return summary.extract

        results = await self.search(topic, limit=1)
        if results:
            best = results[0].title
            logger.info(f"Direct lookup for '{topic}' failed, retrying with '{best}'")
            candidate = await self.get_summary(best)
            if not candidate.is_degraded and candidate.extract:
                return candidate.extract

        return f"Unable to find information about {topic}"

    async def get_description(self, topic: str) -> str:
        summary = await self.get_summary(topic)
        return summary.description or summary.short_extract or topic

    async def search(self, query: str, limit: int = 5) -> list[SearchResult]:
        params = {
            "action": "opensearch",
            "search": query,
            "limit": str(limit),
            "format": "json",
            "origin": "*",
        }
        try:
            response = await self._client.get(self.config.search_url, params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(f"Wikipedia search error for '{query}': {exc}")
            return []

        if not isinstance(data, list):
            logger.warning(f"Unexpected Wikipedia search payload for '{query}'")
            return []

        # OpenSearch returns [query, titles, descriptions, urls]
        titles = data[1] if len(data) > 1 else []
        descriptions = data[2] if len(data) > 2 else []
        urls = data[3] if len(data) > 3 else []
        return [
            SearchResult(
                title=title,
                description=descriptions[idx] if idx < len(descriptions) else "",
                url=urls[idx] if idx < len(urls) else "",
            )
            for idx, title in enumerate(titles)
        ]

    def page_url(self, topic: str) -> str:
        return f"{self.config.page_base_url}/{self.normalize_topic(topic)}"

    @staticmethod
    def normalize_topic(topic: str) -> str:
        return _WHITESPACE.sub("_", topic.strip()).strip("_")

    def clear_cache(self) -> None:
        self._cache.clear()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _get_cached(self, key: str) -> SummaryRecord | None:
        item = self._cache.get(key)
        if item is None:
            return None
        stored_at, record = item
        if time.monotonic() - stored_at >= self.config.cache_ttl_seconds:
            del self._cache[key]
            return None
        return record


def _record_from_payload(data: dict[str, Any], topic: str) -> SummaryRecord:
    extract = data.get("extract") or ""
    thumbnail = data.get("thumbnail") or {}
    desktop_urls = (data.get("content_urls") or {}).get("desktop") or {}
    return SummaryRecord(
        title=data.get("title") or topic,
        description=data.get("description") or "",
        extract=extract,
        short_extract=_HTML_TAG.sub("", extract)[:200] if data.get("extract_html") else "",
        thumbnail_url=thumbnail.get("source"),
        canonical_url=desktop_urls.get("page"),
        timestamp=data.get("timestamp") or _utc_now(),
    )


def _degraded_record(topic: str) -> SummaryRecord:
    return SummaryRecord(
        title=topic,
        description="",
        extract=f"Unable to fetch information about {topic}",
        short_extract="",
        thumbnail_url=None,
        canonical_url=None,
        timestamp=_utc_now(),
        is_degraded=True,
    )


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()
