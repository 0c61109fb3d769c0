import httpx
import pytest

from docufresh_ai.config import LookupConfig
from docufresh_ai.lookup.wikipedia import WikipediaClient


def test_normalize_topic() -> None:
    assert WikipediaClient.normalize_topic("hello world") == "hello_world"
    assert WikipediaClient.normalize_topic("  hello world  ") == "hello_world"
    assert WikipediaClient.normalize_topic("  test  ") == "test"
    assert WikipediaClient.normalize_topic("already_normalized") == "already_normalized"
    assert WikipediaClient.normalize_topic("_a \t b_") == "a_b"


@pytest.mark.asyncio
async def test_get_summary_parses_payload(lookup: WikipediaClient) -> None:
    summary = await lookup.get_summary("JavaScript")

    assert summary.title == "JavaScript"
    assert summary.description == "High-level programming language"
    assert summary.extract.startswith("JavaScript is a programming language")
    assert summary.short_extract == summary.extract[:200]
    assert summary.canonical_url == "https://en.wikipedia.org/wiki/JavaScript"
    assert summary.timestamp == "2024-01-15T08:30:00Z"
    assert summary.is_degraded is False


@pytest.mark.asyncio
async def test_summary_cache_avoids_second_request(
    lookup: WikipediaClient, wiki_requests: list[httpx.Request]
) -> None:
    first = await lookup.get_summary("World population")
    second = await lookup.get_summary("World_population")

    assert first is second
    assert len(wiki_requests) == 1

    lookup.clear_cache()
    await lookup.get_summary("World population")
    assert len(wiki_requests) == 2


@pytest.mark.asyncio
async def test_expired_cache_entry_is_refetched(
    lookup_factory, wiki_requests: list[httpx.Request]
) -> None:
    client = lookup_factory(LookupConfig(cache_ttl_seconds=0.0))
    await client.get_summary("Moon")
    await client.get_summary("Moon")

    assert len(wiki_requests) == 2


@pytest.mark.asyncio
async def test_missing_subject_returns_degraded_record(lookup: WikipediaClient) -> None:
    summary = await lookup.get_summary("this_topic_definitely_does_not_exist_12345")

    assert summary.is_degraded is True
    assert "Unable to fetch" in summary.extract
    assert summary.canonical_url is None


@pytest.mark.asyncio
async def test_transport_error_returns_degraded_record() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    client = WikipediaClient(transport=httpx.MockTransport(_handler))

    summary = await client.get_summary("JavaScript")
    results = await client.search("JavaScript")

    assert summary.is_degraded is True
    assert results == []


@pytest.mark.asyncio
async def test_search_returns_ranked_titles(lookup: WikipediaClient) -> None:
    results = await lookup.search("JavaScript programming language", 3)

    assert [r.title for r in results] == ["JavaScript"]
    assert results[0].url == "https://en.wikipedia.org/wiki/JavaScript"


@pytest.mark.asyncio
async def test_get_fact_variants(lookup: WikipediaClient) -> None:
    assert (await lookup.get_fact("Moon")).startswith("The Moon")
    assert await lookup.get_description("Moon") == "Natural satellite of Earth"


@pytest.mark.asyncio
async def test_fact_with_fallback_uses_top_search_result(lookup: WikipediaClient) -> None:
    direct = await lookup.get_fact_with_fallback("JavaScript")
    searched = await lookup.get_fact_with_fallback("people on earth")
    missing = await lookup.get_fact_with_fallback("zzz nothing here")

    assert direct.startswith("JavaScript is")
    assert searched.startswith("The population reached")
    assert missing == "Unable to find information about zzz nothing here"


def test_page_url_uses_normalized_topic(lookup: WikipediaClient) -> None:
    assert lookup.page_url(" Node js ") == "https://en.wikipedia.org/wiki/Node_js"
