"""Shared fixtures: an in-memory Wikipedia and a scripted chat model."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest
from langchain_core.messages import AIMessage

from docufresh_ai.config import LookupConfig
from docufresh_ai.lookup.wikipedia import WikipediaClient

PAGES: dict[str, dict[str, object]] = {
    "JavaScript": {
        "title": "JavaScript",
        "description": "High-level programming language",
        "extract": (
            "JavaScript is a programming language and core technology of the Web. "
            "It is used by 98 percent of websites."
        ),
        "extract_html": "<p><b>JavaScript</b> is a programming language.</p>",
        "content_urls": {"desktop": {"page": "https://en.wikipedia.org/wiki/JavaScript"}},
        "timestamp": "2024-01-15T08:30:00Z",
    },
    "World_population": {
        "title": "World population",
        "description": "Total number of living humans on Earth",
        "extract": "The population reached 8.1 billion people in 2023. Growth is slowing.",
        "content_urls": {"desktop": {"page": "https://en.wikipedia.org/wiki/World_population"}},
        "timestamp": "2023-11-02T10:00:00Z",
    },
    "Moon": {
        "title": "Moon",
        "description": "Natural satellite of Earth",
        "extract": "The Moon is Earth's only natural satellite. It orbits at 384,400 km.",
        "timestamp": "2024-03-05T00:00:00Z",
    },
}

SEARCH_INDEX: dict[str, list[str]] = {
    "JavaScript programming language": ["JavaScript"],
    "people on earth": ["World population"],
}


def wikipedia_handler(requests: list[httpx.Request]) -> Callable[[httpx.Request], httpx.Response]:
    def _handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        path = request.url.path
        if path.startswith("/api/rest_v1/page/summary/"):
            title = path.rsplit("/", 1)[1]
            payload = PAGES.get(title)
            if payload is None:
                return httpx.Response(404, json={"title": "Not found."})
            return httpx.Response(200, json=payload)
        if path == "/w/api.php":
            query = request.url.params["search"]
            titles = SEARCH_INDEX.get(query, [])
            limit = int(request.url.params.get("limit", "5"))
            titles = titles[:limit]
            return httpx.Response(
                200,
                json=[
                    query,
                    titles,
                    ["" for _ in titles],
                    [f"https://en.wikipedia.org/wiki/{t.replace(' ', '_')}" for t in titles],
                ],
            )
        return httpx.Response(500)

    return _handler


@pytest.fixture
def wiki_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def lookup_factory(
    wiki_requests: list[httpx.Request],
) -> Callable[[LookupConfig | None], WikipediaClient]:
    def _make(config: LookupConfig | None = None) -> WikipediaClient:
        return WikipediaClient(
            config, transport=httpx.MockTransport(wikipedia_handler(wiki_requests))
        )

    return _make


@pytest.fixture
def lookup(lookup_factory: Callable[..., WikipediaClient]) -> WikipediaClient:
    return lookup_factory()


class ScriptedChatModel:
    """Chat model stand-in that replies from a list and records each call."""

    def __init__(self, replies: list[str] | None = None, *, fail: bool = False) -> None:
        self.replies = list(replies or [])
        self.fail = fail
        self.calls: list[tuple[str, dict[str, object]]] = []

    async def ainvoke(self, prompt: str, **kwargs: object) -> AIMessage:
        self.calls.append((prompt, kwargs))
        if self.fail:
            raise RuntimeError("model crashed")
        reply = self.replies.pop(0) if self.replies else ""
        return AIMessage(content=reply)


@pytest.fixture
def scripted_model() -> type[ScriptedChatModel]:
    return ScriptedChatModel
