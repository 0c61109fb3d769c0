"""Shared domain models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class SummaryRecord:
    """A reference summary for one subject, possibly degraded."""

    title: str
    description: str
    extract: str
    short_extract: str
    thumbnail_url: str | None
    canonical_url: str | None
    timestamp: str
    is_degraded: bool = False


@dataclass(slots=True)
class SearchResult:
    """One ranked candidate from a fuzzy title search."""

    title: str
    description: str
    url: str


@dataclass(slots=True)
class MarkerOccurrence:
    """A marker located in a document.

    `span` is the exact matched text. Identical spans are resolved once and
    replaced together.
    """

    name: str
    raw_params: str | None
    span: str


@dataclass(slots=True)
class MarkerTrace:
    """Trace record for an executed marker handler."""

    name: str
    params: list[str]
    output_preview: str
    latency_ms: float
    status: str = "ok"
