"""Deterministic text heuristics used when no generative model is involved."""

from __future__ import annotations

import re

_KEY_INFO_PATTERNS = (
    re.compile(
        r"\d[\d,]*(\.\d+)?\s*(million|billion|trillion)\s*(users|people|dollars|downloads)?",
        flags=re.IGNORECASE,
    ),
    re.compile(r"\d[\d,]*(\.\d+)?\s*(percent|%)", flags=re.IGNORECASE),
    re.compile(
        r"(january|february|march|april|may|june|july|august|september|october|november|december)\s+\d{4}",
        flags=re.IGNORECASE,
    ),
    re.compile(r"\d{4}"),
)
_SENTENCE_BREAK = re.compile(r"[.!?]")
_PLACEHOLDER = re.compile(r"\bX\b", flags=re.IGNORECASE)


def extract_key_info(fact: str, max_length: int = 100) -> str:
    """Pick the most quotable piece of a fact.

    Scaled quantities win over percentages, which win over month/year dates
    and then bare years. Without any of those the first sentence is used,
    cut to `max_length` characters.
    """
    for pattern in _KEY_INFO_PATTERNS:
        match = pattern.search(fact)
        if match:
            return match.group(0).strip()

    sentence = _SENTENCE_BREAK.split(fact, maxsplit=1)[0]
    if len(sentence) <= max_length:
        return sentence.strip()
    return sentence[:max_length].strip() + "..."


def first_sentence(text: str) -> str:
    return text.split(".")[0].strip()


def truncate(text: str, max_length: int) -> str:
    return text[:max_length]


def has_placeholder(template: str) -> bool:
    return _PLACEHOLDER.search(template) is not None


def fill_placeholder(template: str, value: str) -> str:
    return _PLACEHOLDER.sub(lambda _match: value, template)
