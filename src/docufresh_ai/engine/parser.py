"""Marker scanning and parameter splitting."""

from __future__ import annotations

import re
from enum import Enum

from docufresh_ai.types import MarkerOccurrence

# Parameters may not contain `{{` or `}}`, so only innermost markers match.
MARKER_PATTERN = re.compile(
    r"\{\{(?P<name>ai_[A-Za-z0-9_]+)(?::(?P<params>(?:(?!\{\{|\}\}).)*?))?\}\}",
    flags=re.DOTALL,
)


class SplitMode(str, Enum):
    """How a marker's raw parameter text is split into arguments."""

    EVERY_COLON = "every_colon"
    FIRST_COLON = "first_colon"
    WHOLE = "whole"


def scan_markers(document: str) -> list[MarkerOccurrence]:
    """Find resolvable markers in left-to-right order."""
    return [
        MarkerOccurrence(
            name=match.group("name"),
            raw_params=match.group("params"),
            span=match.group(0),
        )
        for match in MARKER_PATTERN.finditer(document)
    ]


def split_params(raw_params: str | None, mode: SplitMode) -> list[str]:
    """Split raw parameter text into trimmed arguments.

    `FIRST_COLON` keeps everything after the first colon as one argument so
    free text may contain colons. `EVERY_COLON` splits on each colon.
    `WHOLE` passes the text through untouched.
    """
    if not raw_params:
        return []
    if mode is SplitMode.WHOLE:
        return [raw_params]
    if mode is SplitMode.FIRST_COLON:
        head, sep, tail = raw_params.partition(":")
        if not sep:
            return [head.strip()]
        return [head.strip(), tail.strip()]
    return [part.strip() for part in raw_params.split(":")]


def marker_literal(name: str, raw_params: str | None) -> str:
    """Rebuild the text of a marker as it appears in a document."""
    if raw_params is None:
        return f"{{{{{name}}}}}"
    return f"{{{{{name}:{raw_params}}}}}"


def replace_markers(document: str, replacements: dict[str, str]) -> str:
    """Substitute every scanned marker in one pass.

    Handler output is never rescanned within the pass, so a replacement that
    happens to contain another marker's text is left as written.
    """
    return MARKER_PATTERN.sub(
        lambda match: replacements.get(match.group(0), match.group(0)), document
    )


def apply_substitutions(document: str, substitutions: dict[str, object]) -> str:
    """Replace literal `{{name}}` placeholders with stringified values."""
    for name, value in substitutions.items():
        document = document.replace(f"{{{{{name}}}}}", str(value))
    return document
