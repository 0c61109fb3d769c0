"""Fixpoint marker resolution loop."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum

from docufresh_ai.config import EngineConfig
from docufresh_ai.engine.parser import (
    apply_substitutions,
    marker_literal,
    replace_markers,
    scan_markers,
)
from docufresh_ai.markers.registry import MarkerObserver, MarkerRegistry
from docufresh_ai.types import MarkerOccurrence, MarkerTrace

logger = logging.getLogger(__name__)


class EngineState(str, Enum):
    """Terminal state of a resolution pass."""

    FIXPOINT = "fixpoint"
    CAPPED = "capped"


@dataclass(slots=True)
class ResolutionOutcome:
    text: str
    iterations: int
    state: EngineState
    traces: list[MarkerTrace] = field(default_factory=list)
    trace_id: str | None = None


class MarkerResolver:
    """Resolves `{{ai_*}}` markers in a document, innermost first.

    Each iteration scans for markers whose parameters contain no further
    markers, resolves every distinct match once and replaces all of its
    occurrences in a single pass. Iteration stops when nothing is left to
    resolve or at `max_iterations`.
    Failures never propagate: a marker that cannot be resolved stays in the
    output as written.
    """

    def __init__(self, registry: MarkerRegistry, config: EngineConfig | None = None) -> None:
        self.registry = registry
        self.config = config or EngineConfig()

    async def resolve(
        self,
        document: str,
        custom_substitutions: dict[str, object] | None = None,
    ) -> str:
        outcome = await self.resolve_detailed(document, custom_substitutions)
        return outcome.text

    async def resolve_detailed(
        self,
        document: str,
        custom_substitutions: dict[str, object] | None = None,
    ) -> ResolutionOutcome:
        text = apply_substitutions(document, custom_substitutions or {})
        traces: list[MarkerTrace] = []
        iterations = 0

        while True:
            occurrences = scan_markers(text)
            if not occurrences:
                state = EngineState.FIXPOINT
                break
            if iterations >= self.config.max_iterations:
                logger.info(
                    f"Iteration cap {self.config.max_iterations} reached, "
                    f"{len(occurrences)} markers left unresolved"
                )
                state = EngineState.CAPPED
                break

            iterations += 1
            distinct = list({occ.span: occ for occ in occurrences}.values())
            replacements = await self._dispatch(distinct, traces.append)

            text = replace_markers(
                text,
                {occ.span: out for occ, out in zip(distinct, replacements, strict=True)},
            )

        return ResolutionOutcome(text=text, iterations=iterations, state=state, traces=traces)

    async def resolve_one(
        self,
        name: str,
        raw_params: str | None,
        *,
        observer: MarkerObserver | None = None,
    ) -> str:
        literal = marker_literal(name, raw_params)
        if name not in self.registry:
            logger.warning(f"Unknown marker: {name}")
            if observer is not None:
                observer(
                    MarkerTrace(
                        name=name,
                        params=[],
                        output_preview=literal,
                        latency_ms=0.0,
                        status="unknown",
                    )
                )
            return literal

        try:
            return await self.registry.execute(name, raw_params, observer=observer)
        except Exception as exc:
            logger.error(f"Error processing {name}: {exc}")
            return literal

    async def _dispatch(
        self, occurrences: list[MarkerOccurrence], observer: MarkerObserver
    ) -> list[str]:
        if self.config.concurrent_dispatch:
            return list(
                await asyncio.gather(
                    *(
                        self.resolve_one(occ.name, occ.raw_params, observer=observer)
                        for occ in occurrences
                    )
                )
            )

        results: list[str] = []
        for occ in occurrences:
            results.append(await self.resolve_one(occ.name, occ.raw_params, observer=observer))
        return results
