"""Marker handler catalog built on Pydantic v2 models."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from time import perf_counter
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from docufresh_ai.engine.parser import SplitMode, split_params
from docufresh_ai.types import MarkerTrace

MarkerHandler = Callable[..., Awaitable[str]]
MarkerObserver = Callable[[MarkerTrace], None]


class MarkerSpec(BaseModel):
    """Declarative marker definition for registration and dispatch."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(pattern=r"^ai_[A-Za-z0-9_]+$")
    description: str
    handler: MarkerHandler
    split_mode: SplitMode = SplitMode.EVERY_COLON
    usage: str = ""
    tags: list[str] = Field(default_factory=list)

    def split_params(self, raw_params: str | None) -> list[str]:
        return split_params(raw_params, self.split_mode)

    async def invoke(self, params: list[str]) -> str:
        return str(await self.handler(*params))


class MarkerRegistry:
    """Stores marker specs and reports every handler execution."""

    def __init__(self) -> None:
        self._markers: dict[str, MarkerSpec] = {}
        self._observer: MarkerObserver | None = None

    def register(self, spec: MarkerSpec) -> None:
        if spec.name in self._markers:
            raise ValueError(f"Marker already registered: {spec.name}")
        self._markers[spec.name] = spec

    def set_observer(self, observer: MarkerObserver | None) -> None:
        """Set an optional callback invoked after each handler execution."""
        self._observer = observer

    def get(self, name: str) -> MarkerSpec | None:
        return self._markers.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._markers

    def names(self) -> list[str]:
        return list(self._markers)

    def specs(self) -> list[MarkerSpec]:
        return list(self._markers.values())

    async def execute(
        self,
        name: str,
        raw_params: str | None,
        *,
        observer: MarkerObserver | None = None,
    ) -> str:
        spec = self._markers.get(name)
        if spec is None:
            raise KeyError(f"Unknown marker: {name}")

        params = spec.split_params(raw_params)
        start = perf_counter()
        try:
            output = await spec.invoke(params)
        except Exception:
            self._notify(
                MarkerTrace(
                    name=name,
                    params=params,
                    output_preview="",
                    latency_ms=(perf_counter() - start) * 1000.0,
                    status="error",
                ),
                observer,
            )
            raise

        self._notify(
            MarkerTrace(
                name=name,
                params=params,
                output_preview=output[:320],
                latency_ms=(perf_counter() - start) * 1000.0,
            ),
            observer,
        )
        return output

    def describe(self) -> list[dict[str, Any]]:
        return [
            {
                "name": spec.name,
                "description": spec.description,
                "usage": spec.usage,
                "split_mode": spec.split_mode.value,
                "tags": list(spec.tags),
            }
            for spec in self._markers.values()
        ]

    def _notify(self, trace: MarkerTrace, observer: MarkerObserver | None) -> None:
        if self._observer is not None:
            self._observer(trace)
        if observer is not None:
            observer(trace)
