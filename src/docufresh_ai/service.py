"""High-level entry point wiring lookup, generation and resolution."""

from __future__ import annotations

import logging

from docufresh_ai.config import BackendConfig, EngineConfig, LookupConfig
from docufresh_ai.engine.resolver import MarkerResolver, ResolutionOutcome
from docufresh_ai.generation.backend import GenerativeBackend, ProgressCallback
from docufresh_ai.generation.writer import ContentWriter
from docufresh_ai.lookup.wikipedia import WikipediaClient
from docufresh_ai.markers.catalog import register_builtin_markers
from docufresh_ai.markers.registry import MarkerRegistry
from docufresh_ai.obs.tracing import Timer, TraceStore
from docufresh_ai.types import SearchResult, SummaryRecord

logger = logging.getLogger(__name__)


class DocuFreshAI:
    """Freshens documents by resolving `{{ai_*}}` markers.

    With `use_ai=False` (or no backend) every marker uses its deterministic
    fallback, which needs no model at all. The model is otherwise loaded on
    first use; call `init()` to load it up front.
    """

    def __init__(
        self,
        *,
        lookup_config: LookupConfig | None = None,
        backend_config: BackendConfig | None = None,
        engine_config: EngineConfig | None = None,
        lookup: WikipediaClient | None = None,
        backend: GenerativeBackend | None = None,
        use_ai: bool = True,
        on_progress: ProgressCallback | None = None,
        trace_store: TraceStore | None = None,
    ) -> None:
        self.engine_config = engine_config or EngineConfig()
        self.lookup = lookup or WikipediaClient(lookup_config)
        if backend is None and use_ai:
            backend = GenerativeBackend(backend_config, on_progress=on_progress)
        self.backend = backend
        self.writer = ContentWriter(backend)
        self.registry = MarkerRegistry()
        register_builtin_markers(
            self.registry,
            self.lookup,
            self.writer,
            search_fallback=self.engine_config.search_fallback,
        )
        self.resolver = MarkerResolver(self.registry, self.engine_config)
        self.trace_store = trace_store or TraceStore()

    @staticmethod
    def available_models() -> list[str]:
        return GenerativeBackend.available_models()

    @staticmethod
    def model_info(model_key: str) -> dict[str, str] | None:
        return GenerativeBackend.model_info(model_key)

    @property
    def model(self) -> str | None:
        return self.backend.model if self.backend is not None else None

    @property
    def search_fallback(self) -> bool:
        return self.engine_config.search_fallback

    async def init(self) -> None:
        if self.backend is None:
            return
        logger.info("Initializing DocuFresh-AI...")
        await self.backend.init()
        logger.info("DocuFresh-AI ready")

    def is_ready(self) -> bool:
        return self.backend is None or self.backend.is_ready()

    async def process(self, text: str, custom_data: dict[str, object] | None = None) -> str:
        outcome = await self.process_detailed(text, custom_data)
        return outcome.text

    async def process_detailed(
        self, text: str, custom_data: dict[str, object] | None = None
    ) -> ResolutionOutcome:
        with Timer() as timer:
            outcome = await self.resolver.resolve_detailed(text, custom_data)

        record = self.trace_store.create_record(
            document=text,
            output=outcome.text,
            iterations=outcome.iterations,
            state=outcome.state.value,
            marker_traces=outcome.traces,
            latency_ms=timer.elapsed_ms,
        )
        outcome.trace_id = record.trace_id
        return outcome

    async def get_fact(self, topic: str) -> str:
        return await self.lookup.get_fact(topic)

    async def get_summary(self, topic: str) -> SummaryRecord:
        return await self.lookup.get_summary(topic)

    async def search(self, query: str, limit: int = 5) -> list[SearchResult]:
        return await self.lookup.search(query, limit)

    async def rewrite(self, fact: str, template: str, *, polish: bool = False) -> str:
        return await self.writer.rewrite_sentence(fact, template, polish=polish)

    async def generate_paragraph(self, topic: str, context: str) -> str:
        return await self.writer.generate_paragraph(topic, context)

    def clear_cache(self) -> None:
        self.lookup.clear_cache()

    async def aclose(self) -> None:
        await self.lookup.aclose()
