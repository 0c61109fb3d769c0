"""Built-in `ai_*` marker handlers."""

from __future__ import annotations

from datetime import datetime

from docufresh_ai.engine.parser import SplitMode
from docufresh_ai.generation.writer import ContentWriter
from docufresh_ai.lookup.wikipedia import WikipediaClient
from docufresh_ai.markers.extraction import has_placeholder
from docufresh_ai.markers.registry import MarkerRegistry, MarkerSpec


def register_builtin_markers(
    registry: MarkerRegistry,
    lookup: WikipediaClient,
    writer: ContentWriter,
    *,
    search_fallback: bool = True,
) -> None:
    """Register the default marker set used by the resolver.

    Markers:
    - `ai_fact`: most important fact about a topic.
    - `ai_describe`: one-sentence description.
    - `ai_rewrite`: rewrite a sentence (or fill an `X` template) with facts.
    - `ai_complete`: returns its content; wraps nested markers.
    - `ai_paragraph` / `ai_summary`: generated prose from the extract.
    - `ai_answer`: answer a question, optionally grounded in a topic.
    - `ai_link` / `ai_updated`: article URL and last-modified date.
    """

    async def _facts(topic: str) -> str:
        if search_fallback:
            return await lookup.get_fact_with_fallback(topic)
        return await lookup.get_fact(topic)

    async def _fact(topic: str) -> str:
        return await writer.extract_key_fact(await _facts(topic))

    async def _describe(topic: str) -> str:
        summary = await lookup.get_summary(topic)
        return await writer.describe(topic, summary.extract)

    async def _rewrite(topic: str, sentence: str) -> str:
        facts = await _facts(topic)
        if has_placeholder(sentence):
            return await writer.rewrite_sentence(facts, sentence)
        return await writer.rewrite_with_facts(sentence, facts)

    async def _complete(content: str = "") -> str:
        # Inner markers were already replaced by earlier iterations.
        return content

    async def _paragraph(topic: str) -> str:
        summary = await lookup.get_summary(topic)
        return await writer.generate_paragraph(summary.title, summary.extract)

    async def _summary(topic: str) -> str:
        summary = await lookup.get_summary(topic)
        return await writer.summarize(summary.extract)

    async def _answer(topic_or_question: str, question: str | None = None) -> str:
        if question:
            context = await _facts(topic_or_question)
            return await writer.answer_question(question, context)
        return await writer.answer_simple(topic_or_question)

    async def _link(topic: str) -> str:
        summary = await lookup.get_summary(topic)
        return summary.canonical_url or lookup.page_url(topic)

    async def _updated(topic: str) -> str:
        summary = await lookup.get_summary(topic)
        if summary.is_degraded or not summary.timestamp:
            return "Unknown"
        try:
            stamp = datetime.fromisoformat(summary.timestamp.replace("Z", "+00:00"))
        except ValueError:
            return "Unknown"
        return f"{stamp.month}/{stamp.day}/{stamp.year}"

    registry.register(
        MarkerSpec(
            name="ai_fact",
            description="Extract the key fact about a topic.",
            handler=_fact,
            usage="{{ai_fact:topic}}",
            tags=["lookup", "generation"],
        )
    )
    registry.register(
        MarkerSpec(
            name="ai_describe",
            description="Generate a one-sentence description of a topic.",
            handler=_describe,
            usage="{{ai_describe:topic}}",
            tags=["lookup", "generation"],
        )
    )
    registry.register(
        MarkerSpec(
            name="ai_rewrite",
            description="Rewrite a sentence using facts about a topic.",
            handler=_rewrite,
            split_mode=SplitMode.FIRST_COLON,
            usage="{{ai_rewrite:topic:sentence}}",
            tags=["lookup", "generation"],
        )
    )
    registry.register(
        MarkerSpec(
            name="ai_complete",
            description="Keep sentence structure around nested markers.",
            handler=_complete,
            split_mode=SplitMode.WHOLE,
            usage="{{ai_complete:text with {{ai_answer:question}} inside}}",
            tags=["structure"],
        )
    )
    registry.register(
        MarkerSpec(
            name="ai_paragraph",
            description="Generate a short paragraph about a topic.",
            handler=_paragraph,
            usage="{{ai_paragraph:topic}}",
            tags=["lookup", "generation"],
        )
    )
    registry.register(
        MarkerSpec(
            name="ai_summary",
            description="Condense a topic summary into one sentence.",
            handler=_summary,
            usage="{{ai_summary:topic}}",
            tags=["lookup", "generation"],
        )
    )
    registry.register(
        MarkerSpec(
            name="ai_answer",
            description="Answer a question, optionally using a topic as context.",
            handler=_answer,
            split_mode=SplitMode.FIRST_COLON,
            usage="{{ai_answer:question}} or {{ai_answer:topic:question}}",
            tags=["lookup", "generation"],
        )
    )
    registry.register(
        MarkerSpec(
            name="ai_link",
            description="Return the article URL for a topic.",
            handler=_link,
            usage="{{ai_link:topic}}",
            tags=["lookup"],
        )
    )
    registry.register(
        MarkerSpec(
            name="ai_updated",
            description="Return the last modified date of a topic's article.",
            handler=_updated,
            usage="{{ai_updated:topic}}",
            tags=["lookup"],
        )
    )
