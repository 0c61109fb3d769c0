"""Content generation tasks with deterministic fallbacks."""

from __future__ import annotations

import logging

from docufresh_ai.generation.backend import GenerationError, GenerativeBackend
from docufresh_ai.generation.prompts import (
    ANSWER_SIMPLE_PROMPT,
    ANSWER_WITH_CONTEXT_PROMPT,
    DESCRIPTION_PROMPT,
    KEY_FACT_PROMPT,
    PARAGRAPH_PROMPT,
    POLISH_PROMPT,
    REWRITE_PROMPT,
    SUMMARY_PROMPT,
)
from docufresh_ai.markers.extraction import (
    extract_key_info,
    fill_placeholder,
    first_sentence,
    has_placeholder,
    truncate,
)

logger = logging.getLogger(__name__)

UNABLE_TO_ANSWER = "Unable to answer"


class ContentWriter:
    """Turns reference text into marker output.

    Every task has a deterministic fallback used when generation fails or
    returns nothing. A writer built without a backend always takes the
    fallback path, which is the non-AI mode of the marker catalog.
    """

    def __init__(self, backend: GenerativeBackend | None = None) -> None:
        self.backend = backend

    @property
    def uses_ai(self) -> bool:
        return self.backend is not None

    async def extract_key_fact(self, text: str, *, temperature: float | None = None) -> str:
        return await self._complete(
            KEY_FACT_PROMPT.format(text=text[:800]),
            fallback=truncate(text, 200),
            task="key fact",
            max_new_tokens=100,
            temperature=temperature,
        )

    async def describe(
        self, topic: str, context: str, *, temperature: float | None = None
    ) -> str:
        return await self._complete(
            DESCRIPTION_PROMPT.format(topic=topic, context=context[:600]),
            fallback=first_sentence(context),
            task="description",
            max_new_tokens=60,
            temperature=temperature,
        )

    async def rewrite_with_facts(
        self, sentence: str, facts: str, *, temperature: float | None = None
    ) -> str:
        return await self._complete(
            REWRITE_PROMPT.format(sentence=sentence, facts=facts[:600]),
            fallback=sentence,
            task="rewrite",
            max_new_tokens=150,
            temperature=temperature,
        )

    async def rewrite_sentence(
        self, fact: str, template: str, *, polish: bool | None = None
    ) -> str:
        """Fill the `X` placeholder in `template` with key info from `fact`.

        When polishing, the model output is only accepted if its length stays
        within half to double the filled template.
        """
        result = template
        if has_placeholder(template):
            result = fill_placeholder(template, extract_key_info(fact))

        if polish is None:
            polish = self.uses_ai
        if not polish or self.backend is None:
            return result

        try:
            output = await self.backend.generate(
                POLISH_PROMPT.format(sentence=result),
                max_new_tokens=100,
                temperature=0.3,
                deterministic=False,
            )
        except GenerationError as exc:
            logger.error(f"Polish generation error: {exc}")
            return result

        if output and len(result) * 0.5 < len(output) < len(result) * 2:
            return output
        return result

    async def generate_paragraph(
        self, topic: str, facts: str, *, temperature: float | None = None
    ) -> str:
        return await self._complete(
            PARAGRAPH_PROMPT.format(topic=topic, facts=facts[:800]),
            fallback=truncate(facts, 200),
            task="paragraph",
            max_new_tokens=150,
            temperature=temperature,
        )

    async def summarize(
        self, text: str, max_length: int = 100, *, temperature: float | None = None
    ) -> str:
        return await self._complete(
            SUMMARY_PROMPT.format(text=text[:1000]),
            fallback=truncate(text, max_length),
            task="summary",
            max_new_tokens=max_length,
            temperature=temperature,
        )

    async def answer_question(
        self, question: str, context: str, *, temperature: float | None = None
    ) -> str:
        return await self._complete(
            ANSWER_WITH_CONTEXT_PROMPT.format(context=context[:800], question=question),
            fallback=UNABLE_TO_ANSWER,
            task="answer",
            max_new_tokens=100,
            temperature=temperature,
        )

    async def answer_simple(self, question: str, *, temperature: float | None = None) -> str:
        return await self._complete(
            ANSWER_SIMPLE_PROMPT.format(question=question),
            fallback=UNABLE_TO_ANSWER,
            task="simple answer",
            max_new_tokens=50,
            temperature=temperature,
        )

    async def _complete(
        self,
        prompt: str,
        *,
        fallback: str,
        task: str,
        max_new_tokens: int,
        temperature: float | None,
    ) -> str:
        if self.backend is None:
            return fallback
        try:
            output = await self.backend.generate(
                prompt, max_new_tokens=max_new_tokens, temperature=temperature
            )
        except GenerationError as exc:
            logger.error(f"AI {task} error: {exc}")
            return fallback
        return output or fallback
