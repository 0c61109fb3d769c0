"""Prompt templates for each content generation task."""

from __future__ import annotations

from langchain_core.prompts import PromptTemplate

KEY_FACT_PROMPT = PromptTemplate.from_template(
    """Extract the single most important fact from this text. Output only the fact in one sentence:
{text}

Most important fact:"""
)

DESCRIPTION_PROMPT = PromptTemplate.from_template(
    """Write a brief, one-sentence description of {topic} based on this information:
{context}

One-sentence description:"""
)

REWRITE_PROMPT = PromptTemplate.from_template(
    """Rewrite this sentence to be more informative using the provided facts.

Original sentence: {sentence}

Facts to use: {facts}

Write a new, improved sentence that incorporates relevant facts:"""
)

POLISH_PROMPT = PromptTemplate.from_template(
    """Slightly polish this sentence while keeping its structure: "{sentence}"
Keep the same meaning. Output only the polished sentence:"""
)

PARAGRAPH_PROMPT = PromptTemplate.from_template(
    """Write a brief, informative paragraph about {topic} based on these facts:
{facts}

Write a 2-3 sentence summary:"""
)

SUMMARY_PROMPT = PromptTemplate.from_template(
    "Summarize this in one sentence: {text}"
)

ANSWER_WITH_CONTEXT_PROMPT = PromptTemplate.from_template(
    """Answer this question based on the context.
Context: {context}
Question: {question}
Answer:"""
)

ANSWER_SIMPLE_PROMPT = PromptTemplate.from_template(
    """Answer this question briefly and accurately:
Question: {question}
Answer:"""
)
