from docufresh_ai.generation.prompts import (
    ANSWER_SIMPLE_PROMPT,
    ANSWER_WITH_CONTEXT_PROMPT,
    KEY_FACT_PROMPT,
    PARAGRAPH_PROMPT,
    POLISH_PROMPT,
)


def test_grounded_prompts_carry_their_source_text() -> None:
    prompt = ANSWER_WITH_CONTEXT_PROMPT.format(context="CTX", question="Q?")

    assert "based on the context" in prompt
    assert "Context: CTX" in prompt
    assert "Question: Q?" in prompt
    assert "FACTS" in PARAGRAPH_PROMPT.format(topic="T", facts="FACTS")


def test_prompts_ask_for_bare_output() -> None:
    assert "Output only the fact in one sentence" in KEY_FACT_PROMPT.format(text="x")
    assert "Output only the polished sentence" in POLISH_PROMPT.format(sentence="x")
    assert ANSWER_SIMPLE_PROMPT.format(question="Q?").rstrip().endswith("Answer:")


def test_prompt_variables_are_declared() -> None:
    assert set(ANSWER_WITH_CONTEXT_PROMPT.input_variables) == {"context", "question"}
    assert set(PARAGRAPH_PROMPT.input_variables) == {"topic", "facts"}
