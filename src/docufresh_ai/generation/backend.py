"""Shared generative model lifecycle built on LangChain chat models."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from docufresh_ai.config import BackendConfig

logger = logging.getLogger(__name__)

SUPPORTED_MODELS: dict[str, dict[str, str]] = {
    "small": {
        "id": "gpt-4o-mini",
        "name": "GPT-4o mini",
        "quality": "good",
        "description": "Fast, inexpensive model for simple tasks",
    },
    "base": {
        "id": "gpt-4.1-mini",
        "name": "GPT-4.1 mini",
        "quality": "better",
        "description": "Balanced model for most use cases",
    },
    "large": {
        "id": "gpt-4o",
        "name": "GPT-4o",
        "quality": "best",
        "description": "Highest quality, slower and more expensive",
    },
}

ModelFactory = Callable[[str], Any]
ProgressCallback = Callable[[dict[str, Any]], None]


class GenerationError(RuntimeError):
    """Raised when the backend cannot produce a completion."""


def _create_chat_model(model_id: str) -> Any:
    from langchain_openai import ChatOpenAI

    return ChatOpenAI(model=model_id, temperature=0)


def resolve_model(model: str) -> str:
    """Map a catalog key to its model id; anything else is a custom id."""
    info = SUPPORTED_MODELS.get(model)
    if info is not None:
        return info["id"]
    return model


class GenerativeBackend:
    """Owns the single chat model instance used by every marker handler.

    The instance is created lazily on first use. Concurrent `init()` calls
    await the same load, and completions are serialized on the shared
    instance.
    """

    def __init__(
        self,
        config: BackendConfig | None = None,
        *,
        model_factory: ModelFactory | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self.config = config or BackendConfig()
        self._model_id = resolve_model(self.config.model)
        self._temperature = self.config.temperature
        self._model_factory = model_factory or _create_chat_model
        self._on_progress = on_progress
        self._llm: Any | None = None
        self._init_lock = asyncio.Lock()
        self._generate_lock = asyncio.Lock()

    @staticmethod
    def available_models() -> list[str]:
        return list(SUPPORTED_MODELS)

    @staticmethod
    def model_info(model_key: str) -> dict[str, str] | None:
        info = SUPPORTED_MODELS.get(model_key)
        return dict(info) if info is not None else None

    @property
    def model(self) -> str:
        return self._model_id

    @property
    def temperature(self) -> float:
        return self._temperature

    @temperature.setter
    def temperature(self, value: float) -> None:
        self._temperature = max(0.0, min(1.0, value))

    def is_ready(self) -> bool:
        return self._llm is not None

    async def init(self) -> None:
        if self._llm is not None:
            return
        async with self._init_lock:
            if self._llm is not None:
                return

            model_id = self._model_id
            logger.info(f"Loading generative model: {model_id}")
            self._report({"status": "initiate", "model": model_id})
            try:
                llm = await asyncio.to_thread(self._model_factory, model_id)
            except Exception as exc:
                logger.error(f"Failed to initialize generative model {model_id}: {exc}")
                raise

            self._llm = llm
            self._report({"status": "ready", "model": model_id})
            logger.info(f"Generative model {model_id} ready")

    async def generate(
        self,
        prompt: str,
        *,
        max_new_tokens: int | None = None,
        temperature: float | None = None,
        deterministic: bool | None = None,
    ) -> str:
        """Run one completion against the shared model.

        Sampling defaults to the backend temperature; a temperature of 0 is
        deterministic unless `deterministic` says otherwise.
        """
        try:
            await self.init()
        except Exception as exc:
            raise GenerationError(f"Model {self._model_id} is unavailable: {exc}") from exc

        temp = self._temperature if temperature is None else temperature
        if deterministic is None:
            deterministic = temp <= 0
        params = {
            "max_tokens": max_new_tokens or self.config.default_max_new_tokens,
            "temperature": 0.0 if deterministic else temp,
        }

        async with self._generate_lock:
            try:
                response = await self._llm.ainvoke(prompt, **params)
            except Exception as exc:
                raise GenerationError(f"Generation failed on {self._model_id}: {exc}") from exc

        return _message_text(response).strip()

    async def set_model(self, model: str) -> None:
        async with self._init_lock:
            self._model_id = resolve_model(model)
            self._llm = None
        await self.init()

    def _report(self, event: dict[str, Any]) -> None:
        if self._on_progress is not None:
            self._on_progress(event)


def _message_text(response: Any) -> str:
    if isinstance(response, str):
        return response
    content = getattr(response, "content", response)
    if isinstance(content, list):
        parts: list[str] = []
        for item in content:
            if isinstance(item, dict) and "text" in item:
                parts.append(str(item["text"]))
            else:
                parts.append(str(item))
        return " ".join(parts)
    return str(content)
