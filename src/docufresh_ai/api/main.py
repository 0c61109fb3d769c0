"""FastAPI entrypoint for resolve/marker/trace endpoints."""

from __future__ import annotations

import os
from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from docufresh_ai.config import BackendConfig, EngineConfig, LookupConfig
from docufresh_ai.generation.backend import GenerativeBackend
from docufresh_ai.service import DocuFreshAI


def _create_backend() -> GenerativeBackend | None:
    if not os.getenv("OPENAI_API_KEY"):
        return None
    return GenerativeBackend(BackendConfig(model=os.getenv("DOCUFRESH_MODEL", "small")))


def _lookup_config() -> LookupConfig:
    ttl = os.getenv("DOCUFRESH_CACHE_TTL")
    if ttl is None:
        return LookupConfig()
    return LookupConfig(cache_ttl_seconds=float(ttl))


class ResolveRequest(BaseModel):
    text: str
    data: dict[str, str | int | float] = Field(default_factory=dict)


app = FastAPI(title="DocuFresh AI", version="0.1.0")

_backend = _create_backend()
_service = DocuFreshAI(
    lookup_config=_lookup_config(),
    engine_config=EngineConfig(),
    backend=_backend,
    use_ai=_backend is not None,
)


@app.get("/health")
def health() -> dict[str, Any]:
    return {
        "status": "ok",
        "llm_configured": _backend is not None,
        "mode": "ai" if _backend is not None else "deterministic",
        "model": _service.model,
        "trace_count": len(_service.trace_store.list_recent(limit=1000)),
    }


@app.post("/resolve")
async def resolve(request: ResolveRequest) -> dict[str, Any]:
    try:
        outcome = await _service.process_detailed(request.text, dict(request.data))
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return {
        "text": outcome.text,
        "iterations": outcome.iterations,
        "state": outcome.state.value,
        "trace_id": outcome.trace_id,
        "markers": [asdict(trace) for trace in outcome.traces],
    }


@app.get("/markers")
def markers() -> dict[str, Any]:
    return {"items": _service.registry.describe()}


@app.get("/models")
def models() -> dict[str, Any]:
    return {
        "items": {key: DocuFreshAI.model_info(key) for key in DocuFreshAI.available_models()},
        "current": _service.model,
    }


@app.post("/cache/clear")
def clear_cache() -> dict[str, str]:
    _service.clear_cache()
    return {"status": "cleared"}


@app.get("/traces")
def traces(limit: int = 20) -> dict[str, Any]:
    records = [asdict(record) for record in _service.trace_store.list_recent(limit=limit)]
    return {"items": records}


@app.get("/traces/{trace_id}")
def trace_detail(trace_id: str) -> dict[str, Any]:
    try:
        record = _service.trace_store.get(trace_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return asdict(record)


@app.get("/metrics")
def metrics() -> dict[str, Any]:
    return _service.trace_store.summary()
