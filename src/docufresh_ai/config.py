"""Configuration models for marker resolution."""

from __future__ import annotations

from pydantic import BaseModel, Field


class LookupConfig(BaseModel):
    """Configures the Wikipedia lookup client and its summary cache."""

    base_url: str = "https://en.wikipedia.org/api/rest_v1"
    search_url: str = "https://en.wikipedia.org/w/api.php"
    page_base_url: str = "https://en.wikipedia.org/wiki"
    cache_ttl_seconds: float = Field(default=3600.0, ge=0.0)
    timeout_seconds: float = Field(default=10.0, gt=0.0)
    user_agent: str = "DocuFresh-AI/0.1.0 (https://github.com/manthenavamsi/docufresh-ai)"


class BackendConfig(BaseModel):
    """Configures the shared generative model instance."""

    model: str = "small"
    temperature: float = Field(default=0.0, ge=0.0, le=1.0)
    default_max_new_tokens: int = Field(default=100, ge=1)


class EngineConfig(BaseModel):
    """Configures the fixpoint resolution loop."""

    max_iterations: int = Field(default=10, ge=1)
    concurrent_dispatch: bool = False
    search_fallback: bool = True
