"""DocuFresh AI package."""

from .config import BackendConfig, EngineConfig, LookupConfig
from .service import DocuFreshAI

__all__ = ["BackendConfig", "DocuFreshAI", "EngineConfig", "LookupConfig"]
