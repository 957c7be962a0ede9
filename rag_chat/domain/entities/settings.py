"""Chat settings entity."""

from __future__ import annotations
from dataclasses import dataclass, asdict, fields, replace
from typing import Dict, Any

from .backend import BackendKind, BackendConfig, OpenAIBackend, LocalBackend, FreeCloudBackend
from ...config import (
    DEFAULT_PROVIDER, SYSTEM_PROMPT, DEFAULT_MAX_CHUNKS, RELEVANCE_THRESHOLD,
    APPLY_RELEVANCE_THRESHOLD, REQUIRE_CONTEXT,
    OPENAI_API_KEY, OPENAI_MODEL, OLLAMA_BASE_URL, OLLAMA_MODEL,
    OPENROUTER_API_KEY, OPENROUTER_MODEL,
)
from ...exceptions import ConfigurationError


@dataclass(frozen=True)
class ChatSettings:
    """User-adjustable chat settings.

    Instances are immutable: ``update`` returns a validated copy and the
    settings repository persists it when asked to.
    """
    provider: BackendKind = DEFAULT_PROVIDER  # type: ignore[assignment]
    system_prompt: str = SYSTEM_PROMPT
    openai_api_key: str = OPENAI_API_KEY
    openai_model: str = OPENAI_MODEL
    local_base_url: str = OLLAMA_BASE_URL
    local_model: str = OLLAMA_MODEL
    free_cloud_api_key: str = OPENROUTER_API_KEY
    free_cloud_model: str = OPENROUTER_MODEL
    max_context_chunks: int = DEFAULT_MAX_CHUNKS
    apply_relevance_threshold: bool = APPLY_RELEVANCE_THRESHOLD
    relevance_threshold: float = RELEVANCE_THRESHOLD
    require_context: bool = REQUIRE_CONTEXT

    def __post_init__(self) -> None:
        if not isinstance(self.provider, BackendKind):
            try:
                object.__setattr__(self, 'provider', BackendKind(self.provider))
            except ValueError as e:
                raise ConfigurationError(
                    message=f"Unknown provider: {self.provider}",
                    details={'allowed': [k.value for k in BackendKind]}
                ) from e
        if self.max_context_chunks < 1:
            raise ConfigurationError(
                message="max_context_chunks must be at least 1",
                details={'max_context_chunks': self.max_context_chunks}
            )
        if self.relevance_threshold < 0:
            raise ConfigurationError(
                message="relevance_threshold must be non-negative",
                details={'relevance_threshold': self.relevance_threshold}
            )

    def update(self, **changes: Any) -> ChatSettings:
        """Return a copy with ``changes`` applied."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ConfigurationError(
                message=f"Unknown settings: {', '.join(unknown)}",
                details={'unknown': unknown}
            )
        return replace(self, **changes)

    def clear_api_key(self, kind: BackendKind) -> ChatSettings:
        if kind is BackendKind.OPENAI:
            return self.update(openai_api_key="")
        if kind is BackendKind.FREE_CLOUD:
            return self.update(free_cloud_api_key="")
        # the local server takes no key
        return self

    def backend_config(self) -> BackendConfig:
        """Build the config of the active backend."""
        if self.provider is BackendKind.OPENAI:
            return OpenAIBackend(api_key=self.openai_api_key, model=self.openai_model)
        if self.provider is BackendKind.LOCAL:
            return LocalBackend(base_url=self.local_base_url, model=self.local_model)
        return FreeCloudBackend(api_key=self.free_cloud_api_key, model=self.free_cloud_model)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['provider'] = self.provider.value
        return data

    def to_public_dict(self) -> Dict[str, Any]:
        """Like ``to_dict`` but with API keys masked."""
        data = self.to_dict()
        for key in ('openai_api_key', 'free_cloud_api_key'):
            data[key] = _mask(data[key])
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ChatSettings:
        """Build settings from stored values, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


def _mask(secret: str) -> str:
    if not secret:
        return ""
    if len(secret) <= 8:
        return "*" * len(secret)
    return f"{secret[:3]}...{secret[-4:]}"
