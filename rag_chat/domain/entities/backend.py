"""Chat backend configurations.

Each backend kind has its own frozen config type; ``BackendConfig`` is the
closed union of them. Clients are built from a config by a single dispatch
function in the infrastructure layer.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union
from enum import Enum

from ...config import (
    OPENAI_MODEL, OPENAI_MAX_TOKENS, OPENAI_TEMPERATURE,
    OLLAMA_BASE_URL, OLLAMA_MODEL,
    OPENROUTER_BASE_URL, OPENROUTER_MODEL, OPENROUTER_MAX_TOKENS, OPENROUTER_TEMPERATURE,
)


class BackendKind(Enum):
    """Supported chat backends."""
    OPENAI = "openai"
    LOCAL = "local"
    FREE_CLOUD = "free-cloud"


@dataclass(frozen=True)
class OpenAIBackend:
    """Hosted OpenAI chat completions."""
    api_key: str
    model: str = OPENAI_MODEL
    max_tokens: int = OPENAI_MAX_TOKENS
    temperature: float = OPENAI_TEMPERATURE

    kind = BackendKind.OPENAI


@dataclass(frozen=True)
class LocalBackend:
    """Locally running Ollama server."""
    base_url: str = OLLAMA_BASE_URL
    model: str = OLLAMA_MODEL

    kind = BackendKind.LOCAL


@dataclass(frozen=True)
class FreeCloudBackend:
    """OpenRouter free-tier relay."""
    api_key: str = ""
    model: str = OPENROUTER_MODEL
    base_url: str = OPENROUTER_BASE_URL
    max_tokens: int = OPENROUTER_MAX_TOKENS
    temperature: float = OPENROUTER_TEMPERATURE

    kind = BackendKind.FREE_CLOUD


BackendConfig = Union[OpenAIBackend, LocalBackend, FreeCloudBackend]
