"""Backend config to client dispatch."""

from ...domain.entities import BackendConfig, OpenAIBackend, LocalBackend, FreeCloudBackend
from ...domain.repositories import LLMRepository
from ...exceptions import ConfigurationError
from .openai_client import OpenAILLMClient
from .ollama_client import OllamaLLMClient
from .openrouter_client import OpenRouterLLMClient


def create_llm_client(config: BackendConfig) -> LLMRepository:
    """Build the client for one of the closed set of backend configs."""
    if isinstance(config, OpenAIBackend):
        return OpenAILLMClient(config)
    if isinstance(config, LocalBackend):
        return OllamaLLMClient(config)
    if isinstance(config, FreeCloudBackend):
        return OpenRouterLLMClient(config)
    raise ConfigurationError(
        message=f"Unsupported backend config: {type(config).__name__}",
        details={'config_type': type(config).__name__}
    )
