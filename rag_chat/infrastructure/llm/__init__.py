"""LLM infrastructure module."""

from .openai_client import OpenAILLMClient
from .ollama_client import OllamaLLMClient
from .openrouter_client import OpenRouterLLMClient
from .factory import create_llm_client

__all__ = ['OpenAILLMClient', 'OllamaLLMClient', 'OpenRouterLLMClient', 'create_llm_client']
