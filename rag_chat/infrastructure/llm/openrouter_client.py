"""OpenRouter (free relay) LLM implementation."""

from typing import List, Optional
import requests

from ...domain.entities import ChatMessage, FreeCloudBackend
from ...domain.repositories import LLMRepository
from ...config import LLM_REQUEST_TIMEOUT
from ...exceptions import LLMError
from ...logging_config import get_logger

logger = get_logger(__name__)

NO_KEY_TOKEN = "sk-or-v1-no-key-required"
EMPTY_REPLY = "Sorry, I could not generate a response."


class OpenRouterLLMClient(LLMRepository):
    """OpenRouter implementation of LLMRepository, used for free-tier models."""

    def __init__(self, config: FreeCloudBackend, timeout: float = LLM_REQUEST_TIMEOUT):
        self.base_url = config.base_url.rstrip('/')
        self.api_key = config.api_key
        self.model = config.model
        self.max_tokens = config.max_tokens
        self.temperature = config.temperature
        self.timeout = timeout

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key or NO_KEY_TOKEN}",
            "X-Title": "RAG Chat",
        }

    def send_message(self, history: List[ChatMessage], context: Optional[str] = None) -> str:
        payload = {
            "model": self.model,
            "messages": [m.to_dict() for m in self.with_context(history, context)],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "stream": False,
        }
        logger.info(f"Generating OpenRouter response with model: {self.model}")

        try:
            response = requests.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers=self._headers(),
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise LLMError(
                message=f"Network error connecting to OpenRouter: {str(e)}",
                details={"error": str(e)}
            ) from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if not response.ok:
            error = data.get("error") or {}
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise LLMError(
                message=message or "Failed to get response from OpenRouter Free API",
                details={"status_code": response.status_code}
            )

        choices = data.get("choices") or []
        if not choices:
            return EMPTY_REPLY
        return (choices[0].get("message") or {}).get("content") or EMPTY_REPLY

    def is_available(self) -> bool:
        try:
            response = requests.get(f"{self.base_url}/models", timeout=5)
            return response.ok
        except requests.exceptions.RequestException:
            return False
