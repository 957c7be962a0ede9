"""Ollama LLM implementation."""

from typing import Dict, Any, List, Optional
import requests

from ...domain.entities import ChatMessage, LocalBackend
from ...domain.repositories import LLMRepository
from ...config import LLM_REQUEST_TIMEOUT
from ...exceptions import LLMError
from ...error_handler import handle_errors
from ...logging_config import get_logger

logger = get_logger(__name__)

EMPTY_REPLY = (
    "The model provided an empty response. This might be due to the model "
    "configuration or the query format."
)


class OllamaLLMClient(LLMRepository):
    """Ollama implementation of LLMRepository."""

    def __init__(self, config: LocalBackend, timeout: float = LLM_REQUEST_TIMEOUT):
        self.base_url = config.base_url.rstrip('/')
        self.model_name = config.model
        self.api_url = f"{self.base_url}/api/chat"
        self.timeout = timeout

    def _check_connection(self) -> bool:
        """Check if Ollama server is available."""
        try:
            response = requests.get(f"{self.base_url}/api/tags", timeout=5)
            return response.status_code == 200
        except requests.exceptions.RequestException:
            return False

    def send_message(self, history: List[ChatMessage], context: Optional[str] = None) -> str:
        """Generate a reply using the Ollama chat endpoint."""
        payload = {
            "model": self.model_name,
            "messages": [m.to_dict() for m in self.with_context(history, context)],
            "stream": False,
        }

        logger.info(f"Generating Ollama response with model: {self.model_name}")

        try:
            response = requests.post(self.api_url, json=payload, timeout=self.timeout)
        except requests.exceptions.ConnectionError as e:
            raise LLMError(
                message=f"Cannot connect to Ollama server. Make sure Ollama is running on {self.base_url}",
                details={"base_url": self.base_url, "error": str(e)}
            ) from e
        except requests.exceptions.RequestException as e:
            raise LLMError(
                message=f"Network error connecting to Ollama: {str(e)}",
                details={"error": str(e)}
            ) from e

        try:
            result = response.json()
        except ValueError:
            result = {}
        if not isinstance(result, dict):
            result = {}

        if response.status_code != 200:
            raise LLMError(
                message=result.get("error") or f"Ollama server error: {response.status_code}",
                details={"status_code": response.status_code, "response": response.text[:500]}
            )

        content = (result.get("message") or {}).get("content") or ""
        if not content.strip():
            logger.warning("Empty response from Ollama")
            return EMPTY_REPLY
        return content

    @handle_errors(default_return={"available": False, "models": []}, exception_type=LLMError)
    def get_model_info(self) -> Dict[str, Any]:
        """Connection test: server reachability and installed models."""
        response = requests.get(f"{self.base_url}/api/tags", timeout=10)
        if response.status_code != 200:
            return {"available": False, "models": [], "error": f"API returned status {response.status_code}"}

        models = [m.get("name") for m in response.json().get("models", [])]
        return {
            "available": True,
            "models": models,
            "model_installed": self.model_name in models,
            "model_name": self.model_name,
            "server_url": self.base_url
        }

    def is_available(self) -> bool:
        """Check if Ollama LLM is available."""
        return self._check_connection()
