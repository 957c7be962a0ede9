"""OpenAI LLM implementation."""

from typing import List, Optional
from openai import OpenAI, OpenAIError

from ...domain.entities import ChatMessage, OpenAIBackend
from ...domain.repositories import LLMRepository
from ...config import LLM_REQUEST_TIMEOUT
from ...exceptions import LLMError
from ...logging_config import get_logger

logger = get_logger(__name__)

EMPTY_REPLY = "Sorry, I could not generate a response."


class OpenAILLMClient(LLMRepository):
    """OpenAI implementation of LLMRepository."""

    def __init__(self, config: OpenAIBackend, client: Optional[OpenAI] = None):
        self.api_key = config.api_key
        self.model = config.model
        self.max_tokens = config.max_tokens
        self.temperature = config.temperature
        self._client = client

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, timeout=LLM_REQUEST_TIMEOUT)
        return self._client

    def is_available(self) -> bool:
        """The hosted API is usable whenever a key is configured."""
        return bool(self.api_key)

    def send_message(self, history: List[ChatMessage], context: Optional[str] = None) -> str:
        """Generate a reply using OpenAI chat completions."""
        if not self.api_key:
            raise LLMError(message="OpenAI API key is required")

        messages = [m.to_dict() for m in self.with_context(history, context)]
        logger.info(f"Generating OpenAI response with model: {self.model}")
        try:
            response = self._get_client().chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=self.max_tokens,
                temperature=self.temperature
            )
        except OpenAIError as e:
            raise LLMError(
                message=f"Failed to get response from OpenAI: {str(e)}",
                details={"model": self.model, "error": str(e)}
            ) from e

        if not response.choices:
            return EMPTY_REPLY
        return response.choices[0].message.content or EMPTY_REPLY
