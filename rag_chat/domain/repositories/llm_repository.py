"""Abstract LLM repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities import ChatMessage, Role

CONTEXT_TEMPLATE = (
    "{prompt}\n\nAdditional context from uploaded documents:\n{context}\n\n"
    "Please use this context to provide more accurate and relevant answers when applicable."
)


class LLMRepository(ABC):
    """Abstract interface for chat backends."""

    @abstractmethod
    def send_message(self, history: List[ChatMessage], context: Optional[str] = None) -> str:
        """Send the conversation to the backend and return the reply text."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the backend can be reached."""
        pass

    @staticmethod
    def with_context(history: List[ChatMessage], context: Optional[str]) -> List[ChatMessage]:
        """Fold ``context`` into the leading system message, if there is one."""
        messages = list(history)
        if context and messages and messages[0].role is Role.SYSTEM:
            messages[0] = ChatMessage.system(
                CONTEXT_TEMPLATE.format(prompt=messages[0].content, context=context)
            )
        return messages
