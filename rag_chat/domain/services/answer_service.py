"""Answer generation domain service."""

from dataclasses import dataclass, field
from typing import List, Optional

from ..entities import ChatMessage, Role
from ..repositories import LLMRepository
from ...logging_config import get_logger

logger = get_logger(__name__)

NO_CONTEXT_ANSWER = "I couldn't find anything relevant in your uploaded documents."


@dataclass
class ChatAnswer:
    """Reply to one user message."""
    answer: str
    sources: List[str] = field(default_factory=list)
    context_used: bool = False
    backend_called: bool = True


class AnswerService:
    """Domain service for answer generation."""

    def __init__(self, llm_repository: LLMRepository, system_prompt: str, require_context: bool = False):
        self._llm_repo = llm_repository
        self.system_prompt = system_prompt
        self.require_context = require_context

    def generate_answer(
        self,
        message: str,
        history: List[ChatMessage],
        context_chunks: List[str]
    ) -> ChatAnswer:
        """Answer ``message`` given the prior turns and the retrieved chunks."""
        if not context_chunks and self.require_context:
            logger.info("No relevant chunks, answering with the fixed fallback")
            return ChatAnswer(answer=NO_CONTEXT_ANSWER, backend_called=False)

        context = self.build_context(context_chunks)
        conversation = self.build_conversation(message, history)
        answer = self._llm_repo.send_message(conversation, context)
        return ChatAnswer(answer=answer, sources=list(context_chunks), context_used=context is not None)

    @staticmethod
    def build_context(chunks: List[str]) -> Optional[str]:
        if not chunks:
            return None
        return "\n\n".join(chunks)

    def build_conversation(self, message: str, history: List[ChatMessage]) -> List[ChatMessage]:
        """System prompt, then prior turns without their own system messages, then ``message``."""
        turns = [m for m in history if m.role is not Role.SYSTEM]
        return [ChatMessage.system(self.system_prompt), *turns, ChatMessage.user(message)]
