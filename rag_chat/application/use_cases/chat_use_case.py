"""Chat use case implementation."""

from typing import Dict, Any, List, Optional

from ...domain.entities import ChatMessage
from ...domain.services import RelevanceRanker, AnswerService, ChatAnswer


class ChatUseCase:
    """Use case for handling chat messages."""

    def __init__(
        self,
        relevance_ranker: RelevanceRanker,
        answer_service: AnswerService,
        max_context_chunks: int,
        provider: str
    ):
        self._ranker = relevance_ranker
        self._answer_service = answer_service
        self.max_context_chunks = max_context_chunks
        self.provider = provider

    def execute(
        self,
        message: str,
        history: Optional[List[ChatMessage]] = None,
        max_chunks: Optional[int] = None
    ) -> Dict[str, Any]:
        """Answer ``message`` using chunks retrieved from the uploaded documents."""
        if not message.strip():
            raise ValueError("Message cannot be empty")

        chunks = self._ranker.find_relevant_chunks(message, max_chunks or self.max_context_chunks)
        result = self._answer_service.generate_answer(message, history or [], chunks)
        return self._to_api_response(result)

    def _to_api_response(self, result: ChatAnswer) -> Dict[str, Any]:
        return {
            "answer": result.answer,
            "context_used": result.context_used,
            "sources": result.sources,
            "provider": self.provider if result.backend_called else None
        }
