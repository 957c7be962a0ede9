"""Domain services package."""

from .retrieval_service import RelevanceRanker, relevance_score
from .answer_service import AnswerService, ChatAnswer, NO_CONTEXT_ANSWER
from .ingestion_service import IngestionPipeline, LocalFile

__all__ = [
    'RelevanceRanker',
    'relevance_score',
    'AnswerService',
    'ChatAnswer',
    'NO_CONTEXT_ANSWER',
    'IngestionPipeline',
    'LocalFile'
]
