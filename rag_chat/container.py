"""Dependency injection container."""

from typing import Optional, Any

from .domain.entities import ChatSettings, BackendKind
from .domain.repositories import KeyValueStore, DocumentRepository, LLMRepository
from .domain.services import RelevanceRanker, AnswerService, IngestionPipeline
from .infrastructure.storage import JsonFileKeyValueStore, KeyValueDocumentRepository, SettingsRepository
from .infrastructure.llm import create_llm_client
from .application.use_cases import ChatUseCase
from .config import STORE_PATH, CHUNK_SIZE, CHUNK_OVERLAP, MAX_UPLOAD_BYTES
from .logging_config import get_logger

logger = get_logger(__name__)


class Container:
    """Dependency injection container.

    Settings are loaded once, lazily, and change only through
    ``update_settings``; services that depend on them are rebuilt on change.
    """

    def __init__(self, store_path: str = STORE_PATH):
        self.store_path = store_path
        self._key_value_store: Optional[KeyValueStore] = None
        self._settings_repository: Optional[SettingsRepository] = None
        self._settings: Optional[ChatSettings] = None
        self._document_repository: Optional[DocumentRepository] = None
        self._llm_repository: Optional[LLMRepository] = None
        self._ingestion_pipeline: Optional[IngestionPipeline] = None
        self._relevance_ranker: Optional[RelevanceRanker] = None
        self._answer_service: Optional[AnswerService] = None
        self._chat_use_case: Optional[ChatUseCase] = None

    def key_value_store(self) -> KeyValueStore:
        if self._key_value_store is None:
            logger.info(f"Creating JsonFileKeyValueStore at: {self.store_path}")
            self._key_value_store = JsonFileKeyValueStore(self.store_path)
        return self._key_value_store

    def settings_repository(self) -> SettingsRepository:
        if self._settings_repository is None:
            self._settings_repository = SettingsRepository(self.key_value_store())
        return self._settings_repository

    def settings(self) -> ChatSettings:
        """Current settings, loaded from storage on first use."""
        if self._settings is None:
            self._settings = self.settings_repository().load()
        return self._settings

    def update_settings(self, persist: bool = True, **changes: Any) -> ChatSettings:
        """Apply ``changes`` and optionally save them."""
        self._settings = self.settings().update(**changes)
        if persist:
            self.settings_repository().save(self._settings)
        self._reset_settings_dependents()
        return self._settings

    def clear_api_key(self, kind: BackendKind) -> ChatSettings:
        self._settings = self.settings().clear_api_key(kind)
        self.settings_repository().save(self._settings)
        self._reset_settings_dependents()
        return self._settings

    def document_repository(self) -> DocumentRepository:
        if self._document_repository is None:
            self._document_repository = KeyValueDocumentRepository(self.key_value_store())
        return self._document_repository

    def llm_repository(self) -> LLMRepository:
        """Client for the active backend."""
        if self._llm_repository is None:
            config = self.settings().backend_config()
            logger.info(f"Creating {config.kind.value} LLM client")
            self._llm_repository = create_llm_client(config)
        return self._llm_repository

    def ingestion_pipeline(self) -> IngestionPipeline:
        if self._ingestion_pipeline is None:
            self._ingestion_pipeline = IngestionPipeline(
                document_repository=self.document_repository(),
                chunk_size=CHUNK_SIZE,
                chunk_overlap=CHUNK_OVERLAP,
                max_bytes=MAX_UPLOAD_BYTES
            )
        return self._ingestion_pipeline

    def relevance_ranker(self) -> RelevanceRanker:
        if self._relevance_ranker is None:
            settings = self.settings()
            self._relevance_ranker = RelevanceRanker(
                document_repository=self.document_repository(),
                min_score=settings.relevance_threshold,
                apply_threshold=settings.apply_relevance_threshold
            )
        return self._relevance_ranker

    def answer_service(self) -> AnswerService:
        if self._answer_service is None:
            settings = self.settings()
            self._answer_service = AnswerService(
                llm_repository=self.llm_repository(),
                system_prompt=settings.system_prompt,
                require_context=settings.require_context
            )
        return self._answer_service

    def chat_use_case(self) -> ChatUseCase:
        if self._chat_use_case is None:
            settings = self.settings()
            self._chat_use_case = ChatUseCase(
                relevance_ranker=self.relevance_ranker(),
                answer_service=self.answer_service(),
                max_context_chunks=settings.max_context_chunks,
                provider=settings.provider.value
            )
        return self._chat_use_case

    def _reset_settings_dependents(self) -> None:
        self._llm_repository = None
        self._relevance_ranker = None
        self._answer_service = None
        self._chat_use_case = None

    def reset(self):
        """Reset all instances (useful for testing)."""
        self._key_value_store = None
        self._settings_repository = None
        self._settings = None
        self._document_repository = None
        self._ingestion_pipeline = None
        self._reset_settings_dependents()
        logger.info("Container reset")


# Global container instance
container = Container()
