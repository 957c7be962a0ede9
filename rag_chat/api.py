"""FastAPI backend for the RAG chat assistant (API only).

Endpoints:
  POST   /documents          -> upload and ingest a text/markdown/csv/json/docx file
  GET    /documents          -> stored documents (without content)
  DELETE /documents/{id}     -> remove a document (no-op for unknown ids)
  DELETE /documents          -> remove every document
  GET    /documents/search   -> scored chunks for ?q=&k=
  POST   /chat               -> {message, history} returns {answer, context_used, sources, provider}
  GET    /settings           -> chat settings with API keys masked
  PUT    /settings           -> update and persist chat settings
  GET    /backend/status     -> whether the active backend is reachable
  GET    /health             -> {'status':'ok'}
  GET    /stats              -> document and chunk counts
"""

from typing import Dict, Any, List, Optional
from fastapi import FastAPI, File, Query, UploadFile, HTTPException
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .container import container
from .config import (
    API_HOST, API_PORT, FRONTEND_VITE_PORT, FRONTEND_REACT_PORT,
    CHUNK_SIZE, CHUNK_OVERLAP
)
from .domain.entities import ChatMessage, Document, Role, BackendKind
from .exceptions import RagChatError, LLMError
from .error_handler import http_status_for, log_error, safe_execute
from .infrastructure.llm import OllamaLLMClient
from .logging_config import get_logger

logger = get_logger(__name__)

app = FastAPI(title="RAG Chat Assistant")


@app.exception_handler(RagChatError)
async def rag_chat_exception_handler(request, exc: RagChatError):
    log_error(exc, f"API error in {request.url.path}")
    return JSONResponse(
        status_code=http_status_for(exc),
        content={
            "error": exc.error_code,
            "message": exc.message,
            "details": exc.details
        }
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        f"http://127.0.0.1:{FRONTEND_VITE_PORT}",
        f"http://localhost:{FRONTEND_VITE_PORT}",
        f"http://127.0.0.1:{FRONTEND_REACT_PORT}",
        f"http://localhost:{FRONTEND_REACT_PORT}",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class MessageModel(BaseModel):
    role: Role
    content: str


class ChatRequest(BaseModel):
    message: str
    history: List[MessageModel] = Field(default_factory=list)


class SettingsUpdate(BaseModel):
    provider: Optional[BackendKind] = None
    system_prompt: Optional[str] = None
    openai_api_key: Optional[str] = None
    openai_model: Optional[str] = None
    local_base_url: Optional[str] = None
    local_model: Optional[str] = None
    free_cloud_api_key: Optional[str] = None
    free_cloud_model: Optional[str] = None
    max_context_chunks: Optional[int] = Field(None, ge=1, le=20)
    apply_relevance_threshold: Optional[bool] = None
    relevance_threshold: Optional[float] = Field(None, ge=0)
    require_context: Optional[bool] = None


def _document_summary(document: Document) -> Dict[str, Any]:
    return {
        "id": document.id,
        "filename": document.filename,
        "uploadedAt": document.uploaded_at.isoformat(),
        "chunks": document.chunk_count,
    }


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/documents", status_code=201)
async def upload_document(file: UploadFile = File(...)) -> Dict[str, Any]:
    """Ingest one uploaded file."""
    logger.info(f"Upload request: {file.filename} ({file.content_type})")
    document = await container.ingestion_pipeline().ingest(file)
    return _document_summary(document)


@app.get("/documents")
def list_documents() -> List[Dict[str, Any]]:
    return [_document_summary(d) for d in container.ingestion_pipeline().list_documents()]


@app.delete("/documents/{document_id}")
def delete_document(document_id: str) -> Dict[str, Any]:
    removed = container.ingestion_pipeline().remove(document_id)
    return {"id": document_id, "removed": removed}


@app.delete("/documents")
def clear_documents() -> Dict[str, str]:
    container.document_repository().clear()
    return {"status": "cleared"}


@app.get("/documents/search")
def search_documents(
    q: str = Query(..., min_length=1, description="Query text"),
    k: int = Query(2, ge=1, le=20, description="Maximum number of chunks")
) -> Dict[str, Any]:
    results = container.relevance_ranker().rank(q, k)
    return {
        "query": q,
        "results": [{"chunk": r.chunk, "score": r.score} for r in results]
    }


@app.post("/chat")
def chat(req: ChatRequest) -> Dict[str, Any]:
    """Answer a message, adding context from uploaded documents when relevant."""
    message = req.message.strip()
    if not message:
        return JSONResponse({"error": "empty message"}, status_code=400)

    history = [ChatMessage(role=m.role, content=m.content) for m in req.history]
    try:
        logger.info(f"Chat request: {message[:50]}... (history={len(history)})")
        return container.chat_use_case().execute(message, history)
    except RagChatError:
        # handled by the global exception handler
        raise
    except Exception as e:
        log_error(e, "Unexpected error in chat endpoint", {'message': message[:200]})
        raise HTTPException(
            status_code=500,
            detail={
                "error": "InternalServerError",
                "message": "An unexpected error occurred while processing your request"
            }
        )


@app.get("/settings")
def get_settings() -> Dict[str, Any]:
    return container.settings().to_public_dict()


@app.put("/settings")
def update_settings(update: SettingsUpdate) -> Dict[str, Any]:
    changes = update.model_dump(exclude_none=True)
    settings = container.update_settings(**changes)
    logger.info(f"Settings updated: {sorted(changes)}")
    return settings.to_public_dict()


@app.delete("/settings/api-key/{provider}")
def clear_api_key(provider: BackendKind) -> Dict[str, Any]:
    return container.clear_api_key(provider).to_public_dict()


@app.get("/backend/status")
def backend_status() -> Dict[str, Any]:
    settings = container.settings()
    available = safe_execute(
        lambda: container.llm_repository().is_available(),
        context="Backend availability check",
        default_return=False,
        exception_type=LLMError
    )
    status = {"provider": settings.provider.value, "available": bool(available)}
    client = container.llm_repository()
    if isinstance(client, OllamaLLMClient):
        status["local"] = client.get_model_info()
    return status


@app.get("/stats")
def stats() -> Dict[str, Any]:
    documents = container.document_repository().list_documents()
    return {
        "documents": len(documents),
        "chunks": sum(d.chunk_count for d in documents),
        "chunk_size": CHUNK_SIZE,
        "chunk_overlap": CHUNK_OVERLAP,
    }


@app.get("/")
def root() -> Dict[str, Any]:
    return {
        "name": "RAG Chat Assistant API",
        "endpoints": [
            "POST /documents", "GET /documents", "DELETE /documents/{id}", "DELETE /documents",
            "GET /documents/search", "POST /chat", "GET /settings", "PUT /settings",
            "DELETE /settings/api-key/{provider}", "GET /backend/status", "GET /stats", "GET /health"
        ],
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("rag_chat.api:app", host=API_HOST, port=API_PORT, reload=True)
