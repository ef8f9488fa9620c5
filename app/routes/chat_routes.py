from fastapi import APIRouter, Depends
from typing import Optional
import logging

from app.database.schemas import ChatRequest, utc_timestamp
from app.services.analysis_service import AnalysisService
from app.services.document_store import DocumentStore, ChatSessionStore
from app.utils.dependencies import get_analysis_service, get_chat_store, get_document_store
from app.utils.exceptions import LegalAssistantError, NotFoundError, ProcessingError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/chat",
    tags=["Chat Bot Services"]
)

# Old clients posted to /chat/{id}; kept as thin delegates
legacy_router = APIRouter(
    prefix="/chat",
    tags=["Chat Bot Services (legacy)"]
)


@router.get("/sessions")
async def list_chat_sessions(
    chat_store: ChatSessionStore = Depends(get_chat_store),
    document_store: DocumentStore = Depends(get_document_store)
):
    """Every chat session with its message count and last message time"""
    sessions = chat_store.list_sessions()

    for session in sessions:
        record = document_store.get(session["documentId"])
        session["document"] = {
            "fileName": record.file_name,
            "documentType": record.analysis.summary.document_type
        } if record else None

    return {
        "success": True,
        "count": len(sessions),
        "sessions": sessions
    }


@router.post("/{document_id}")
async def chat_with_document(
    document_id: str,
    request: Optional[ChatRequest] = None,
    analysis_service: AnalysisService = Depends(get_analysis_service)
):
    """
    Ask a question about an uploaded document

    Example:
    ```
    POST /api/chat/3f2b...-9c1d
    {"question": "Can the landlord raise the rent?"}
    ```
    """
    question = request.question if request else None

    try:
        answer, history = await analysis_service.ask(document_id, question)
    except LegalAssistantError:
        raise
    except Exception as e:
        logger.exception(f"[ERROR] Chat processing failed: {str(e)}")
        raise ProcessingError("Chat processing failed", detail=str(e)) from e

    return {
        "success": True,
        "answer": answer,
        "documentId": document_id,
        "chatHistory": [turn.model_dump() for turn in history],
        "timestamp": utc_timestamp()
    }


@router.get("/{document_id}/history")
async def get_chat_history(document_id: str, chat_store: ChatSessionStore = Depends(get_chat_store)):
    """Chat turns for a document; unknown ids give an empty history"""
    history = chat_store.get(document_id)
    return {
        "success": True,
        "documentId": document_id,
        "chatHistory": [turn.model_dump() for turn in history],
        "messageCount": len(history)
    }


@router.delete("/{document_id}/history")
async def clear_chat_history(
    document_id: str,
    chat_store: ChatSessionStore = Depends(get_chat_store),
    document_store: DocumentStore = Depends(get_document_store)
):
    if not document_store.has(document_id):
        raise NotFoundError("Document not found")

    chat_store.clear(document_id)
    logger.info(f"[OK] Chat history cleared for {document_id}")

    return {
        "success": True,
        "message": "Chat history cleared",
        "documentId": document_id
    }


@legacy_router.post("/{document_id}")
async def legacy_chat_with_document(
    document_id: str,
    request: Optional[ChatRequest] = None,
    analysis_service: AnalysisService = Depends(get_analysis_service)
):
    return await chat_with_document(document_id, request, analysis_service)


@legacy_router.get("/{document_id}")
async def legacy_get_chat_history(document_id: str, chat_store: ChatSessionStore = Depends(get_chat_store)):
    return await get_chat_history(document_id, chat_store)
