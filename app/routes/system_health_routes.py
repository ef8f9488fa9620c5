from fastapi import APIRouter, Depends

from app.config.config import Config
from app.services.document_store import DocumentStore, ChatSessionStore
from app.utils.dependencies import get_chat_store, get_document_store

VERSION = "1.0.0"

router = APIRouter(tags=["System"])


@router.get("/health")
async def health_check(
    document_store: DocumentStore = Depends(get_document_store),
    chat_store: ChatSessionStore = Depends(get_chat_store)
):
    """Check service health and model status"""
    return {
        "status": "healthy",
        "model": Config.GEMINI_MODEL,
        "version": VERSION,
        "documents": len(document_store),
        "chatSessions": len(chat_store)
    }


@router.get("/")
async def root():
    return {
        "service": "Legal AI Server - document analysis with Gemini chat",
        "version": VERSION,
        "endpoints": {
            "documents": {
                "upload": "POST /upload",
                "analysis": "GET /api/document/{id}",
                "summary": "GET /api/document/{id}/summary",
                "clauses": "GET /api/document/{id}/clauses",
                "risks": "GET /api/document/{id}/risks",
                "terms": "GET /api/document/{id}/terms",
                "list": "GET /api/documents",
                "test_parse": "POST /api/test-parse"
            },
            "chatbot": {
                "ask": "POST /api/chat/{id}",
                "history": "GET /api/chat/{id}/history",
                "clear_history": "DELETE /api/chat/{id}/history",
                "sessions": "GET /api/chat/sessions"
            },
            "system": {
                "health": "/health",
                "docs": "/docs",
                "web_interface": "/index.html"
            }
        },
        "usage": {
            "1_upload": "POST /upload (multipart form, field 'file')",
            "2_chat": "POST /api/chat/{documentId} with {\"question\": ...}"
        }
    }
