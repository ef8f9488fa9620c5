from fastapi import Request

from app.services.analysis_service import AnalysisService
from app.services.document_processor import DocumentProcessor
from app.services.document_store import DocumentStore, ChatSessionStore
from app.utils.file_handler import FileHandler


# Dependencies for FastAPI; the instances are created once by create_app()
def get_document_store(request: Request) -> DocumentStore:
    return request.app.state.document_store


def get_chat_store(request: Request) -> ChatSessionStore:
    return request.app.state.chat_store


def get_analysis_service(request: Request) -> AnalysisService:
    return request.app.state.analysis_service


def get_file_handler(request: Request) -> FileHandler:
    return request.app.state.file_handler


def get_document_processor(request: Request) -> DocumentProcessor:
    return request.app.state.document_processor
