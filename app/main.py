from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import uvicorn
import logging
import sys

from app.config.config import Config
from app.config.logging_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

try:
    Config.initialize()
except ValueError as e:
    logger.error(f"❌ {e}")
    sys.exit(1)

from app.routes import chat_routes, document_routes, system_health_routes
from app.services.analysis_service import AnalysisService
from app.services.document_processor import DocumentProcessor
from app.services.document_store import DocumentStore, ChatSessionStore
from app.services.gemini_client import GeminiClient
from app.utils.exceptions import LegalAssistantError
from app.utils.file_handler import FileHandler


async def legal_assistant_error_handler(request: Request, exc: LegalAssistantError):
    if exc.status_code >= 500:
        logger.error(f"[ERROR] {request.method} {request.url.path}: {exc.message} ({exc.detail})")
    return JSONResponse(content=exc.to_content(), status_code=exc.status_code)


def create_app(
    llm_client=None,
    document_store: DocumentStore = None,
    chat_store: ChatSessionStore = None,
    file_handler: FileHandler = None,
    document_processor: DocumentProcessor = None
) -> FastAPI:
    """Build the app with its own stores and services (override any for tests)"""
    app = FastAPI(
        title="Legal AI Server - Document Analysis with AI Chatbot",
        version=system_health_routes.VERSION,
        description="Gemini-powered legal document analysis and follow-up chat"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Initialize services
    if document_store is None:
        document_store = DocumentStore()
    if chat_store is None:
        chat_store = ChatSessionStore()
    if llm_client is None:
        llm_client = GeminiClient()

    app.state.document_store = document_store
    app.state.chat_store = chat_store
    app.state.file_handler = file_handler or FileHandler()
    app.state.document_processor = document_processor or DocumentProcessor()
    app.state.analysis_service = AnalysisService(llm_client, document_store, chat_store)

    app.add_exception_handler(LegalAssistantError, legal_assistant_error_handler)

    app.include_router(system_health_routes.router)
    app.include_router(document_routes.router)
    app.include_router(chat_routes.router)
    app.include_router(chat_routes.legacy_router)

    # Web interface; mounted last so API routes take precedence
    if Config.STATIC_DIR.is_dir():
        app.mount("/", StaticFiles(directory=Config.STATIC_DIR, html=True), name="static")
        logger.info(f"✓ Serving web interface from {Config.STATIC_DIR.absolute()}")

    logger.info("=" * 80)
    logger.info("Legal AI Server")
    logger.info(f"✓ Model: {Config.GEMINI_MODEL}")
    logger.info(f"✓ Upload directory: {app.state.file_handler.upload_dir.absolute()}")
    logger.info("=" * 80)

    return app


app = create_app()


if __name__ == "__main__":
    logger.info(f"🚀 Server running on port {Config.PORT}")
    uvicorn.run(app, host=Config.HOST, port=Config.PORT)
