"""
Analysis Service - upload pipeline and document chat

Upload: extracted text -> analysis prompt -> Gemini -> normalizer -> stores
Chat:   question + stored analysis + history -> chat prompt -> Gemini -> history
"""

import logging
import uuid
from typing import List, Tuple

from app.database.schemas import DocumentRecord, ChatTurn
from app.services.document_store import DocumentStore, ChatSessionStore
from app.services.gemini_client import GeminiClient
from app.services.prompt_builder import build_analysis_prompt, build_chat_prompt
from app.services.response_normalizer import normalize_detailed
from app.utils.exceptions import ValidationError, NotFoundError

logger = logging.getLogger(__name__)


class AnalysisService:
    """Runs Gemini analysis and chat against the in-memory stores"""

    def __init__(
        self,
        llm_client: GeminiClient,
        document_store: DocumentStore,
        chat_store: ChatSessionStore
    ):
        self.llm_client = llm_client
        self.document_store = document_store
        self.chat_store = chat_store

    async def analyze_upload(self, file_name: str, text: str) -> DocumentRecord:
        """
        Analyze extracted document text and store the result

        Args:
            file_name: Original upload filename (display only)
            text: Extracted document text

        Returns:
            The stored DocumentRecord
        """
        if not text or not text.strip():
            raise ValidationError("Empty PDF text")

        document_id = str(uuid.uuid4())

        logger.info("=" * 80)
        logger.info(f"Analyzing document {document_id} ({file_name}, {len(text)} chars)")
        logger.info("=" * 80)

        ai_response = await self.llm_client.generate(build_analysis_prompt(text))

        result = normalize_detailed(ai_response)
        logger.info(f"Analysis parsed via '{result.method}' stage")

        record = DocumentRecord(
            id=document_id,
            original_text=text,
            analysis=result.analysis,
            file_name=file_name
        )

        self.document_store.put(document_id, record)
        self.chat_store.create(document_id)

        logger.info(f"[OK] Document stored: {document_id}")
        return record

    async def ask(self, document_id: str, question: str) -> Tuple[str, List[ChatTurn]]:
        """
        Answer a follow-up question about a stored document

        Returns:
            (answer, full chat history after this exchange)
        """
        if not question:
            raise ValidationError("Question is required")

        document = self.document_store.get(document_id)
        if document is None:
            raise NotFoundError("Document not found")

        logger.info(f"[CHATBOT] Question for document {document_id}: {question}")

        history = self.chat_store.get(document_id)
        prompt = build_chat_prompt(
            analysis=document.analysis,
            original_text=document.original_text,
            history=history,
            question=question
        )

        user_turn = ChatTurn(role="user", content=question)
        answer = await self.llm_client.generate(prompt)
        assistant_turn = ChatTurn(role="assistant", content=answer)

        updated_history = self.chat_store.append(document_id, user_turn, assistant_turn)
        logger.info(f"[OK] Answer generated ({len(answer)} chars, {len(updated_history)} messages)")

        return answer, updated_history
