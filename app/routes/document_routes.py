from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse
from typing import Optional
import logging

from app.database.schemas import DocumentRecord, ParseTestRequest
from app.services.analysis_service import AnalysisService
from app.services.document_processor import DocumentProcessor
from app.services.document_store import DocumentStore
from app.services.response_normalizer import normalize_detailed
from app.utils.dependencies import (
    get_analysis_service,
    get_document_processor,
    get_document_store,
    get_file_handler,
)
from app.utils.exceptions import LegalAssistantError, NotFoundError, ProcessingError, ValidationError
from app.utils.file_handler import FileHandler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Document Analysis"])


def _get_record(store: DocumentStore, document_id: str) -> DocumentRecord:
    record = store.get(document_id)
    if record is None:
        raise NotFoundError("Document not found")
    return record


@router.post("/upload")
async def upload_document(
    file: Optional[UploadFile] = File(None),
    file_handler: FileHandler = Depends(get_file_handler),
    document_processor: DocumentProcessor = Depends(get_document_processor),
    analysis_service: AnalysisService = Depends(get_analysis_service)
):
    """Upload a PDF/DOCX, extract its text and run the Gemini legal analysis"""
    if file is None or not file.filename:
        raise ValidationError("No file uploaded")

    logger.info(f"NEW UPLOAD: {file.filename}")

    file_path = await file_handler.save_upload(file)
    try:
        text = await document_processor.extract_text(file_path)
        record = await analysis_service.analyze_upload(file.filename, text)
    except LegalAssistantError:
        raise
    except Exception as e:
        logger.exception(f"[ERROR] Upload processing failed: {str(e)}")
        raise ProcessingError("Processing failed", detail=str(e)) from e
    finally:
        await file_handler.cleanup(file_path)

    return JSONResponse(content={
        "message": "PDF processed successfully",
        "documentId": record.id,
        "analysis": record.analysis.to_json()
    }, status_code=200)


@router.get("/api/documents")
async def list_documents(store: DocumentStore = Depends(get_document_store)):
    """Lightweight summaries of every uploaded document"""
    documents = store.list()
    return {
        "success": True,
        "count": len(documents),
        "documents": documents
    }


@router.get("/api/document/{document_id}")
async def get_document(document_id: str, store: DocumentStore = Depends(get_document_store)):
    """Complete document analysis"""
    record = _get_record(store, document_id)
    return {
        "success": True,
        "documentId": document_id,
        "fileName": record.file_name,
        "uploadedAt": record.uploaded_at,
        "analysis": record.analysis.to_json()
    }


@router.get("/api/document/{document_id}/summary")
async def get_document_summary(document_id: str, store: DocumentStore = Depends(get_document_store)):
    record = _get_record(store, document_id)
    return {
        "success": True,
        "documentId": document_id,
        "summary": record.analysis.summary.model_dump(by_alias=True)
    }


@router.get("/api/document/{document_id}/clauses")
async def get_document_clauses(document_id: str, store: DocumentStore = Depends(get_document_store)):
    record = _get_record(store, document_id)
    return {
        "success": True,
        "documentId": document_id,
        "clauses": [clause.model_dump(by_alias=True) for clause in record.analysis.clauses]
    }


@router.get("/api/document/{document_id}/risks")
async def get_document_risks(document_id: str, store: DocumentStore = Depends(get_document_store)):
    record = _get_record(store, document_id)
    return {
        "success": True,
        "documentId": document_id,
        "riskAssessment": record.analysis.risk_assessment.model_dump(by_alias=True)
    }


@router.get("/api/document/{document_id}/terms")
async def get_document_terms(document_id: str, store: DocumentStore = Depends(get_document_store)):
    record = _get_record(store, document_id)
    return {
        "success": True,
        "documentId": document_id,
        "keyTerms": [term.model_dump(by_alias=True) for term in record.analysis.key_terms]
    }


@router.post("/api/test-parse")
async def parse_diagnostics(request: Optional[ParseTestRequest] = None):
    """
    Run the response normalizer on a pasted Gemini reply

    Example:
    ```
    POST /api/test-parse
    {"testResponse": "```json\\n{\\"summary\\": {...}}\\n```"}
    ```
    """
    text = request.test_response if request else None
    if not text:
        raise ValidationError("testResponse is required")

    result = normalize_detailed(text)

    if result.method == "fallback":
        return {
            "success": False,
            "error": result.error,
            "rawResponse": text[:500] + "..."
        }

    content = {
        "success": True,
        "parsed": result.analysis.to_json(),
        "method": result.method
    }
    if result.method == "direct":
        content["cleanResponse"] = result.source[:200] + "..."
    else:
        content["extracted"] = result.source[:200] + "..."
    return content
