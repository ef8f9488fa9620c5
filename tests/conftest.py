import json
import os
import tempfile

# Config is read at import time, so the environment has to be ready first
_TMP_DIR = tempfile.mkdtemp(prefix="legal-ai-tests-")
os.environ["GEMINI_API_KEY"] = "test-key"
os.environ["LOG_TO_FILE"] = "false"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["STATIC_DIR"] = os.path.join(_TMP_DIR, "public")

import fitz
import pytest
from fastapi.testclient import TestClient

from app.database.schemas import DocumentAnalysis, DocumentRecord
from app.main import create_app
from app.services.document_store import DocumentStore, ChatSessionStore
from app.utils.file_handler import FileHandler


SAMPLE_ANALYSIS = {
    "summary": {
        "overview": "A residential lease between A and B.",
        "documentType": "Lease Agreement",
        "parties": "A (landlord) and B (tenant)",
        "purpose": "Rent an apartment for twelve months"
    },
    "clauses": [
        {
            "title": "Rent",
            "description": "Tenant pays 1000 per month.",
            "benefits": ["Predictable income for the landlord"],
            "risks": ["Late fees for the tenant"],
            "importance": "High"
        }
    ],
    "keyTerms": [
        {
            "term": "Security deposit",
            "explanation": "Money held against damage",
            "impact": "Refundable at the end of the lease"
        }
    ],
    "riskAssessment": {
        "overallRisk": "Medium",
        "criticalPoints": ["Automatic renewal"],
        "recommendations": ["Diary the notice deadline"]
    }
}


class FakeLLMClient:
    """Stands in for GeminiClient: records prompts, replays canned replies"""

    def __init__(self, replies=None, error=None):
        self.replies = list(replies or [])
        self.error = error
        self.prompts = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if self.replies:
            return self.replies.pop(0)
        return "No response"


def _build_pdf(text: str = "") -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    if text:
        page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def make_pdf():
    return _build_pdf


@pytest.fixture
def sample_analysis_json():
    return json.loads(json.dumps(SAMPLE_ANALYSIS))


@pytest.fixture
def fake_llm():
    return FakeLLMClient()


@pytest.fixture
def document_store():
    return DocumentStore()


@pytest.fixture
def chat_store():
    return ChatSessionStore()


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def client(fake_llm, document_store, chat_store, upload_dir):
    app = create_app(
        llm_client=fake_llm,
        document_store=document_store,
        chat_store=chat_store,
        file_handler=FileHandler(upload_dir=upload_dir)
    )
    return TestClient(app)


@pytest.fixture
def stored_document(document_store, chat_store):
    record = DocumentRecord(
        id="doc-1",
        original_text="Lease Agreement between A and B. " * 200,
        analysis=DocumentAnalysis.model_validate(SAMPLE_ANALYSIS),
        file_name="lease.pdf"
    )
    document_store.put(record.id, record)
    chat_store.create(record.id)
    return record
