import json

import pytest

from app.utils.exceptions import UpstreamError


def _upload(client, data, filename="lease.pdf"):
    return client.post("/upload", files={"file": (filename, data, "application/pdf")})


def test_upload_fenced_reply_then_read_summary(client, fake_llm, make_pdf, sample_analysis_json, upload_dir):
    fake_llm.replies = ["```json\n" + json.dumps(sample_analysis_json, indent=2) + "\n```"]

    response = _upload(client, make_pdf("Lease Agreement between A and B..."))

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "PDF processed successfully"
    assert body["analysis"] == sample_analysis_json
    assert "Lease Agreement between A and B..." in fake_llm.prompts[0]

    document_id = body["documentId"]
    summary = client.get(f"/api/document/{document_id}/summary")
    assert summary.status_code == 200
    assert summary.json()["summary"]["documentType"] == "Lease Agreement"

    # temp upload removed, chat session created empty
    assert list(upload_dir.iterdir()) == []
    history = client.get(f"/api/chat/{document_id}/history").json()
    assert history["messageCount"] == 0


def test_upload_prose_reply_still_succeeds(client, fake_llm, make_pdf):
    prose = "This lease looks standard; watch the renewal clause."
    fake_llm.replies = [prose]

    response = _upload(client, make_pdf("Lease Agreement between A and B"))

    assert response.status_code == 200
    analysis = response.json()["analysis"]
    assert analysis["rawResponse"] == prose
    assert analysis["riskAssessment"]["overallRisk"] == "Unknown"


def test_upload_ids_are_unique(client, fake_llm, make_pdf):
    fake_llm.replies = ["{}", "{}"]

    first = _upload(client, make_pdf("Contract one")).json()["documentId"]
    second = _upload(client, make_pdf("Contract two")).json()["documentId"]

    assert first != second


def test_upload_without_file(client):
    response = client.post("/upload")

    assert response.status_code == 400
    assert response.json() == {"error": "No file uploaded"}


def test_upload_rejects_unsupported_type(client):
    response = _upload(client, b"hello", filename="notes.txt")

    assert response.status_code == 400
    assert "Invalid file type" in response.json()["error"]


def test_upload_blank_pdf(client, fake_llm, make_pdf):
    response = _upload(client, make_pdf())

    assert response.status_code == 400
    assert response.json() == {"error": "Empty PDF text"}
    assert fake_llm.prompts == []


def test_upload_corrupt_pdf(client, document_store):
    response = _upload(client, b"definitely not a pdf")

    assert response.status_code == 500
    assert response.json()["error"] == "Processing failed"
    assert "detail" in response.json()
    assert len(document_store) == 0


def test_upload_gemini_failure(client, fake_llm, make_pdf, document_store, chat_store):
    fake_llm.error = UpstreamError("Gemini request failed", detail="503 Service Unavailable")

    response = _upload(client, make_pdf("Lease Agreement"))

    assert response.status_code == 500
    assert response.json() == {"error": "Gemini request failed", "detail": "503 Service Unavailable"}
    assert len(document_store) == 0
    assert len(chat_store) == 0


def test_get_document(client, stored_document):
    response = client.get("/api/document/doc-1")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["fileName"] == "lease.pdf"
    assert body["uploadedAt"] == stored_document.uploaded_at
    assert body["analysis"]["summary"]["documentType"] == "Lease Agreement"


def test_document_slices(client, stored_document, sample_analysis_json):
    assert client.get("/api/document/doc-1/clauses").json()["clauses"] == sample_analysis_json["clauses"]
    assert client.get("/api/document/doc-1/risks").json()["riskAssessment"] == sample_analysis_json["riskAssessment"]
    assert client.get("/api/document/doc-1/terms").json()["keyTerms"] == sample_analysis_json["keyTerms"]


@pytest.mark.parametrize("path", [
    "/api/document/x",
    "/api/document/x/summary",
    "/api/document/x/clauses",
    "/api/document/x/risks",
    "/api/document/x/terms",
])
def test_unknown_document_is_404(client, path):
    response = client.get(path)

    assert response.status_code == 404
    assert response.json() == {"error": "Document not found"}


def test_list_documents(client, stored_document):
    response = client.get("/api/documents")

    body = response.json()
    assert body["success"] is True
    assert body["count"] == 1
    assert body["documents"][0] == {
        "id": "doc-1",
        "fileName": "lease.pdf",
        "uploadedAt": stored_document.uploaded_at,
        "documentType": "Lease Agreement",
        "overallRisk": "Medium"
    }


def test_parse_endpoint_direct(client, sample_analysis_json):
    response = client.post("/api/test-parse", json={"testResponse": json.dumps(sample_analysis_json)})

    body = response.json()
    assert body["success"] is True
    assert body["method"] == "direct"
    assert body["parsed"] == sample_analysis_json
    assert body["cleanResponse"].endswith("...")


def test_parse_endpoint_fenced_block(client, sample_analysis_json):
    reply = "Sure!\n```json\n" + json.dumps(sample_analysis_json) + "\n```\nDone."

    body = client.post("/api/test-parse", json={"testResponse": reply}).json()

    assert body["success"] is True
    assert body["method"] == "fenced"
    assert body["parsed"]["summary"]["documentType"] == "Lease Agreement"
    assert "extracted" in body


def test_parse_endpoint_failure(client):
    body = client.post("/api/test-parse", json={"testResponse": "no json here"}).json()

    assert body == {
        "success": False,
        "error": "No JSON found in markdown blocks",
        "rawResponse": "no json here..."
    }


def test_parse_endpoint_requires_text(client):
    response = client.post("/api/test-parse", json={})

    assert response.status_code == 400
    assert response.json() == {"error": "testResponse is required"}


def test_health_and_root(client, stored_document):
    health = client.get("/health").json()
    assert health["status"] == "healthy"
    assert health["documents"] == 1
    assert health["chatSessions"] == 1

    root = client.get("/").json()
    assert "POST /upload" in root["endpoints"]["documents"]["upload"]
