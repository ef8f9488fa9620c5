"""
In-memory stores for uploaded documents and their chat sessions.

Both live for the lifetime of the process only. One instance of each is
created by the app factory and handed to route handlers through
FastAPI dependencies.
"""

import threading
from typing import Dict, List, Optional, Any

from app.database.schemas import DocumentRecord, ChatTurn


class DocumentStore:
    """Document id -> DocumentRecord, insertion ordered, last write wins"""

    def __init__(self):
        self._documents: Dict[str, DocumentRecord] = {}
        self._lock = threading.Lock()

    def put(self, document_id: str, record: DocumentRecord) -> None:
        with self._lock:
            self._documents[document_id] = record

    def get(self, document_id: str) -> Optional[DocumentRecord]:
        with self._lock:
            return self._documents.get(document_id)

    def has(self, document_id: str) -> bool:
        with self._lock:
            return document_id in self._documents

    def list(self) -> List[Dict[str, Any]]:
        """Lightweight summaries for the documents listing"""
        with self._lock:
            records = list(self._documents.values())

        return [
            {
                "id": record.id,
                "fileName": record.file_name,
                "uploadedAt": record.uploaded_at,
                "documentType": record.analysis.summary.document_type or "Unknown",
                "overallRisk": record.analysis.risk_assessment.overall_risk or "Unknown"
            }
            for record in records
        ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._documents)


class ChatSessionStore:
    """Document id -> ordered chat turns"""

    def __init__(self):
        self._sessions: Dict[str, List[ChatTurn]] = {}
        self._lock = threading.Lock()

    def create(self, document_id: str) -> None:
        with self._lock:
            self._sessions[document_id] = []

    def get(self, document_id: str) -> List[ChatTurn]:
        """Copy of the turns; empty for unknown ids"""
        with self._lock:
            return list(self._sessions.get(document_id, []))

    def append(self, document_id: str, *turns: ChatTurn) -> List[ChatTurn]:
        """Append all turns under one lock and return the updated history"""
        with self._lock:
            history = self._sessions.setdefault(document_id, [])
            history.extend(turns)
            return list(history)

    def clear(self, document_id: str) -> None:
        with self._lock:
            self._sessions[document_id] = []

    def list_sessions(self) -> List[Dict[str, Any]]:
        with self._lock:
            sessions = [(document_id, list(history)) for document_id, history in self._sessions.items()]

        return [
            {
                "documentId": document_id,
                "messageCount": len(history),
                "lastMessage": history[-1].timestamp if history else None
            }
            for document_id, history in sessions
        ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
