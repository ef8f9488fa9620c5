from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional, Literal, Any
from datetime import datetime, timezone

Importance = Literal["High", "Medium", "Low"]
RiskLevel = Literal["Low", "Medium", "High", "Unknown"]


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _as_text_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [_as_text(item) for item in value if item is not None]
    return [_as_text(value)]


def _as_object_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (dict, BaseModel)):
        return [value]
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, (dict, BaseModel))]
    return []


def _match_choice(value: Any, choices, default: str) -> str:
    text = _as_text(value).strip().lower()
    for choice in choices:
        if text == choice.lower():
            return choice
    return default


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase JSON (the shape the LLM is asked for)"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DocumentSummary(CamelModel):
    overview: str = ""
    document_type: str = ""
    parties: str = ""
    purpose: str = ""

    @field_validator("overview", "document_type", "parties", "purpose", mode="before")
    @classmethod
    def _text(cls, value):
        return _as_text(value)


class ClauseAnalysis(CamelModel):
    title: str = ""
    description: str = ""
    benefits: List[str] = []
    risks: List[str] = []
    importance: Importance = "Medium"

    @field_validator("title", "description", mode="before")
    @classmethod
    def _text(cls, value):
        return _as_text(value)

    @field_validator("benefits", "risks", mode="before")
    @classmethod
    def _text_list(cls, value):
        return _as_text_list(value)

    @field_validator("importance", mode="before")
    @classmethod
    def _importance(cls, value):
        return _match_choice(value, ("High", "Medium", "Low"), "Medium")


class KeyTerm(CamelModel):
    term: str = ""
    explanation: str = ""
    impact: str = ""

    @field_validator("term", "explanation", "impact", mode="before")
    @classmethod
    def _text(cls, value):
        return _as_text(value)


class RiskAssessment(CamelModel):
    overall_risk: RiskLevel = "Unknown"
    critical_points: List[str] = []
    recommendations: List[str] = []

    @field_validator("overall_risk", mode="before")
    @classmethod
    def _risk(cls, value):
        return _match_choice(value, ("Low", "Medium", "High", "Unknown"), "Unknown")

    @field_validator("critical_points", "recommendations", mode="before")
    @classmethod
    def _text_list(cls, value):
        return _as_text_list(value)


class DocumentAnalysis(CamelModel):
    summary: DocumentSummary = Field(default_factory=DocumentSummary)
    clauses: List[ClauseAnalysis] = []
    key_terms: List[KeyTerm] = []
    risk_assessment: RiskAssessment = Field(default_factory=RiskAssessment)
    raw_response: Optional[str] = None  # only set on the fallback variant

    @field_validator("summary", mode="before")
    @classmethod
    def _summary(cls, value):
        if isinstance(value, str):
            return {"overview": value}
        return value if isinstance(value, (dict, BaseModel)) else {}

    @field_validator("risk_assessment", mode="before")
    @classmethod
    def _risk_assessment(cls, value):
        return value if isinstance(value, (dict, BaseModel)) else {}

    @field_validator("clauses", "key_terms", mode="before")
    @classmethod
    def _object_list(cls, value):
        return _as_object_list(value)

    @classmethod
    def fallback(cls, raw_text: str) -> "DocumentAnalysis":
        """Schema-conforming wrapper around a reply that could not be parsed"""
        return cls(
            summary=DocumentSummary(
                overview=raw_text,
                document_type="Legal Document",
                parties="Not specified",
                purpose="Document analysis"
            ),
            clauses=[],
            key_terms=[],
            risk_assessment=RiskAssessment(
                overall_risk="Unknown",
                critical_points=["Unable to parse detailed analysis"],
                recommendations=["Please review the document manually"]
            ),
            raw_response=raw_text
        )

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class DocumentRecord(CamelModel):
    id: str
    original_text: str
    analysis: DocumentAnalysis
    file_name: str
    uploaded_at: str = Field(default_factory=utc_timestamp)


class ChatTurn(CamelModel):
    role: Literal["user", "assistant"]
    content: str
    timestamp: str = Field(default_factory=utc_timestamp)


# Request bodies. Fields are optional so a missing value reaches the
# handler and is reported as a 400 rather than FastAPI's 422.
class ChatRequest(BaseModel):
    question: Optional[str] = None


class ParseTestRequest(CamelModel):
    test_response: Optional[str] = None
