import json
from typing import List

from app.config.config import Config
from app.database.schemas import DocumentAnalysis, ChatTurn


ANALYSIS_SCHEMA = """{
  "summary": {
    "overview": "Complete overview of the document in 2-3 paragraphs",
    "documentType": "Type of legal document (contract, agreement, etc.)",
    "parties": "Who are the main parties involved",
    "purpose": "Main purpose and objectives of this document"
  },
  "clauses": [
    {
      "title": "Clause name/title",
      "description": "What this clause means in simple language",
      "benefits": ["List of benefits for each party"],
      "risks": ["List of potential risks or losses"],
      "importance": "High/Medium/Low"
    }
  ],
  "keyTerms": [
    {
      "term": "Legal term",
      "explanation": "Simple explanation of what this means",
      "impact": "How this affects the parties"
    }
  ],
  "riskAssessment": {
    "overallRisk": "Low/Medium/High",
    "criticalPoints": ["Most important things to watch out for"],
    "recommendations": ["Practical advice for the parties"]
  }
}"""


def build_analysis_prompt(document_text: str) -> str:
    """Prompt asking Gemini for the full DocumentAnalysis JSON"""

    prompt = f"""You are an expert legal AI assistant specializing in contract and legal document analysis.

Analyze the following legal document and provide a comprehensive analysis in this EXACT JSON format:

{ANALYSIS_SCHEMA}

**DOCUMENT TEXT:**

{document_text}

**IMPORTANT:** Return ONLY valid JSON, no additional text or explanations."""

    return prompt


def format_history(history: List[ChatTurn]) -> str:
    return "\n".join(f"{turn.role}: {turn.content}" for turn in history)


def build_chat_prompt(
    analysis: DocumentAnalysis,
    original_text: str,
    history: List[ChatTurn],
    question: str,
    context_chars: int = None
) -> str:
    """Prompt for a follow-up question; the original text is hard-truncated"""
    if context_chars is None:
        context_chars = Config.CHAT_CONTEXT_CHARS

    analysis_json = json.dumps(analysis.to_json(), indent=2, ensure_ascii=False)

    prompt = f"""You are a legal AI assistant helping with questions about a specific legal document.

DOCUMENT ANALYSIS SUMMARY:
{analysis_json}

ORIGINAL DOCUMENT TEXT (for reference):
{original_text[:context_chars]}...

PREVIOUS CHAT HISTORY:
{format_history(history)}

CURRENT QUESTION: {question}

Please provide a practical, easy-to-understand answer based on the document analysis.
Focus on:
1. Direct answer to the question
2. Relevant clauses or terms from the document
3. Practical implications
4. Any warnings or important considerations

Keep your response conversational and helpful."""

    return prompt
