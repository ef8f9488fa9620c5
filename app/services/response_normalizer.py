"""
Response Normalizer - turns a free-text Gemini reply into a DocumentAnalysis

The reply is supposed to be a bare JSON object but in practice arrives
wrapped in markdown fences, sometimes with prose around them. Stages are
tried in order; the fallback stage always succeeds, so normalize() never
raises.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from pydantic import ValidationError as SchemaError

from app.database.schemas import DocumentAnalysis

logger = logging.getLogger(__name__)

_JSON_FENCE_OPEN = re.compile(r"^```json\s*\n?")
_BARE_FENCE_OPEN = re.compile(r"^```\s*\n?")
_FENCE_CLOSE = re.compile(r"\n?\s*```\Z")
_FENCED_JSON_BLOCK = re.compile(r"```json\s*\n([\s\S]*?)\n\s*```")

PREVIEW_CHARS = 500


@dataclass
class NormalizationResult:
    analysis: DocumentAnalysis
    method: str                  # "direct", "fenced" or "fallback"
    source: str                  # text that was handed to the JSON parser
    error: Optional[str] = None  # why the last failed stage failed


def strip_fences(text: str) -> str:
    """Trim and drop a leading ```json / ``` fence and a trailing ``` fence"""
    cleaned = text.strip()
    cleaned = _FENCE_CLOSE.sub("", _JSON_FENCE_OPEN.sub("", cleaned))
    cleaned = _FENCE_CLOSE.sub("", _BARE_FENCE_OPEN.sub("", cleaned))
    return cleaned.strip()


def extract_fenced_block(text: str) -> Optional[str]:
    """Interior of the first ```json ... ``` block, or None"""
    match = _FENCED_JSON_BLOCK.search(text)
    if not match:
        return None
    return match.group(1).strip()


def parse_analysis(candidate: Optional[str]) -> Optional[DocumentAnalysis]:
    """Parse a JSON object into a DocumentAnalysis; None on any failure"""
    if not candidate:
        return None
    try:
        payload = json.loads(candidate)
    except (ValueError, RecursionError) as e:
        logger.debug(f"JSON parse failed: {e}")
        return None

    if not isinstance(payload, dict):
        logger.debug(f"JSON parse produced {type(payload).__name__}, expected object")
        return None

    # rawResponse marks the fallback variant; only DocumentAnalysis.fallback sets it
    payload.pop("rawResponse", None)
    payload.pop("raw_response", None)

    try:
        return DocumentAnalysis.model_validate(payload)
    except SchemaError as e:
        logger.debug(f"JSON does not fit the analysis schema: {e}")
        return None


# (method name, candidate extractor) in cascade order
STAGES: List[Tuple[str, Callable[[str], Optional[str]]]] = [
    ("direct", strip_fences),
    ("fenced", extract_fenced_block),
]


def normalize_detailed(text: str) -> NormalizationResult:
    """Run the cascade and report which stage produced the analysis"""
    text = text or ""
    error = None

    for method, extract in STAGES:
        candidate = extract(text)
        analysis = parse_analysis(candidate)
        if analysis is not None:
            logger.info(f"✓ Parsed AI response ({method}, {len(candidate)} chars)")
            return NormalizationResult(analysis=analysis, method=method, source=candidate)

        if candidate is None:
            error = "No JSON found in markdown blocks"
        else:
            error = f"{method} stage could not parse a JSON analysis object"
        logger.info(f"✗ {error}")

    logger.warning("Falling back to raw response wrapper")
    logger.warning(f"Raw AI response length: {len(text)}")
    logger.warning(f"First {PREVIEW_CHARS} chars: {text[:PREVIEW_CHARS]}")
    return NormalizationResult(
        analysis=DocumentAnalysis.fallback(text),
        method="fallback",
        source=text,
        error=error
    )


def normalize(text: str) -> DocumentAnalysis:
    """Always returns a schema-conforming analysis"""
    return normalize_detailed(text).analysis
