"""
Normalization of model replies into the fixed AnalysisResult shape.

The model answers in free-form text that is expected to contain a JSON
object. This module locates that object, parses it, and maps every field of
the output schema either to the model's value or to a named fallback, so a
result is never partially shaped.
"""

import json
import logging
import math
from collections.abc import Mapping
from typing import Any

from ...models import AnalysisResult, AnalysisSummary
from .exceptions import ResponseFormatError

logger = logging.getLogger(__name__)


# =============================================================================
# Fallback Values
# =============================================================================

FALLBACK_TITLE = "Titre non identifié"
FALLBACK_AUTHORS = ("Auteur inconnu",)
FALLBACK_ABSTRACT = "Résumé non disponible"
FALLBACK_DOI = "Non spécifié"
FALLBACK_YEAR = "Non spécifié"
FALLBACK_KEYWORDS = ("Non spécifié",)
FALLBACK_THEME = "Non classifié"
FALLBACK_THEME_SCORE = 75
FALLBACK_OBJECTIVES = ("Non identifié",)
FALLBACK_SUMMARY_PROBLEM = "Non identifié"
FALLBACK_SUMMARY_METHOD = "Non identifié"
FALLBACK_SUMMARY_DATA = "Non spécifié"
FALLBACK_SUMMARY_RESULTS = "Non identifié"
FALLBACK_CONCLUSIONS = ("Non identifié",)
FALLBACK_GAPS = ("Non identifié",)
FALLBACK_FUTUREWORK = ("Non spécifié",)
FALLBACK_RESEARCH_DOMAIN = "Non classifié"

INVALID_FORMAT_MESSAGE = "Format JSON invalide"


# =============================================================================
# JSON Extraction
# =============================================================================


def extract_json_object(text: str) -> str:
    """
    Return the first balanced ``{...}`` span of ``text``.

    Braces inside JSON strings are ignored, so trailing prose such as
    ``"... }"`` after the object does not leak into the result. When the
    first object is never closed, fall back to the span between the first
    ``{`` and the last ``}``.

    Raises:
        ResponseFormatError: If no brace-delimited span exists.
    """
    start = text.find("{")
    if start == -1:
        raise ResponseFormatError(INVALID_FORMAT_MESSAGE)

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]

    end = text.rfind("}")
    if end > start:
        logger.warning("Unbalanced JSON object in reply, using greedy span")
        return text[start : end + 1]

    raise ResponseFormatError(INVALID_FORMAT_MESSAGE)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def parse_analysis_reply(text: str) -> dict[str, Any]:
    """
    Extract and decode the JSON object contained in a model reply.

    ``NaN``, ``Infinity`` and ``-Infinity`` are not JSON and are rejected.

    Raises:
        ResponseFormatError: If no object is found or it is not valid JSON.
    """
    candidate = extract_json_object(text)
    try:
        return json.loads(candidate, parse_constant=_reject_constant)
    except ValueError as e:
        logger.error("Failed to parse analysis reply: %s", candidate[:500])
        raise ResponseFormatError(str(e)) from e


# =============================================================================
# Field Coercion
# =============================================================================


def _is_number(value: Any) -> bool:
    """Finite int or float; bools and overflowed literals such as 1e400 are not numbers."""
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        return math.isfinite(value)
    return isinstance(value, int)


def _coerce_text(value: Any, fallback: str) -> str:
    """Keep a non-empty string, stringify a non-zero number, else fall back."""
    if isinstance(value, str) and value:
        return value
    if _is_number(value) and value:
        return str(value)
    return fallback


def _coerce_year(value: Any) -> str | int:
    """Keep a non-zero int; an integral float such as 2023.0 becomes 2023."""
    if _is_number(value) and value and float(value).is_integer():
        return int(value)
    return _coerce_text(value, FALLBACK_YEAR)


def _coerce_list(value: Any, fallback: tuple[str, ...]) -> list[str]:
    """
    Keep a list, else use the fallback.

    Numeric items are stringified; None, booleans and nested containers
    (including objects such as ``{"name": ...}``) are dropped.
    """
    if not isinstance(value, list):
        return list(fallback)

    items = []
    for item in value:
        if isinstance(item, str):
            items.append(item)
        elif _is_number(item):
            items.append(str(item))
    return items


def _coerce_score(value: Any) -> float | int:
    if _is_number(value):
        return value
    return FALLBACK_THEME_SCORE


def _normalize_summary(value: Any) -> AnalysisSummary:
    summary = value if isinstance(value, Mapping) else {}
    return AnalysisSummary(
        problem=_coerce_text(summary.get("problem"), FALLBACK_SUMMARY_PROBLEM),
        method=_coerce_text(summary.get("method"), FALLBACK_SUMMARY_METHOD),
        data=_coerce_text(summary.get("data"), FALLBACK_SUMMARY_DATA),
        results=_coerce_text(summary.get("results"), FALLBACK_SUMMARY_RESULTS),
    )


# =============================================================================
# Normalization
# =============================================================================


def normalize_analysis(raw: Mapping[str, Any] | Any) -> AnalysisResult:
    """
    Map a loosely shaped reply onto the complete AnalysisResult schema.

    Args:
        raw: Decoded model reply. Anything that is not a mapping is treated
            as an empty reply.

    Returns:
        AnalysisResult with every field populated.
    """
    data = raw if isinstance(raw, Mapping) else {}

    return AnalysisResult(
        title=_coerce_text(data.get("title"), FALLBACK_TITLE),
        authors=_coerce_list(data.get("authors"), FALLBACK_AUTHORS),
        abstract=_coerce_text(data.get("abstract"), FALLBACK_ABSTRACT),
        doi=_coerce_text(data.get("doi"), FALLBACK_DOI),
        year=_coerce_year(data.get("year")),
        keywords=_coerce_list(data.get("keywords"), FALLBACK_KEYWORDS),
        theme=_coerce_text(data.get("theme"), FALLBACK_THEME),
        themeScore=_coerce_score(data.get("themeScore")),
        objectives=_coerce_list(data.get("objectives"), FALLBACK_OBJECTIVES),
        summary=_normalize_summary(data.get("summary")),
        conclusions=_coerce_list(data.get("conclusions"), FALLBACK_CONCLUSIONS),
        gaps=_coerce_list(data.get("gaps"), FALLBACK_GAPS),
        futurework=_coerce_list(data.get("futurework"), FALLBACK_FUTUREWORK),
        researchDomain=_coerce_text(data.get("researchDomain"), FALLBACK_RESEARCH_DOMAIN),
    )


def analyze_reply(text: str) -> AnalysisResult:
    """Parse a raw model reply and normalize it."""
    return normalize_analysis(parse_analysis_reply(text))
