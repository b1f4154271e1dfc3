"""Schema validation of parsed model output.

Evaluation payloads get a light normalization pass first so near-conformant
output (an extra sentence, a stray line break, a fractional score) is
absorbed. Normalization only trims, rounds or collapses existing values and
always runs before validation, never instead of it.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any

from pydantic import ValidationError

from rubricscore.errors import EvaluationInvalid, RubricStructureInvalid
from rubricscore.schemas import (
    FEEDBACK_MAX_CHARS,
    IMPROVEMENT_MAX_CHARS,
    SUMMARY_MAX_CHARS,
    SUMMARY_MAX_SENTENCES,
    TOP_IMPROVEMENTS_COUNT,
    Evaluation,
    Rubric,
    split_sentences,
)

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_LINE_BREAKS = re.compile(r"[\r\n]+")


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def _summarize_errors(exc: ValidationError) -> list[str]:
    return [f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}" for error in exc.errors()]


def _normalize_summary(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    sentences = split_sentences(_collapse(value))
    return " ".join(sentences[:SUMMARY_MAX_SENTENCES]).strip()[:SUMMARY_MAX_CHARS]


def _normalize_top_improvements(value: Any) -> Any:
    if not isinstance(value, list):
        return value
    items = [_collapse(item)[:IMPROVEMENT_MAX_CHARS] for item in value if isinstance(item, str)]
    return [item for item in items if item][:TOP_IMPROVEMENTS_COUNT]


def _round_endpoint(value: Any) -> Any:
    if isinstance(value, float) and math.isfinite(value):
        return round(value)
    return value


def _normalize_criterion_score(item: Any) -> Any:
    if not isinstance(item, dict):
        return item

    row = dict(item)
    estimated = row.get("estimated_range")
    if isinstance(estimated, list):
        row["estimated_range"] = [_round_endpoint(endpoint) for endpoint in estimated]

    feedback = row.get("feedback")
    if isinstance(feedback, str):
        row["feedback"] = _collapse(_LINE_BREAKS.sub(" ", feedback))[:FEEDBACK_MAX_CHARS]
    return row


def normalize_evaluation_payload(value: Any) -> Any:
    """Absorb near-conformant evaluation output without inventing data."""

    if not isinstance(value, dict):
        return value

    normalized = dict(value)
    if "summary" in normalized:
        normalized["summary"] = _normalize_summary(normalized["summary"])
    if "top_improvements" in normalized:
        normalized["top_improvements"] = _normalize_top_improvements(normalized["top_improvements"])
    scores = normalized.get("criteria_scores")
    if isinstance(scores, list):
        normalized["criteria_scores"] = [_normalize_criterion_score(item) for item in scores]
    return normalized


def validate_rubric(value: Any) -> Rubric:
    """Validate parsed rubric-structuring output."""

    try:
        return Rubric.model_validate(value)
    except ValidationError as exc:
        errors = _summarize_errors(exc)
        logger.warning("rubric schema validation failed", extra={"stage": "validate_rubric", "errors": errors})
        raise RubricStructureInvalid(f"Rubric structure invalid: {'; '.join(errors)}") from exc


def validate_evaluation(value: Any) -> Evaluation:
    """Normalize, then validate parsed evaluation output."""

    normalized = normalize_evaluation_payload(value)
    try:
        return Evaluation.model_validate(normalized)
    except ValidationError as exc:
        errors = _summarize_errors(exc)
        logger.warning("evaluation schema validation failed", extra={"stage": "validate_evaluation", "errors": errors})
        raise EvaluationInvalid(f"Evaluation invalid: {'; '.join(errors)}") from exc
