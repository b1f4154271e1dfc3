"""Data contracts for model output and the final report."""

from __future__ import annotations

import re
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator, model_validator

from rubricscore.pipeline.keys import normalize_criterion_key

SUMMARY_MAX_CHARS = 280
SUMMARY_MAX_SENTENCES = 2
FEEDBACK_MAX_CHARS = 140
IMPROVEMENT_MAX_CHARS = 120
TOP_IMPROVEMENTS_COUNT = 3

_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")


def split_sentences(text: str) -> list[str]:
    """Split text into sentence-like segments ending in '.', '!' or '?'."""
    return [part for part in _SENTENCE_BREAK.split(text.strip()) if part]


class RubricCriterion(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: StrictStr = Field(min_length=1)
    max_score: float = Field(gt=0, strict=True, allow_inf_nan=False)
    description: StrictStr


class Rubric(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    criteria: list[RubricCriterion] = Field(min_length=2)

    @model_validator(mode="after")
    def _criterion_keys_distinct(self) -> "Rubric":
        seen: set[str] = set()
        for criterion in self.criteria:
            key = normalize_criterion_key(criterion.name)
            if not key:
                raise ValueError(f"criterion name {criterion.name!r} has no letters or digits")
            if key in seen:
                raise ValueError(f"duplicate criterion name {criterion.name!r}")
            seen.add(key)
        return self

    @property
    def max_total(self) -> float:
        return sum(criterion.max_score for criterion in self.criteria)


class CriterionScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: StrictStr
    estimated_range: tuple[StrictInt, StrictInt]
    feedback: StrictStr = Field(max_length=FEEDBACK_MAX_CHARS)

    @field_validator("estimated_range")
    @classmethod
    def _ordered(cls, value: tuple[int, int]) -> tuple[int, int]:
        low, high = value
        if low > high:
            raise ValueError("estimated_range low must not exceed high")
        return value

    @field_validator("feedback")
    @classmethod
    def _single_line(cls, value: str) -> str:
        if "\n" in value or "\r" in value:
            raise ValueError("feedback must be a single line")
        return value


class Evaluation(BaseModel):
    model_config = ConfigDict(frozen=True)

    summary: StrictStr = Field(min_length=1, max_length=SUMMARY_MAX_CHARS)
    criteria_scores: list[CriterionScore]
    top_improvements: list[Annotated[StrictStr, Field(max_length=IMPROVEMENT_MAX_CHARS)]] = Field(
        min_length=TOP_IMPROVEMENTS_COUNT,
        max_length=TOP_IMPROVEMENTS_COUNT,
    )

    @field_validator("summary")
    @classmethod
    def _one_or_two_sentences(cls, value: str) -> str:
        count = len(split_sentences(value))
        if count < 1 or count > SUMMARY_MAX_SENTENCES:
            raise ValueError("summary must be 1-2 sentences")
        return value


class ReconciledCriterion(BaseModel):
    name: str
    max_score: float
    estimated_range: tuple[int, int]
    feedback: str


class FinalReport(BaseModel):
    title: str | None = None
    overall_range: tuple[int, int]
    max_total: float
    summary: str
    top_improvements: list[str] = Field(min_length=TOP_IMPROVEMENTS_COUNT, max_length=TOP_IMPROVEMENTS_COUNT)
    criteria: list[ReconciledCriterion]

    @field_validator("overall_range")
    @classmethod
    def _bounded(cls, value: tuple[int, int]) -> tuple[int, int]:
        low, high = value
        if not 0 <= low <= high <= 100:
            raise ValueError("overall_range must satisfy 0 <= low <= high <= 100")
        return value


class ExtractedTexts(BaseModel):
    rubric_text: str
    assignment_text: str


class ErrorResponse(BaseModel):
    detail: str
    error: str
    field: str | None = None
    request_id: str
    stage: str
