"""Error taxonomy for the grading pipeline and its request boundary."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass
class RubricScoreError(Exception):
    message: str
    field: str | None = None

    code: ClassVar[str] = "GRADING_FAILED"
    status_code: ClassVar[int] = 500
    public_message: ClassVar[str | None] = None

    def __str__(self) -> str:
        return self.message

    @property
    def detail(self) -> str:
        """Message safe to return to the caller."""
        return self.public_message or self.message


class MissingInput(RubricScoreError):
    code = "MISSING_INPUT"
    status_code = 400


class FileTooLarge(RubricScoreError):
    code = "FILE_TOO_LARGE"
    status_code = 400


class UnsupportedFileType(RubricScoreError):
    code = "UNSUPPORTED_FILE_TYPE"
    status_code = 400


class TextExtractionFailed(RubricScoreError):
    code = "TEXT_EXTRACTION_FAILED"
    status_code = 400


class ModelUnavailable(RubricScoreError):
    code = "MODEL_UNAVAILABLE"
    status_code = 502
    public_message = "The grading model is unavailable. Please try again later."


class ModelOutputUnparseable(RubricScoreError):
    code = "MODEL_OUTPUT_UNPARSEABLE"
    status_code = 502
    public_message = "The grading model returned a response that could not be read."


class RubricStructureInvalid(RubricScoreError):
    code = "RUBRIC_STRUCTURE_INVALID"
    status_code = 422
    public_message = "Could not identify at least two distinct criteria in the rubric."


class EvaluationInvalid(RubricScoreError):
    code = "EVALUATION_FAILED"
    status_code = 502
    public_message = "Evaluation failed. Please try again."


class EvaluationFailed(RubricScoreError):
    code = "EVALUATION_FAILED"
    status_code = 502
    public_message = "Evaluation failed. Please try again."


class ReconciliationFailed(EvaluationFailed):
    pass


def collapse_evaluation_error(exc: RubricScoreError) -> RubricScoreError:
    """Map an evaluation-stage failure onto the single public evaluation error."""
    if isinstance(exc, (EvaluationInvalid, EvaluationFailed)):
        return exc
    if isinstance(exc, ModelOutputUnparseable):
        return EvaluationFailed(message=exc.message, field=exc.field)
    return exc
