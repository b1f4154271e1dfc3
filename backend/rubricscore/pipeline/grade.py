"""Rubric structuring, assignment evaluation and report assembly."""

from __future__ import annotations

import logging
import time
import uuid

from rubricscore.ai.openai_client import ModelClient, ModelRole
from rubricscore.errors import ModelOutputUnparseable, RubricScoreError, collapse_evaluation_error
from rubricscore.pipeline.json_recovery import recover_json
from rubricscore.pipeline.prompts import build_evaluation_prompt, build_structure_prompt
from rubricscore.pipeline.report import assemble_report
from rubricscore.pipeline.validation import validate_evaluation, validate_rubric
from rubricscore.schemas import Evaluation, FinalReport, Rubric

logger = logging.getLogger(__name__)


def structure_rubric(client: ModelClient, rubric_text: str) -> Rubric:
    output = client.invoke(ModelRole.STRUCTURE, build_structure_prompt(rubric_text))
    return validate_rubric(recover_json(output))


def evaluate_assignment(client: ModelClient, rubric: Rubric, assignment_text: str) -> Evaluation:
    output = client.invoke(ModelRole.EVALUATE, build_evaluation_prompt(rubric, assignment_text))
    try:
        parsed = recover_json(output)
    except ModelOutputUnparseable as exc:
        raise collapse_evaluation_error(exc) from exc
    return validate_evaluation(parsed)


def grade_assignment(
    client: ModelClient,
    rubric_text: str,
    assignment_text: str,
    *,
    title: str | None = None,
    request_id: str | None = None,
) -> FinalReport:
    """Run the full pipeline for one request; every failure is terminal."""

    request_id = request_id or str(uuid.uuid4())
    timings: dict[str, int] = {"structure_ms": 0, "evaluate_ms": 0}
    stage = "structure_rubric"
    try:
        started = time.perf_counter()
        rubric = structure_rubric(client, rubric_text)
        timings["structure_ms"] = int((time.perf_counter() - started) * 1000)
        logger.info(
            "grade rubric structured",
            extra={"request_id": request_id, "stage": stage, "criteria": len(rubric.criteria)},
        )

        stage = "evaluate_assignment"
        started = time.perf_counter()
        evaluation = evaluate_assignment(client, rubric, assignment_text)
        timings["evaluate_ms"] = int((time.perf_counter() - started) * 1000)

        stage = "assemble_report"
        report = assemble_report(rubric, evaluation, title=title)
    except RubricScoreError as exc:
        logger.warning(
            "grade failed",
            extra={"request_id": request_id, "stage": stage, "error": exc.code, "reason": exc.message},
        )
        raise

    logger.info(
        "grade completed",
        extra={"request_id": request_id, "stage": stage, "overall_range": report.overall_range, "timings": timings},
    )
    return report
