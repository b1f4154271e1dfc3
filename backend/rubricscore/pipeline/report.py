"""Final report assembly."""

from __future__ import annotations

from rubricscore.errors import EvaluationFailed
from rubricscore.pipeline.ranges import clamp_criterion_range, compute_overall_range
from rubricscore.pipeline.reconcile import reconcile_criteria
from rubricscore.schemas import TOP_IMPROVEMENTS_COUNT, Evaluation, FinalReport, ReconciledCriterion, Rubric


def assemble_report(rubric: Rubric, evaluation: Evaluation, title: str | None = None) -> FinalReport:
    """Build the final report, or raise without returning anything partial."""

    pairs = reconcile_criteria(rubric.criteria, evaluation.criteria_scores)

    reconciled: list[ReconciledCriterion] = []
    for criterion, score in pairs:
        low, high = score.estimated_range
        reconciled.append(
            ReconciledCriterion(
                name=criterion.name,
                max_score=criterion.max_score,
                estimated_range=clamp_criterion_range(low, high, criterion.max_score),
                feedback=score.feedback,
            )
        )

    overall_range = compute_overall_range(
        (item.estimated_range for item in reconciled),
        [criterion.max_score for criterion in rubric.criteria],
    )

    if len(evaluation.top_improvements) < TOP_IMPROVEMENTS_COUNT:
        raise EvaluationFailed(
            f"Expected {TOP_IMPROVEMENTS_COUNT} top improvements, got {len(evaluation.top_improvements)}"
        )

    return FinalReport(
        title=title,
        overall_range=overall_range,
        max_total=rubric.max_total,
        summary=evaluation.summary,
        top_improvements=list(evaluation.top_improvements[:TOP_IMPROVEMENTS_COUNT]),
        criteria=reconciled,
    )
