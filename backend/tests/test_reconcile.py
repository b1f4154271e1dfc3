from __future__ import annotations

import pytest

from rubricscore.errors import EvaluationFailed, ReconciliationFailed
from rubricscore.pipeline.reconcile import reconcile_criteria
from rubricscore.schemas import CriterionScore, RubricCriterion


def _criterion(name: str, max_score: float = 10) -> RubricCriterion:
    return RubricCriterion(name=name, max_score=max_score, description=f"{name} description")


def _score(name: str, low: int = 5, high: int = 7) -> CriterionScore:
    return CriterionScore(name=name, estimated_range=(low, high), feedback=f"{name} feedback")


def test_permuted_scores_align_in_rubric_order() -> None:
    criteria = [_criterion("Thesis"), _criterion("Evidence"), _criterion("Organization")]
    scores = [_score("organization"), _score("THESIS"), _score("Evidence.")]

    pairs = reconcile_criteria(criteria, scores)

    assert [criterion.name for criterion, _ in pairs] == ["Thesis", "Evidence", "Organization"]
    assert [score.name for _, score in pairs] == ["THESIS", "Evidence.", "organization"]


def test_missing_score_fails() -> None:
    criteria = [_criterion("Thesis"), _criterion("Evidence"), _criterion("Organization")]
    scores = [_score("Thesis"), _score("Evidence")]

    with pytest.raises(ReconciliationFailed, match="Organization"):
        reconcile_criteria(criteria, scores)


def test_extra_score_fails() -> None:
    criteria = [_criterion("Thesis"), _criterion("Evidence")]
    scores = [_score("Thesis"), _score("Evidence"), _score("Style")]

    with pytest.raises(ReconciliationFailed, match="Style"):
        reconcile_criteria(criteria, scores)


def test_duplicate_score_names_fail() -> None:
    criteria = [_criterion("Thesis"), _criterion("Evidence")]
    scores = [_score("Thesis"), _score("thesis ")]

    with pytest.raises(ReconciliationFailed):
        reconcile_criteria(criteria, scores)


def test_duplicate_rubric_names_fail() -> None:
    criteria = [_criterion("Clarity"), _criterion("clarity ")]
    scores = [_score("Clarity")]

    with pytest.raises(ReconciliationFailed):
        reconcile_criteria(criteria, scores)


def test_unnameable_names_fail() -> None:
    with pytest.raises(ReconciliationFailed):
        reconcile_criteria([_criterion("Thesis"), _criterion("Evidence")], [_score("???"), _score("Thesis")])

    with pytest.raises(ReconciliationFailed):
        reconcile_criteria([_criterion("..."), _criterion("Evidence")], [_score("Evidence")])


def test_reconciliation_failure_is_an_evaluation_failure() -> None:
    with pytest.raises(EvaluationFailed):
        reconcile_criteria([_criterion("Thesis"), _criterion("Evidence")], [])
