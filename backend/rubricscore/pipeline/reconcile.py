"""One-to-one alignment of rubric criteria with scored criteria."""

from __future__ import annotations

from collections.abc import Sequence

from rubricscore.errors import ReconciliationFailed
from rubricscore.pipeline.keys import normalize_criterion_key
from rubricscore.schemas import CriterionScore, RubricCriterion


def reconcile_criteria(
    criteria: Sequence[RubricCriterion],
    scores: Sequence[CriterionScore],
) -> list[tuple[RubricCriterion, CriterionScore]]:
    """Pair every rubric criterion with exactly one score, in rubric order.

    The pairing must be a bijection: a missing, duplicated, unnameable or
    extra score name is a failure rather than a best-effort partial match.
    """

    scores_by_key: dict[str, CriterionScore] = {}
    for score in scores:
        key = normalize_criterion_key(score.name)
        if not key:
            raise ReconciliationFailed(f"Score name {score.name!r} has no letters or digits")
        if key in scores_by_key:
            raise ReconciliationFailed(f"Duplicate score for criterion {score.name!r}")
        scores_by_key[key] = score

    pairs: list[tuple[RubricCriterion, CriterionScore]] = []
    seen: set[str] = set()
    for criterion in criteria:
        key = normalize_criterion_key(criterion.name)
        if not key:
            raise ReconciliationFailed(f"Criterion name {criterion.name!r} has no letters or digits")
        if key in seen:
            raise ReconciliationFailed(f"Duplicate rubric criterion {criterion.name!r}")
        seen.add(key)

        score = scores_by_key.get(key)
        if score is None:
            raise ReconciliationFailed(f"No score returned for criterion {criterion.name!r}")
        pairs.append((criterion, score))

    if len(pairs) != len(scores_by_key):
        extra = sorted(score.name for key, score in scores_by_key.items() if key not in seen)
        raise ReconciliationFailed(f"Scores returned for unknown criteria: {extra}")
    return pairs
