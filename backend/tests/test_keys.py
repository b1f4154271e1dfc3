from __future__ import annotations

import pytest

from rubricscore.pipeline.keys import normalize_criterion_key


@pytest.mark.parametrize(
    ("left", "right"),
    [
        ("Clarity", "clarity "),
        ("Use of Evidence", "use-of   EVIDENCE!"),
        ("Clarté", "clarte"),
        ("Résumé quality", "résumé quality"),
        ("Grammar & Mechanics", "grammar mechanics"),
        ("Ｔｈｅｓｉｓ", "thesis"),
    ],
)
def test_equivalent_names_share_a_key(left: str, right: str) -> None:
    assert normalize_criterion_key(left) == normalize_criterion_key(right)


def test_key_collapses_punctuation_and_whitespace() -> None:
    assert normalize_criterion_key("  Organization / Structure (20%)  ") == "organization structure 20"


def test_underscores_count_as_separators() -> None:
    assert normalize_criterion_key("word_choice") == "word choice"


@pytest.mark.parametrize("name", ["", "   ", "---", "!!!", "* / *"])
def test_unnameable_names_map_to_empty_key(name: str) -> None:
    assert normalize_criterion_key(name) == ""


def test_distinct_names_keep_distinct_keys() -> None:
    assert normalize_criterion_key("Thesis") != normalize_criterion_key("Thesis 2")
