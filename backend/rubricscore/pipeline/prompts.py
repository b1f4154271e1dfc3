"""Prompt builders for rubric structuring and assignment evaluation."""

from __future__ import annotations

import json

from rubricscore.schemas import (
    FEEDBACK_MAX_CHARS,
    IMPROVEMENT_MAX_CHARS,
    SUMMARY_MAX_CHARS,
    TOP_IMPROVEMENTS_COUNT,
    Rubric,
)

SYSTEM_INSTRUCTION = "Return a single valid JSON object only. Do not include markdown, code fences, or extra text."

_RUBRIC_SHAPE = '{ "criteria": [{ "name": "string", "max_score": number, "description": "string" }] }'

_EVALUATION_SHAPE = """{
  "summary": "string",
  "criteria_scores": [
    {
      "name": "string",
      "estimated_range": [integer, integer],
      "feedback": "string"
    }
  ],
  "top_improvements": ["string", "string", "string"]
}"""


def build_structure_prompt(rubric_text: str) -> str:
    return "\n".join(
        [
            "Extract a grading rubric from the provided text.",
            "Return strict JSON that matches this schema exactly:",
            _RUBRIC_SHAPE,
            "Requirements:",
            "- Include every rubric criterion you can identify.",
            "- For each criterion, provide name, max_score, and description.",
            "- Criterion names must be distinct.",
            "- max_score must be a positive number.",
            "- description should be concise and faithful to the source.",
            "",
            "Rubric text:",
            rubric_text,
        ]
    )


def build_evaluation_prompt(rubric: Rubric, assignment_text: str) -> str:
    criteria = [{"name": criterion.name, "max_score": criterion.max_score} for criterion in rubric.criteria]
    return "\n".join(
        [
            "Evaluate the assignment using the provided rubric.",
            "Return JSON only, matching this schema exactly:",
            _EVALUATION_SHAPE,
            "Rules:",
            "- Use the rubric criterion names exactly as given.",
            "- Include exactly one criteria_scores item per rubric criterion.",
            "- Keep criteria_scores in the same order as rubric criteria.",
            "- estimated_range must be [low, high] integers with 0 <= low <= high <= max_score.",
            "- Keep each range width modest; target width <= 20% of that criterion max_score.",
            f"- feedback must be one line, <= {FEEDBACK_MAX_CHARS} chars, neutral and constructive in tone.",
            f"- summary must be 1-2 sentences, <= {SUMMARY_MAX_CHARS} chars, and neutral in tone.",
            f"- top_improvements must contain exactly {TOP_IMPROVEMENTS_COUNT} items, each <= {IMPROVEMENT_MAX_CHARS} chars.",
            "- Do not include numbering prefixes in top_improvements.",
            "- No markdown. No extra keys. No extra text.",
            "",
            "Rubric criteria (use these names exactly):",
            json.dumps(criteria, ensure_ascii=False),
            "",
            "Assignment text:",
            assignment_text,
        ]
    )
