"""Best-effort recovery of a JSON value from free-form model output.

Models intermittently wrap otherwise valid JSON in prose or markdown fences.
Each candidate text yields an ordered list of parse attempts:

1. the trimmed text itself
2. the body of every ```/```json fenced block, in order of appearance
3. the slice from the first ``{`` to the last ``}``
4. the slice from the first ``[`` to the last ``]``

The first attempt that parses as strict JSON wins.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterator, Sequence
from typing import Any

from rubricscore.errors import ModelOutputUnparseable

logger = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"```(?:json)?[^\S\n]*\n?(.*?)```", re.IGNORECASE | re.DOTALL)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _bracket_slice(text: str, opener: str, closer: str) -> str | None:
    start = text.find(opener)
    end = text.rfind(closer)
    if start == -1 or end <= start:
        return None
    return text[start : end + 1]


def _attempts_for(text: str) -> Iterator[str]:
    trimmed = text.strip()
    yield trimmed
    for match in _FENCED_BLOCK.finditer(trimmed):
        yield match.group(1).strip()
    for opener, closer in (("{", "}"), ("[", "]")):
        sliced = _bracket_slice(trimmed, opener, closer)
        if sliced is not None:
            yield sliced


def parse_attempts(output: str | Sequence[str] | None) -> list[str]:
    """Return the deduplicated, ordered parse attempts for raw model output."""

    if output is None:
        return []
    candidates = [output] if isinstance(output, str) else list(output)

    attempts: list[str] = []
    seen: set[str] = set()
    for candidate in candidates:
        if not isinstance(candidate, str):
            continue
        for attempt in _attempts_for(candidate):
            if not attempt or attempt in seen:
                continue
            seen.add(attempt)
            attempts.append(attempt)
    return attempts


def loads_strict(text: str) -> Any:
    """Parse text as standard JSON, rejecting NaN and Infinity literals."""
    return json.loads(text, parse_constant=_reject_constant)


def recover_json(output: str | Sequence[str] | None) -> Any:
    """Return the first JSON value recoverable from the model output."""

    attempts = parse_attempts(output)
    for index, attempt in enumerate(attempts):
        try:
            value = loads_strict(attempt)
        except (ValueError, RecursionError):
            continue
        if index:
            logger.info("model output json recovered", extra={"stage": "recover_json", "attempt": index + 1})
        return value

    logger.warning("model output json unrecoverable", extra={"stage": "recover_json", "attempts": len(attempts)})
    raise ModelOutputUnparseable("No JSON value could be recovered from the model output")
