"""OpenAI text model client for rubric structuring and evaluation."""

from __future__ import annotations

import json
import logging
import time
from enum import Enum
from typing import Any, Protocol

import httpx
from fastapi import Request

from rubricscore.errors import ModelUnavailable
from rubricscore.pipeline.prompts import SYSTEM_INSTRUCTION
from rubricscore.settings import Settings

logger = logging.getLogger(__name__)


class ModelRole(str, Enum):
    STRUCTURE = "structure"
    EVALUATE = "evaluate"


_MODEL_ENV_NAMES = {
    ModelRole.STRUCTURE: "STRUCTURE_MODEL",
    ModelRole.EVALUATE: "EVALUATION_MODEL",
}


class ModelClient(Protocol):
    def invoke(self, role: ModelRole, prompt: str) -> str | list[str]:
        """Return the raw text (or ordered candidate texts) produced for the prompt."""


def build_model_request(model: str, prompt: str) -> dict[str, object]:
    return {
        "model": model,
        "input": [
            {"role": "system", "content": SYSTEM_INSTRUCTION},
            {"role": "user", "content": prompt},
        ],
    }


def collect_output_texts(response: Any) -> list[str]:
    """Gather candidate texts from a Responses API result, aggregate text first."""

    texts: list[str] = []
    aggregate = getattr(response, "output_text", None)
    if isinstance(aggregate, str) and aggregate.strip():
        texts.append(aggregate)

    for item in getattr(response, "output", None) or []:
        for part in getattr(item, "content", None) or []:
            if getattr(part, "type", None) != "output_text":
                continue
            text = getattr(part, "text", None)
            if isinstance(text, str) and text.strip() and text not in texts:
                texts.append(text)
    return texts


class OpenAIModelClient:
    def __init__(
        self,
        api_key: str,
        structure_model: str,
        evaluation_model: str,
        timeout_seconds: float = 60.0,
    ) -> None:
        self._api_key = api_key.strip()
        self._models = {
            ModelRole.STRUCTURE: structure_model.strip(),
            ModelRole.EVALUATE: evaluation_model.strip(),
        }
        self._timeout_seconds = timeout_seconds
        self._client: Any = None

    @classmethod
    def from_settings(cls, config: Settings) -> "OpenAIModelClient":
        return cls(
            api_key=config.openai_api_key,
            structure_model=config.structure_model,
            evaluation_model=config.evaluation_model,
            timeout_seconds=config.openai_timeout_seconds,
        )

    def _get_client(self) -> Any:
        if self._client is None:
            if not self._api_key:
                raise ModelUnavailable("OPENAI_API_KEY is not set")

            from openai import OpenAI

            self._client = OpenAI(api_key=self._api_key, timeout=self._timeout_seconds)
        return self._client

    def invoke(self, role: ModelRole, prompt: str) -> list[str]:
        model = self._models[role]
        if not model:
            raise ModelUnavailable(f"{_MODEL_ENV_NAMES[role]} is not set")

        client = self._get_client()
        started = time.perf_counter()
        try:
            response = client.responses.create(**build_model_request(model, prompt))
        except (httpx.TimeoutException, TimeoutError) as exc:
            logger.warning("openai request timed out", extra={"stage": f"call_openai_{role.value}", "model": model})
            raise ModelUnavailable(f"OpenAI request timed out: {exc}") from exc
        except Exception as exc:
            status_code = getattr(exc, "status_code", None)
            logger.warning(
                "openai request failed",
                extra={"stage": f"call_openai_{role.value}", "model": model, "status_code": status_code},
            )
            raise ModelUnavailable(f"OpenAI request failed: {exc}") from exc

        texts = collect_output_texts(response)
        logger.info(
            "openai call completed",
            extra={
                "stage": f"call_openai_{role.value}",
                "model": model,
                "candidates": len(texts),
                "openai_ms": int((time.perf_counter() - started) * 1000),
            },
        )
        if not texts:
            raise ModelUnavailable("OpenAI returned no output text")
        return texts


MOCK_RUBRIC_RESPONSE = (
    "Here is the structured rubric:\n```json\n"
    + json.dumps(
        {
            "criteria": [
                {"name": "Thesis", "max_score": 10, "description": "Clear, arguable central claim."},
                {"name": "Evidence", "max_score": 10, "description": "Relevant support for each point."},
                {"name": "Organization", "max_score": 5, "description": "Logical flow between paragraphs."},
            ]
        },
        indent=2,
    )
    + "\n```"
)

MOCK_EVALUATION_RESPONSE = json.dumps(
    {
        "summary": "The essay states a clear position and supports most points. Organization is uneven in the middle section.",
        "criteria_scores": [
            {"name": "Thesis", "estimated_range": [7, 9], "feedback": "The thesis is specific and arguable."},
            {"name": "Evidence", "estimated_range": [6, 8], "feedback": "Most claims cite support; two rely on assertion."},
            {"name": "Organization", "estimated_range": [3, 4], "feedback": "Transitions between body paragraphs could be clearer."},
        ],
        "top_improvements": [
            "Add evidence for the claims in paragraph three",
            "Use transitions to connect body paragraphs",
            "Restate the thesis in the conclusion",
        ],
    }
)


class MockModelClient:
    """Deterministic client for local runs and tests."""

    def __init__(self, responses: dict[ModelRole, str | list[str]] | None = None) -> None:
        self.responses: dict[ModelRole, str | list[str]] = {
            ModelRole.STRUCTURE: MOCK_RUBRIC_RESPONSE,
            ModelRole.EVALUATE: MOCK_EVALUATION_RESPONSE,
        }
        if responses:
            self.responses.update(responses)
        self.calls: list[tuple[ModelRole, str]] = []

    def invoke(self, role: ModelRole, prompt: str) -> str | list[str]:
        self.calls.append((role, prompt))
        return self.responses[role]


def build_model_client(config: Settings) -> ModelClient:
    if config.openai_mock:
        return MockModelClient()
    return OpenAIModelClient.from_settings(config)


def get_model_client(request: Request) -> ModelClient:
    """Return the application-scoped model client, building it on first use."""

    client = getattr(request.app.state, "model_client", None)
    if client is None:
        client = build_model_client(Settings())
        request.app.state.model_client = client
    return client
