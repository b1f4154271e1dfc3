from __future__ import annotations

from types import SimpleNamespace

import httpx
import pytest

from rubricscore.ai.openai_client import (
    MockModelClient,
    ModelRole,
    OpenAIModelClient,
    build_model_client,
    build_model_request,
    collect_output_texts,
)
from rubricscore.errors import ModelUnavailable
from rubricscore.settings import Settings


class _FakeResponses:
    def __init__(self, result=None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.requests: list[dict] = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.result


def _client_with(responses: _FakeResponses, **overrides) -> OpenAIModelClient:
    options = {"api_key": "test-key", "structure_model": "struct-model", "evaluation_model": "eval-model"}
    options.update(overrides)
    client = OpenAIModelClient(**options)
    client._client = SimpleNamespace(responses=responses)
    return client


def test_build_model_request_sends_system_and_user_messages() -> None:
    payload = build_model_request("eval-model", "Grade this")

    assert payload["model"] == "eval-model"
    messages = payload["input"]
    assert [message["role"] for message in messages] == ["system", "user"]
    assert "JSON" in messages[0]["content"]
    assert messages[1]["content"] == "Grade this"


def test_collect_output_texts_orders_aggregate_first_and_dedupes() -> None:
    response = SimpleNamespace(
        output_text='{"a": 1}',
        output=[
            SimpleNamespace(type="reasoning", content=None),
            SimpleNamespace(
                type="message",
                content=[
                    SimpleNamespace(type="output_text", text='{"a": 1}'),
                    SimpleNamespace(type="refusal", text="nope"),
                    SimpleNamespace(type="output_text", text="```json\n{}\n```"),
                ],
            ),
        ],
    )

    assert collect_output_texts(response) == ['{"a": 1}', "```json\n{}\n```"]


def test_invoke_uses_model_for_role() -> None:
    responses = _FakeResponses(result=SimpleNamespace(output_text='{"criteria": []}', output=[]))
    client = _client_with(responses)

    assert client.invoke(ModelRole.STRUCTURE, "p1") == ['{"criteria": []}']
    client.invoke(ModelRole.EVALUATE, "p2")

    assert [request["model"] for request in responses.requests] == ["struct-model", "eval-model"]


def test_invoke_requires_configured_model() -> None:
    client = _client_with(_FakeResponses(), evaluation_model="  ")

    with pytest.raises(ModelUnavailable, match="EVALUATION_MODEL"):
        client.invoke(ModelRole.EVALUATE, "prompt")


def test_invoke_requires_api_key() -> None:
    client = OpenAIModelClient(api_key="", structure_model="m", evaluation_model="m")

    with pytest.raises(ModelUnavailable, match="OPENAI_API_KEY"):
        client.invoke(ModelRole.STRUCTURE, "prompt")


@pytest.mark.parametrize("error", [RuntimeError("boom"), httpx.ReadTimeout("slow")])
def test_invoke_wraps_transport_errors_without_retry(error: Exception) -> None:
    responses = _FakeResponses(error=error)
    client = _client_with(responses)

    with pytest.raises(ModelUnavailable):
        client.invoke(ModelRole.STRUCTURE, "prompt")
    assert len(responses.requests) == 1


def test_invoke_rejects_empty_output() -> None:
    client = _client_with(_FakeResponses(result=SimpleNamespace(output_text="  ", output=[])))

    with pytest.raises(ModelUnavailable):
        client.invoke(ModelRole.STRUCTURE, "prompt")


def test_build_model_client_honours_mock_flag(monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_MOCK", "1")
    assert isinstance(build_model_client(Settings()), MockModelClient)

    monkeypatch.setenv("OPENAI_MOCK", "0")
    assert isinstance(build_model_client(Settings()), OpenAIModelClient)
