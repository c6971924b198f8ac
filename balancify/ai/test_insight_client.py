import pytest
import requests

from balancify.ai import insight_client
from balancify.ai.insight_client import extract_text, parse_json_object, query_json
from balancify.core.errors import InsightServiceError


def test_parse_plain_json():
    assert parse_json_object('{"immediate": ["save"]}') == {"immediate": ["save"]}


def test_parse_fenced_json():
    text = '```json\n{"riskAnalysis": "low"}\n```'
    assert parse_json_object(text) == {"riskAnalysis": "low"}


@pytest.mark.parametrize("text", ["not json at all", '{"unterminated": ', "[1, 2, 3]"])
def test_parse_rejects_non_objects(text):
    with pytest.raises(InsightServiceError):
        parse_json_object(text)


def test_extract_text_from_chat_response():
    response = {"choices": [{"message": {"role": "assistant", "content": "  {\"a\": 1}  "}}]}
    assert extract_text(response) == '{"a": 1}'


def test_extract_text_handles_empty_responses():
    assert extract_text({}) == ""
    assert extract_text({"choices": [{"message": {"content": None}}]}) == ""
    assert extract_text({"choices": [{"text": "legacy"}]}) == "legacy"


def test_query_json_empty_reply(monkeypatch):
    monkeypatch.setattr(insight_client, "query_model", lambda prompt: {"choices": [{"message": {"content": ""}}]})
    with pytest.raises(InsightServiceError, match="Empty response"):
        query_json("prompt")


def test_query_json_parses_reply(monkeypatch):
    reply = {"choices": [{"message": {"content": '{"emergencyFund": "6 months"}'}}]}
    monkeypatch.setattr(insight_client, "query_model", lambda prompt: reply)
    assert query_json("prompt") == {"emergencyFund": "6 months"}


def test_query_model_requires_api_key(monkeypatch):
    monkeypatch.setattr(insight_client, "LLM_API_KEY", None)
    with pytest.raises(InsightServiceError, match="BALANCIFY_LLM_API_KEY"):
        insight_client.query_model("prompt")


def test_base_url_strips_completions_path(monkeypatch):
    monkeypatch.setattr(insight_client, "LLM_BASE_URL", "http://localhost:8001/v1/chat/completions")
    assert insight_client._base_url() == "http://localhost:8001/v1"


def test_health_check_offline(monkeypatch):
    def refuse(*args, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(insight_client.requests, "get", refuse)
    assert insight_client.check_insight_service_online(timeout=0.1) is False
