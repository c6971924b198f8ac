import json
import logging
import os
from typing import Any, Dict
from urllib.parse import urlparse, urlunparse

import requests
from openai import OpenAI, OpenAIError

from balancify.core.errors import InsightServiceError

logger = logging.getLogger(__name__)

LLM_BASE_URL = os.getenv("BALANCIFY_LLM_BASE_URL", "https://api.openai.com/v1")
LLM_MODEL = os.getenv("BALANCIFY_LLM_MODEL", "gpt-4o-mini")
LLM_TIMEOUT = float(os.getenv("BALANCIFY_LLM_TIMEOUT", "60"))
LLM_HEALTH_TIMEOUT = float(os.getenv("BALANCIFY_LLM_HEALTH_TIMEOUT", "1.0"))
LLM_MAX_RETRIES = max(0, int(os.getenv("BALANCIFY_LLM_MAX_RETRIES", "0")))
LLM_API_KEY = os.getenv("BALANCIFY_LLM_API_KEY") or os.getenv("OPENAI_API_KEY")
LLM_DEFAULT_MAX_TOKENS = int(os.getenv("BALANCIFY_LLM_MAX_TOKENS", "1200"))


def _base_url() -> str:
    parsed = urlparse(LLM_BASE_URL)
    path = parsed.path.rstrip("/")
    if path.endswith("/chat/completions"):
        path = path[: -len("/chat/completions")]
    elif path.endswith("/completions"):
        path = path[: -len("/completions")]
    base = parsed._replace(path=path, params="", query="", fragment="")
    return urlunparse(base)


def _get_client() -> OpenAI:
    return OpenAI(base_url=_base_url(), api_key=LLM_API_KEY, max_retries=LLM_MAX_RETRIES)


def check_insight_service_online(timeout: float | None = None) -> bool:
    base = _base_url().rstrip("/")
    health_timeout = timeout if timeout is not None else LLM_HEALTH_TIMEOUT
    headers = {"Authorization": f"Bearer {LLM_API_KEY}"} if LLM_API_KEY else {}
    for path in ("/models", "/health"):
        try:
            resp = requests.get(f"{base}{path}", timeout=health_timeout, headers=headers)
        except requests.RequestException:
            continue
        # Any non-5xx HTTP response means the endpoint is reachable.
        if resp.status_code < 500:
            return True
    return False


def query_model(
    prompt: str,
    max_tokens: int | None = None,
    temperature: float | None = None,
) -> Dict[str, Any]:
    if not LLM_API_KEY:
        raise InsightServiceError("Missing BALANCIFY_LLM_API_KEY. Set the environment variable and restart the app.")

    token_limit = int(max_tokens) if max_tokens is not None else LLM_DEFAULT_MAX_TOKENS
    try:
        response = _get_client().chat.completions.create(
            model=LLM_MODEL,
            messages=[{"role": "user", "content": prompt}],
            temperature=0.2 if temperature is None else float(temperature),
            max_tokens=token_limit,
            response_format={"type": "json_object"},
            timeout=LLM_TIMEOUT,
        )
    except OpenAIError as exc:
        logger.error("Insight model request failed: %s", exc)
        raise InsightServiceError(str(exc)) from exc
    return response.model_dump()


def extract_text(response: Dict[str, Any]) -> str:
    choices = response.get("choices") or []
    if not choices:
        return ""
    choice = choices[0]
    message = choice.get("message") if isinstance(choice, dict) else None
    if isinstance(message, dict):
        content = message.get("content")
        if isinstance(content, str) and content.strip():
            return content.strip()
        return ""
    text = choice.get("text") if isinstance(choice, dict) else None
    if text:
        return str(text).strip()
    return ""


def parse_json_object(text: str) -> Dict[str, Any]:
    cleaned = text.strip()
    # some models wrap JSON in a markdown fence even in JSON mode
    if cleaned.startswith("```"):
        cleaned = cleaned.strip("`")
        if cleaned.lower().startswith("json"):
            cleaned = cleaned[4:]
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise InsightServiceError(f"AI model returned invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise InsightServiceError("AI model returned JSON that is not an object")
    return payload


def query_json(prompt: str) -> Dict[str, Any]:
    text = extract_text(query_model(prompt))
    if not text:
        raise InsightServiceError("Empty response from AI model")
    return parse_json_object(text)
