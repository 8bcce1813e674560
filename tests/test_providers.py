from __future__ import annotations

import httpx
import pytest

from commit_gateway.config import ProviderConfig
from commit_gateway.core.errors import ProviderError, UpstreamError
from commit_gateway.core.providers import (
    MAX_TOKENS,
    SYSTEM_PROMPT,
    TEMPERATURE,
    GeminiClient,
    OpenAIClient,
    select_provider,
)

PROVIDERS = ProviderConfig(openai_api_key="sk-openai", gemini_api_key="gm-gemini")


def test_generate_shapes_request_and_normalizes_reply(upstream, http_client):
    message = OpenAIClient(PROVIDERS, http_client).generate("diff --git a/x b/x")

    assert message == "feat: add login form"
    assert upstream.calls == 1
    request = upstream.requests[0]
    assert str(request.url) == OpenAIClient.endpoint
    assert request.headers["authorization"] == "Bearer sk-openai"
    assert request.headers["content-type"] == "application/json"
    payload = upstream.last_payload()
    assert payload == {
        "model": "gpt-3.5-turbo",
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": "diff --git a/x b/x"},
        ],
        "temperature": TEMPERATURE,
        "max_tokens": MAX_TOKENS,
    }


def test_gemini_uses_its_own_endpoint_model_and_key(upstream, http_client):
    GeminiClient(PROVIDERS, http_client).generate("diff")

    request = upstream.requests[0]
    assert str(request.url) == GeminiClient.endpoint
    assert request.headers["authorization"] == "Bearer gm-gemini"
    assert upstream.last_payload()["model"] == "gemini-2.0-flash"


def test_api_key_override_wins_unless_blank(upstream, http_client):
    client = GeminiClient(PROVIDERS, http_client)

    client.generate("diff", "caller-key")
    client.generate("diff", "   ")

    assert upstream.requests[0].headers["authorization"] == "Bearer caller-key"
    assert upstream.requests[1].headers["authorization"] == "Bearer gm-gemini"


def test_upstream_error_message_is_relayed_verbatim(upstream, http_client):
    upstream.status_code = 401
    upstream.body = {"error": {"message": "invalid api key"}}

    with pytest.raises(UpstreamError) as excinfo:
        OpenAIClient(PROVIDERS, http_client).generate("diff")

    assert excinfo.value.status_code == 401
    assert excinfo.value.message == "invalid api key"


def test_upstream_error_without_body_reports_status(upstream, http_client):
    upstream.status_code = 503
    upstream.body = {}

    with pytest.raises(UpstreamError, match="api error: status code 503"):
        GeminiClient(PROVIDERS, http_client).generate("diff")


def test_empty_choices_is_a_provider_error(upstream, http_client):
    upstream.body = {"choices": []}

    with pytest.raises(ProviderError, match="no response from gemini api"):
        GeminiClient(PROVIDERS, http_client).generate("diff")


def test_transport_failure_is_a_provider_error(upstream, http_client):
    upstream.exc = httpx.ConnectError("connection refused")

    with pytest.raises(ProviderError, match="failed to reach openai api"):
        OpenAIClient(PROVIDERS, http_client).generate("diff")


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("openai", OpenAIClient),
        ("gemini", GeminiClient),
        (None, GeminiClient),
        ("", GeminiClient),
        ("ruby", GeminiClient),
    ],
)
def test_select_provider(name, expected, http_client):
    assert isinstance(select_provider(name, PROVIDERS, http_client), expected)


def test_select_provider_honours_configured_default(http_client):
    config = ProviderConfig(default_provider="openai")

    assert isinstance(select_provider(None, config, http_client), OpenAIClient)
    assert isinstance(select_provider("gemini", config, http_client), GeminiClient)
