from __future__ import annotations

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from commit_gateway.config import ProviderConfig, ServiceConfig
from commit_gateway.main import build_app

ALLOWED_IP = "10.0.0.5"


class UpstreamRecorder:
    """Mock transport for provider calls that records every request it sees."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body: dict = {"choices": [{"message": {"content": "  Feat: Add login form \n"}}]}
        self.exc: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        return httpx.Response(self.status_code, json=self.body)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def last_payload(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def config() -> ServiceConfig:
    return ServiceConfig(
        allowed_ips=f"127.0.0.1, {ALLOWED_IP} ,::1",
        providers=ProviderConfig(openai_api_key="sk-openai", gemini_api_key="gm-gemini"),
    )


@pytest.fixture
def upstream() -> UpstreamRecorder:
    return UpstreamRecorder()


@pytest.fixture
def http_client(upstream: UpstreamRecorder) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(upstream))


@pytest.fixture
def app(config: ServiceConfig, http_client: httpx.Client):
    return build_app(config, http_client=http_client)


@pytest.fixture
def client(app) -> TestClient:
    with TestClient(app) as test_client:
        yield test_client
