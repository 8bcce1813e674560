"""Provider clients that turn a diff into a conventional commit message."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from ..config import ProviderConfig
from ..schemas import ProviderName
from .errors import ProviderError, UpstreamError

logger = logging.getLogger("commit-gateway.providers")

SYSTEM_PROMPT = """Generate a single-line git commit message based on the provided information about staged and committed files, and the full diff. Adhere strictly to these specifications:
1. Format: <type>: <subject> OR <type>(<scope>): <subject>
   - <scope> is optional and should only be used when it adds significant clarity
2. Maximum length: 72 characters (including type and scope)
3. Use present tense and imperative mood
4. Capitalize the first letter of the subject
5. No period at the end
6. Message in only English language

Types:
- feat: New feature
- fix: Bug fix
- docs: Documentation changes
- style: Code style changes (formatting, missing semi colons, etc)
- refactor: Code refactoring
- perf: Performance improvements
- test: Adding or updating tests
- build: Build system or external dependency changes
- ci: CI configuration changes
- chore: Other changes that don't modify src or test files
- revert: Revert a previous commit

Guidelines:
- Be specific, concise, clear, and descriptive
- Focus on why the change was made, not how
- Use consistent terminology
- Avoid redundant information
- Use file extensions to pick the type: .md and .txt are documentation, .yml and .yaml are configuration, test.* and spec.* are tests, everything else is code
- Consider both staged and committed files in determining the scope and nature of the change
- Only include scope when it significantly clarifies the change and fits within the character limit

Examples:
- feat(auth): Add user authentication feature
- fix(api): Resolve null pointer exception in login process
- docs: Update API endpoints documentation
- refactor(data): Simplify data processing algorithm
- perf: Optimize database query for faster results

IMPORTANT: Respond ONLY with the commit message. Do not include any other text, explanations, or metadata. The entire response should be a single line containing only the commit message."""

TEMPERATURE = 0.7
MAX_TOKENS = 200


class ProviderClient(ABC):
    """Chat-completion client for one upstream LLM provider.

    Subclasses pin the endpoint, model and configured key; request shaping
    and response parsing are shared because both providers speak the
    OpenAI chat-completions dialect.
    """

    name: str
    endpoint: str
    model: str

    def __init__(self, config: ProviderConfig, http_client: httpx.Client) -> None:
        self.config = config
        self.http_client = http_client

    @abstractmethod
    def configured_key(self) -> str:
        """Return the server-side API key for this provider."""

    def resolve_key(self, api_key_override: str = "") -> str:
        if api_key_override and api_key_override.strip():
            return api_key_override
        return self.configured_key()

    def build_payload(self, diff: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": diff},
            ],
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
        }

    def generate(self, diff: str, api_key_override: str = "") -> str:
        """Send one completion request and return the normalized message.

        Raises:
            UpstreamError: the provider answered with a non-2xx status.
            ProviderError: the provider was unreachable or returned no choices.
        """
        api_key = self.resolve_key(api_key_override)
        logger.info("Requesting commit message from provider=%s model=%s", self.name, self.model)
        try:
            response = self.http_client.post(
                self.endpoint,
                json=self.build_payload(diff),
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {api_key}",
                },
            )
        except httpx.HTTPError as exc:
            raise ProviderError(f"failed to reach {self.name} api: {exc}") from exc

        body = _decode_body(response)

        if not response.is_success:
            error = body.get("error")
            if isinstance(error, dict) and isinstance(error.get("message"), str):
                raise UpstreamError(response.status_code, error["message"])
            raise UpstreamError(
                response.status_code, f"api error: status code {response.status_code}"
            )

        content = _first_choice_content(body)
        if content is None:
            raise ProviderError(f"no response from {self.name} api")
        return content.strip().lower()


class OpenAIClient(ProviderClient):
    name = ProviderName.OPENAI.value
    endpoint = "https://api.openai.com/v1/chat/completions"
    model = "gpt-3.5-turbo"

    def configured_key(self) -> str:
        return self.config.openai_api_key


class GeminiClient(ProviderClient):
    name = ProviderName.GEMINI.value
    endpoint = "https://generativelanguage.googleapis.com/v1beta/openai/chat/completions"
    model = "gemini-2.0-flash"

    def configured_key(self) -> str:
        return self.config.gemini_api_key


_CLIENTS: dict[str, type[ProviderClient]] = {
    ProviderName.OPENAI.value: OpenAIClient,
    ProviderName.GEMINI.value: GeminiClient,
}


def select_provider(
    name: str | None, config: ProviderConfig, http_client: httpx.Client
) -> ProviderClient:
    """Map a provider name to a client; unset or unknown names use the default."""
    client_cls = _CLIENTS.get(name or "") or _CLIENTS.get(config.default_provider, GeminiClient)
    return client_cls(config, http_client)


def _decode_body(response: httpx.Response) -> dict[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


def _first_choice_content(body: dict[str, Any]) -> str | None:
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None
