"""Request and response contracts for the commit gateway HTTP surface."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProviderName(str, Enum):
    """LLM providers a caller may request by name."""

    OPENAI = "openai"
    GEMINI = "gemini"


class GenerationRequest(BaseModel):
    """Body accepted by `POST /`."""

    model_config = ConfigDict(populate_by_name=True)

    diff: str = Field(default="", description="Unified diff of the staged changes.")
    provider: str | None = Field(
        default=None,
        description="Override default provider (openai, gemini).",
    )
    api_key: str = Field(
        default="",
        alias="apiKey",
        description="Caller-supplied provider key, overrides the server key.",
    )

    @field_validator("diff", "api_key", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return "" if value is None else value


class GenerationResult(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Envelope for every negotiated JSON error body."""

    message: str
