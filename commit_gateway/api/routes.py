"""FastAPI route definitions for the commit gateway."""

from __future__ import annotations

import logging
from typing import Callable

import pydantic
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from ..core.access import AccessGuard
from ..core.errors import ProviderError, ValidationError
from ..core.providers import ProviderClient
from ..schemas import GenerationRequest, GenerationResult, ProviderName

logger = logging.getLogger("commit-gateway.api")

router = APIRouter()

ProviderFactory = Callable[[str | None], ProviderClient]

VALID_PROVIDERS = frozenset(provider.value for provider in ProviderName)


def get_provider_factory() -> ProviderFactory:
    """Dependency placeholder for selecting a provider client."""
    raise NotImplementedError("Provider factory dependency must be wired in main.py")


def get_access_guard() -> AccessGuard:
    """Dependency placeholder for the IP allowlist guard."""
    raise NotImplementedError("Access guard dependency must be wired in main.py")


def enforce_access(request: Request, guard: AccessGuard = Depends(get_access_guard)) -> None:
    remote_addr = request.client.host if request.client else None
    guard.check(request.headers, request.query_params, remote_addr)


def parse_generation_request(raw: bytes) -> GenerationRequest:
    """Decode and validate the generation body, raising ValidationError on bad input."""
    try:
        payload = GenerationRequest.model_validate_json(raw or b"")
    except pydantic.ValidationError as exc:
        errors = exc.errors()
        raise ValidationError(errors[0]["msg"] if errors else str(exc)) from exc

    if not payload.diff.strip():
        raise ValidationError("diff must not be empty")
    if payload.provider and payload.provider not in VALID_PROVIDERS:
        raise ValidationError("invalid provider specified")
    return payload


@router.get("/healthz", response_class=PlainTextResponse)
async def healthz() -> str:
    return "ok"


@router.post(
    "/",
    response_model=GenerationResult,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(enforce_access)],
)
async def generate_commit_message(
    request: Request, select_provider: ProviderFactory = Depends(get_provider_factory)
) -> GenerationResult:
    """Generate a conventional commit message for the posted diff.

    Provider failures are reported as 400 because they almost always come
    from a missing or invalid caller-supplied key.
    """
    payload = parse_generation_request(await request.body())
    client = select_provider(payload.provider)
    logger.info("Handling / with provider=%s", client.name)
    try:
        message = await run_in_threadpool(client.generate, payload.diff, payload.api_key)
    except ProviderError as exc:
        logger.info("Provider %s failed: %s", client.name, exc.message)
        raise ValidationError(exc.message) from exc
    return GenerationResult(message=message)
