"""Tests for the HTTP client, run against the app in-process over ASGI."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from resume_ai.main import app
from resume_ai.schemas.revision import GenerateRequest, MatchAnalysis, MatchAnalysisRequest
from resume_ai.services.document_store import InMemoryDocumentStore
from resume_ai.services.errors import (
    IncompleteDocumentError,
    RateLimitedError,
    TransportFailureError,
    ValidationError,
    error_from_response,
)
from resume_ai.services.llm_gateway import get_model_gateway
from resume_ai.services.resume_client import ResumeApiClient
from resume_ai.services.revision_session import RevisionOrchestrator, RevisionStage

from conftest import resume_reply


@pytest.fixture
def api_client(gateway):
    app.dependency_overrides[get_model_gateway] = lambda: gateway
    try:
        yield ResumeApiClient(base_url="http://testserver", transport=httpx.ASGITransport(app=app))
    finally:
        app.dependency_overrides.clear()


def test_revise_returns_typed_result(api_client, gateway, sample_resume) -> None:
    gateway.queue({"score": 71.4, "missingKeywords": ["Kubernetes"]})
    request = MatchAnalysisRequest(stage=1, job_description="Go engineer", resume=sample_resume)

    async def call():
        async with api_client:
            return await api_client.revise(request)

    result = asyncio.run(call())
    assert isinstance(result, MatchAnalysis)
    assert result.score == 71
    assert result.missing_keywords == ["Kubernetes"]


def test_orchestrator_over_http(api_client, gateway, sample_resume) -> None:
    gateway.queue(
        {"score": 58, "missingKeywords": ["Kubernetes"]},
        {"workExperiences": resume_reply()["workExperiences"]},
        resume_reply(),
    )
    store = InMemoryDocumentStore(sample_resume)
    orchestrator = RevisionOrchestrator(api_client, store, job_description="Go engineer")

    async def session():
        async with api_client:
            await orchestrator.run_stage1()
            await orchestrator.run_stage2()
            await orchestrator.run_stage3()

    asyncio.run(session())
    assert orchestrator.session.stage == RevisionStage.ATS_FIXED
    assert orchestrator.revert()
    assert store.read() == sample_resume


def test_server_errors_are_raised_as_same_class(api_client, gateway) -> None:
    gateway.queue(RateLimitedError())

    async def call():
        async with api_client:
            return await api_client.generate(GenerateRequest(job_description="Go engineer"))

    with pytest.raises(RateLimitedError) as excinfo:
        asyncio.run(call())
    assert excinfo.value.message == RateLimitedError.default_message


def test_orchestrator_records_http_failure(api_client, gateway, sample_resume) -> None:
    incomplete = resume_reply()
    del incomplete["profile"]
    gateway.queue(incomplete)
    orchestrator = RevisionOrchestrator(api_client, InMemoryDocumentStore(sample_resume), job_description="Go engineer")

    async def call():
        async with api_client:
            return await orchestrator.generate()

    assert asyncio.run(call()) is None
    assert orchestrator.session.error == IncompleteDocumentError.default_message


def test_unreachable_server_is_transport_failure() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = ResumeApiClient(base_url="http://testserver", transport=httpx.MockTransport(refuse))

    async def call():
        async with client:
            return await client.generate(GenerateRequest(job_description="Go engineer"))

    with pytest.raises(TransportFailureError):
        asyncio.run(call())


@pytest.mark.parametrize(
    "status, body, expected",
    [
        (400, {"error": "Job description is required.", "kind": "ValidationError"}, ValidationError),
        (500, {"error": "AI generated an incomplete resume.", "kind": "IncompleteDocument"}, IncompleteDocumentError),
        (429, {"detail": "slow down"}, RateLimitedError),
        (502, {}, TransportFailureError),
    ],
)
def test_error_from_response(status, body, expected) -> None:
    error = error_from_response(status, body)
    assert type(error) is expected
    if "error" in body:
        assert error.message == body["error"]
