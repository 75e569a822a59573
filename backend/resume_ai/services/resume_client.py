"""
HTTP client for the resume API, usable as the orchestrator's ``ResumeClient``.

Error bodies (``{"error": ..., "kind": ...}``) are raised again as the same
error classes the server raised, so a session behaves identically whether
it talks to the service in-process or over HTTP.
"""
import logging
from typing import Optional, Union

import httpx

from ..config import get_settings
from ..schemas.resume import CamelModel
from ..schemas.revision import (
    AtsOptimizeRequest,
    ExperienceRewrite,
    ExperienceRewriteRequest,
    GenerateRequest,
    InstructionRequest,
    MatchAnalysis,
    MatchAnalysisRequest,
    ResumeResponse,
)
from .errors import TransportFailureError, UpstreamFormatError, error_from_response

logger = logging.getLogger(__name__)

_REVISE_RESPONSES = {
    MatchAnalysisRequest: MatchAnalysis,
    ExperienceRewriteRequest: ExperienceRewrite,
    AtsOptimizeRequest: ResumeResponse,
}


class ResumeApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=timeout if timeout is not None else settings.api_timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "ResumeApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _post(self, path: str, payload: CamelModel) -> dict:
        try:
            response = await self._client.post(path, json=payload.model_dump(mode="json", by_alias=True))
        except httpx.HTTPError as e:
            logger.error(f"[CLIENT] POST {path} failed: {e!r}")
            raise TransportFailureError() from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_error:
            raise error_from_response(response.status_code, body or {})
        if not isinstance(body, dict):
            raise UpstreamFormatError()
        return body

    async def generate(self, request: GenerateRequest) -> ResumeResponse:
        body = await self._post("/api/generate-resume", request)
        return ResumeResponse.model_validate(body)

    async def revise(
        self, request: Union[MatchAnalysisRequest, ExperienceRewriteRequest, AtsOptimizeRequest]
    ) -> Union[MatchAnalysis, ExperienceRewrite, ResumeResponse]:
        body = await self._post("/api/revise-resume", request)
        return _REVISE_RESPONSES[type(request)].model_validate(body)

    async def apply_instruction(self, request: InstructionRequest) -> ResumeResponse:
        body = await self._post("/api/apply-instruction", request)
        return ResumeResponse.model_validate(body)
