"""
Resume AI service: generation, the three revision stages and custom
instructions, each as a single model round trip.

Every call builds its prompt, sends it through the gateway, and passes the
reply through the matching output contract before anything is returned.
"""
import logging
from functools import singledispatchmethod
from typing import Any, Optional

from ..config import Settings, get_settings
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
from .contracts import (
    parse_model_json,
    validate_experience_rewrite,
    validate_full_resume,
    validate_match_analysis,
)
from .errors import ValidationError
from .llm_gateway import ModelGateway
from .prompts import (
    Prompt,
    build_ats_prompt,
    build_generation_prompt,
    build_instruction_prompt,
    build_match_prompt,
    build_rewrite_prompt,
)

logger = logging.getLogger(__name__)


class ResumeAIService:
    def __init__(self, gateway: ModelGateway, settings: Optional[Settings] = None):
        self.gateway = gateway
        self.settings = settings or get_settings()

    async def _ask(self, prompt: Prompt) -> Any:
        raw = await self.gateway.complete_json(prompt)
        return parse_model_json(raw)

    async def generate(self, request: GenerateRequest) -> ResumeResponse:
        """Single-shot tailored resume, optionally based on the current one."""
        logger.info(
            f"[GENERATE] jd_chars={len(request.job_description)}, "
            f"base_resume={'yes' if request.current_resume else 'no'}"
        )
        data = await self._ask(build_generation_prompt(request.job_description, request.current_resume))
        resume = validate_full_resume(data)
        logger.info(f"[GENERATE] Done: {len(resume.work_experiences)} work experiences")
        return ResumeResponse(resume=resume)

    @singledispatchmethod
    async def revise(self, request) -> Any:
        raise ValidationError("Invalid stage. Must be 1, 2, or 3.")

    @revise.register(MatchAnalysisRequest)
    async def _score_match(self, request: MatchAnalysisRequest) -> MatchAnalysis:
        logger.info(f"[STAGE1] Scoring resume against job description ({len(request.job_description)} chars)")
        data = await self._ask(build_match_prompt(request.job_description, request.resume))
        analysis = validate_match_analysis(data)
        logger.info(f"[STAGE1] score={analysis.score}, missing={len(analysis.missing_keywords)}")
        return analysis

    @revise.register(ExperienceRewriteRequest)
    async def _rewrite_experience(self, request: ExperienceRewriteRequest) -> ExperienceRewrite:
        expected = len(request.resume.work_experiences)
        logger.info(f"[STAGE2] Rewriting {expected} work experiences with {len(request.missing_keywords)} keywords")
        data = await self._ask(
            build_rewrite_prompt(request.job_description, request.resume, request.missing_keywords)
        )
        return validate_experience_rewrite(
            data,
            expected_count=expected,
            enforce_parity=self.settings.enforce_experience_parity,
        )

    @revise.register(AtsOptimizeRequest)
    async def _optimize_for_ats(self, request: AtsOptimizeRequest) -> ResumeResponse:
        logger.info("[STAGE3] ATS optimization pass")
        data = await self._ask(build_ats_prompt(request.resume))
        return ResumeResponse(resume=validate_full_resume(data))

    async def apply_instruction(self, request: InstructionRequest) -> ResumeResponse:
        logger.info(f"[CUSTOM] Applying instruction ({len(request.instruction)} chars)")
        data = await self._ask(
            build_instruction_prompt(request.instruction, request.resume, request.job_description)
        )
        return ResumeResponse(resume=validate_full_resume(data))
