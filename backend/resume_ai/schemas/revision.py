"""
Request and response schemas for the generate / revise / instruction endpoints.

Revision requests form a closed union tagged by ``stage``; each variant has
its own required fields so a stage-2 request without ``missingKeywords`` is
rejected before any model call.
"""
from typing import List, Literal, Optional, Union
from pydantic import Field, field_validator

from ..config import get_settings
from .resume import CamelModel, ResumeDocument, ResumeWorkExperience


def _check_job_description(value: Optional[str], required: bool) -> Optional[str]:
    if value is None or not value.strip():
        if required:
            raise ValueError("Job description is required.")
        return value
    limit = get_settings().max_job_description_chars
    if len(value) > limit:
        raise ValueError(f"Job description is too long. Please limit to {limit:,} characters.")
    return value


# ============================================================================
# Generate
# ============================================================================

class GenerateRequest(CamelModel):
    job_description: str
    current_resume: Optional[ResumeDocument] = None

    @field_validator("job_description")
    @classmethod
    def _job_description(cls, value: str) -> str:
        return _check_job_description(value, required=True)


class ResumeResponse(CamelModel):
    """Full-document reply (generation, stage 3, custom instruction)."""
    resume: ResumeDocument


# ============================================================================
# Revise (stages 1-3)
# ============================================================================

class MatchAnalysisRequest(CamelModel):
    """Stage 1: score the resume against the job and list missing keywords."""
    stage: Literal[1]
    job_description: str
    resume: ResumeDocument

    @field_validator("job_description")
    @classmethod
    def _job_description(cls, value: str) -> str:
        return _check_job_description(value, required=True)


class ExperienceRewriteRequest(CamelModel):
    """Stage 2: rewrite work experience, weaving in the missing keywords."""
    stage: Literal[2]
    job_description: str
    resume: ResumeDocument
    missing_keywords: List[str]

    @field_validator("job_description")
    @classmethod
    def _job_description(cls, value: str) -> str:
        return _check_job_description(value, required=True)


class AtsOptimizeRequest(CamelModel):
    """Stage 3: ATS pass over the whole document."""
    stage: Literal[3]
    job_description: Optional[str] = None
    resume: ResumeDocument

    @field_validator("job_description")
    @classmethod
    def _job_description(cls, value: Optional[str]) -> Optional[str]:
        return _check_job_description(value, required=False)


ReviseRequest = Union[MatchAnalysisRequest, ExperienceRewriteRequest, AtsOptimizeRequest]


class MatchAnalysis(CamelModel):
    score: int = Field(ge=0, le=100)
    missing_keywords: List[str] = Field(default_factory=list, max_length=5)


class ExperienceRewrite(CamelModel):
    work_experiences: List[ResumeWorkExperience]


ReviseResponse = Union[MatchAnalysis, ExperienceRewrite, ResumeResponse]


# ============================================================================
# Custom instruction
# ============================================================================

class InstructionRequest(CamelModel):
    instruction: str
    job_description: Optional[str] = None
    resume: ResumeDocument

    @field_validator("instruction")
    @classmethod
    def _instruction(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Instruction is required.")
        limit = get_settings().max_instruction_chars
        if len(value) > limit:
            raise ValueError(f"Instruction is too long. Please limit to {limit:,} characters.")
        return value

    @field_validator("job_description")
    @classmethod
    def _job_description(cls, value: Optional[str]) -> Optional[str]:
        return _check_job_description(value, required=False)


class ErrorResponse(CamelModel):
    error: str
    kind: str
