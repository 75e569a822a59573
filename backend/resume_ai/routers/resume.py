from typing import Annotated

from fastapi import APIRouter, Body, Depends

from ..schemas.revision import (
    ErrorResponse,
    GenerateRequest,
    InstructionRequest,
    ResumeResponse,
    ReviseRequest,
    ReviseResponse,
)
from ..services.llm_gateway import ModelGateway, get_model_gateway
from ..services.resume_ai import ResumeAIService

router = APIRouter(prefix="/api", tags=["Resume AI"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    401: {"model": ErrorResponse, "description": "Invalid Gemini API key"},
    429: {"model": ErrorResponse, "description": "Rate limited by Gemini"},
    500: {"model": ErrorResponse, "description": "Configuration or AI response error"},
    502: {"model": ErrorResponse, "description": "Gemini unreachable"},
}


def get_resume_service(gateway: ModelGateway = Depends(get_model_gateway)) -> ResumeAIService:
    return ResumeAIService(gateway)


@router.post("/generate-resume", response_model=ResumeResponse, responses=_ERROR_RESPONSES)
async def generate_resume(
    request: GenerateRequest,
    service: ResumeAIService = Depends(get_resume_service),
):
    """Generate a resume tailored to a job description, optionally from the current one"""
    return await service.generate(request)


@router.post(
    "/revise-resume",
    response_model=ReviseResponse,
    responses=_ERROR_RESPONSES,
)
async def revise_resume(
    request: Annotated[ReviseRequest, Body(discriminator="stage")],
    service: ResumeAIService = Depends(get_resume_service),
):
    """
    Run one revision stage.

    - stage 1: match score and the five most important missing keywords
    - stage 2: work experience rewritten with the missing keywords
    - stage 3: whole resume optimized for ATS parsing
    """
    return await service.revise(request)


@router.post("/apply-instruction", response_model=ResumeResponse, responses=_ERROR_RESPONSES)
async def apply_instruction(
    request: InstructionRequest,
    service: ResumeAIService = Depends(get_resume_service),
):
    """Apply a free-form editing instruction to the whole resume"""
    return await service.apply_instruction(request)
