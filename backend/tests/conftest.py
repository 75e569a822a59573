"""Shared fixtures: a sample resume and a scripted stand-in for the Gemini gateway."""

from __future__ import annotations

import json
from typing import Any, List, Union

import pytest
from fastapi.testclient import TestClient

from resume_ai.main import app
from resume_ai.schemas.resume import (
    FeaturedSkill,
    ResumeCustom,
    ResumeDocument,
    ResumeEducation,
    ResumeProfile,
    ResumeProject,
    ResumeSkills,
    ResumeWorkExperience,
)
from resume_ai.services.llm_gateway import get_model_gateway
from resume_ai.services.prompts import Prompt


class ScriptedGateway:
    """Replays queued replies in order and records every prompt it was sent.

    A reply may be a dict/list (sent as JSON text), a raw string, or an
    exception instance to raise.
    """

    model = "scripted-model"

    def __init__(self, *replies: Union[dict, list, str, Exception]):
        self.replies: List[Any] = list(replies)
        self.prompts: List[Prompt] = []

    def queue(self, *replies: Union[dict, list, str, Exception]) -> None:
        self.replies.extend(replies)

    async def complete_json(self, prompt: Prompt) -> str:
        self.prompts.append(prompt)
        if not self.replies:
            raise AssertionError("ScriptedGateway ran out of replies")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, str):
            return reply
        return json.dumps(reply)


def make_resume() -> ResumeDocument:
    return ResumeDocument(
        profile=ResumeProfile(
            name="Jane Doe",
            email="jane@example.com",
            phone="555-0100",
            url="linkedin.com/in/janedoe",
            summary="Backend engineer focused on payments infrastructure.",
            location="Austin, TX",
        ),
        work_experiences=[
            ResumeWorkExperience(
                company="Acme Payments",
                job_title="Software Engineer",
                date="Jan 2021 - Present",
                descriptions=[
                    "Built a settlement service in Go handling 2M transactions per day",
                    "Reduced batch job runtime by 40% by parallelizing reconciliation",
                ],
            ),
            ResumeWorkExperience(
                company="Widget Co",
                job_title="Junior Developer",
                date="Jun 2018 - Dec 2020",
                descriptions=["Maintained internal REST APIs written in Python"],
            ),
        ],
        educations=[
            ResumeEducation(school="State University", degree="BS Computer Science", date="2018", gpa="3.7"),
        ],
        projects=[
            ResumeProject(project="ledgerlite", date="2022", descriptions=["Double-entry ledger library"]),
        ],
        skills=ResumeSkills(
            featured_skills=[FeaturedSkill(skill="Go", rating=4), FeaturedSkill(skill="Python", rating=3)],
            descriptions=["Languages: Go, Python, SQL"],
        ),
        custom=ResumeCustom(descriptions=["Speaker, GopherCon 2023"]),
    )


def resume_reply(work_experience_count: int = 2, featured_skill_count: int = 6, **overrides) -> dict:
    """A well-formed full-resume reply in wire format."""
    reply = {
        "profile": {
            "name": "Jane Doe",
            "email": "jane@example.com",
            "phone": "555-0100",
            "url": "linkedin.com/in/janedoe",
            "summary": "**Go** backend engineer building payment systems.",
            "location": "Austin, TX",
        },
        "workExperiences": [
            {
                "company": f"Company {i}",
                "jobTitle": "Software Engineer",
                "date": "Jan 2021 - Present",
                "descriptions": [f"Shipped feature {i} in **Go**"],
            }
            for i in range(work_experience_count)
        ],
        "educations": [
            {"school": "State University", "degree": "BS Computer Science", "date": "2018", "gpa": "3.7", "descriptions": []}
        ],
        "projects": [{"project": "ledgerlite", "date": "2022", "descriptions": ["Ledger library"]}],
        "skills": {
            "featuredSkills": [{"skill": f"Skill {i}", "rating": 4} for i in range(featured_skill_count)],
            "descriptions": ["Languages: Go, Python"],
        },
        "custom": {"descriptions": []},
    }
    reply.update(overrides)
    return reply


@pytest.fixture
def sample_resume() -> ResumeDocument:
    return make_resume()


@pytest.fixture
def gateway() -> ScriptedGateway:
    return ScriptedGateway()


@pytest.fixture
def client(gateway: ScriptedGateway):
    app.dependency_overrides[get_model_gateway] = lambda: gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
