"""
Resume document schemas.

Wire names are camelCase (``workExperiences``, ``jobTitle``...); attributes
are snake_case. Field declaration order is the serialization order.
"""
import math
from typing import Annotated, List, Optional
from pydantic import BaseModel, BeforeValidator, Field, field_validator
from pydantic.alias_generators import to_camel


FEATURED_SKILL_COUNT = 6
PLACEHOLDER_SKILL_RATING = 4


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


def _none_as_empty(value):
    # JSON mode answers null for contact details it does not know
    return "" if value is None else value


def _as_text_list(value):
    """Accept a lone string where a list of strings is expected."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    if isinstance(value, list):
        return [item for item in value if item is not None]
    return value


Text = Annotated[str, BeforeValidator(_none_as_empty)]
TextList = Annotated[List[str], BeforeValidator(_as_text_list)]


# ============================================================================
# Sections
# ============================================================================

class ResumeProfile(CamelModel):
    name: Text = ""
    email: Text = ""
    phone: Text = ""
    url: Text = ""
    summary: Text = ""
    location: Text = ""


class ResumeWorkExperience(CamelModel):
    company: Text = ""
    job_title: Text = ""
    date: Text = ""
    descriptions: TextList = Field(default_factory=list)


class ResumeEducation(CamelModel):
    school: Text = ""
    degree: Text = ""
    date: Text = ""
    gpa: Optional[str] = ""
    descriptions: TextList = Field(default_factory=list)

    @field_validator("gpa", mode="before")
    @classmethod
    def _gpa_as_text(cls, value):
        # Models like to answer 3.8 instead of "3.8"
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class ResumeProject(CamelModel):
    project: Text = ""
    date: Text = ""
    descriptions: TextList = Field(default_factory=list)
    hidden: bool = False

    @field_validator("hidden", mode="before")
    @classmethod
    def _null_as_visible(cls, value):
        return False if value is None else value


class FeaturedSkill(CamelModel):
    skill: Text = ""
    rating: int = PLACEHOLDER_SKILL_RATING

    @field_validator("rating", mode="before")
    @classmethod
    def _round_rating(cls, value):
        if value is None or (isinstance(value, float) and not math.isfinite(value)):
            return PLACEHOLDER_SKILL_RATING
        if isinstance(value, float):
            return int(round(value))
        return value


def normalize_featured_skills(skills: list) -> list:
    """Pad with placeholders or truncate so exactly six entries remain."""
    skills = list(skills or [])[:FEATURED_SKILL_COUNT]
    while len(skills) < FEATURED_SKILL_COUNT:
        skills.append(FeaturedSkill())
    return skills


class ResumeSkills(CamelModel):
    featured_skills: List[FeaturedSkill] = Field(
        default_factory=lambda: normalize_featured_skills([])
    )
    descriptions: TextList = Field(default_factory=list)

    @field_validator("featured_skills", mode="before")
    @classmethod
    def _missing_as_empty(cls, value):
        return [] if value is None else value

    @field_validator("featured_skills", mode="after")
    @classmethod
    def _exactly_six(cls, value: List[FeaturedSkill]) -> List[FeaturedSkill]:
        return normalize_featured_skills(value)


class ResumeCustom(CamelModel):
    descriptions: TextList = Field(default_factory=list)


# ============================================================================
# Document
# ============================================================================

class ResumeDocument(CamelModel):
    """The resume aggregate every generation and revision stage operates on."""
    profile: ResumeProfile = Field(default_factory=ResumeProfile)
    work_experiences: List[ResumeWorkExperience] = Field(default_factory=list)
    educations: List[ResumeEducation] = Field(default_factory=list)
    projects: List[ResumeProject] = Field(default_factory=list)
    skills: ResumeSkills = Field(default_factory=ResumeSkills)
    custom: ResumeCustom = Field(default_factory=ResumeCustom)

    def has_content(self) -> bool:
        """True once the user has filled in at least their name."""
        return self.profile.name != ""

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


def initial_resume() -> ResumeDocument:
    """Blank document the editor starts with: one empty entry per list section."""
    return ResumeDocument(
        work_experiences=[ResumeWorkExperience()],
        educations=[ResumeEducation()],
        projects=[ResumeProject()],
    )
