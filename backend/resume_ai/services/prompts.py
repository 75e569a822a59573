"""
Prompt construction for resume generation and the revision stages.

Each call type has one fixed system policy. The user payload is built from
the current inputs only, so the same inputs always produce the same prompt.
Documents are embedded as indented JSON in wire (camelCase) form with fields
in declaration order; nothing is elided.
"""
import json
from dataclasses import dataclass
from typing import List, Optional

from ..config import get_settings
from ..schemas.resume import ResumeDocument, ResumeWorkExperience


@dataclass(frozen=True)
class Prompt:
    system: str
    user: str
    temperature: float


# ============================================================================
# JSON shapes the model must answer with
# ============================================================================

RESUME_JSON_SHAPE = """{
  "profile": {
    "name": "string",
    "email": "string",
    "phone": "string",
    "url": "string",
    "summary": "string",
    "location": "string"
  },
  "workExperiences": [
    {
      "company": "string",
      "jobTitle": "string",
      "date": "string",
      "descriptions": ["string"]
    }
  ],
  "educations": [
    {
      "school": "string",
      "degree": "string",
      "date": "string",
      "gpa": "string",
      "descriptions": ["string"]
    }
  ],
  "projects": [
    {
      "project": "string",
      "date": "string",
      "descriptions": ["string"]
    }
  ],
  "skills": {
    "featuredSkills": [
      { "skill": "string", "rating": 4 },
      { "skill": "string", "rating": 4 },
      { "skill": "string", "rating": 3 },
      { "skill": "string", "rating": 3 },
      { "skill": "string", "rating": 3 },
      { "skill": "string", "rating": 3 }
    ],
    "descriptions": ["string"]
  },
  "custom": {
    "descriptions": ["string"]
  }
}"""

BOLD_RULE = (
    "Bold formatting: wrap only the highest-signal words or phrases in **double asterisks**: "
    "quantified results (e.g. **40%**, **$2M**), key technical skills and tools, and keywords "
    "taken from the job description. Never bold generic words such as \"team\", \"project\", "
    "\"experience\" or \"responsible\". Do not over-bold; one or two bold spans per bullet at most."
)


# ============================================================================
# System policies
# ============================================================================

GENERATION_SYSTEM_PROMPT = f"""You are an expert resume writer and ATS (Applicant Tracking System) optimization specialist.

Generate a resume tailored to the job description you are given:
1. Extract the key skills, technologies, qualifications and keywords from the job description.
2. Write resume content that incorporates these keywords naturally.
3. Use strong action verbs and achievement-focused phrasing.
4. Keep descriptions concise and scannable (bullet-point style).
5. When a current resume is provided, keep its facts (names, companies, titles, schools, dates) intact and only enhance wording and emphasis.

Guidelines:
- Include 2-3 work experiences with 3-4 bullet points each.
- Include 1-2 education entries and 1-2 relevant projects.
- featuredSkills must contain exactly 6 entries: the most important skills for the job.
- Skill descriptions group related skills by category (e.g. "Languages: Python, Go, SQL").

Respond ONLY with a JSON object of exactly this structure:
{RESUME_JSON_SHAPE}"""

MATCH_SYSTEM_PROMPT = """You are a senior technical recruiter with 15+ years of experience evaluating candidates.

Compare the candidate resume against the job description and identify the gaps.

Scoring guidelines:
- 80-100: strong match, most required skills present
- 60-79: moderate match, several key skills missing
- 0-59: weak match, major gaps in required qualifications

missingKeywords must contain exactly 5 items: the most important skills, technologies or
qualifications from the job description that are absent or underrepresented in the resume.

Respond ONLY with a JSON object of exactly this structure:
{
  "score": <integer 0-100>,
  "missingKeywords": ["keyword1", "keyword2", "keyword3", "keyword4", "keyword5"]
}"""

REWRITE_SYSTEM_PROMPT = f"""You are an expert resume writer who uses the XYZ achievement formula:
"Accomplished X, as measured by Y, by doing Z."

Rewrite every bullet of the work experience you are given with the XYZ formula, working the
missing keywords in where the candidate's existing descriptions support them.

Rules:
- Return exactly as many work experiences as you were given, in the same order.
- Keep every company name, job title and date exactly as given.
- NEVER invent facts. Do not add companies, job titles, technologies, tools or metrics that do
  not appear in the original descriptions.
- Metrics: only reuse numbers that already appear in the original bullet. When a bullet has no
  number, describe the result qualitatively (e.g. "significantly reduced build times") instead
  of making up a percentage or count.
- Missing keywords: include one only if the candidate's existing descriptions show they actually
  worked with it. Skipping a keyword is always better than claiming experience they lack.
- Rewrite, do not reinvent: the underlying facts of each bullet must stay true to the original.
- {BOLD_RULE}

Respond ONLY with a JSON object of exactly this structure:
{{
  "workExperiences": [
    {{
      "company": "string",
      "jobTitle": "string",
      "date": "string",
      "descriptions": ["string"]
    }}
  ]
}}"""

ATS_SYSTEM_PROMPT = f"""You are an ATS (Applicant Tracking System) optimization specialist.

Rewrite the resume you are given for maximum machine readability:
- Use simple, parser-friendly date formats (e.g. "Jan 2022 - Mar 2024").
- Remove special characters, tables, columns and unusual formatting from descriptions.
- Start bullet points with strong action verbs; keep them clear and scannable.
- Raise the keyword density of critical skills that are already in the resume.
- Preserve every fact: each company, job title, date, school, degree, project and skill carries
  over verbatim.
- Do not add skills, technologies or experiences that are not already in the resume. Do not
  invent content of any kind; only improve phrasing and formatting.
- If a section is already ATS-friendly, reproduce it unchanged.
- Keep bold spans from earlier revisions.
- {BOLD_RULE} Apply this across all description fields, including notable honors in education
  and one or two critical qualifications in the profile summary.

Respond ONLY with a JSON object of exactly this structure:
{RESUME_JSON_SHAPE}"""

INSTRUCTION_SYSTEM_PROMPT = f"""You are an expert resume editor. Apply the user's instruction to the resume
you are given and return the complete, updated resume.

Rules:
- Change only what the instruction asks for; carry every other section over unchanged.
- NEVER invent facts. Do not add companies, job titles, technologies, tools or metrics that are
  not already in the resume, even if the instruction asks for them.
- Keep the target job description in mind when choosing wording.
- {BOLD_RULE}

Respond ONLY with a JSON object of exactly this structure:
{RESUME_JSON_SHAPE}"""


# ============================================================================
# Builders
# ============================================================================

def serialize_resume(resume: ResumeDocument) -> str:
    return json.dumps(resume.to_wire(), indent=2, ensure_ascii=False)


def serialize_work_experiences(work_experiences: List[ResumeWorkExperience]) -> str:
    payload = [exp.model_dump(mode="json", by_alias=True) for exp in work_experiences]
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _job_block(job_description: str) -> str:
    return f"Job Description:\n---\n{job_description}\n---"


def build_generation_prompt(job_description: str, current_resume: Optional[ResumeDocument] = None) -> Prompt:
    user = f"Generate a tailored resume for the following job description.\n\n{_job_block(job_description)}"
    if current_resume is not None:
        user += (
            "\n\nUse the candidate's current resume below as the base. Enhance and tailor it to the "
            "job description while keeping its core information intact:\n\n"
            + serialize_resume(current_resume)
        )
    else:
        user += (
            "\n\nNo resume was provided. Write realistic sample content that would be a strong match "
            "for this position."
        )
    return Prompt(GENERATION_SYSTEM_PROMPT, user, get_settings().generation_temperature)


def build_match_prompt(job_description: str, resume: ResumeDocument) -> Prompt:
    user = f"{_job_block(job_description)}\n\nCandidate Resume:\n{serialize_resume(resume)}"
    return Prompt(MATCH_SYSTEM_PROMPT, user, get_settings().match_temperature)


def build_rewrite_prompt(job_description: str, resume: ResumeDocument, missing_keywords: List[str]) -> Prompt:
    keywords = ", ".join(missing_keywords) if missing_keywords else "(none)"
    user = (
        f"{_job_block(job_description)}\n\n"
        f"Missing keywords to incorporate: {keywords}\n\n"
        f"Current Work Experience ({len(resume.work_experiences)} entries):\n"
        f"{serialize_work_experiences(resume.work_experiences)}"
    )
    return Prompt(REWRITE_SYSTEM_PROMPT, user, get_settings().rewrite_temperature)


def build_ats_prompt(resume: ResumeDocument) -> Prompt:
    user = f"Here is the resume to optimize for ATS compatibility:\n\n{serialize_resume(resume)}"
    return Prompt(ATS_SYSTEM_PROMPT, user, get_settings().ats_temperature)


def build_instruction_prompt(instruction: str, resume: ResumeDocument, job_description: Optional[str] = None) -> Prompt:
    user = f"Instruction:\n---\n{instruction}\n---"
    if job_description:
        user += f"\n\nTarget {_job_block(job_description)}"
    user += f"\n\nCurrent Resume:\n{serialize_resume(resume)}"
    return Prompt(INSTRUCTION_SYSTEM_PROMPT, user, get_settings().instruction_temperature)
