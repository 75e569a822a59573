"""
Output contracts for model replies.

The model's JSON is untrusted. Each function here either returns a value
that satisfies its call's shape contract or raises ``UpstreamFormatError`` /
``IncompleteDocumentError``. Nothing here performs I/O.
"""
import json
import logging
import math
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from ..schemas.resume import ResumeDocument, ResumeWorkExperience
from ..schemas.revision import ExperienceRewrite, MatchAnalysis
from .errors import IncompleteDocumentError, UpstreamFormatError

logger = logging.getLogger(__name__)

REQUIRED_SECTIONS = ("profile", "workExperiences", "educations", "skills")
MAX_MISSING_KEYWORDS = 5


def parse_model_json(raw: str) -> Any:
    """Parse a model reply, tolerating a surrounding markdown code fence."""
    text = raw.strip()
    if text.startswith("```json"):
        text = text[7:]
    if text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    text = text.strip()

    try:
        return json.loads(text)
    except ValueError as e:
        # JSONDecodeError, or an integer literal past the int digit limit
        logger.warning(f"[CONTRACT] Unparseable model reply: {e} (first 200 chars: {text[:200]!r})")
        raise UpstreamFormatError("Failed to parse AI response. Please try again.") from e


def _is_number(value: Any) -> bool:
    """Any JSON number except NaN. Infinities and huge ints are clamped later."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def validate_match_analysis(data: Any) -> MatchAnalysis:
    """Stage 1: clamp the score into [0, 100] and keep at most five keywords."""
    if not isinstance(data, dict):
        raise UpstreamFormatError()
    score = data.get("score")
    keywords = data.get("missingKeywords")
    if not _is_number(score) or not isinstance(keywords, list):
        raise UpstreamFormatError()

    # Clamp before any float arithmetic so 10**400 and inf stay safe
    clamped = int(math.floor(max(0, min(100, score)) + 0.5))
    usable = [k for k in keywords if isinstance(k, str) or _is_number(k)]
    if clamped != score:
        logger.debug(f"[CONTRACT] Score normalized to {clamped}")
    return MatchAnalysis(
        score=clamped,
        missing_keywords=[str(k) for k in usable][:MAX_MISSING_KEYWORDS],
    )


def validate_experience_rewrite(
    data: Any,
    expected_count: Optional[int] = None,
    enforce_parity: bool = False,
) -> ExperienceRewrite:
    """Stage 2: the reply must carry a list of work experiences.

    A count different from ``expected_count`` is only logged unless
    ``enforce_parity`` is set.
    """
    if not isinstance(data, dict) or not isinstance(data.get("workExperiences"), list):
        raise UpstreamFormatError()

    try:
        work_experiences = [
            ResumeWorkExperience.model_validate(item) for item in data["workExperiences"]
        ]
    except PydanticValidationError as e:
        logger.warning(f"[CONTRACT] Malformed work experience entry: {e.error_count()} errors")
        raise UpstreamFormatError() from e

    if expected_count is not None and len(work_experiences) != expected_count:
        if enforce_parity:
            raise UpstreamFormatError(
                f"AI returned {len(work_experiences)} work experiences instead of {expected_count}. Please try again."
            )
        logger.warning(
            f"[CONTRACT] Work experience count changed: expected {expected_count}, got {len(work_experiences)}"
        )
    return ExperienceRewrite(work_experiences=work_experiences)


def validate_full_resume(data: Any) -> ResumeDocument:
    """Generation, stage 3 and custom instructions: a complete document.

    ``projects`` and ``custom`` default to empty; the featured skills are
    padded or truncated to six by the document model.
    """
    if not isinstance(data, dict):
        raise UpstreamFormatError()

    missing = [section for section in REQUIRED_SECTIONS if data.get(section) is None]
    if missing:
        logger.warning(f"[CONTRACT] Resume missing sections: {', '.join(missing)}")
        raise IncompleteDocumentError()

    data = dict(data)
    if data.get("projects") is None:
        data["projects"] = []
    if data.get("custom") is None:
        data["custom"] = {"descriptions": []}

    try:
        return ResumeDocument.model_validate(data)
    except PydanticValidationError as e:
        logger.warning(f"[CONTRACT] Malformed resume sections: {e.error_count()} errors")
        raise UpstreamFormatError() from e