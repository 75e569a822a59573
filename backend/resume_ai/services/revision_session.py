"""
Revision session state machine.

The three revision stages run strictly in order against one job description:

    idle -> scoring -> scored -> rewriting -> rewritten -> atsFixing -> atsFixed

``scoring``, ``rewriting`` and ``atsFixing`` are in-flight states. A failed
stage falls back one step (stage 1 back to idle), keeping earlier results so
they can be reused without another model call. Generation and custom
instructions run beside the pipeline without moving ``stage``.

Before the first mutating action of a session the live document is
deep-copied; ``revert()`` puts that copy back. Only one action may be in
flight at a time; the orchestrator refuses a second one instead of queueing.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol, Union

from pydantic import ValidationError as PydanticValidationError

from ..schemas.resume import ResumeDocument
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
from .document_store import DocumentStore
from .errors import (
    ResumeAIError,
    StageInProgressError,
    StageOrderError,
    UnknownError,
    ValidationError,
    describe_validation_errors,
)

logger = logging.getLogger(__name__)


class ResumeClient(Protocol):
    """What the orchestrator needs from the generate / revise API.

    Satisfied in-process by ``ResumeAIService`` and over HTTP by
    ``ResumeApiClient``.
    """

    async def generate(self, request: GenerateRequest) -> ResumeResponse:
        ...

    async def revise(
        self, request: Union[MatchAnalysisRequest, ExperienceRewriteRequest, AtsOptimizeRequest]
    ) -> Union[MatchAnalysis, ExperienceRewrite, ResumeResponse]:
        ...

    async def apply_instruction(self, request: InstructionRequest) -> ResumeResponse:
        ...


class RevisionStage(str, Enum):
    IDLE = "idle"
    SCORING = "scoring"
    SCORED = "scored"
    REWRITING = "rewriting"
    REWRITTEN = "rewritten"
    ATS_FIXING = "atsFixing"
    ATS_FIXED = "atsFixed"


IN_FLIGHT_STAGES = frozenset({RevisionStage.SCORING, RevisionStage.REWRITING, RevisionStage.ATS_FIXING})


@dataclass
class RevisionSession:
    stage: RevisionStage = RevisionStage.IDLE
    match_score: Optional[int] = None
    missing_keywords: List[str] = field(default_factory=list)
    snapshot: Optional[ResumeDocument] = None
    error: Optional[str] = None
    # "generate" / "custom" while one of the side paths is in flight
    pending_action: Optional[str] = None

    @property
    def busy(self) -> bool:
        return self.stage in IN_FLIGHT_STAGES or self.pending_action is not None


class SnapshotManager:
    """Capture-once, restore-once copy of the document for one session."""

    def __init__(self, session: RevisionSession):
        self.session = session

    @property
    def has_snapshot(self) -> bool:
        return self.session.snapshot is not None

    def capture(self, document: ResumeDocument) -> bool:
        """Deep-copy ``document`` unless a snapshot is already held."""
        if self.session.snapshot is not None:
            return False
        self.session.snapshot = document.model_copy(deep=True)
        return True

    def restore(self, store: DocumentStore) -> bool:
        snapshot = self.session.snapshot
        if snapshot is None:
            return False
        store.replace(snapshot)
        self.session.snapshot = None
        return True

    def clear(self) -> None:
        self.session.snapshot = None


class RevisionOrchestrator:
    """Drives one editing session's revision pipeline against a document store."""

    def __init__(self, client: ResumeClient, store: DocumentStore, job_description: str = ""):
        self.client = client
        self.store = store
        self.session = RevisionSession()
        self.snapshots = SnapshotManager(self.session)
        self._job_description = job_description

    # ------------------------------------------------------------------
    # Session context
    # ------------------------------------------------------------------

    @property
    def job_description(self) -> str:
        return self._job_description

    def set_job_description(self, text: str) -> None:
        """Every downstream result depends on the job description, so any
        change discards the session."""
        if text == self._job_description:
            return
        self._ensure_not_busy()
        self._job_description = text
        self.reset()

    def reset(self) -> None:
        self._ensure_not_busy()
        self.session.stage = RevisionStage.IDLE
        self.session.match_score = None
        self.session.missing_keywords = []
        self.session.error = None
        self.snapshots.clear()

    def revert(self) -> bool:
        """Restore the pre-session document and return to idle.

        Returns False (and changes nothing) when no snapshot is held.
        """
        self._ensure_not_busy()
        if not self.snapshots.has_snapshot:
            return False
        self.snapshots.restore(self.store)
        self.reset()
        logger.info("[SESSION] Reverted to snapshot")
        return True

    # ------------------------------------------------------------------
    # Gating
    # ------------------------------------------------------------------

    @property
    def can_run_stage1(self) -> bool:
        return self.session.stage == RevisionStage.IDLE and not self.session.busy

    @property
    def can_run_stage2(self) -> bool:
        return self.session.stage == RevisionStage.SCORED and not self.session.busy

    @property
    def can_run_stage3(self) -> bool:
        return self.session.stage == RevisionStage.REWRITTEN and not self.session.busy

    @property
    def can_revert(self) -> bool:
        return self.snapshots.has_snapshot and not self.session.busy

    def _ensure_not_busy(self) -> None:
        if self.session.busy:
            raise StageInProgressError(
                f"Cannot start a new action while '{self.session.pending_action or self.session.stage.value}' is in flight"
            )

    def _begin_stage(self, required: RevisionStage, in_flight: RevisionStage) -> None:
        self._ensure_not_busy()
        if self.session.stage != required:
            raise StageOrderError(
                f"{in_flight.value} requires stage '{required.value}', session is '{self.session.stage.value}'"
            )
        self.session.stage = in_flight
        self.session.error = None

    def _begin_side_action(self, name: str) -> None:
        self._ensure_not_busy()
        self.session.pending_action = name
        self.session.error = None

    def _record_failure(self, action: str, error: Exception) -> None:
        if isinstance(error, ResumeAIError):
            message = error.message
            logger.warning(f"[SESSION] {action} failed ({error.kind}): {message}")
        else:
            message = UnknownError.default_message
            logger.exception(f"[SESSION] {action} failed unexpectedly")
        self.session.error = message

    def _build(self, model, **fields):
        """Build a request model, reporting bad input as a ValidationError."""
        try:
            return model(**fields)
        except PydanticValidationError as e:
            raise ValidationError(describe_validation_errors(e.errors())) from e

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    async def run_stage1(self) -> Optional[MatchAnalysis]:
        """Score the document against the job description.

        Returns the analysis, or None after recording the failure in
        ``session.error``.
        """
        self._begin_stage(RevisionStage.IDLE, RevisionStage.SCORING)
        try:
            request = self._build(
                MatchAnalysisRequest,
                stage=1,
                job_description=self._job_description,
                resume=self.store.read(),
            )
            self.snapshots.capture(self.store.read())
            result = await self.client.revise(request)
        except Exception as e:
            self._record_failure("Stage 1", e)
            self.session.stage = RevisionStage.IDLE
            return None

        self.session.match_score = result.score
        self.session.missing_keywords = list(result.missing_keywords)
        self.session.stage = RevisionStage.SCORED
        return result

    async def run_stage2(self) -> Optional[ExperienceRewrite]:
        """Rewrite work experience using stage 1's missing keywords.

        Only ``work_experiences`` of the live document is replaced.
        """
        self._begin_stage(RevisionStage.SCORED, RevisionStage.REWRITING)
        try:
            request = self._build(
                ExperienceRewriteRequest,
                stage=2,
                job_description=self._job_description,
                resume=self.store.read(),
                missing_keywords=list(self.session.missing_keywords),
            )
            result = await self.client.revise(request)
        except Exception as e:
            self._record_failure("Stage 2", e)
            self.session.stage = RevisionStage.SCORED
            return None

        current = self.store.read()
        self.store.replace(current.model_copy(update={"work_experiences": result.work_experiences}))
        self.session.stage = RevisionStage.REWRITTEN
        return result

    async def run_stage3(self) -> Optional[ResumeDocument]:
        """ATS pass; the returned document replaces the live one entirely."""
        self._begin_stage(RevisionStage.REWRITTEN, RevisionStage.ATS_FIXING)
        try:
            request = self._build(
                AtsOptimizeRequest,
                stage=3,
                job_description=self._job_description or None,
                resume=self.store.read(),
            )
            result = await self.client.revise(request)
        except Exception as e:
            self._record_failure("Stage 3", e)
            self.session.stage = RevisionStage.REWRITTEN
            return None

        self.store.replace(result.resume)
        self.session.stage = RevisionStage.ATS_FIXED
        return result.resume

    # ------------------------------------------------------------------
    # Side paths
    # ------------------------------------------------------------------

    async def run_custom_instruction(self, instruction: str) -> Optional[ResumeDocument]:
        """Apply a free-form instruction to the whole document.

        Takes the session snapshot if none is held yet; ``stage`` is left
        as it was.
        """
        self._begin_side_action("custom")
        try:
            request = self._build(
                InstructionRequest,
                instruction=instruction,
                job_description=self._job_description or None,
                resume=self.store.read(),
            )
            self.snapshots.capture(self.store.read())
            result = await self.client.apply_instruction(request)
        except Exception as e:
            self._record_failure("Custom instruction", e)
            return None
        finally:
            self.session.pending_action = None

        self.store.replace(result.resume)
        return result.resume

    async def generate(self, use_existing_resume: bool = True) -> Optional[ResumeDocument]:
        """Single-shot tailored resume for the current job description.

        The current document is sent as the base when requested and it has
        content. On success the stage results are cleared, since they
        described the replaced document; a held snapshot is kept.
        """
        self._begin_side_action("generate")
        try:
            current = self.store.read()
            request = self._build(
                GenerateRequest,
                job_description=self._job_description.strip(),
                current_resume=current if use_existing_resume and current.has_content() else None,
            )
            result = await self.client.generate(request)
        except Exception as e:
            self._record_failure("Generate", e)
            return None
        finally:
            self.session.pending_action = None

        self.store.replace(result.resume)
        self.session.stage = RevisionStage.IDLE
        self.session.match_score = None
        self.session.missing_keywords = []
        return result.resume
