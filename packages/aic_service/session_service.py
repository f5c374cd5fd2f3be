import uuid
from typing import Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from packages.aic_core.dto import (
    QuestionGenerationRequestDTO,
    QuestionSetDTO,
    ResumeGradeRequestDTO,
    ResumeGradeResultDTO,
)
from packages.aic_core.errors import InputValidationError
from packages.aic_core.logging import get_logger
from packages.aic_history.dto import InterviewRecord
from packages.aic_history.repository import HistoryStore
from packages.aic_providers.question.base import IQuestionProvider
from packages.aic_providers.resume.base import IResumeGrader
from packages.aic_session.actions import SessionAction
from packages.aic_session.dto import Notice, SessionSnapshot
from packages.aic_session.engine import InterviewSessionOrchestrator

logger = get_logger("aic.service")


class SessionNotFoundError(LookupError):
    pass


class ActionResult(BaseModel):
    accepted: bool
    snapshot: SessionSnapshot
    notices: List[Notice] = Field(default_factory=list)


class SessionService:
    """
    Application service hosting interview sessions for the HTTP layer.
    Responsible for:
    1. Session lifecycle (create, lookup, close)
    2. Routing typed actions to the owning orchestrator
    3. Stand-alone tools sharing the same collaborators (questions, resume grading, history)
    """
    def __init__(
        self,
        orchestrator_factory: Callable[[], InterviewSessionOrchestrator],
        question_provider: IQuestionProvider,
        resume_grader: IResumeGrader,
        history_store: HistoryStore,
        question_count: int = 5
    ):
        self.orchestrator_factory = orchestrator_factory
        self.question_provider = question_provider
        self.resume_grader = resume_grader
        self.history_store = history_store
        self.question_count = question_count
        self._sessions: Dict[str, InterviewSessionOrchestrator] = {}

    @property
    def active_session_count(self) -> int:
        return len(self._sessions)

    def create_session(self) -> Tuple[str, SessionSnapshot]:
        session_id = f"sess_{uuid.uuid4().hex[:12]}"
        self._sessions[session_id] = self.orchestrator_factory()
        logger.info(f"Session created: {session_id} (active={len(self._sessions)})")
        return session_id, self._sessions[session_id].snapshot()

    def _get(self, session_id: str) -> InterviewSessionOrchestrator:
        orchestrator = self._sessions.get(session_id)
        if orchestrator is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return orchestrator

    def get_session(self, session_id: str) -> SessionSnapshot:
        return self._get(session_id).snapshot()

    async def dispatch(self, session_id: str, action: SessionAction) -> ActionResult:
        orchestrator = self._get(session_id)
        accepted = await orchestrator.dispatch(action)
        logger.info(f"Action {action.type} on {session_id}: accepted={accepted}")
        return ActionResult(
            accepted=accepted,
            snapshot=orchestrator.snapshot(),
            notices=orchestrator.drain_notices(),
        )

    async def close_session(self, session_id: str) -> None:
        orchestrator = self._sessions.pop(session_id, None)
        if orchestrator is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        await orchestrator.close()

    async def close_all(self) -> None:
        for session_id in list(self._sessions):
            await self.close_session(session_id)

    def list_history(self) -> List[InterviewRecord]:
        return self.history_store.load()

    async def generate_questions(self, job_description: str, count: Optional[int] = None) -> QuestionSetDTO:
        if not job_description or not job_description.strip():
            raise InputValidationError("Job description cannot be empty.")
        request = QuestionGenerationRequestDTO(
            job_description=job_description,
            count=count or self.question_count,
        )
        return await self.question_provider.generate_questions(request)

    async def grade_resume(self, resume_text: str) -> ResumeGradeResultDTO:
        if not resume_text or not resume_text.strip():
            raise InputValidationError("Resume text cannot be empty.")
        return await self.resume_grader.grade(ResumeGradeRequestDTO(resume_text=resume_text))
