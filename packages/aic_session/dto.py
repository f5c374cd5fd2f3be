from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from packages.aic_core.dto import SkillScoreDTO
from packages.aic_media.state import RecordingState
from .state import NoticeLevel, SessionEvent, Stage


class Answer(BaseModel):
    """
    One answer slot, index-aligned with its question.
    `submitted` only ever goes from False to True within a session.
    """
    question: str
    answer_text: str = ""
    submitted: bool = False


class Notice(BaseModel):
    model_config = ConfigDict(frozen=True)

    event: SessionEvent
    title: str
    description: str
    level: NoticeLevel = NoticeLevel.DEFAULT


class SessionState(BaseModel):
    """
    Mutable state owned by the orchestrator.
    Only the orchestrator's transition methods write to it.
    """
    stage: Stage = Stage.START
    job_description: str = ""
    questions: List[str] = Field(default_factory=list)
    answers: List[Answer] = Field(default_factory=list)
    current_question_index: int = 0

    recording_state: RecordingState = RecordingState.IDLE
    is_transcribing: bool = False
    camera_permission: Optional[bool] = None

    full_transcript: str = ""
    feedback_report: str = ""
    score: float = 0.0
    comparison_report: str = ""
    skill_scores: List[SkillScoreDTO] = Field(default_factory=list)


class SessionSnapshot(SessionState):
    """
    Read-only copy of SessionState for rendering layers.
    """
    model_config = ConfigDict(frozen=True)

    total_questions: int = 0
    submitted_count: int = 0
    all_submitted: bool = False
    is_last_question: bool = False
    current_question: Optional[str] = None
    progress_percentage: float = 0.0

    @classmethod
    def from_state(cls, state: SessionState) -> "SessionSnapshot":
        total = len(state.questions)
        submitted = sum(1 for a in state.answers if a.submitted)
        index = state.current_question_index
        return cls(
            **state.model_dump(),
            total_questions=total,
            submitted_count=submitted,
            all_submitted=total > 0 and submitted == total,
            is_last_question=total > 0 and index == total - 1,
            current_question=state.questions[index] if 0 <= index < total else None,
            progress_percentage=(submitted / total * 100.0) if total else 0.0,
        )
