from typing import List, Optional

from pydantic import BaseModel, Field

from packages.aic_history.dto import InterviewRecord
from packages.aic_session.actions import SessionAction
from packages.aic_session.dto import Notice, SessionSnapshot


class SessionResponse(BaseModel):
    session_id: str
    state: SessionSnapshot


class ActionRequest(BaseModel):
    action: SessionAction


class ActionResponse(BaseModel):
    session_id: str
    accepted: bool
    state: SessionSnapshot
    notices: List[Notice] = Field(default_factory=list)


class HistoryResponse(BaseModel):
    count: int
    items: List[InterviewRecord]


class QuestionGenerateRequest(BaseModel):
    job_description: str
    count: Optional[int] = Field(default=None, ge=1, le=20)


class ResumeGradeRequest(BaseModel):
    resume_text: str
