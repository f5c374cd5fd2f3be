from datetime import datetime
from typing import List

from pydantic import ConfigDict, Field

from packages.aic_core.dto import BaseDTO


class RecordedAnswer(BaseDTO):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    question: str
    answer: str = ""
    submitted: bool = Field(default=True, alias="isSubmitted")


class InterviewRecord(BaseDTO):
    """
    Immutable summary of one completed interview session.
    Serialized with camelCase keys under the history key.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    job_description: str = Field(..., alias="jobDescription")
    full_transcript: str = Field(..., alias="interviewTranscript")
    feedback_report: str = Field(..., alias="feedbackReport")
    score: float = Field(..., ge=0, le=10)
    answers: List[RecordedAnswer] = Field(default_factory=list)
    completed_at: datetime = Field(..., alias="completedAt")
