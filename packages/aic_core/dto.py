from typing import List
from pydantic import BaseModel, ConfigDict, Field


class BaseDTO(BaseModel):
    """
    AIC 프로젝트의 모든 DTO(Data Transfer Object)의 기반 클래스.

    Features:
        - from_attributes=True (ORM/객체 변환 지원)
        - populate_by_name=True (camelCase 별칭과 필드명 모두 허용)
    """
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True
    )


# -------------------------------------------------------------------------
# Question Generation DTOs
# -------------------------------------------------------------------------
class QuestionGenerationRequestDTO(BaseDTO):
    job_description: str = Field(..., alias="jobDescription")
    count: int = Field(default=5, ge=1, alias="numberOfQuestions")


class QuestionSetDTO(BaseDTO):
    questions: List[str]


# -------------------------------------------------------------------------
# Transcription DTOs
# -------------------------------------------------------------------------
class TranscriptionRequestDTO(BaseDTO):
    # Expected format: 'data:<mimetype>;base64,<encoded_data>'
    audio_data_uri: str = Field(..., alias="audioDataUri")


class TranscriptDTO(BaseDTO):
    transcript: str


# -------------------------------------------------------------------------
# Evaluation DTOs
# -------------------------------------------------------------------------
class EvaluationRequestDTO(BaseDTO):
    job_description: str = Field(..., alias="jobDescription")
    transcript: str = Field(..., alias="interviewTranscript")


class EvaluationResultDTO(BaseDTO):
    score: float = Field(..., ge=0, le=10)
    feedback_report: str = Field(..., alias="feedbackReport")


class ComparisonRequestDTO(BaseDTO):
    current_job_description: str = Field(..., alias="currentJobDescription")
    current_transcript: str = Field(..., alias="currentInterviewTranscript")
    current_score: float = Field(..., alias="currentInterviewScore")
    previous_job_description: str = Field(..., alias="previousJobDescription")
    previous_transcript: str = Field(..., alias="previousInterviewTranscript")
    previous_score: float = Field(..., alias="previousInterviewScore")


class SkillScoreDTO(BaseDTO):
    skill: str
    previous_score: float = Field(..., ge=0, le=10, alias="previousScore")
    current_score: float = Field(..., ge=0, le=10, alias="currentScore")


class ComparisonResultDTO(BaseDTO):
    comparison_report: str = Field(..., alias="comparisonReport")
    skill_scores: List[SkillScoreDTO] = Field(default_factory=list, alias="skillScores")


# -------------------------------------------------------------------------
# Resume Grading DTOs
# -------------------------------------------------------------------------
class ResumeGradeRequestDTO(BaseDTO):
    resume_text: str = Field(..., alias="resumeText")


class ResumeGradeResultDTO(BaseDTO):
    score: float = Field(..., ge=0, le=100)
    report: str
