import asyncio

from packages.aic_core.dto import ResumeGradeRequestDTO, ResumeGradeResultDTO
from packages.aic_core.errors import ResumeGradingError
from packages.aic_providers.resume.base import IResumeGrader


class MockResumeGrader(IResumeGrader):
    def __init__(self, score: float = 72.0, should_fail: bool = False, latency_ms: int = 0):
        self.score = score
        self.should_fail = should_fail
        self.latency_ms = latency_ms

    async def grade(self, request: ResumeGradeRequestDTO) -> ResumeGradeResultDTO:
        if self.latency_ms > 0:
            await asyncio.sleep(self.latency_ms / 1000.0)
        if self.should_fail:
            raise ResumeGradingError("Failed to grade resume. Please try again.")

        words = len(request.resume_text.split())
        return ResumeGradeResultDTO(
            score=self.score,
            report=(
                "1. Strengths:\n- Resume parsed successfully.\n"
                f"2. Areas for Improvement:\n- {words} words; quantify achievements where possible.\n"
                "3. Actionable Suggestions:\n1. Lead each bullet with a strong action verb."
            )
        )
