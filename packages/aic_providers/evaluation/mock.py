import asyncio
from typing import List

from packages.aic_core.dto import (
    ComparisonRequestDTO,
    ComparisonResultDTO,
    EvaluationRequestDTO,
    EvaluationResultDTO,
    SkillScoreDTO,
)
from packages.aic_core.errors import ComparisonError, ScoringError
from packages.aic_providers.evaluation.base import IEvaluationProvider

MOCK_SKILLS = ["Clarity & Conciseness", "Confidence & Communication", "Relevance to Job Description"]


class MockEvaluationProvider(IEvaluationProvider):
    def __init__(
        self,
        score: float = 7.5,
        feedback_report: str = "Clear structure and relevant examples. Reduce filler words.",
        fail_scoring: bool = False,
        fail_comparison: bool = False,
        latency_ms: int = 0
    ):
        self.score = score
        self.feedback_report = feedback_report
        self.fail_scoring = fail_scoring
        self.fail_comparison = fail_comparison
        self.latency_ms = latency_ms
        self.evaluate_calls: List[EvaluationRequestDTO] = []
        self.compare_calls: List[ComparisonRequestDTO] = []

    async def _delay(self):
        if self.latency_ms > 0:
            await asyncio.sleep(self.latency_ms / 1000.0)

    async def evaluate(self, request: EvaluationRequestDTO) -> EvaluationResultDTO:
        self.evaluate_calls.append(request)
        await self._delay()
        if self.fail_scoring:
            raise ScoringError("Failed to generate feedback. Please try again.")
        return EvaluationResultDTO(score=self.score, feedback_report=self.feedback_report)

    async def compare(self, request: ComparisonRequestDTO) -> ComparisonResultDTO:
        self.compare_calls.append(request)
        await self._delay()
        if self.fail_comparison:
            raise ComparisonError("Failed to generate comparison. Please try again.")

        delta = request.current_score - request.previous_score
        return ComparisonResultDTO(
            comparison_report=f"Overall score changed by {delta:+.1f} points.",
            skill_scores=[
                SkillScoreDTO(
                    skill=skill,
                    previous_score=request.previous_score,
                    current_score=request.current_score
                )
                for skill in MOCK_SKILLS
            ]
        )
