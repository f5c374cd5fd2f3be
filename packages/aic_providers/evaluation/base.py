from abc import ABC, abstractmethod

from packages.aic_core.dto import (
    ComparisonRequestDTO,
    ComparisonResultDTO,
    EvaluationRequestDTO,
    EvaluationResultDTO,
)


class IEvaluationProvider(ABC):
    @abstractmethod
    async def evaluate(self, request: EvaluationRequestDTO) -> EvaluationResultDTO:
        """
        Score a full interview transcript (0-10) and write the feedback report.
        Raises ScoringError on failure.
        """
        pass

    @abstractmethod
    async def compare(self, request: ComparisonRequestDTO) -> ComparisonResultDTO:
        """
        Compare the current interview against a previous one.
        Raises ComparisonError on failure; callers treat it as best-effort.
        """
        pass
