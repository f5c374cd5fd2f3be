from abc import ABC, abstractmethod

from packages.aic_core.dto import ResumeGradeRequestDTO, ResumeGradeResultDTO


class IResumeGrader(ABC):
    @abstractmethod
    async def grade(self, request: ResumeGradeRequestDTO) -> ResumeGradeResultDTO:
        """
        Give the resume an ATS score (0-100) and a report.
        Raises ResumeGradingError on failure.
        """
        pass
