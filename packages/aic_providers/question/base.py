from abc import ABC, abstractmethod

from packages.aic_core.dto import QuestionGenerationRequestDTO, QuestionSetDTO


class IQuestionProvider(ABC):
    @abstractmethod
    async def generate_questions(self, request: QuestionGenerationRequestDTO) -> QuestionSetDTO:
        """
        Generate interview questions for a job description.
        Raises QuestionGenerationError on failure.
        """
        pass
