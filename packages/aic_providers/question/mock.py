import asyncio
from typing import List, Optional

from packages.aic_core.dto import QuestionGenerationRequestDTO, QuestionSetDTO
from packages.aic_core.errors import QuestionGenerationError
from packages.aic_providers.question.base import IQuestionProvider

_TEMPLATES = [
    "Tell me about yourself and why you are interested in the {role} role.",
    "Describe a challenging project relevant to {role} and how you handled it.",
    "Which skills from the {role} description are your strongest, and why?",
    "Tell me about a time you disagreed with a teammate. How did you resolve it?",
    "Where do you see yourself growing in a {role} position over the next two years?",
]


class MockQuestionProvider(IQuestionProvider):
    """
    Deterministic question generator for development and tests.
    Simulates latency and failure scenarios.
    """
    def __init__(
        self,
        should_fail: bool = False,
        latency_ms: int = 0,
        questions: Optional[List[str]] = None
    ):
        self.should_fail = should_fail
        self.latency_ms = latency_ms
        self.questions = questions
        self.calls: List[QuestionGenerationRequestDTO] = []

    async def generate_questions(self, request: QuestionGenerationRequestDTO) -> QuestionSetDTO:
        self.calls.append(request)
        if self.latency_ms > 0:
            await asyncio.sleep(self.latency_ms / 1000.0)

        if self.should_fail:
            raise QuestionGenerationError("Mock Failure: Intentional Error")

        if self.questions is not None:
            return QuestionSetDTO(questions=list(self.questions[:request.count]))

        lines = request.job_description.strip().splitlines()
        role = lines[0][:60] if lines else "this"
        generated = [
            _TEMPLATES[i % len(_TEMPLATES)].format(role=role)
            for i in range(request.count)
        ]
        return QuestionSetDTO(questions=generated)
