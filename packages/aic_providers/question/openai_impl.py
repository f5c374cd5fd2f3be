from packages.aic_core.config import AICConfig
from packages.aic_core.dto import QuestionGenerationRequestDTO, QuestionSetDTO
from packages.aic_core.errors import QuestionGenerationError
from packages.aic_core.logging import get_logger
from packages.aic_providers.openai_client import build_async_client, chat_json
from packages.aic_providers.prompts import QUESTION_SYSTEM_PROMPT, QUESTION_USER_PROMPT
from packages.aic_providers.question.base import IQuestionProvider

logger = get_logger("aic.providers.question")


class OpenAIQuestionProvider(IQuestionProvider):
    def __init__(self, config: AICConfig):
        self.client = build_async_client(config)
        self.model = config.LLM_MODEL

    async def generate_questions(self, request: QuestionGenerationRequestDTO) -> QuestionSetDTO:
        try:
            data = await chat_json(
                self.client,
                self.model,
                QUESTION_SYSTEM_PROMPT,
                QUESTION_USER_PROMPT.format(
                    job_description=request.job_description,
                    count=request.count
                ),
                temperature=1.0
            )
            result = QuestionSetDTO.model_validate(data)
        except Exception as e:
            logger.exception("Question generation failed")
            raise QuestionGenerationError("Failed to generate questions. Please try again.") from e

        questions = [q.strip() for q in result.questions if q and q.strip()]
        if not questions:
            raise QuestionGenerationError("Failed to generate questions. Please try again.")
        return QuestionSetDTO(questions=questions[:request.count])
