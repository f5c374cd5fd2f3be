from packages.aic_core.config import AICConfig
from packages.aic_core.dto import ResumeGradeRequestDTO, ResumeGradeResultDTO
from packages.aic_core.errors import ResumeGradingError
from packages.aic_core.logging import get_logger
from packages.aic_providers.openai_client import build_async_client, chat_json
from packages.aic_providers.prompts import RESUME_SYSTEM_PROMPT, RESUME_USER_PROMPT
from packages.aic_providers.resume.base import IResumeGrader

logger = get_logger("aic.providers.resume")


class OpenAIResumeGrader(IResumeGrader):
    def __init__(self, config: AICConfig):
        self.client = build_async_client(config)
        self.model = config.LLM_MODEL

    async def grade(self, request: ResumeGradeRequestDTO) -> ResumeGradeResultDTO:
        try:
            data = await chat_json(
                self.client,
                self.model,
                RESUME_SYSTEM_PROMPT,
                RESUME_USER_PROMPT.format(resume_text=request.resume_text)
            )
            return ResumeGradeResultDTO.model_validate(data)
        except Exception as e:
            logger.exception("Resume grading failed")
            raise ResumeGradingError("Failed to grade resume. Please try again.") from e
