from packages.aic_core.config import AICConfig
from packages.aic_core.dto import (
    ComparisonRequestDTO,
    ComparisonResultDTO,
    EvaluationRequestDTO,
    EvaluationResultDTO,
)
from packages.aic_core.errors import ComparisonError, ScoringError
from packages.aic_core.logging import get_logger
from packages.aic_providers.evaluation.base import IEvaluationProvider
from packages.aic_providers.openai_client import build_async_client, chat_json
from packages.aic_providers.prompts import (
    COMPARISON_SYSTEM_PROMPT,
    COMPARISON_USER_PROMPT,
    EVALUATION_SYSTEM_PROMPT,
    EVALUATION_USER_PROMPT,
)

logger = get_logger("aic.providers.evaluation")


class OpenAIEvaluationProvider(IEvaluationProvider):
    def __init__(self, config: AICConfig):
        self.client = build_async_client(config)
        self.model = config.LLM_MODEL

    async def evaluate(self, request: EvaluationRequestDTO) -> EvaluationResultDTO:
        try:
            data = await chat_json(
                self.client,
                self.model,
                EVALUATION_SYSTEM_PROMPT,
                EVALUATION_USER_PROMPT.format(
                    job_description=request.job_description,
                    transcript=request.transcript
                )
            )
            return EvaluationResultDTO.model_validate(data)
        except Exception as e:
            logger.exception("Interview scoring failed")
            raise ScoringError("Failed to generate feedback. Please try again.") from e

    async def compare(self, request: ComparisonRequestDTO) -> ComparisonResultDTO:
        try:
            data = await chat_json(
                self.client,
                self.model,
                COMPARISON_SYSTEM_PROMPT,
                COMPARISON_USER_PROMPT.format(
                    previous_score=request.previous_score,
                    previous_job_description=request.previous_job_description,
                    previous_transcript=request.previous_transcript,
                    current_score=request.current_score,
                    current_job_description=request.current_job_description,
                    current_transcript=request.current_transcript
                )
            )
            return ComparisonResultDTO.model_validate(data)
        except Exception as e:
            logger.warning(f"Interview comparison failed: {e}")
            raise ComparisonError("Failed to generate comparison. Please try again.") from e
