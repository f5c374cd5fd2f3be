from functools import lru_cache

from packages.aic_core.config import AICConfig
from packages.aic_history.repository import FileHistoryStore, HistoryStore
from packages.aic_media import get_media_devices
from packages.aic_media.base import IMediaDevices
from packages.aic_providers.evaluation import get_evaluation_provider
from packages.aic_providers.evaluation.base import IEvaluationProvider
from packages.aic_providers.question import get_question_provider
from packages.aic_providers.question.base import IQuestionProvider
from packages.aic_providers.resume import get_resume_grader
from packages.aic_providers.resume.base import IResumeGrader
from packages.aic_providers.stt import get_stt_provider
from packages.aic_providers.stt.base import ISTTProvider
from packages.aic_service.session_service import SessionService
from packages.aic_session.engine import InterviewSessionOrchestrator


@lru_cache
def get_config() -> AICConfig:
    return AICConfig.load()


def _mock_kwargs(config: AICConfig) -> dict:
    if config.PROVIDER_MODE == "mock":
        return {"latency_ms": config.MOCK_LATENCY_MS}
    return {}

# --- Providers (External Adapters) ---

@lru_cache
def get_question_generator() -> IQuestionProvider:
    config = get_config()
    return get_question_provider(config.PROVIDER_MODE, config, **_mock_kwargs(config))


@lru_cache
def get_transcriber() -> ISTTProvider:
    config = get_config()
    return get_stt_provider(config.PROVIDER_MODE, config, **_mock_kwargs(config))


@lru_cache
def get_evaluator() -> IEvaluationProvider:
    config = get_config()
    return get_evaluation_provider(config.PROVIDER_MODE, config, **_mock_kwargs(config))


@lru_cache
def get_grader() -> IResumeGrader:
    config = get_config()
    return get_resume_grader(config.PROVIDER_MODE, config, **_mock_kwargs(config))


@lru_cache
def get_devices() -> IMediaDevices:
    config = get_config()
    return get_media_devices(config.MEDIA_BACKEND, config)

# --- Repositories (Persistence) ---

@lru_cache
def get_history_store() -> HistoryStore:
    """
    Singleton History Store (File-based key-value storage).
    """
    config = get_config()
    return FileHistoryStore(config.HISTORY_FILE, key=config.HISTORY_KEY, limit=config.HISTORY_LIMIT)

# --- Domain Services (Application Logic) ---

def build_orchestrator() -> InterviewSessionOrchestrator:
    config = get_config()
    return InterviewSessionOrchestrator(
        question_provider=get_question_generator(),
        stt_provider=get_transcriber(),
        evaluation_provider=get_evaluator(),
        history_store=get_history_store(),
        media_devices=get_devices(),
        question_count=config.QUESTION_COUNT,
    )


@lru_cache
def get_session_service() -> SessionService:
    """
    Singleton Session Service.
    Must be shared across requests so sessions survive between calls.
    """
    return SessionService(
        orchestrator_factory=build_orchestrator,
        question_provider=get_question_generator(),
        resume_grader=get_grader(),
        history_store=get_history_store(),
        question_count=get_config().QUESTION_COUNT,
    )
