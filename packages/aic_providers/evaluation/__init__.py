from packages.aic_core.config import AICConfig

from .base import IEvaluationProvider
from .mock import MockEvaluationProvider


def get_evaluation_provider(provider_type: str = "mock", config: AICConfig = None, **kwargs) -> IEvaluationProvider:
    if provider_type == "mock":
        return MockEvaluationProvider(**kwargs)
    elif provider_type == "openai":
        from .openai_impl import OpenAIEvaluationProvider
        return OpenAIEvaluationProvider(config or AICConfig.load())

    raise ValueError(f"Unknown provider type: {provider_type}")
