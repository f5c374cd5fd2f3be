from packages.aic_core.config import AICConfig

from .base import IQuestionProvider
from .mock import MockQuestionProvider


def get_question_provider(provider_type: str = "mock", config: AICConfig = None, **kwargs) -> IQuestionProvider:
    """
    Factory to get Question Provider instance.

    Args:
        provider_type (str): 'mock' or 'openai'.
        **kwargs: Arguments to pass to the mock constructor.
    """
    if provider_type == "mock":
        return MockQuestionProvider(**kwargs)
    elif provider_type == "openai":
        from .openai_impl import OpenAIQuestionProvider
        return OpenAIQuestionProvider(config or AICConfig.load())

    raise ValueError(f"Unknown provider type: {provider_type}")
