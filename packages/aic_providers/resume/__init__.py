from packages.aic_core.config import AICConfig

from .base import IResumeGrader
from .mock import MockResumeGrader


def get_resume_grader(provider_type: str = "mock", config: AICConfig = None, **kwargs) -> IResumeGrader:
    if provider_type == "mock":
        return MockResumeGrader(**kwargs)
    elif provider_type == "openai":
        from .openai_impl import OpenAIResumeGrader
        return OpenAIResumeGrader(config or AICConfig.load())

    raise ValueError(f"Unknown provider type: {provider_type}")
