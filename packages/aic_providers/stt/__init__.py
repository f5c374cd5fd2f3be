from packages.aic_core.config import AICConfig

from .base import ISTTProvider, decode_data_uri
from .mock import MockSTTProvider


def get_stt_provider(provider_type: str = "mock", config: AICConfig = None, **kwargs) -> ISTTProvider:
    """
    Factory to get STT Provider instance.

    Args:
        provider_type (str): 'mock' or 'openai'.
    """
    if provider_type == "mock":
        return MockSTTProvider(**kwargs)
    elif provider_type == "openai":
        from .openai_impl import WhisperSTTProvider
        return WhisperSTTProvider(config or AICConfig.load())

    raise ValueError(f"Unknown provider type: {provider_type}")
