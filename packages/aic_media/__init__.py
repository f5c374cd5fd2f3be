from packages.aic_core.config import AICConfig

from .base import IMediaDevices, MediaStream
from .capture import MediaCaptureManager
from .dto import AudioPayload
from .mock import MockMediaDevices
from .recorder import AnswerRecorder
from .state import RecordingState, RecorderState


def get_media_devices(backend: str = "mock", config: AICConfig = None, **kwargs) -> IMediaDevices:
    """
    Factory to get the media device backend.

    Args:
        backend (str): 'mock' or 'pyaudio'.
        config (AICConfig): required by the hardware backend.
    """
    if backend == "mock":
        return MockMediaDevices(**kwargs)
    elif backend == "pyaudio":
        # Hardware libraries are an optional extra; import only when selected
        from .pyaudio_impl import PyAudioMediaDevices
        return PyAudioMediaDevices(config or AICConfig.load())

    raise ValueError(f"Unknown media backend: {backend}")


__all__ = [
    "IMediaDevices",
    "MediaStream",
    "MediaCaptureManager",
    "AudioPayload",
    "MockMediaDevices",
    "AnswerRecorder",
    "RecordingState",
    "RecorderState",
    "get_media_devices",
]
