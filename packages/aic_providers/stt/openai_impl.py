import mimetypes

from packages.aic_core.config import AICConfig
from packages.aic_core.dto import TranscriptionRequestDTO, TranscriptDTO
from packages.aic_core.errors import TranscriptionError
from packages.aic_core.logging import get_logger
from packages.aic_providers.openai_client import build_async_client
from packages.aic_providers.stt.base import ISTTProvider, decode_data_uri

logger = get_logger("aic.providers.stt")

_EXTENSIONS = {
    "audio/webm": ".webm",
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/mpeg": ".mp3",
    "audio/mp4": ".m4a",
    "audio/ogg": ".ogg",
}


class WhisperSTTProvider(ISTTProvider):
    """Transcribes answer audio with OpenAI Whisper."""
    def __init__(self, config: AICConfig):
        self.client = build_async_client(config)
        self.model = config.STT_MODEL

    async def transcribe(self, request: TranscriptionRequestDTO) -> TranscriptDTO:
        mime_type, audio = decode_data_uri(request.audio_data_uri)
        if not audio:
            raise TranscriptionError("No audio was recorded.")

        ext = _EXTENSIONS.get(mime_type) or mimetypes.guess_extension(mime_type) or ".webm"
        try:
            result = await self.client.audio.transcriptions.create(
                model=self.model,
                file=(f"answer{ext}", audio, mime_type)
            )
        except Exception as e:
            logger.exception(f"Whisper transcription failed (mime={mime_type}, bytes={len(audio)})")
            raise TranscriptionError("Failed to transcribe audio. Please try again.") from e

        return TranscriptDTO(transcript=(result.text or "").strip())
