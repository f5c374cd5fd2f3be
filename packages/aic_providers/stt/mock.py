import asyncio
from typing import List, Optional

from packages.aic_core.dto import TranscriptionRequestDTO, TranscriptDTO
from packages.aic_core.errors import TranscriptionError
from packages.aic_providers.stt.base import ISTTProvider, decode_data_uri


class MockSTTProvider(ISTTProvider):
    def __init__(
        self,
        transcript: str = "This is a mock transcription result.",
        should_fail: bool = False,
        latency_ms: int = 0
    ):
        self.transcript = transcript
        self.should_fail = should_fail
        self.latency_ms = latency_ms
        self.calls: List[TranscriptionRequestDTO] = []
        # Set by tests to hold a transcription open until released
        self.gate: Optional[asyncio.Event] = None

    async def transcribe(self, request: TranscriptionRequestDTO) -> TranscriptDTO:
        self.calls.append(request)
        decode_data_uri(request.audio_data_uri)

        if self.latency_ms > 0:
            await asyncio.sleep(self.latency_ms / 1000.0)
        if self.gate is not None:
            await self.gate.wait()

        if self.should_fail:
            raise TranscriptionError("Failed to transcribe audio. Please try again.")
        return TranscriptDTO(transcript=self.transcript)
