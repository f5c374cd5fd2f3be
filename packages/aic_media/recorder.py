from typing import List, Optional

from packages.aic_core.errors import AICBaseError, DeviceAccessError
from packages.aic_core.logging import get_logger
from packages.aic_media.base import AudioTrack, MediaStream
from packages.aic_media.dto import AudioPayload
from packages.aic_media.state import RecorderState

logger = get_logger("aic.media.recorder")


class AnswerRecorder:
    """
    Binds to the audio track of a live stream and records one segment per answer.
    A fresh recorder is bound for every question; the stream itself is shared.
    """
    def __init__(self, stream: MediaStream):
        tracks = stream.get_audio_tracks()
        if not tracks:
            raise DeviceAccessError("The device stream has no audio track to record from.")
        self._track: AudioTrack = tracks[0]
        self._chunks: List[bytes] = []
        self.state = RecorderState.INACTIVE

    @property
    def mime_type(self) -> str:
        return self._track.mime_type

    @property
    def is_recording(self) -> bool:
        return self.state == RecorderState.RECORDING

    def _on_data(self, chunk: bytes) -> None:
        if self.state not in (RecorderState.STARTING, RecorderState.RECORDING):
            return
        if chunk:
            self._chunks.append(chunk)

    async def start(self) -> bool:
        """
        Begin capture on the audio track.
        Raises DeviceAccessError when the back-end cannot open the device; the
        recorder is inactive again afterwards.
        """
        if self.state != RecorderState.INACTIVE:
            logger.warning(f"Recorder start ignored in state {self.state}")
            return False
        if not self._track.is_live:
            logger.warning("Recorder start ignored: audio track has ended")
            return False

        self._chunks = []
        self.state = RecorderState.STARTING
        try:
            await self._track.begin_capture(self._on_data)
        except (OSError, AICBaseError) as e:
            self.state = RecorderState.INACTIVE
            self._chunks = []
            logger.error(f"Recorder start failed: {e}")
            raise DeviceAccessError("Could not begin audio capture", details={"reason": str(e)}) from e

        if self.state != RecorderState.STARTING:
            # Discarded while the device was opening
            await self._track.end_capture()
            self._chunks = []
            return False
        self.state = RecorderState.RECORDING
        return True

    async def stop(self) -> Optional[AudioPayload]:
        """
        Stop capture and assemble the payload.
        Returns None when the recorder was not recording.
        Raises DeviceAccessError when the back-end fails to close or encode.
        """
        if self.state != RecorderState.RECORDING:
            logger.warning(f"Recorder stop ignored in state {self.state}")
            return None

        try:
            await self._track.end_capture()
            chunks, self._chunks = self._chunks, []
            data = self._track.encode(chunks) if chunks else b""
        except (OSError, AICBaseError) as e:
            logger.error(f"Recorder stop failed: {e}")
            raise DeviceAccessError("Could not finish audio capture", details={"reason": str(e)}) from e
        finally:
            self.state = RecorderState.INACTIVE
            self._chunks = []

        payload = AudioPayload(data=data, mime_type=self.mime_type)
        logger.info(f"Recording stopped. chunks={len(chunks)} bytes={payload.size}")
        return payload

    async def discard(self) -> None:
        """
        Force-stop without producing a payload (navigation, teardown).
        A start still opening the device closes it itself once it resolves.
        """
        if self.state == RecorderState.RECORDING:
            await self._track.end_capture()
            logger.info(f"Recording discarded. chunks={len(self._chunks)}")
        self.state = RecorderState.INACTIVE
        self._chunks = []
