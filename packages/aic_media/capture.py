from typing import Optional

from packages.aic_core.errors import DeviceAccessError
from packages.aic_core.logging import get_logger
from packages.aic_media.base import IMediaDevices, MediaStream

logger = get_logger("aic.media.capture")


class MediaCaptureManager:
    """
    Owns the single device stream of an interviewing session.

    acquire() tries audio+video first. When that is denied the camera is
    marked unavailable and an audio-only stream is tried, so answers can
    still be recorded. If that fails as well there is no stream and
    recording is blocked, but the interview itself continues.
    """
    def __init__(self, devices: IMediaDevices):
        self.devices = devices
        self.stream: Optional[MediaStream] = None
        self.camera_permission: Optional[bool] = None
        self.last_error: Optional[DeviceAccessError] = None

    @property
    def has_stream(self) -> bool:
        return self.stream is not None and self.stream.active

    @property
    def has_audio(self) -> bool:
        return self.has_stream and any(t.is_live for t in self.stream.get_audio_tracks())

    async def acquire(self) -> Optional[MediaStream]:
        if self.has_stream:
            return self.stream

        self.camera_permission = None
        self.last_error = None
        try:
            self.stream = await self.devices.get_user_media(audio=True, video=True)
            self.camera_permission = True
            logger.info("Acquired audio+video device stream")
            return self.stream
        except DeviceAccessError as e:
            logger.warning(f"Camera/microphone access failed: {e.message}")
            self.camera_permission = False
            self.last_error = e

        try:
            self.stream = await self.devices.get_user_media(audio=True, video=False)
            logger.info("Continuing with audio-only device stream")
        except DeviceAccessError as e:
            logger.warning(f"Audio-only access failed, recording disabled: {e.message}")
            self.stream = None
        return self.stream

    def release(self) -> None:
        """Stop every track of the current stream. Safe to call repeatedly."""
        if self.stream is None:
            return
        self.stream.stop()
        self.stream = None
        logger.info("Device stream released")
