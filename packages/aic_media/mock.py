import asyncio
from typing import List, Optional

from packages.aic_core.errors import DeviceAccessError
from packages.aic_media.base import AudioTrack, DataCallback, IMediaDevices, MediaStream, VideoTrack


class MockAudioTrack(AudioTrack):
    """
    Replays the owner's scripted chunks when capture ends.
    Setting owner.chunks to [] simulates a zero-byte recording; owner.begin_error
    and owner.end_error make the device fail like a busy or unplugged microphone.
    """
    def __init__(self, owner: "MockMediaDevices"):
        super().__init__(label="mock-microphone")
        self._owner = owner
        self._on_data: Optional[DataCallback] = None
        self.mime_type = owner.mime_type
        self.open_captures = 0

    async def begin_capture(self, on_data: DataCallback) -> None:
        if self._owner.begin_latency_ms > 0:
            await asyncio.sleep(self._owner.begin_latency_ms / 1000.0)
        if self._owner.begin_error is not None:
            raise self._owner.begin_error
        self._on_data = on_data
        self.open_captures += 1

    async def end_capture(self) -> None:
        if self._on_data is None:
            return
        on_data, self._on_data = self._on_data, None
        self.open_captures -= 1
        if self._owner.end_error is not None:
            raise self._owner.end_error
        for chunk in self._owner.chunks:
            on_data(chunk)

    def _release(self) -> None:
        if self._on_data is not None:
            self.open_captures -= 1
        self._on_data = None


class MockVideoTrack(VideoTrack):
    def __init__(self):
        super().__init__(label="mock-camera")

    def _release(self) -> None:
        pass


class MockMediaDevices(IMediaDevices):
    """
    In-memory devices for local development and tests.
    Every issued stream is kept in `streams` so teardown can be asserted.
    """
    def __init__(
        self,
        chunks: Optional[List[bytes]] = None,
        camera_available: bool = True,
        microphone_available: bool = True,
        mime_type: str = "audio/webm",
        latency_ms: int = 0,
        begin_latency_ms: int = 0,
        begin_error: Optional[Exception] = None,
        end_error: Optional[Exception] = None
    ):
        self.chunks = [b"mock-audio-chunk"] if chunks is None else chunks
        self.camera_available = camera_available
        self.microphone_available = microphone_available
        self.mime_type = mime_type
        self.latency_ms = latency_ms
        self.begin_latency_ms = begin_latency_ms
        self.begin_error = begin_error
        self.end_error = end_error
        self.streams: List[MediaStream] = []

    @property
    def live_streams(self) -> List[MediaStream]:
        return [s for s in self.streams if s.active]

    async def get_user_media(self, audio: bool = True, video: bool = True) -> MediaStream:
        if self.latency_ms > 0:
            await asyncio.sleep(self.latency_ms / 1000.0)

        if video and not self.camera_available:
            raise DeviceAccessError("Permission denied: camera")
        if audio and not self.microphone_available:
            raise DeviceAccessError("Permission denied: microphone")

        tracks = []
        if audio:
            tracks.append(MockAudioTrack(self))
        if video:
            tracks.append(MockVideoTrack())
        stream = MediaStream(tracks)
        self.streams.append(stream)
        return stream
