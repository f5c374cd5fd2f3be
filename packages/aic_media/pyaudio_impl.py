import asyncio
import io
import wave
from typing import List, Optional

import cv2
import pyaudio

from packages.aic_core.config import AICConfig
from packages.aic_core.errors import DeviceAccessError
from packages.aic_core.logging import get_logger
from packages.aic_media.base import AudioTrack, DataCallback, IMediaDevices, MediaStream, VideoTrack

logger = get_logger("aic.media.pyaudio")

FORMAT = pyaudio.paInt16
CHANNELS = 1


class PyAudioTrack(AudioTrack):
    """
    Microphone track backed by a PyAudio input stream in callback mode.
    Raw 16-bit PCM chunks are wrapped into a WAV container on encode.
    """
    mime_type = "audio/wav"

    def __init__(self, p: pyaudio.PyAudio, rate: int, chunk_frames: int):
        super().__init__(label="pyaudio-microphone")
        self._p = p
        self._rate = rate
        self._chunk_frames = chunk_frames
        self._stream = None

    async def begin_capture(self, on_data: DataCallback) -> None:
        loop = asyncio.get_running_loop()

        def _callback(in_data, frame_count, time_info, status):
            loop.call_soon_threadsafe(on_data, in_data)
            return (None, pyaudio.paContinue)

        self._stream = await asyncio.to_thread(
            self._p.open,
            format=FORMAT,
            channels=CHANNELS,
            rate=self._rate,
            input=True,
            frames_per_buffer=self._chunk_frames,
            stream_callback=_callback
        )

    async def end_capture(self) -> None:
        stream, self._stream = self._stream, None
        if stream is None:
            return
        await asyncio.to_thread(self._close_stream, stream)

    @staticmethod
    def _close_stream(stream) -> None:
        stream.stop_stream()
        stream.close()

    def encode(self, chunks: List[bytes]) -> bytes:
        buffer = io.BytesIO()
        with wave.open(buffer, "wb") as wf:
            wf.setnchannels(CHANNELS)
            wf.setsampwidth(self._p.get_sample_size(FORMAT))
            wf.setframerate(self._rate)
            wf.writeframes(b"".join(chunks))
        return buffer.getvalue()

    def _release(self) -> None:
        if self._stream is not None:
            self._close_stream(self._stream)
            self._stream = None
        self._p.terminate()


class OpenCVVideoTrack(VideoTrack):
    """Camera preview track backed by cv2.VideoCapture."""
    def __init__(self, capture: "cv2.VideoCapture", index: int):
        super().__init__(label=f"camera-{index}")
        self._capture = capture

    async def read_frame(self) -> Optional[object]:
        if not self.is_live:
            return None
        ok, frame = await asyncio.to_thread(self._capture.read)
        return frame if ok else None

    def _release(self) -> None:
        self._capture.release()


class PyAudioMediaDevices(IMediaDevices):
    def __init__(self, config: AICConfig):
        self.rate = config.AUDIO_SAMPLE_RATE
        self.chunk_frames = config.AUDIO_CHUNK_FRAMES
        self.camera_index = config.CAMERA_INDEX

    def _open_microphone(self) -> PyAudioTrack:
        p = pyaudio.PyAudio()
        try:
            p.get_default_input_device_info()
        except (IOError, OSError) as e:
            p.terminate()
            raise DeviceAccessError("No microphone available", details={"reason": str(e)}) from e
        return PyAudioTrack(p, self.rate, self.chunk_frames)

    def _open_camera(self) -> OpenCVVideoTrack:
        capture = cv2.VideoCapture(self.camera_index)
        if capture is None or not capture.isOpened():
            if capture is not None:
                capture.release()
            raise DeviceAccessError(f"Unable to open video source: {self.camera_index}")
        return OpenCVVideoTrack(capture, self.camera_index)

    async def get_user_media(self, audio: bool = True, video: bool = True) -> MediaStream:
        tracks = []
        try:
            if audio:
                tracks.append(await asyncio.to_thread(self._open_microphone))
            if video:
                tracks.append(await asyncio.to_thread(self._open_camera))
        except DeviceAccessError:
            # All-or-nothing, like getUserMedia
            for track in tracks:
                track.stop()
            raise
        logger.info(f"Opened device stream: {[t.kind for t in tracks]}")
        return MediaStream(tracks)
