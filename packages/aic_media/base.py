from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from packages.aic_media.state import TrackState

DataCallback = Callable[[bytes], None]


class MediaTrack(ABC):
    """
    One device track (audio or video) of a MediaStream.
    Stopping a track releases the underlying device and is irreversible.
    """
    kind: str = ""

    def __init__(self, label: str = ""):
        self.label = label
        self._state = TrackState.LIVE

    @property
    def ready_state(self) -> TrackState:
        return self._state

    @property
    def is_live(self) -> bool:
        return self._state == TrackState.LIVE

    def stop(self) -> None:
        if self._state == TrackState.ENDED:
            return
        self._state = TrackState.ENDED
        self._release()

    @abstractmethod
    def _release(self) -> None:
        """Free the device handle behind this track."""
        pass


class AudioTrack(MediaTrack):
    kind = "audio"
    mime_type: str = "audio/webm"

    @abstractmethod
    async def begin_capture(self, on_data: DataCallback) -> None:
        """
        Start delivering captured chunks to on_data.
        """
        pass

    @abstractmethod
    async def end_capture(self) -> None:
        """
        Stop delivering chunks.
        Every chunk captured before this returns has been passed to on_data.
        """
        pass

    def encode(self, chunks: List[bytes]) -> bytes:
        """Concatenate captured chunks into one container payload."""
        return b"".join(chunks)


class VideoTrack(MediaTrack):
    kind = "video"

    async def read_frame(self) -> Optional[object]:
        """Latest preview frame, if the backend supports it."""
        return None


class MediaStream:
    """
    Combined device stream handed out by IMediaDevices.
    Owned by the capture manager, borrowed by the recorder.
    """
    def __init__(self, tracks: List[MediaTrack]):
        self._tracks = list(tracks)

    def get_tracks(self) -> List[MediaTrack]:
        return list(self._tracks)

    def get_audio_tracks(self) -> List[AudioTrack]:
        return [t for t in self._tracks if isinstance(t, AudioTrack)]

    def get_video_tracks(self) -> List[VideoTrack]:
        return [t for t in self._tracks if isinstance(t, VideoTrack)]

    @property
    def active(self) -> bool:
        return any(t.is_live for t in self._tracks)

    def stop(self) -> None:
        for track in self._tracks:
            track.stop()


class IMediaDevices(ABC):
    @abstractmethod
    async def get_user_media(self, audio: bool = True, video: bool = True) -> MediaStream:
        """
        Acquire a device stream with the requested track kinds.
        Raises DeviceAccessError when permission is denied or no device exists.
        """
        pass
