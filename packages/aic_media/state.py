from enum import Enum


class RecordingState(str, Enum):
    """
    Per-question answer capture lifecycle.
    idle -> recording -> processing -> done, done -> idle on re-record.
    """
    IDLE = "idle"
    RECORDING = "recording"
    PROCESSING = "processing"
    DONE = "done"


class RecorderState(str, Enum):
    """Binder state of the recorder itself (MediaRecorder semantics)."""
    INACTIVE = "inactive"
    STARTING = "starting"
    RECORDING = "recording"


class TrackState(str, Enum):
    LIVE = "live"
    ENDED = "ended"
