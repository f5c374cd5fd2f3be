from enum import Enum


class Stage(str, Enum):
    """
    Coarse phase of one interview session.
    start -> interviewing -> evaluating -> feedback, reset back to start.
    """
    START = "start"
    INTERVIEWING = "interviewing"
    EVALUATING = "evaluating"
    FEEDBACK = "feedback"


class NoticeLevel(str, Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


class SessionEvent(str, Enum):
    """
    User-visible notices emitted by the orchestrator.
    """
    INPUT_INVALID = "INPUT_INVALID"
    GENERATION_FAILED = "GENERATION_FAILED"
    DEVICE_ACCESS_DENIED = "DEVICE_ACCESS_DENIED"   # Degraded mode, once per session
    RECORDER_FAILED = "RECORDER_FAILED"              # Back-end failed to open or close capture
    RECORDING_UNAVAILABLE = "RECORDING_UNAVAILABLE"  # No stream at all
    RECORDING_IN_PROGRESS = "RECORDING_IN_PROGRESS"  # Navigation refused
    RECORDING_EMPTY = "RECORDING_EMPTY"
    TRANSCRIPTION_FAILED = "TRANSCRIPTION_FAILED"
    LAST_QUESTION_SUBMITTED = "LAST_QUESTION_SUBMITTED"
    INTERVIEW_INCOMPLETE = "INTERVIEW_INCOMPLETE"    # Finish refused
    SCORING_FAILED = "SCORING_FAILED"
    HISTORY_SAVE_FAILED = "HISTORY_SAVE_FAILED"
