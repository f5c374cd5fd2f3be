"""
Transition guards for the interview session.
The engine consults these predicates; they never change state themselves.
"""
from typing import Optional

from packages.aic_media.state import RecordingState
from .dto import Answer, SessionState
from .state import Stage

BUSY_RECORDING_STATES = (RecordingState.RECORDING, RecordingState.PROCESSING)


def current_answer(state: SessionState) -> Optional[Answer]:
    if 0 <= state.current_question_index < len(state.answers):
        return state.answers[state.current_question_index]
    return None


def is_recording_busy(state: SessionState) -> bool:
    """A recording or a transcription is outstanding for the active question."""
    return state.recording_state in BUSY_RECORDING_STATES or state.is_transcribing


def all_answers_submitted(state: SessionState) -> bool:
    return bool(state.answers) and all(a.submitted for a in state.answers)


def can_navigate(state: SessionState, index: int) -> bool:
    return (
        state.stage == Stage.INTERVIEWING
        and 0 <= index < len(state.questions)
        and not is_recording_busy(state)
    )


def can_start_recording(state: SessionState) -> bool:
    answer = current_answer(state)
    return (
        state.stage == Stage.INTERVIEWING
        and answer is not None
        and not answer.submitted
        and state.recording_state == RecordingState.IDLE
        and not state.is_transcribing
    )


def can_stop_recording(state: SessionState) -> bool:
    return state.stage == Stage.INTERVIEWING and state.recording_state == RecordingState.RECORDING


def can_reset_recording(state: SessionState) -> bool:
    answer = current_answer(state)
    return (
        state.stage == Stage.INTERVIEWING
        and answer is not None
        and not answer.submitted
        and state.recording_state == RecordingState.DONE
    )


def can_edit_answer(state: SessionState) -> bool:
    answer = current_answer(state)
    return (
        state.stage == Stage.INTERVIEWING
        and answer is not None
        and not answer.submitted
        and state.recording_state in (RecordingState.IDLE, RecordingState.DONE)
        and not state.is_transcribing
    )


def can_submit_answer(state: SessionState) -> bool:
    # Submission requires a finished recording
    return can_reset_recording(state)


def can_finish(state: SessionState) -> bool:
    return (
        state.stage == Stage.INTERVIEWING
        and all_answers_submitted(state)
        and not is_recording_busy(state)
    )
