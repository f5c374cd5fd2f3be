from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from packages.aic_core.dto import (
    ComparisonRequestDTO,
    ComparisonResultDTO,
    EvaluationRequestDTO,
    QuestionGenerationRequestDTO,
    TranscriptionRequestDTO,
)
from packages.aic_core.errors import AICBaseError, DeviceAccessError
from packages.aic_core.logging import get_logger
from packages.aic_history.dto import InterviewRecord, RecordedAnswer
from packages.aic_history.repository import HistoryStore
from packages.aic_media.base import IMediaDevices
from packages.aic_media.capture import MediaCaptureManager
from packages.aic_media.recorder import AnswerRecorder
from packages.aic_media.state import RecordingState
from packages.aic_providers.evaluation.base import IEvaluationProvider
from packages.aic_providers.question.base import IQuestionProvider
from packages.aic_providers.stt.base import ISTTProvider

from . import actions
from . import policy
from .dto import Answer, Notice, SessionSnapshot, SessionState
from .state import NoticeLevel, SessionEvent, Stage
from .transcript import build_transcript

logger = get_logger("aic.session")

DEFAULT_QUESTION_COUNT = 5

# (session generation, recording epoch) guarding recorder and transcription results
RequestToken = Tuple[int, int]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InterviewSessionOrchestrator:
    """
    Drives one practice interview end to end.

    Owns the stage machine (start -> interviewing -> evaluating -> feedback),
    the per-question recording lifecycle, the device stream and every call to
    the AI collaborators. All mutations happen on one event loop; every await
    on a collaborator captures a request token first and the result is dropped
    when the token no longer matches (reset, stage change, re-arm).

    Refused transitions return False and may emit a Notice. They never raise.
    """
    def __init__(
        self,
        question_provider: IQuestionProvider,
        stt_provider: ISTTProvider,
        evaluation_provider: IEvaluationProvider,
        history_store: HistoryStore,
        media_devices: IMediaDevices,
        question_count: int = DEFAULT_QUESTION_COUNT,
        notice_listener: Optional[Callable[[Notice], None]] = None,
        clock: Callable[[], datetime] = _utcnow
    ):
        self.question_provider = question_provider
        self.stt_provider = stt_provider
        self.evaluation_provider = evaluation_provider
        self.history_store = history_store
        self.capture = MediaCaptureManager(media_devices)
        self.question_count = question_count
        self.notice_listener = notice_listener
        self.clock = clock

        self._state = SessionState()
        self._recorder: Optional[AnswerRecorder] = None
        self._generation = 0
        self._recording_epoch = 0
        self._starting = False
        self._device_notice_sent = False
        self._notices: List[Notice] = []

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    @property
    def stage(self) -> Stage:
        return self._state.stage

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot.from_state(self._state)

    def drain_notices(self) -> List[Notice]:
        """Return and clear notices emitted since the last drain."""
        notices, self._notices = self._notices, []
        return notices

    # ------------------------------------------------------------------
    # Stage: start
    # ------------------------------------------------------------------
    async def start_interview(self, job_description: str) -> bool:
        if self._state.stage != Stage.START:
            logger.warning(f"Cannot start interview from {self._state.stage}")
            return False
        if self._starting:
            logger.warning("Question generation already in flight, start ignored")
            return False

        job_description = job_description or ""
        if not job_description.strip():
            self._notify(
                SessionEvent.INPUT_INVALID,
                "Job Description Required",
                "Please provide a job description to generate interview questions.",
                NoticeLevel.DESTRUCTIVE,
            )
            return False

        generation = self._generation
        self._starting = True
        logger.info(f"Generating questions. jd_length={len(job_description)} count={self.question_count}")
        try:
            result = await self.question_provider.generate_questions(
                QuestionGenerationRequestDTO(job_description=job_description, count=self.question_count)
            )
        except Exception as e:
            if generation != self._generation:
                logger.info("Discarding question generation failure from a stale session")
                return False
            self._log_collaborator_failure("Question generation", e)
            self._notify(
                SessionEvent.GENERATION_FAILED,
                "Error",
                "Failed to generate interview questions. Please try again.",
                NoticeLevel.DESTRUCTIVE,
            )
            return False
        finally:
            if generation == self._generation:
                self._starting = False

        if generation != self._generation:
            logger.info("Discarding questions generated for a stale session")
            return False

        questions = [q for q in result.questions if q and q.strip()]
        if not questions:
            logger.error("Question generator returned no usable questions")
            self._notify(
                SessionEvent.GENERATION_FAILED,
                "Error",
                "Failed to generate interview questions. Please try again.",
                NoticeLevel.DESTRUCTIVE,
            )
            return False

        self._state.job_description = job_description
        self._state.questions = questions
        self._state.answers = [Answer(question=q) for q in questions]
        self._state.current_question_index = 0
        await self._enter_interviewing()
        return True

    # ------------------------------------------------------------------
    # Stage: interviewing, navigation
    # ------------------------------------------------------------------
    async def go_to_question(self, index: int) -> bool:
        state = self._state
        if not policy.can_navigate(state, index):
            if state.stage == Stage.INTERVIEWING and policy.is_recording_busy(state):
                self._notify(
                    SessionEvent.RECORDING_IN_PROGRESS,
                    "Recording in Progress",
                    "Please stop recording or wait for the transcription before changing questions.",
                )
            else:
                logger.warning(f"Navigation to index {index} ignored in stage {state.stage}")
            return False

        state.current_question_index = index
        await self._arm_recorder()
        logger.info(f"Moved to question {index + 1}/{len(state.questions)}")
        return True

    async def next_question(self) -> bool:
        return await self.go_to_question(self._state.current_question_index + 1)

    async def previous_question(self) -> bool:
        return await self.go_to_question(self._state.current_question_index - 1)

    def update_answer_text(self, text: str) -> bool:
        if not policy.can_edit_answer(self._state):
            logger.warning("Answer edit ignored for the current question")
            return False
        policy.current_answer(self._state).answer_text = text or ""
        return True

    # ------------------------------------------------------------------
    # Stage: interviewing, recording lifecycle
    # ------------------------------------------------------------------
    async def start_recording(self) -> bool:
        state = self._state
        if not policy.can_start_recording(state):
            logger.warning(f"Start recording ignored. recording_state={state.recording_state}")
            return False
        if self._recorder is None:
            self._notify(
                SessionEvent.RECORDING_UNAVAILABLE,
                "Recording Unavailable",
                "No microphone is available. Please enable microphone permissions to record an answer.",
                NoticeLevel.DESTRUCTIVE,
            )
            return False

        # Claimed before awaiting so navigation is refused meanwhile
        state.recording_state = RecordingState.RECORDING
        recorder = self._recorder
        try:
            started = await recorder.start()
        except DeviceAccessError as e:
            if recorder is not self._recorder:
                return False
            logger.error(f"Recorder start failed: {e.message}")
            state.recording_state = RecordingState.IDLE
            self._notify(
                SessionEvent.RECORDER_FAILED,
                "Recording Error",
                "Could not start the audio recorder. Please check your microphone and try again.",
                NoticeLevel.DESTRUCTIVE,
            )
            return False
        if recorder is not self._recorder:
            logger.info("Recorder was replaced while starting, ignoring")
            return False
        if not started:
            state.recording_state = RecordingState.IDLE
            self._notify(
                SessionEvent.RECORDING_UNAVAILABLE,
                "Recording Unavailable",
                "The microphone stream has ended. Please re-enable your microphone.",
                NoticeLevel.DESTRUCTIVE,
            )
            return False
        logger.info(f"Recording started for question {state.current_question_index + 1}")
        return True

    async def stop_recording(self) -> bool:
        state = self._state
        if not policy.can_stop_recording(state) or self._recorder is None:
            logger.warning(f"Stop recording ignored. recording_state={state.recording_state}")
            return False
        if not self._recorder.is_recording:
            # Capture has not begun yet
            logger.warning("Stop recording ignored while the recorder is still starting")
            return False

        token = self._token()
        index = state.current_question_index
        state.recording_state = RecordingState.PROCESSING
        try:
            payload = await self._recorder.stop()
        except DeviceAccessError as e:
            if not self._is_current(token):
                return False
            logger.error(f"Recorder stop failed: {e.message}")
            state.recording_state = RecordingState.IDLE
            self._notify(
                SessionEvent.RECORDER_FAILED,
                "Recording Error",
                "The recording could not be saved. Please try recording again.",
                NoticeLevel.DESTRUCTIVE,
            )
            return False
        if not self._is_current(token):
            logger.info("Discarding recording payload from a stale recorder")
            return False

        if payload is None or payload.is_empty:
            state.recording_state = RecordingState.IDLE
            self._notify(
                SessionEvent.RECORDING_EMPTY,
                "Recording Failed",
                "No audio was recorded. Please check your microphone and try again.",
                NoticeLevel.DESTRUCTIVE,
            )
            return False

        state.is_transcribing = True
        try:
            result = await self.stt_provider.transcribe(
                TranscriptionRequestDTO(audio_data_uri=payload.to_data_uri())
            )
        except Exception as e:
            if not self._is_current(token):
                logger.info("Discarding transcription failure from a stale recorder")
                return False
            self._log_collaborator_failure("Transcription", e)
            state.is_transcribing = False
            state.recording_state = RecordingState.IDLE
            self._notify(
                SessionEvent.TRANSCRIPTION_FAILED,
                "Transcription Failed",
                "Could not transcribe your answer. Please try recording again.",
                NoticeLevel.DESTRUCTIVE,
            )
            return False

        if not self._is_current(token):
            logger.info("Discarding transcript from a stale recorder")
            return False

        state.is_transcribing = False
        state.answers[index].answer_text = result.transcript
        state.recording_state = RecordingState.DONE
        logger.info(f"Transcribed answer {index + 1}. length={len(result.transcript)}")
        return True

    def reset_recording(self) -> bool:
        """Re-record: clear the answer text and go back to idle."""
        if not policy.can_reset_recording(self._state):
            logger.warning(f"Re-record ignored. recording_state={self._state.recording_state}")
            return False
        policy.current_answer(self._state).answer_text = ""
        self._state.recording_state = RecordingState.IDLE
        return True

    async def submit_answer(self) -> bool:
        state = self._state
        if not policy.can_submit_answer(state):
            logger.warning(f"Submit ignored. recording_state={state.recording_state}")
            return False

        index = state.current_question_index
        state.answers[index].submitted = True
        logger.info(f"Answer {index + 1}/{len(state.answers)} submitted")

        if index < len(state.questions) - 1:
            await self.go_to_question(index + 1)
        else:
            self._notify(
                SessionEvent.LAST_QUESTION_SUBMITTED,
                "Last Question Submitted",
                "You can now finish the interview to get your feedback.",
            )
        return True

    # ------------------------------------------------------------------
    # Stage: evaluating -> feedback
    # ------------------------------------------------------------------
    async def finish_interview(self) -> bool:
        state = self._state
        if state.stage != Stage.INTERVIEWING:
            logger.warning(f"Finish ignored in stage {state.stage}")
            return False
        if not policy.all_answers_submitted(state):
            self._notify(
                SessionEvent.INTERVIEW_INCOMPLETE,
                "Interview Not Complete",
                "Please submit all your answers before getting feedback.",
                NoticeLevel.DESTRUCTIVE,
            )
            return False
        if not policy.can_finish(state):
            logger.warning("Finish ignored while a recording is outstanding")
            return False

        self._set_stage(Stage.EVALUATING)
        generation = self._generation
        await self._teardown_devices()
        if generation != self._generation:
            return False

        transcript = build_transcript(state.answers)
        state.full_transcript = transcript
        logger.info(f"Scoring interview. transcript_length={len(transcript)}")
        try:
            evaluation = await self.evaluation_provider.evaluate(
                EvaluationRequestDTO(job_description=state.job_description, transcript=transcript)
            )
        except Exception as e:
            if generation != self._generation:
                logger.info("Discarding scoring failure from a stale session")
                return False
            self._log_collaborator_failure("Scoring", e)
            self._notify(
                SessionEvent.SCORING_FAILED,
                "Error",
                "Failed to generate feedback. Please try again.",
                NoticeLevel.DESTRUCTIVE,
            )
            state.full_transcript = ""
            await self._enter_interviewing()
            return False

        if generation != self._generation:
            logger.info("Discarding scoring result from a stale session")
            return False

        state.feedback_report = evaluation.feedback_report
        state.score = evaluation.score

        previous = self.history_store.latest()
        if previous is not None:
            comparison = await self._compare(previous, generation)
            if generation != self._generation:
                logger.info("Discarding comparison result from a stale session")
                return False
            if comparison is not None and comparison.comparison_report:
                state.comparison_report = comparison.comparison_report
                state.skill_scores = list(comparison.skill_scores)

        self._save_record()
        self._set_stage(Stage.FEEDBACK)
        logger.info(f"Interview evaluated. score={state.score} compared={bool(state.comparison_report)}")
        return True

    async def _compare(self, previous: InterviewRecord, generation: int) -> Optional[ComparisonResultDTO]:
        """Best effort. Any failure yields None and the feedback stage shows no comparison."""
        state = self._state
        try:
            return await self.evaluation_provider.compare(
                ComparisonRequestDTO(
                    current_job_description=state.job_description,
                    current_transcript=state.full_transcript,
                    current_score=state.score,
                    previous_job_description=previous.job_description,
                    previous_transcript=previous.full_transcript,
                    previous_score=previous.score,
                )
            )
        except Exception as e:
            if generation == self._generation:
                logger.warning(f"Comparison skipped: {e}")
            return None

    def _save_record(self) -> None:
        state = self._state
        record = InterviewRecord(
            job_description=state.job_description,
            full_transcript=state.full_transcript,
            feedback_report=state.feedback_report,
            score=state.score,
            answers=[
                RecordedAnswer(question=a.question, answer=a.answer_text, submitted=True)
                for a in state.answers
            ],
            completed_at=self.clock(),
        )
        try:
            self.history_store.add(record)
        except OSError as e:
            logger.error(f"Failed to save interview history: {e}")
            self._notify(
                SessionEvent.HISTORY_SAVE_FAILED,
                "History Not Saved",
                "Your feedback is ready, but this interview could not be saved to your history.",
            )

    # ------------------------------------------------------------------
    # Reset / teardown
    # ------------------------------------------------------------------
    async def start_new_interview(self) -> None:
        """
        Return to an empty start stage from anywhere.
        In-flight collaborator results for the old session are discarded on arrival.
        """
        logger.info(f"Resetting session from stage {self._state.stage}")
        self._generation += 1
        self._state = SessionState()
        self._starting = False
        self._device_notice_sent = False
        await self._teardown_devices()

    async def close(self) -> None:
        self._generation += 1
        await self._teardown_devices()
        logger.info("Session closed")

    async def __aenter__(self) -> "InterviewSessionOrchestrator":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def dispatch(self, action: actions.SessionAction) -> bool:
        """Route a typed user action to its transition."""
        if isinstance(action, actions.StartInterview):
            return await self.start_interview(action.job_description)
        if isinstance(action, actions.GoToQuestion):
            return await self.go_to_question(action.index)
        if isinstance(action, actions.NextQuestion):
            return await self.next_question()
        if isinstance(action, actions.PreviousQuestion):
            return await self.previous_question()
        if isinstance(action, actions.EditAnswer):
            return self.update_answer_text(action.text)
        if isinstance(action, actions.StartRecording):
            return await self.start_recording()
        if isinstance(action, actions.StopRecording):
            return await self.stop_recording()
        if isinstance(action, actions.ResetRecording):
            return self.reset_recording()
        if isinstance(action, actions.SubmitAnswer):
            return await self.submit_answer()
        if isinstance(action, actions.FinishInterview):
            return await self.finish_interview()
        if isinstance(action, actions.StartNewInterview):
            await self.start_new_interview()
            return True
        raise TypeError(f"Unsupported session action: {type(action).__name__}")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _token(self) -> RequestToken:
        return (self._generation, self._recording_epoch)

    def _is_current(self, token: RequestToken) -> bool:
        return token == self._token()

    def _set_stage(self, stage: Stage) -> None:
        logger.info(f"Stage transition: {self._state.stage.value} -> {stage.value}")
        self._generation += 1
        self._state.stage = stage

    async def _enter_interviewing(self) -> None:
        state = self._state
        self._set_stage(Stage.INTERVIEWING)
        state.recording_state = RecordingState.IDLE
        state.is_transcribing = False
        generation = self._generation

        await self.capture.acquire()
        if generation != self._generation:
            # Session moved on while devices were being requested
            self.capture.release()
            return

        state.camera_permission = self.capture.camera_permission
        if self.capture.camera_permission is False and not self._device_notice_sent:
            self._device_notice_sent = True
            if self.capture.has_audio:
                description = "Camera access was denied. You can continue with audio only."
            else:
                description = "Please enable camera and microphone permissions in your browser settings to record answers."
            self._notify(
                SessionEvent.DEVICE_ACCESS_DENIED,
                "Media Access Denied",
                description,
                NoticeLevel.DESTRUCTIVE,
            )
        await self._arm_recorder()

    async def _arm_recorder(self) -> None:
        """Unbind the previous recorder and bind a fresh one to the shared stream."""
        await self._disarm_recorder()
        self._state.recording_state = RecordingState.IDLE
        if self.capture.has_audio:
            self._recorder = AnswerRecorder(self.capture.stream)

    async def _disarm_recorder(self) -> None:
        self._recording_epoch += 1
        recorder, self._recorder = self._recorder, None
        if recorder is not None:
            await recorder.discard()

    async def _teardown_devices(self) -> None:
        try:
            await self._disarm_recorder()
        finally:
            self.capture.release()

    def _notify(
        self,
        event: SessionEvent,
        title: str,
        description: str,
        level: NoticeLevel = NoticeLevel.DEFAULT
    ) -> None:
        notice = Notice(event=event, title=title, description=description, level=level)
        self._notices.append(notice)
        logger.info(f"Notice emitted: {event.value}")
        if self.notice_listener is not None:
            self.notice_listener(notice)

    @staticmethod
    def _log_collaborator_failure(operation: str, error: Exception) -> None:
        if isinstance(error, AICBaseError):
            logger.error(f"{operation} failed: [{error.code}] {error.message}")
        else:
            logger.exception(f"{operation} failed with an unexpected error: {error}")
