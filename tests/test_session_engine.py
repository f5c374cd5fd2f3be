import asyncio
import unittest
from datetime import datetime, timezone

from packages.aic_core.dto import QuestionSetDTO
from packages.aic_history.dto import InterviewRecord
from packages.aic_history.infrastructure.memory_repo import MemoryHistoryStore
from packages.aic_media.mock import MockMediaDevices
from packages.aic_media.state import RecordingState
from packages.aic_providers.evaluation.mock import MockEvaluationProvider
from packages.aic_providers.question.mock import MockQuestionProvider
from packages.aic_providers.stt.mock import MockSTTProvider
from packages.aic_session import actions
from packages.aic_session.engine import InterviewSessionOrchestrator
from packages.aic_session.state import SessionEvent, Stage
from packages.aic_session.transcript import build_transcript

JOB_DESCRIPTION = "Backend Engineer\nPython, FastAPI, PostgreSQL. 3+ years building APIs."
FIXED_TIME = datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)


class GatedQuestionProvider(MockQuestionProvider):
    """Holds generation open until the test releases the gate."""
    def __init__(self):
        super().__init__()
        self.gate = asyncio.Event()
        self.entered = False

    async def generate_questions(self, request):
        self.entered = True
        await self.gate.wait()
        return await super().generate_questions(request)


class GatedEvaluationProvider(MockEvaluationProvider):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.gate = asyncio.Event()
        self.entered = False

    async def evaluate(self, request):
        self.entered = True
        await self.gate.wait()
        return await super().evaluate(request)


def previous_record(score: float = 6.0) -> InterviewRecord:
    return InterviewRecord(
        job_description="Data Analyst",
        full_transcript="Question: Why data?\nAnswer: I like numbers.",
        feedback_report="Solid start.",
        score=score,
        answers=[],
        completed_at=datetime(2025, 12, 1, tzinfo=timezone.utc),
    )


async def wait_until(predicate, attempts: int = 200):
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition was never reached")


class OrchestratorTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.questions = MockQuestionProvider()
        self.stt = MockSTTProvider(transcript="I designed a queue-backed ingestion service.")
        self.evaluation = MockEvaluationProvider(score=7.5)
        self.history = MemoryHistoryStore()
        self.devices = MockMediaDevices()
        self.received = []

    def build(self) -> InterviewSessionOrchestrator:
        return InterviewSessionOrchestrator(
            question_provider=self.questions,
            stt_provider=self.stt,
            evaluation_provider=self.evaluation,
            history_store=self.history,
            media_devices=self.devices,
            notice_listener=self.received.append,
            clock=lambda: FIXED_TIME,
        )

    async def started(self) -> InterviewSessionOrchestrator:
        orch = self.build()
        self.assertTrue(await orch.start_interview(JOB_DESCRIPTION))
        orch.drain_notices()
        return orch

    async def answer_current(self, orch: InterviewSessionOrchestrator):
        self.assertTrue(await orch.start_recording())
        self.assertTrue(await orch.stop_recording())
        self.assertTrue(await orch.submit_answer())

    async def answer_all(self, orch: InterviewSessionOrchestrator):
        for _ in range(len(orch.snapshot().questions)):
            await self.answer_current(orch)

    def events(self, orch: InterviewSessionOrchestrator):
        return [n.event for n in orch.drain_notices()]


class TestStartStage(OrchestratorTestCase):
    async def test_blank_job_description_is_rejected_before_generation(self):
        orch = self.build()
        self.assertFalse(await orch.start_interview("   \n\t"))
        self.assertEqual(orch.stage, Stage.START)
        self.assertEqual(self.questions.calls, [])
        self.assertEqual(self.events(orch), [SessionEvent.INPUT_INVALID])
        self.assertEqual(self.devices.streams, [])

    async def test_generation_success_initialises_answers(self):
        orch = await self.started()
        snap = orch.snapshot()
        self.assertEqual(snap.stage, Stage.INTERVIEWING)
        self.assertEqual(len(snap.questions), 5)
        self.assertEqual(len(snap.answers), len(snap.questions))
        self.assertFalse(any(a.submitted for a in snap.answers))
        self.assertTrue(all(a.answer_text == "" for a in snap.answers))
        self.assertEqual(snap.current_question_index, 0)
        self.assertEqual(snap.recording_state, RecordingState.IDLE)
        self.assertTrue(snap.camera_permission)
        self.assertEqual(len(self.devices.live_streams), 1)
        self.assertEqual(self.questions.calls[0].count, 5)

    async def test_configured_question_count_is_requested(self):
        self.questions = MockQuestionProvider(questions=["Q1", "Q2", "Q3"])
        orch = self.build()
        orch.question_count = 3
        self.assertTrue(await orch.start_interview(JOB_DESCRIPTION))
        self.assertEqual(orch.snapshot().questions, ["Q1", "Q2", "Q3"])
        self.assertEqual(self.questions.calls[0].count, 3)

    async def test_generation_failure_stays_in_start(self):
        self.questions = MockQuestionProvider(should_fail=True)
        orch = self.build()
        self.assertFalse(await orch.start_interview(JOB_DESCRIPTION))
        snap = orch.snapshot()
        self.assertEqual(snap.stage, Stage.START)
        self.assertEqual(snap.questions, [])
        self.assertEqual(self.events(orch), [SessionEvent.GENERATION_FAILED])
        self.assertEqual(self.devices.streams, [])

    async def test_empty_question_set_counts_as_failure(self):
        self.questions = MockQuestionProvider(questions=["", "  "])
        orch = self.build()
        self.assertFalse(await orch.start_interview(JOB_DESCRIPTION))
        self.assertEqual(orch.stage, Stage.START)
        self.assertEqual(self.events(orch), [SessionEvent.GENERATION_FAILED])

    async def test_start_is_refused_outside_start_stage(self):
        orch = await self.started()
        self.assertFalse(await orch.start_interview("Another role"))
        self.assertEqual(len(self.questions.calls), 1)

    async def test_notice_listener_receives_notices(self):
        orch = self.build()
        await orch.start_interview("")
        self.assertEqual([n.event for n in self.received], [SessionEvent.INPUT_INVALID])


class TestDeviceAcquisition(OrchestratorTestCase):
    async def test_camera_denied_falls_back_to_audio_only(self):
        self.devices = MockMediaDevices(camera_available=False)
        orch = self.build()
        self.assertTrue(await orch.start_interview(JOB_DESCRIPTION))

        self.assertFalse(orch.snapshot().camera_permission)
        self.assertEqual(self.events(orch), [SessionEvent.DEVICE_ACCESS_DENIED])
        stream = self.devices.live_streams[0]
        self.assertEqual(len(stream.get_audio_tracks()), 1)
        self.assertEqual(stream.get_video_tracks(), [])

        # Recording still works without a camera
        await self.answer_current(orch)
        self.assertTrue(orch.snapshot().answers[0].submitted)

    async def test_no_devices_blocks_recording_but_not_the_interview(self):
        self.devices = MockMediaDevices(camera_available=False, microphone_available=False)
        orch = self.build()
        self.assertTrue(await orch.start_interview(JOB_DESCRIPTION))
        self.assertEqual(orch.stage, Stage.INTERVIEWING)
        self.assertEqual(self.events(orch), [SessionEvent.DEVICE_ACCESS_DENIED])

        self.assertFalse(await orch.start_recording())
        self.assertEqual(orch.snapshot().recording_state, RecordingState.IDLE)
        self.assertEqual(self.events(orch), [SessionEvent.RECORDING_UNAVAILABLE])

        # Navigation still works
        self.assertTrue(await orch.next_question())

    async def test_single_stream_survives_navigation(self):
        orch = await self.started()
        await orch.next_question()
        await orch.next_question()
        await orch.previous_question()
        await orch.go_to_question(4)
        self.assertEqual(len(self.devices.streams), 1)
        self.assertEqual(len(self.devices.live_streams), 1)

    async def test_stream_released_when_leaving_interviewing(self):
        orch = await self.started()
        await self.answer_all(orch)
        self.assertTrue(await orch.finish_interview())
        self.assertEqual(self.devices.live_streams, [])
        self.assertTrue(all(
            not t.is_live for s in self.devices.streams for t in s.get_tracks()
        ))

    async def test_close_releases_stream(self):
        orch = await self.started()
        self.assertTrue(await orch.start_recording())
        await orch.close()
        self.assertEqual(self.devices.live_streams, [])

    async def test_async_context_manager_closes(self):
        async with self.build() as orch:
            await orch.start_interview(JOB_DESCRIPTION)
            self.assertEqual(len(self.devices.live_streams), 1)
        self.assertEqual(self.devices.live_streams, [])


class TestRecordingLifecycle(OrchestratorTestCase):
    async def test_record_stop_transcribe(self):
        orch = await self.started()
        self.assertTrue(await orch.start_recording())
        self.assertEqual(orch.snapshot().recording_state, RecordingState.RECORDING)

        self.assertTrue(await orch.stop_recording())
        snap = orch.snapshot()
        self.assertEqual(snap.recording_state, RecordingState.DONE)
        self.assertFalse(snap.is_transcribing)
        self.assertEqual(snap.answers[0].answer_text, "I designed a queue-backed ingestion service.")
        self.assertFalse(snap.answers[0].submitted)
        self.assertTrue(self.stt.calls[0].audio_data_uri.startswith("data:audio/webm;base64,"))

    async def test_zero_byte_recording_returns_to_idle(self):
        self.devices = MockMediaDevices(chunks=[])
        orch = await self.started()
        self.assertTrue(orch.update_answer_text("typed draft"))

        self.assertTrue(await orch.start_recording())
        self.assertFalse(await orch.stop_recording())

        snap = orch.snapshot()
        self.assertEqual(snap.recording_state, RecordingState.IDLE)
        self.assertEqual(snap.answers[0].answer_text, "typed draft")
        self.assertFalse(snap.answers[0].submitted)
        self.assertEqual(self.stt.calls, [])
        self.assertEqual(self.events(orch), [SessionEvent.RECORDING_EMPTY])

    async def test_transcription_failure_keeps_text(self):
        self.stt = MockSTTProvider(should_fail=True)
        orch = await self.started()
        orch.update_answer_text("typed draft")

        await orch.start_recording()
        self.assertFalse(await orch.stop_recording())

        snap = orch.snapshot()
        self.assertEqual(snap.recording_state, RecordingState.IDLE)
        self.assertFalse(snap.is_transcribing)
        self.assertEqual(snap.answers[0].answer_text, "typed draft")
        self.assertEqual(self.events(orch), [SessionEvent.TRANSCRIPTION_FAILED])

    async def test_rerecord_clears_text(self):
        orch = await self.started()
        await orch.start_recording()
        await orch.stop_recording()

        self.assertTrue(orch.reset_recording())
        snap = orch.snapshot()
        self.assertEqual(snap.recording_state, RecordingState.IDLE)
        self.assertEqual(snap.answers[0].answer_text, "")
        self.assertFalse(snap.answers[0].submitted)

        # A second take goes through the full cycle again
        await orch.start_recording()
        self.assertTrue(await orch.stop_recording())
        self.assertEqual(len(self.stt.calls), 2)

    async def test_transcript_can_be_edited_before_submit(self):
        orch = await self.started()
        await orch.start_recording()
        await orch.stop_recording()
        self.assertTrue(orch.update_answer_text("edited answer"))
        self.assertEqual(orch.snapshot().answers[0].answer_text, "edited answer")

    async def test_edit_refused_while_recording(self):
        orch = await self.started()
        await orch.start_recording()
        self.assertFalse(orch.update_answer_text("typing over the mic"))
        self.assertEqual(orch.snapshot().answers[0].answer_text, "")

    async def test_invalid_recording_transitions_are_refused(self):
        orch = await self.started()
        self.assertFalse(await orch.stop_recording())
        self.assertFalse(orch.reset_recording())

        await orch.start_recording()
        self.assertFalse(await orch.start_recording())
        self.assertEqual(orch.snapshot().recording_state, RecordingState.RECORDING)

    async def test_submit_requires_done(self):
        orch = await self.started()
        orch.update_answer_text("typed only")
        self.assertFalse(await orch.submit_answer())
        self.assertFalse(orch.snapshot().answers[0].submitted)

        await orch.start_recording()
        self.assertFalse(await orch.submit_answer())
        self.assertFalse(orch.snapshot().answers[0].submitted)

    async def test_submitted_answer_cannot_be_recorded_again(self):
        orch = await self.started()
        await self.answer_current(orch)
        await orch.previous_question()
        self.assertTrue(orch.snapshot().answers[0].submitted)
        self.assertFalse(await orch.start_recording())
        self.assertFalse(orch.update_answer_text("changed my mind"))


class TestNavigation(OrchestratorTestCase):
    async def test_navigation_refused_while_recording(self):
        orch = await self.started()
        await orch.start_recording()

        self.assertFalse(await orch.next_question())
        self.assertFalse(await orch.go_to_question(3))
        self.assertEqual(orch.snapshot().current_question_index, 0)
        self.assertEqual(
            self.events(orch),
            [SessionEvent.RECORDING_IN_PROGRESS, SessionEvent.RECORDING_IN_PROGRESS]
        )

    async def test_navigation_refused_while_transcribing(self):
        self.stt.gate = asyncio.Event()
        orch = await self.started()
        await orch.start_recording()

        task = asyncio.create_task(orch.stop_recording())
        await wait_until(lambda: orch.snapshot().is_transcribing)
        self.assertEqual(orch.snapshot().recording_state, RecordingState.PROCESSING)

        self.assertFalse(await orch.next_question())
        self.assertEqual(orch.snapshot().current_question_index, 0)

        self.stt.gate.set()
        self.assertTrue(await task)
        self.assertEqual(orch.snapshot().recording_state, RecordingState.DONE)

    async def test_out_of_range_navigation_is_ignored(self):
        orch = await self.started()
        self.assertFalse(await orch.previous_question())
        self.assertFalse(await orch.go_to_question(5))
        self.assertEqual(orch.snapshot().current_question_index, 0)
        self.assertEqual(self.events(orch), [])

    async def test_navigation_rearms_recorder(self):
        orch = await self.started()
        await orch.start_recording()
        await orch.stop_recording()

        self.assertTrue(await orch.next_question())
        snap = orch.snapshot()
        self.assertEqual(snap.current_question_index, 1)
        self.assertEqual(snap.recording_state, RecordingState.IDLE)
        # Unsubmitted text of the previous question is kept
        self.assertNotEqual(snap.answers[0].answer_text, "")

        self.assertTrue(await orch.start_recording())
        self.assertTrue(await orch.stop_recording())
        self.assertEqual(orch.snapshot().answers[1].answer_text, self.stt.transcript)


class TestSubmitAndFinish(OrchestratorTestCase):
    async def test_submit_advances_until_last_question(self):
        orch = await self.started()
        await self.answer_current(orch)
        snap = orch.snapshot()
        self.assertTrue(snap.answers[0].submitted)
        self.assertEqual(snap.current_question_index, 1)
        self.assertEqual(snap.recording_state, RecordingState.IDLE)

        await orch.go_to_question(4)
        await self.answer_current(orch)
        snap = orch.snapshot()
        self.assertEqual(snap.current_question_index, 4)
        self.assertEqual(self.events(orch), [SessionEvent.LAST_QUESTION_SUBMITTED])

    async def test_finish_with_missing_answer_is_refused(self):
        orch = await self.started()
        for _ in range(4):
            await self.answer_current(orch)
        self.events(orch)

        self.assertFalse(await orch.finish_interview())
        self.assertEqual(orch.stage, Stage.INTERVIEWING)
        self.assertEqual(self.evaluation.evaluate_calls, [])
        self.assertEqual(self.events(orch), [SessionEvent.INTERVIEW_INCOMPLETE])

    async def test_backend_engineer_scenario(self):
        orch = await self.started()
        await self.answer_all(orch)

        self.assertTrue(await orch.finish_interview())
        snap = orch.snapshot()
        self.assertEqual(snap.stage, Stage.FEEDBACK)
        self.assertEqual(snap.score, 7.5)
        self.assertTrue(snap.feedback_report)
        self.assertEqual(snap.comparison_report, "")
        self.assertEqual(self.evaluation.compare_calls, [])

        records = self.history.load()
        self.assertEqual(len(records), 1)
        record = records[0]
        self.assertEqual(record.score, 7.5)
        self.assertEqual(len(record.answers), 5)
        self.assertTrue(all(a.submitted for a in record.answers))
        self.assertTrue(record.feedback_report)
        self.assertEqual(record.job_description, JOB_DESCRIPTION)
        self.assertEqual(record.completed_at, FIXED_TIME)

    async def test_scoring_receives_assembled_transcript(self):
        orch = await self.started()
        await self.answer_all(orch)
        await orch.finish_interview()

        request = self.evaluation.evaluate_calls[0]
        self.assertEqual(request.job_description, JOB_DESCRIPTION)
        self.assertEqual(request.transcript, build_transcript(orch.snapshot().answers))
        self.assertEqual(self.history.latest().full_transcript, request.transcript)

    async def test_comparison_runs_when_history_exists(self):
        self.history = MemoryHistoryStore(records=[previous_record(score=6.0)])
        orch = await self.started()
        await self.answer_all(orch)

        self.assertTrue(await orch.finish_interview())
        self.assertEqual(len(self.evaluation.compare_calls), 1)
        request = self.evaluation.compare_calls[0]
        self.assertEqual(request.previous_score, 6.0)
        self.assertEqual(request.previous_job_description, "Data Analyst")
        self.assertEqual(request.current_score, 7.5)

        snap = orch.snapshot()
        self.assertIn("+1.5", snap.comparison_report)
        self.assertEqual(len(snap.skill_scores), 3)

        records = self.history.load()
        self.assertEqual(len(records), 2)
        self.assertEqual(records[0].score, 7.5)

    async def test_comparison_failure_does_not_block_feedback(self):
        self.history = MemoryHistoryStore(records=[previous_record()])
        self.evaluation = MockEvaluationProvider(score=7.5, fail_comparison=True)
        orch = await self.started()
        await self.answer_all(orch)

        self.assertTrue(await orch.finish_interview())
        snap = orch.snapshot()
        self.assertEqual(snap.stage, Stage.FEEDBACK)
        self.assertEqual(snap.comparison_report, "")
        self.assertEqual(snap.skill_scores, [])
        self.assertEqual(len(self.history.load()), 2)
        self.assertNotIn(SessionEvent.SCORING_FAILED, self.events(orch))

    async def test_scoring_failure_reverts_to_interviewing(self):
        self.evaluation = MockEvaluationProvider(fail_scoring=True)
        orch = await self.started()
        await self.answer_all(orch)
        self.events(orch)

        self.assertFalse(await orch.finish_interview())
        snap = orch.snapshot()
        self.assertEqual(snap.stage, Stage.INTERVIEWING)
        self.assertTrue(all(a.submitted for a in snap.answers))
        self.assertEqual(self.history.load(), [])
        self.assertEqual(self.history.save_count, 0)
        self.assertEqual(self.events(orch), [SessionEvent.SCORING_FAILED])
        # Devices are acquired again for the retry
        self.assertEqual(len(self.devices.live_streams), 1)
        self.assertEqual(len(self.devices.streams), 2)

        self.evaluation.fail_scoring = False
        self.assertTrue(await orch.finish_interview())
        self.assertEqual(orch.stage, Stage.FEEDBACK)

    async def test_finish_twice_concurrently_scores_once(self):
        self.evaluation = GatedEvaluationProvider(score=8.0)
        orch = await self.started()
        await self.answer_all(orch)

        first = asyncio.create_task(orch.finish_interview())
        await wait_until(lambda: self.evaluation.entered)
        self.assertEqual(orch.stage, Stage.EVALUATING)
        self.assertFalse(await orch.finish_interview())

        self.evaluation.gate.set()
        self.assertTrue(await first)
        self.assertEqual(len(self.evaluation.evaluate_calls), 1)
        self.assertEqual(len(self.history.load()), 1)


class TestResetAndStaleResults(OrchestratorTestCase):
    async def test_start_new_interview_clears_session(self):
        orch = await self.started()
        await self.answer_all(orch)
        await orch.finish_interview()

        await orch.start_new_interview()
        snap = orch.snapshot()
        self.assertEqual(snap.stage, Stage.START)
        self.assertEqual(snap.job_description, "")
        self.assertEqual(snap.questions, [])
        self.assertEqual(snap.answers, [])
        self.assertEqual(snap.score, 0.0)
        self.assertEqual(snap.feedback_report, "")
        self.assertIsNone(snap.camera_permission)
        self.assertEqual(len(self.history.load()), 1)

        self.assertTrue(await orch.start_interview("Frontend Engineer"))
        self.assertEqual(orch.stage, Stage.INTERVIEWING)

    async def test_late_transcript_after_reset_is_discarded(self):
        self.stt.gate = asyncio.Event()
        orch = await self.started()
        await orch.start_recording()
        task = asyncio.create_task(orch.stop_recording())
        await wait_until(lambda: orch.snapshot().is_transcribing)

        await orch.start_new_interview()
        self.assertEqual(self.devices.live_streams, [])

        self.stt.gate.set()
        self.assertFalse(await task)
        snap = orch.snapshot()
        self.assertEqual(snap.stage, Stage.START)
        self.assertEqual(snap.answers, [])
        self.assertFalse(snap.is_transcribing)
        self.assertEqual(snap.recording_state, RecordingState.IDLE)

    async def test_late_questions_after_reset_are_discarded(self):
        self.questions = GatedQuestionProvider()
        orch = self.build()
        task = asyncio.create_task(orch.start_interview(JOB_DESCRIPTION))
        await wait_until(lambda: self.questions.entered)

        await orch.start_new_interview()
        self.questions.gate.set()
        self.assertFalse(await task)
        self.assertEqual(orch.stage, Stage.START)
        self.assertEqual(orch.snapshot().questions, [])
        self.assertEqual(self.devices.streams, [])

    async def test_late_score_after_reset_writes_no_record(self):
        self.evaluation = GatedEvaluationProvider(score=9.0)
        orch = await self.started()
        await self.answer_all(orch)
        task = asyncio.create_task(orch.finish_interview())
        await wait_until(lambda: self.evaluation.entered)

        await orch.start_new_interview()
        self.evaluation.gate.set()
        self.assertFalse(await task)
        self.assertEqual(orch.stage, Stage.START)
        self.assertEqual(self.history.load(), [])
        self.assertEqual(orch.snapshot().score, 0.0)

    async def test_second_start_refused_while_generating(self):
        self.questions = GatedQuestionProvider()
        orch = self.build()
        task = asyncio.create_task(orch.start_interview(JOB_DESCRIPTION))
        await wait_until(lambda: self.questions.entered)

        self.assertFalse(await orch.start_interview(JOB_DESCRIPTION))
        self.questions.gate.set()
        self.assertTrue(await task)
        self.assertEqual(len(self.devices.streams), 1)


class TestDispatch(OrchestratorTestCase):
    async def test_typed_actions_drive_a_full_session(self):
        orch = self.build()
        self.assertTrue(await orch.dispatch(actions.StartInterview(job_description=JOB_DESCRIPTION)))
        for _ in range(5):
            self.assertTrue(await orch.dispatch(actions.StartRecording()))
            self.assertTrue(await orch.dispatch(actions.StopRecording()))
            self.assertTrue(await orch.dispatch(actions.SubmitAnswer()))
        self.assertTrue(await orch.dispatch(actions.FinishInterview()))
        self.assertEqual(orch.stage, Stage.FEEDBACK)

        self.assertTrue(await orch.dispatch(actions.StartNewInterview()))
        self.assertEqual(orch.stage, Stage.START)

    async def test_navigation_actions(self):
        orch = await self.started()
        self.assertTrue(await orch.dispatch(actions.GoToQuestion(index=2)))
        self.assertTrue(await orch.dispatch(actions.PreviousQuestion()))
        self.assertTrue(await orch.dispatch(actions.NextQuestion()))
        self.assertTrue(await orch.dispatch(actions.EditAnswer(text="draft")))
        self.assertEqual(orch.snapshot().current_question_index, 2)
        self.assertEqual(orch.snapshot().answers[2].answer_text, "draft")

    async def test_snapshot_is_detached(self):
        orch = await self.started()
        snap = orch.snapshot()
        snap.answers[0].answer_text = "mutated outside"
        self.assertEqual(orch.snapshot().answers[0].answer_text, "")
        self.assertEqual(snap.total_questions, 5)
        self.assertEqual(snap.current_question, snap.questions[0])


class FailingHistoryStore(MemoryHistoryStore):
    def save(self, records):
        raise OSError(28, "No space left on device")


class TestRecorderFailures(OrchestratorTestCase):
    def audio_track(self):
        return self.devices.streams[-1].get_audio_tracks()[0]

    async def test_device_busy_on_start_returns_to_idle(self):
        self.devices = MockMediaDevices(begin_error=OSError("[Errno -9985] Device unavailable"))
        orch = await self.started()

        self.assertFalse(await orch.start_recording())
        self.assertEqual(orch.snapshot().recording_state, RecordingState.IDLE)
        self.assertEqual(self.events(orch), [SessionEvent.RECORDER_FAILED])

        # The session is not stuck: navigation works and a retry succeeds
        self.assertTrue(await orch.next_question())
        self.devices.begin_error = None
        await self.answer_current(orch)
        self.assertTrue(orch.snapshot().answers[1].submitted)

    async def test_capture_failure_on_stop_returns_to_idle(self):
        self.devices = MockMediaDevices(end_error=OSError("Stream closed"))
        orch = await self.started()
        orch.update_answer_text("typed draft")

        self.assertTrue(await orch.start_recording())
        self.assertFalse(await orch.stop_recording())
        snap = orch.snapshot()
        self.assertEqual(snap.recording_state, RecordingState.IDLE)
        self.assertFalse(snap.is_transcribing)
        self.assertEqual(snap.answers[0].answer_text, "typed draft")
        self.assertEqual(self.stt.calls, [])
        self.assertEqual(self.events(orch), [SessionEvent.RECORDER_FAILED])

        self.devices.end_error = None
        self.assertTrue(await orch.start_recording())
        self.assertTrue(await orch.stop_recording())
        self.assertEqual(orch.snapshot().recording_state, RecordingState.DONE)

    async def test_stop_waits_for_pending_start(self):
        self.devices = MockMediaDevices(begin_latency_ms=20)
        orch = await self.started()

        start = asyncio.create_task(orch.start_recording())
        await wait_until(lambda: orch.snapshot().recording_state == RecordingState.RECORDING)
        self.assertFalse(await orch.stop_recording())
        self.assertEqual(orch.snapshot().recording_state, RecordingState.RECORDING)

        self.assertTrue(await start)
        self.assertEqual(self.audio_track().open_captures, 1)
        self.assertTrue(await orch.stop_recording())
        self.assertEqual(orch.snapshot().recording_state, RecordingState.DONE)
        self.assertEqual(self.audio_track().open_captures, 0)
        self.assertEqual(self.events(orch), [])

    async def test_reset_during_pending_start_leaves_no_open_capture(self):
        self.devices = MockMediaDevices(begin_latency_ms=20)
        orch = await self.started()
        track = self.audio_track()

        start = asyncio.create_task(orch.start_recording())
        await wait_until(lambda: orch.snapshot().recording_state == RecordingState.RECORDING)
        await orch.start_new_interview()

        self.assertFalse(await start)
        self.assertEqual(track.open_captures, 0)
        self.assertEqual(orch.stage, Stage.START)


class TestHistoryWriteFailure(OrchestratorTestCase):
    async def test_feedback_is_shown_when_history_cannot_be_saved(self):
        self.history = FailingHistoryStore()
        orch = await self.started()
        await self.answer_all(orch)
        orch.drain_notices()

        self.assertTrue(await orch.finish_interview())
        snap = orch.snapshot()
        self.assertEqual(snap.stage, Stage.FEEDBACK)
        self.assertEqual(snap.score, 7.5)
        self.assertTrue(snap.feedback_report)
        self.assertEqual(self.events(orch), [SessionEvent.HISTORY_SAVE_FAILED])
        self.assertIsNone(self.history.latest())
        self.assertEqual(self.devices.live_streams, [])


if __name__ == "__main__":
    unittest.main()
