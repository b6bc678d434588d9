import asyncio
import time
import unittest
from unittest import mock

from fakes import ScriptedAIClient, on_topic_answer
from mock_interview.core.state_transitions import InvalidTransitionError
from mock_interview.domain.models import Candidate, CandidateProfileRequest
from mock_interview.services.candidate_store import InMemoryCandidateStore
from mock_interview.services.interview_session import InterviewSession, SessionBusyError
from mock_interview.services.session_manager import SessionManager, SessionNotFoundError


def make_session(client, store=None):
    store = store or InMemoryCandidateStore()
    candidate = store.add_candidate(
        Candidate(
            name="Ada Lovelace",
            email="ada@example.com",
            phone="555-123-4567",
            resume_text="Full stack developer with React and Node.js experience.",
        )
    )
    session = InterviewSession(client, store, retries=2, backoff_base=0)
    return session, candidate, store


class TestInterviewFlow(unittest.TestCase):
    def test_full_interview(self):
        client = ScriptedAIClient(scores=[8, 8, 6, 6, 4, 4])
        session, candidate, store = make_session(client)

        snapshot = session.start(candidate)
        self.assertEqual(snapshot.status, "in-progress")
        self.assertEqual(snapshot.current_question.difficulty, "Easy")
        self.assertEqual(snapshot.timer, 20)
        self.assertTrue(snapshot.is_timer_running)
        self.assertEqual(store.get_candidate(candidate.id).status, "in-progress")
        self.assertTrue(snapshot.messages[0].content.startswith("Hello Ada Lovelace!"))
        self.assertTrue(snapshot.messages[1].content.startswith("Question 1/6: Explain how"))

        for number in range(1, 7):
            snapshot = session.submit_answer(on_topic_answer(number))

        self.assertEqual(snapshot.status, "completed")
        self.assertEqual(snapshot.final_score, 60)
        self.assertEqual(
            snapshot.summary,
            "Interview completed with 60% score. Strong areas: 2 questions. "
            "Areas for improvement: 2 questions.",
        )
        self.assertEqual(
            [(q.difficulty, q.time_limit) for q in snapshot.questions],
            [("Easy", 20), ("Easy", 20), ("Medium", 60), ("Medium", 60), ("Hard", 120), ("Hard", 120)],
        )
        self.assertEqual(snapshot.individual_scores, [8, 8, 6, 6, 4, 4])
        self.assertIsNone(snapshot.current_question)
        self.assertFalse(snapshot.is_timer_running)
        self.assertTrue(snapshot.messages[-1].content.startswith("Your final score is 60/100."))

        record = store.get_candidate(candidate.id)
        self.assertEqual(record.status, "completed")
        self.assertEqual(record.score, 60)
        self.assertEqual(record.summary, snapshot.summary)
        self.assertEqual(len(record.questions), 6)
        self.assertEqual(len(record.answers), 6)
        self.assertEqual(len(record.individual_scores), 6)
        self.assertIsNotNone(record.completed_at)

        with self.assertRaises(InvalidTransitionError):
            session.submit_answer("one more")

    def test_difficulty_and_resume_reach_the_client(self):
        client = ScriptedAIClient()
        session, candidate, _ = make_session(client)
        session.start(candidate)
        session.submit_answer(on_topic_answer(1))
        session.submit_answer(on_topic_answer(2))
        self.assertEqual(
            [call["difficulty"] for call in client.question_calls],
            ["Easy", "Easy", "Medium"],
        )
        self.assertEqual(client.question_calls[0]["resume_context"], candidate.resume_text)
        self.assertEqual(len(client.question_calls[2]["previous_questions"]), 2)

    def test_empty_submission_uses_draft_then_placeholder(self):
        client = ScriptedAIClient(scores=[7])
        session, candidate, _ = make_session(client)
        session.start(candidate)

        session.update_draft(on_topic_answer(1))
        snapshot = session.submit_answer("   ")
        self.assertEqual(snapshot.answers, [on_topic_answer(1)])

        snapshot = session.submit_answer(None)
        self.assertEqual(snapshot.answers[-1], "No answer provided")
        self.assertEqual(snapshot.individual_scores, [7, 0])


class TestTimer(unittest.TestCase):
    def test_expiry_equals_empty_submission(self):
        timed, timed_candidate, _ = make_session(ScriptedAIClient())
        explicit, explicit_candidate, _ = make_session(ScriptedAIClient())
        timed.start(timed_candidate)
        explicit.start(explicit_candidate)

        expired = [timed.tick() for _ in range(20)]
        explicit.submit_answer("")

        self.assertEqual(expired, [False] * 19 + [True])
        a, b = timed.snapshot(), explicit.snapshot()
        self.assertEqual(a.answers, b.answers)
        self.assertEqual(a.individual_scores, b.individual_scores)
        self.assertEqual(a.individual_scores, [0])
        self.assertEqual(a.question_index, 1)
        self.assertIn("Time is up! Moving to the next question.", [m.content for m in a.messages])
        self.assertEqual(a.timer, 20)
        self.assertTrue(a.is_timer_running)

    def test_expiry_submits_the_draft(self):
        client = ScriptedAIClient(scores=[9])
        session, candidate, _ = make_session(client)
        session.start(candidate)
        session.update_draft(on_topic_answer(1))
        for _ in range(20):
            session.tick()
        self.assertEqual(session.snapshot().individual_scores, [9])
        self.assertEqual(client.evaluation_calls[0]["answer"], on_topic_answer(1))

    def test_tick_is_ignored_when_stopped(self):
        session, candidate, _ = make_session(ScriptedAIClient())
        session.start(candidate)
        session.timer.stop()
        self.assertFalse(session.tick())
        self.assertEqual(session.snapshot().question_index, 0)


class TestSessionGuards(unittest.TestCase):
    def test_submission_rejected_while_processing(self):
        session, candidate, _ = make_session(ScriptedAIClient())
        session.start(candidate)
        session.is_processing = True
        with self.assertRaises(SessionBusyError):
            session.submit_answer(on_topic_answer(1))

    def test_submission_rejected_before_start(self):
        session, _, _ = make_session(ScriptedAIClient())
        with self.assertRaises(InvalidTransitionError):
            session.submit_answer("hello")

    def test_failed_question_can_be_retried(self):
        client = ScriptedAIClient(question_failures=3)
        session, candidate, _ = make_session(client)

        snapshot = session.start(candidate)
        self.assertIsNotNone(snapshot.question_error)
        self.assertIsNone(snapshot.current_question)
        self.assertFalse(snapshot.is_timer_running)
        self.assertEqual(len(client.question_calls), 3)
        with self.assertRaises(InvalidTransitionError):
            session.submit_answer(on_topic_answer(1))

        snapshot = session.retry_question()
        self.assertIsNone(snapshot.question_error)
        self.assertEqual(snapshot.current_question.difficulty, "Easy")
        self.assertTrue(snapshot.is_timer_running)

        with self.assertRaises(InvalidTransitionError):
            session.retry_question()

    def test_reset_clears_everything(self):
        client = ScriptedAIClient(scores=[6, 6])
        session, candidate, store = make_session(client)
        session.start(candidate)
        session.submit_answer(on_topic_answer(1))
        snapshot = session.submit_answer(on_topic_answer(1))
        self.assertEqual(snapshot.individual_scores, [6, 1])
        self.assertEqual(len(client.evaluation_calls), 1)

        snapshot = session.reset()
        self.assertEqual(snapshot.status, "idle")
        self.assertEqual(snapshot.questions, [])
        self.assertEqual(snapshot.messages, [])
        self.assertEqual(len(session.memory.questions), 0)
        self.assertEqual(len(session.memory.used_answers), 0)
        self.assertFalse(snapshot.is_timer_running)

        second = store.add_candidate(Candidate(name="Grace Hopper", email="grace@example.com", phone="1"))
        session.start(second)
        snapshot = session.submit_answer(on_topic_answer(1))
        self.assertEqual(snapshot.individual_scores, [6])
        self.assertEqual(len(client.evaluation_calls), 2)

    def test_failed_time_up_submission_is_logged_not_raised(self):
        session, candidate, _ = make_session(ScriptedAIClient())
        session.start(candidate)
        with mock.patch.object(session, "_run_step", side_effect=RuntimeError("boom")):
            expired = [session.tick() for _ in range(20)]
        self.assertTrue(expired[-1])
        self.assertFalse(session.is_processing)
        self.assertFalse(session.timer.is_running)


class SlowEvaluationClient(ScriptedAIClient):
    def evaluate_answer(self, question, answer, difficulty):
        time.sleep(0.3)
        return super().evaluate_answer(question, answer, difficulty)


class TestCountdownTask(unittest.IsolatedAsyncioTestCase):
    async def wait_for_next_question(self, session, first, timeout=3.0):
        """Sleep in small steps until expiry has scheduled a new countdown task."""
        gaps = []
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            before = time.monotonic()
            await asyncio.sleep(0.01)
            gaps.append(time.monotonic() - before)
            if session.timer._task not in (None, first) and not session.is_processing:
                return gaps
        self.fail("countdown never moved to the next question")

    async def test_expiry_moves_to_next_question(self):
        session, candidate, _ = make_session(ScriptedAIClient())
        session.timer.interval = 0.01
        session.start(candidate)
        first = session.timer._task
        self.assertIsNotNone(first)

        await self.wait_for_next_question(session, first)
        session.timer.stop()
        await asyncio.wait([first], timeout=1)

        snapshot = session.snapshot()
        self.assertEqual(snapshot.answers[0], "No answer provided")
        self.assertGreaterEqual(snapshot.question_index, 1)
        self.assertIn("Time is up! Moving to the next question.", [m.content for m in snapshot.messages])
        # the expiring task finished on its own rather than being cancelled by the next start()
        self.assertTrue(first.done())
        self.assertFalse(first.cancelled())

    async def test_manual_submit_replaces_the_task(self):
        session, candidate, _ = make_session(ScriptedAIClient())
        session.timer.interval = 0.05
        session.start(candidate)
        first = session.timer._task

        session.submit_answer(on_topic_answer(1))
        second = session.timer._task
        self.assertIsNotNone(second)
        self.assertIsNot(first, second)

        await asyncio.sleep(0.01)
        self.assertTrue(first.cancelled())
        self.assertFalse(second.done())

        session.timer.stop()
        await asyncio.sleep(0.01)
        self.assertTrue(second.cancelled())
        self.assertIsNone(session.timer._task)

    async def test_event_loop_keeps_running_during_expiry(self):
        client = SlowEvaluationClient()
        session, candidate, _ = make_session(client)
        session.timer.interval = 0.01
        session.start(candidate)
        session.update_draft(on_topic_answer(1))
        first = session.timer._task

        gaps = await self.wait_for_next_question(session, first)
        session.timer.stop()

        self.assertEqual(len(client.evaluation_calls), 1)
        self.assertEqual(session.snapshot().answers[0], on_topic_answer(1))
        self.assertLess(max(gaps), 0.2)


class TestSessionManager(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryCandidateStore()
        self.manager = SessionManager(ai_client=ScriptedAIClient(), store=self.store, backoff_base=0)
        self.profile = CandidateProfileRequest(
            name="Alan Turing",
            email="alan@example.com",
            phone="+44 20 7946 0958",
            resume_text="Backend engineer",
        )

    def test_create_session_adds_candidate(self):
        snapshot = self.manager.create_session(self.profile)
        self.assertEqual(len(self.manager), 1)
        candidate = self.store.get_candidate(snapshot.candidate_id)
        self.assertEqual(candidate.name, "Alan Turing")
        self.assertEqual(candidate.status, "in-progress")

    def test_unknown_session(self):
        with self.assertRaises(SessionNotFoundError):
            self.manager.get_snapshot("missing")

    def test_restart_requires_reset(self):
        snapshot = self.manager.create_session(self.profile)
        with self.assertRaises(InvalidTransitionError):
            self.manager.restart_session(snapshot.session_id, self.profile)
        self.assertEqual(self.store.stats().total, 1)

        self.manager.reset_session(snapshot.session_id)
        restarted = self.manager.restart_session(snapshot.session_id, self.profile)
        self.assertEqual(restarted.status, "in-progress")
        self.assertNotEqual(restarted.candidate_id, snapshot.candidate_id)
        self.assertEqual(self.store.stats().total, 2)


if __name__ == "__main__":
    unittest.main()
