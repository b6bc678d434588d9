"""
One candidate's interview pass.

`InterviewSession` wraps the compiled interview graph with everything the
graph does not own: the idle/ready/in-progress/completed status, the
countdown timer, the draft answer, the chat transcript and the
one-AI-call-at-a-time gate. When the graph reports completion the
candidate record is finalized in the store exactly once.
"""
import threading
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from mock_interview.core.config import NO_ANSWER_PLACEHOLDER, TOTAL_QUESTIONS
from mock_interview.core.llm_client import AICompletionClient
from mock_interview.core.session_memory import SessionMemory
from mock_interview.core.state_transitions import (
    InterviewStatus,
    InvalidTransitionError,
    initial_status,
    transition,
)
from mock_interview.domain.models import (
    Candidate,
    ChatMessage,
    QuestionRecord,
    SessionResponse,
)
from mock_interview.graph.interview_graph import compile_interview_graph, initial_graph_state
from mock_interview.services.candidate_store import CandidateStore
from mock_interview.services.timer import QuestionTimer
from mock_interview.utils.logger import setup_logger

logger = setup_logger("interview_session")


class SessionBusyError(RuntimeError):
    """Raised when an answer arrives while an AI call is still in flight."""


class InterviewSession:
    def __init__(
        self,
        ai_client: AICompletionClient,
        store: CandidateStore,
        session_id: Optional[str] = None,
        retries: Optional[int] = None,
        backoff_base: Optional[float] = None
    ) -> None:
        self.session_id = session_id or str(uuid.uuid4())
        self.ai_client = ai_client
        self.store = store
        self.retries = retries
        self.backoff_base = backoff_base

        self.status = initial_status()
        self.candidate_id: Optional[str] = None
        self.candidate_name = ""
        self.memory = SessionMemory()
        self.timer = QuestionTimer(on_expire=self.handle_time_up)
        self.graph = None
        self.is_processing = False
        self.draft = ""
        self.messages: List[ChatMessage] = []

        self._finalized = False
        self._lock = threading.Lock()

    # ==================== Lifecycle ====================

    def start(self, candidate: Candidate) -> SessionResponse:
        """
        Begin an interview pass for `candidate` (idle → ready → in-progress).

        Raises:
            InvalidTransitionError: If the session is not idle
        """
        self.status = transition(self.status, InterviewStatus.READY)
        self._clear()
        self.candidate_id = candidate.id
        self.candidate_name = candidate.name
        self._update_candidate(status="ready")

        self.graph = compile_interview_graph(
            self.ai_client,
            self.memory,
            retries=self.retries,
            backoff_base=self.backoff_base,
        )

        self.status = transition(self.status, InterviewStatus.IN_PROGRESS)
        self._update_candidate(status="in-progress")
        logger.info(f"[SESSION] {self.session_id} started for candidate {candidate.id}")

        self._add_message(
            "bot",
            f"Hello {candidate.name}! Welcome to your Full Stack Developer interview. "
            f"You'll be asked {TOTAL_QUESTIONS} questions with different difficulty levels. "
            "Your final results will be available at the end. Let's begin!"
        )

        self._run_step(initial_graph_state(self.session_id, candidate.resume_text))
        return self.snapshot()

    def reset(self) -> SessionResponse:
        """Return to idle from any state, discarding the current pass."""
        self.status = transition(self.status, InterviewStatus.IDLE)
        self._clear()
        self.candidate_id = None
        self.candidate_name = ""
        logger.info(f"[SESSION] {self.session_id} reset")
        return self.snapshot()

    def _clear(self) -> None:
        self.timer.stop()
        self.timer.remaining = 0
        self.memory.clear()
        self.graph = None
        self.is_processing = False
        self.draft = ""
        self.messages = []
        self._finalized = False

    # ==================== Answers ====================

    def update_draft(self, text: str) -> None:
        """Store the answer the candidate is still typing."""
        self.draft = text or ""

    def submit_answer(self, text: Optional[str] = None) -> SessionResponse:
        """
        Submit an answer for the pending question.

        The answer is `text` if it has content, else the current draft, else
        the "No answer provided" placeholder.

        Raises:
            InvalidTransitionError: If no question is waiting for an answer
            SessionBusyError: If a previous answer is still being processed
        """
        self._begin_processing()
        try:
            if self.status != InterviewStatus.IN_PROGRESS or self.current_question() is None:
                raise InvalidTransitionError("No question is waiting for an answer")

            self.timer.stop()
            answer = (text or "").strip() or self.draft.strip() or NO_ANSWER_PLACEHOLDER
            self.draft = ""
            self._add_message("user", answer)

            index = self._values().get("question_index", 0)
            closing = (
                "Let's move to the next question."
                if index < TOTAL_QUESTIONS - 1
                else "That's the final question!"
            )
            self._add_message("bot", f"Thank you for your answer. {closing}")

            self._run_step({"pending_answer": answer})
        finally:
            self.is_processing = False
        return self.snapshot()

    def handle_time_up(self) -> None:
        """Timer expiry: same path as submitting the draft (or no answer)."""
        if self.status != InterviewStatus.IN_PROGRESS or self.current_question() is None:
            return
        self._add_message("bot", "Time is up! Moving to the next question.")
        try:
            self.submit_answer(None)
        except (SessionBusyError, InvalidTransitionError) as e:
            logger.warning(f"[SESSION] {self.session_id} time-up ignored: {e}")
        except Exception as e:
            logger.error(f"[SESSION] {self.session_id} time-up submission failed: {e}")

    def tick(self) -> bool:
        """One-second timer step; returns True if the question timed out."""
        return self.timer.tick()

    def retry_question(self) -> SessionResponse:
        """
        Ask again for the question that failed to generate.

        Raises:
            InvalidTransitionError: If there is no failed question to retry
            SessionBusyError: If an AI call is already in flight
        """
        self._begin_processing()
        try:
            if self.status != InterviewStatus.IN_PROGRESS or not self._values().get("question_error"):
                raise InvalidTransitionError("There is no failed question to retry")
            logger.info(f"[SESSION] {self.session_id} retrying question generation")
            self._run_step({"pending_answer": None})
        finally:
            self.is_processing = False
        return self.snapshot()

    # ==================== Graph ====================

    def _config(self) -> Dict[str, Any]:
        return {"configurable": {"thread_id": self.session_id}}

    def _values(self) -> Dict[str, Any]:
        if self.graph is None:
            return {}
        return self.graph.get_state(self._config()).values or {}

    def _run_step(self, input_state: Dict[str, Any]) -> None:
        """Invoke the graph once and react to what it produced."""
        values = self.graph.invoke(input_state, config=self._config())

        if values.get("status") == "completed":
            self._complete(values)
            return

        if values.get("question_error"):
            self._add_message("bot", values["question_error"])
            return

        question = self.current_question(values)
        if question is not None:
            index = values.get("question_index", 0)
            self._add_message("bot", f"Question {index + 1}/{TOTAL_QUESTIONS}: {question.question}")
            self.timer.start(question.time_limit)

    def _complete(self, values: Dict[str, Any]) -> None:
        self.timer.stop()
        self.status = transition(self.status, InterviewStatus.COMPLETED)

        self._add_message(
            "bot",
            "Congratulations! You have completed the interview. Calculating your final results..."
        )
        self._add_message(
            "bot",
            f"Your final score is {values['final_score']}/100. You can view detailed results "
            "in the Interviewer Dashboard. Thank you for your time!"
        )

        if self._finalized:
            return
        self._finalized = True
        self._update_candidate(
            status="completed",
            score=values["final_score"],
            summary=values["summary"],
            questions=[q["question"] for q in values.get("questions", [])],
            answers=list(values.get("answers", [])),
            individual_scores=list(values.get("scores", [])),
            completed_at=datetime.utcnow(),
        )

    # ==================== Helpers ====================

    def _begin_processing(self) -> None:
        with self._lock:
            if self.is_processing:
                raise SessionBusyError("An answer is already being processed")
            self.is_processing = True

    def _add_message(self, role: str, content: str) -> None:
        self.messages.append(ChatMessage(role=role, content=content))

    def _update_candidate(self, **changes: Any) -> None:
        if self.candidate_id is not None:
            self.store.update_candidate(self.candidate_id, **changes)

    def current_question(self, values: Optional[Dict[str, Any]] = None) -> Optional[QuestionRecord]:
        """The question waiting for an answer, if any."""
        if values is None:
            values = self._values()
        if values.get("status") == "completed":
            return None
        index = values.get("question_index", 0)
        questions = values.get("questions", [])
        if index < len(questions):
            return QuestionRecord(**questions[index])
        return None

    def snapshot(self) -> SessionResponse:
        """Read-only projection of the session for the API."""
        values = self._values()
        return SessionResponse(
            session_id=self.session_id,
            candidate_id=self.candidate_id,
            status=self.status.value,
            question_index=values.get("question_index", 0),
            total_questions=TOTAL_QUESTIONS,
            current_question=self.current_question(values),
            timer=self.timer.remaining,
            is_timer_running=self.timer.is_running,
            is_processing=self.is_processing,
            question_error=values.get("question_error"),
            questions=[QuestionRecord(**q) for q in values.get("questions", [])],
            answers=list(values.get("answers", [])),
            individual_scores=list(values.get("scores", [])),
            feedback=list(values.get("feedback", [])),
            final_score=values.get("final_score"),
            summary=values.get("summary"),
            messages=list(self.messages),
        )
