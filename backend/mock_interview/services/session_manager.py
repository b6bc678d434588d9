"""
Session manager for in-memory interview sessions.

Each session wraps its own compiled LangGraph graph, session memory and
timer. Candidates created here are written to the candidate store so the
dashboard sees them as soon as the interview starts.
"""
from typing import Dict, Optional

from mock_interview.core.llm_client import AICompletionClient, get_ai_client
from mock_interview.core.state_transitions import InterviewStatus, InvalidTransitionError
from mock_interview.domain.models import Candidate, CandidateProfileRequest, SessionResponse
from mock_interview.services.candidate_store import CandidateStore, get_candidate_store
from mock_interview.services.interview_session import InterviewSession
from mock_interview.utils.logger import setup_logger

logger = setup_logger("session_manager")


class SessionNotFoundError(ValueError):
    """Raised when a session id is unknown."""


# ==================== In-Memory Storage ====================

class SessionManager:
    """
    Manages interview sessions in memory.

    Sessions are never evicted; they live as long as the process.
    """

    def __init__(
        self,
        ai_client: Optional[AICompletionClient] = None,
        store: Optional[CandidateStore] = None,
        retries: Optional[int] = None,
        backoff_base: Optional[float] = None
    ) -> None:
        self._ai_client = ai_client
        self._store = store
        self.retries = retries
        self.backoff_base = backoff_base
        self._sessions: Dict[str, InterviewSession] = {}

    @property
    def ai_client(self) -> AICompletionClient:
        if self._ai_client is None:
            self._ai_client = get_ai_client()
        return self._ai_client

    @property
    def store(self) -> CandidateStore:
        if self._store is None:
            self._store = get_candidate_store()
        return self._store

    def __len__(self) -> int:
        return len(self._sessions)

    def create_session(self, profile: CandidateProfileRequest) -> SessionResponse:
        """
        Create a candidate from the profile form and start their interview.

        Args:
            profile: Confirmed name, email, phone and résumé text

        Returns:
            Snapshot with the welcome message and the first question
        """
        session = InterviewSession(
            self.ai_client,
            self.store,
            retries=self.retries,
            backoff_base=self.backoff_base,
        )
        self._sessions[session.session_id] = session
        logger.info(f"[SESSIONS] Created session {session.session_id}")
        return self._start(session, profile)

    def get_session(self, session_id: str) -> InterviewSession:
        """
        Raises:
            SessionNotFoundError: If the session does not exist
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return session

    def get_snapshot(self, session_id: str) -> SessionResponse:
        return self.get_session(session_id).snapshot()

    def update_draft(self, session_id: str, text: str) -> SessionResponse:
        session = self.get_session(session_id)
        session.update_draft(text)
        return session.snapshot()

    def submit_answer(self, session_id: str, answer: Optional[str]) -> SessionResponse:
        return self.get_session(session_id).submit_answer(answer)

    def retry_question(self, session_id: str) -> SessionResponse:
        return self.get_session(session_id).retry_question()

    def reset_session(self, session_id: str) -> SessionResponse:
        return self.get_session(session_id).reset()

    def restart_session(self, session_id: str, profile: CandidateProfileRequest) -> SessionResponse:
        """Start a new pass (new candidate record) on an idle session."""
        return self._start(self.get_session(session_id), profile)

    def _start(self, session: InterviewSession, profile: CandidateProfileRequest) -> SessionResponse:
        # checked before the candidate record is created
        if session.status != InterviewStatus.IDLE:
            raise InvalidTransitionError("Reset the session before starting a new interview")
        candidate = self.store.add_candidate(
            Candidate(
                name=profile.name,
                email=profile.email,
                phone=profile.phone,
                resume_text=profile.resume_text,
            )
        )
        return session.start(candidate)


# ==================== Global Instance ====================

_session_manager: Optional[SessionManager] = None


def get_session_manager() -> SessionManager:
    """Get the global session manager instance."""
    global _session_manager
    if _session_manager is None:
        _session_manager = SessionManager()
    return _session_manager
