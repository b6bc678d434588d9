"""
Pydantic schemas for the mock interview API.

Defines the Candidate record kept in the candidate store and the
request/response models used by the routers.
"""
from typing import List, Literal, Optional
from uuid import uuid4
from pydantic import BaseModel, Field, field_validator
from datetime import datetime

from mock_interview.security.validators import sanitize_text


CandidateStatus = Literal["pending", "ready", "in-progress", "completed"]
SessionStatus = Literal["idle", "ready", "in-progress", "completed"]


# ==================== Domain ====================

class Candidate(BaseModel):
    """One person's interview attempt and, once completed, its results."""

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Opaque unique candidate identifier"
    )

    name: str = Field(default="", description="Candidate name")
    email: str = Field(default="", description="Candidate email")
    phone: str = Field(default="", description="Candidate phone number")
    resume_text: str = Field(default="", description="Plain text extracted from the résumé")

    status: CandidateStatus = Field(
        default="pending",
        description="pending, ready, in-progress or completed"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the candidate record was created"
    )

    score: Optional[int] = Field(
        None,
        ge=0,
        le=100,
        description="Final score (0-100), set once the interview completes"
    )

    summary: Optional[str] = Field(None, description="One-line result summary")

    questions: List[str] = Field(default_factory=list, description="Asked questions, in order")
    answers: List[str] = Field(default_factory=list, description="Given answers, in order")
    individual_scores: List[float] = Field(
        default_factory=list,
        description="Per-question scores (0-10), in order"
    )

    completed_at: Optional[datetime] = Field(None, description="When the interview completed")


# ==================== Request Schemas ====================

class CandidateProfileRequest(BaseModel):
    """Profile form submitted before the interview starts.

    Fields are usually pre-filled from the parsed résumé and corrected by the candidate.
    """

    name: str = Field(
        ...,
        description="Candidate name",
        min_length=1,
        max_length=200,
        examples=["Jane Smith"]
    )

    email: str = Field(
        ...,
        description="Candidate email",
        min_length=3,
        max_length=320,
        examples=["jane.smith@example.com"]
    )

    phone: str = Field(
        ...,
        description="Candidate phone number",
        min_length=1,
        max_length=50,
        examples=["+1 555-123-4567"]
    )

    resume_text: str = Field(
        default="",
        description="Résumé text returned by the parse endpoint",
        max_length=200_000
    )

    @field_validator("name", "email", "phone", "resume_text")
    @classmethod
    def _sanitize(cls, value: str) -> str:
        return sanitize_text(value).strip()


class AnswerRequest(BaseModel):
    """Answer submission (or draft update) for the pending question."""

    answer: str = Field(
        default="",
        description="Candidate's answer; empty means no answer",
        max_length=5000,
        examples=["useEffect runs after render and can return a cleanup function..."]
    )

    @field_validator("answer")
    @classmethod
    def _sanitize(cls, value: str) -> str:
        return sanitize_text(value)


# ==================== Response Schemas ====================

class ParsedResumeResponse(BaseModel):
    """Text and advisory contact details extracted from an uploaded résumé."""

    name: str = Field(default="", description="Best-guess candidate name")
    email: str = Field(default="", description="First email address found")
    phone: str = Field(default="", description="First phone number found")
    text: str = Field(default="", description="Extracted plain text")


class ChatMessage(BaseModel):
    """Individual message in the interview transcript."""

    role: Literal["bot", "user"] = Field(..., description="Message sender")
    content: str = Field(..., description="Message content")
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the message was created"
    )


class QuestionRecord(BaseModel):
    """A generated question tagged with its question setting."""

    question: str = Field(..., description="Question text")
    difficulty: str = Field(..., description="Easy, Medium or Hard")
    time_limit: int = Field(..., description="Seconds allowed to answer")


class SessionResponse(BaseModel):
    """Snapshot of an interview session."""

    session_id: str = Field(..., description="Unique session identifier (UUID)")
    candidate_id: Optional[str] = Field(None, description="Candidate being interviewed")
    status: SessionStatus = Field(..., description="idle, ready, in-progress or completed")

    question_index: int = Field(default=0, description="Index of the current question (0-6)")
    total_questions: int = Field(..., description="Fixed number of questions")
    current_question: Optional[QuestionRecord] = Field(
        None,
        description="Question awaiting an answer, if any"
    )

    timer: int = Field(default=0, description="Seconds remaining for the current question")
    is_timer_running: bool = Field(default=False, description="Whether the countdown is active")
    is_processing: bool = Field(
        default=False,
        description="Whether an AI call is in flight (answer submission is disabled)"
    )
    question_error: Optional[str] = Field(
        None,
        description="Set when question generation failed; retry via /retry-question"
    )

    questions: List[QuestionRecord] = Field(default_factory=list, description="Questions asked so far")
    answers: List[str] = Field(default_factory=list, description="Answers given so far")
    individual_scores: List[float] = Field(default_factory=list, description="Per-question scores")
    feedback: List[str] = Field(default_factory=list, description="Per-question evaluation feedback")

    final_score: Optional[int] = Field(None, description="Final score (0-100) once completed")
    summary: Optional[str] = Field(None, description="Result summary once completed")

    messages: List[ChatMessage] = Field(default_factory=list, description="Interview transcript")


class DashboardStats(BaseModel):
    total: int = 0
    pending: int = 0
    ready: int = 0
    in_progress: int = 0
    completed: int = 0


class CandidateListResponse(BaseModel):
    """Dashboard listing: candidates ranked by score plus status counts."""

    candidates: List[Candidate] = Field(default_factory=list, description="Ranked candidates")
    total: int = Field(..., description="Number of candidates matching the filters")
    stats: DashboardStats = Field(..., description="Counts over all candidates by status")


class HealthResponse(BaseModel):
    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")
    ai_configured: bool = Field(..., description="Whether an AI API key is configured")
    active_sessions: int = Field(default=0, description="Interview sessions held in memory")


# ==================== Error Schemas ====================

class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")


