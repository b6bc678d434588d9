"""
FastAPI router for interview sessions.

Endpoints for starting an interview from a confirmed profile, answering
questions, retrying a failed question, and resetting or restarting a
session. Every endpoint returns the session snapshot.
"""
from fastapi import APIRouter, Depends, HTTPException, Request, status

from mock_interview.core.state_transitions import InvalidTransitionError
from mock_interview.domain.models import (
    AnswerRequest,
    CandidateProfileRequest,
    SessionResponse,
)
from mock_interview.security.rate_limit import SESSION_LIMIT, limiter
from mock_interview.services.interview_session import SessionBusyError
from mock_interview.services.session_manager import (
    SessionManager,
    SessionNotFoundError,
    get_session_manager,
)
from mock_interview.utils.logger import setup_logger

logger = setup_logger("routers.interviews")


# ==================== Router Setup ====================

router = APIRouter(
    prefix="/api/interviews",
    tags=["Interviews"]
)


def _http_error(e: Exception, action: str) -> HTTPException:
    if isinstance(e, SessionNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, (InvalidTransitionError, SessionBusyError)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    logger.error(f"[API] Failed to {action}: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}: {str(e)}"
    )


# ==================== Endpoints ====================

@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start interview",
    description="Create a candidate from the confirmed profile and start a 6-question interview. Returns the welcome message and first question."
)
@limiter.limit(SESSION_LIMIT)
async def create_interview(
    request: Request,
    profile: CandidateProfileRequest,
    manager: SessionManager = Depends(get_session_manager),
) -> SessionResponse:
    try:
        return manager.create_session(profile)
    except Exception as e:
        raise _http_error(e, "create interview")


@router.get(
    "/{session_id}",
    response_model=SessionResponse,
    summary="Get interview",
    description="Current question, timer, progress, scores and transcript of a session."
)
async def get_interview(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
) -> SessionResponse:
    try:
        return manager.get_snapshot(session_id)
    except Exception as e:
        raise _http_error(e, "load interview")


@router.put(
    "/{session_id}/draft",
    response_model=SessionResponse,
    summary="Save draft answer",
    description="Store the answer being typed; it is submitted automatically if the timer runs out."
)
async def update_draft(
    session_id: str,
    request: AnswerRequest,
    manager: SessionManager = Depends(get_session_manager),
) -> SessionResponse:
    try:
        return manager.update_draft(session_id, request.answer)
    except Exception as e:
        raise _http_error(e, "save draft")


@router.post(
    "/{session_id}/answer",
    response_model=SessionResponse,
    summary="Submit answer",
    description="Submit an answer (possibly empty) for the pending question. Returns the next question or the final results."
)
async def submit_answer(
    session_id: str,
    request: AnswerRequest,
    manager: SessionManager = Depends(get_session_manager),
) -> SessionResponse:
    try:
        return manager.submit_answer(session_id, request.answer)
    except Exception as e:
        raise _http_error(e, "submit answer")


@router.post(
    "/{session_id}/retry-question",
    response_model=SessionResponse,
    summary="Retry question",
    description="Request the current question again after question generation failed."
)
async def retry_question(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
) -> SessionResponse:
    try:
        return manager.retry_question(session_id)
    except Exception as e:
        raise _http_error(e, "retry question")


@router.post(
    "/{session_id}/reset",
    response_model=SessionResponse,
    summary="Reset interview",
    description="Discard the current pass and return the session to idle."
)
async def reset_interview(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
) -> SessionResponse:
    try:
        return manager.reset_session(session_id)
    except Exception as e:
        raise _http_error(e, "reset interview")


@router.post(
    "/{session_id}/start",
    response_model=SessionResponse,
    summary="Start new pass",
    description="Start a new interview (new candidate record) on an idle session."
)
@limiter.limit(SESSION_LIMIT)
async def restart_interview(
    request: Request,
    session_id: str,
    profile: CandidateProfileRequest,
    manager: SessionManager = Depends(get_session_manager),
) -> SessionResponse:
    try:
        return manager.restart_session(session_id, profile)
    except Exception as e:
        raise _http_error(e, "start interview")
