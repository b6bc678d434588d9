"""
FastAPI router for the interviewer dashboard.

Read-only: candidates are created and updated by interview sessions.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from mock_interview.domain.models import Candidate, CandidateListResponse
from mock_interview.services.candidate_store import CandidateStore, get_candidate_store


router = APIRouter(
    prefix="/api/candidates",
    tags=["Candidates"]
)


@router.get(
    "",
    response_model=CandidateListResponse,
    summary="List candidates",
    description="Candidates ranked by score (unscored last), filtered by name/email search and status."
)
async def list_candidates(
    search: Optional[str] = Query(None, description="Case-insensitive match on name or email"),
    status_filter: Optional[str] = Query(
        None,
        alias="status",
        description="pending, ready, in-progress, completed or all"
    ),
    store: CandidateStore = Depends(get_candidate_store),
) -> CandidateListResponse:
    candidates = store.list_candidates(search=search, status=status_filter)
    return CandidateListResponse(
        candidates=candidates,
        total=len(candidates),
        stats=store.stats(),
    )


@router.get(
    "/{candidate_id}",
    response_model=Candidate,
    summary="Get candidate",
    description="Full candidate record including questions, answers and per-question scores."
)
async def get_candidate(
    candidate_id: str,
    store: CandidateStore = Depends(get_candidate_store),
) -> Candidate:
    candidate = store.get_candidate(candidate_id)
    if candidate is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Candidate {candidate_id} not found"
        )
    return candidate
