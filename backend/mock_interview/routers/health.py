from fastapi import APIRouter, Depends

from mock_interview.core.config import API_VERSION, get_ai_api_key
from mock_interview.domain.models import HealthResponse
from mock_interview.services.session_manager import SessionManager, get_session_manager

router = APIRouter(tags=["Health"])


@router.get(
    "/",
    tags=["Root"],
    summary="API root",
    description="API information and documentation links"
)
async def root():
    return {
        "message": "Mock Interview API",
        "version": API_VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/health"
    }


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the API is running and whether the AI key is configured"
)
async def health_check(manager: SessionManager = Depends(get_session_manager)) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=API_VERSION,
        ai_configured=bool(get_ai_api_key()),
        active_sessions=len(manager),
    )
