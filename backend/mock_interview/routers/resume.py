"""
FastAPI router for résumé uploads.

Accepts a PDF or DOCX file, extracts its text and returns the contact
details found in it so the client can pre-fill the profile form.
"""
from fastapi import APIRouter, File, Request, UploadFile, status
from fastapi.responses import JSONResponse

from mock_interview.domain.models import ErrorResponse, ParsedResumeResponse
from mock_interview.security.rate_limit import UPLOAD_LIMIT, limiter
from mock_interview.services.resume_parser import (
    UploadValidationError,
    parse_resume,
    validate_upload,
)


# ==================== Router Setup ====================

router = APIRouter(
    prefix="/api/resume",
    tags=["Resume"]
)


# ==================== Endpoints ====================

@router.post(
    "/parse",
    response_model=ParsedResumeResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_413_REQUEST_ENTITY_TOO_LARGE: {"model": ErrorResponse},
    },
    summary="Parse résumé",
    description="Upload a PDF or DOCX résumé (max 10 MB). Returns extracted text, name, email and phone."
)
@limiter.limit(UPLOAD_LIMIT)
async def parse_resume_upload(request: Request, file: UploadFile = File(...)):
    """
    Parse an uploaded résumé.

    Validation happens before any parsing; unreadable files still return
    200 with a placeholder text so the candidate can fill the form by hand.
    """
    data = await file.read()

    try:
        validate_upload(file.filename, file.content_type, len(data))
    except UploadValidationError as e:
        return JSONResponse(status_code=e.status_code, content={"error": str(e)})

    parsed = parse_resume(data, file.content_type)
    return ParsedResumeResponse(**parsed)
