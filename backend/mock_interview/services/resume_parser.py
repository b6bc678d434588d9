"""
Résumé upload handling.

Validates uploads before anything is parsed, extracts plain text from PDF
(pypdf) and DOCX (python-docx) files, and pairs the text with the contact
details found in it. Extraction problems never raise: the candidate still
gets a profile form, pre-filled with whatever could be read.
"""
import io
from typing import Dict, Optional

from docx import Document
from pypdf import PdfReader

from mock_interview.core.config import (
    ALLOWED_RESUME_MIME_TYPES,
    DOCX_MIME_TYPE,
    MAX_UPLOAD_BYTES,
    MAX_UPLOAD_MB,
    PDF_MIME_TYPE,
)
from mock_interview.utils.contact_info import extract_contact_info
from mock_interview.utils.logger import setup_logger

logger = setup_logger("resume_parser")

PDF_ERROR_TEXT = "Error parsing PDF content."
DOCX_ERROR_TEXT = "Error parsing DOCX content."


class UploadValidationError(ValueError):
    """Raised when an upload is rejected before parsing.

    `status_code` is the HTTP status the API should answer with.
    """

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


# ==================== Validation ====================

def validate_upload(filename: Optional[str], mime_type: Optional[str], size: int) -> None:
    """
    Reject unsupported or oversized résumé uploads.

    Args:
        filename: Original file name (only used in log messages)
        mime_type: Declared content type of the upload
        size: Size of the upload in bytes

    Raises:
        UploadValidationError: 400 for a missing/unsupported type or an empty
            file, 413 when the file exceeds the size cap
    """
    if mime_type not in ALLOWED_RESUME_MIME_TYPES:
        logger.warning(f"[UPLOAD] Rejected {filename!r}: unsupported type {mime_type!r}")
        raise UploadValidationError("Invalid file type. Please upload PDF or DOCX.", 400)

    if size <= 0:
        logger.warning(f"[UPLOAD] Rejected {filename!r}: empty file")
        raise UploadValidationError("No file uploaded.", 400)

    if size > MAX_UPLOAD_BYTES:
        logger.warning(f"[UPLOAD] Rejected {filename!r}: {size} bytes")
        raise UploadValidationError(f"File too large. Maximum size is {MAX_UPLOAD_MB} MB.", 413)


# ==================== Extraction ====================

def _extract_pdf_text(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    return "\n".join((page.extract_text() or "") for page in reader.pages)


def _extract_docx_text(data: bytes) -> str:
    document = Document(io.BytesIO(data))
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def extract_text(data: bytes, mime_type: str) -> str:
    """
    Extract plain text from a PDF or DOCX résumé.

    Args:
        data: Raw file bytes
        mime_type: PDF or DOCX content type

    Returns:
        Extracted text, or a fixed error sentence when the file cannot be read
    """
    if mime_type == PDF_MIME_TYPE:
        try:
            return _extract_pdf_text(data)
        except Exception as e:  # pypdf raises a wide range of errors on bad input
            logger.error(f"[UPLOAD] PDF extraction failed: {e}")
            return PDF_ERROR_TEXT

    if mime_type == DOCX_MIME_TYPE:
        try:
            return _extract_docx_text(data)
        except Exception as e:
            logger.error(f"[UPLOAD] DOCX extraction failed: {e}")
            return DOCX_ERROR_TEXT

    raise UploadValidationError("Invalid file type. Please upload PDF or DOCX.", 400)


def parse_resume(data: bytes, mime_type: str) -> Dict[str, str]:
    """Extract text and contact details; returns {name, email, phone, text}."""
    text = extract_text(data, mime_type)
    contact = extract_contact_info(text)
    logger.info(
        f"[UPLOAD] Parsed résumé: {len(text)} chars, "
        f"name={'yes' if contact['name'] else 'no'}, "
        f"email={'yes' if contact['email'] else 'no'}, "
        f"phone={'yes' if contact['phone'] else 'no'}"
    )
    return {**contact, "text": text}
