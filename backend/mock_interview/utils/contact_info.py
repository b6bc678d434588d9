"""
Best-effort contact details from résumé text.

Results only pre-fill the profile form; the candidate can correct every
field before the interview starts.
"""
import re
from typing import Dict


EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_PATTERN = re.compile(r"(\+\d{1,3}[\s-]?)?\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}")
NAME_PATTERN = re.compile(r"^([A-Z][a-z]+ [A-Z][a-z]+)", re.MULTILINE)
NAME_LINE_PATTERN = re.compile(r"^[A-Za-z\s]+$")

MAX_NAME_LINE_LENGTH = 50


def _first_match(pattern: re.Pattern, text: str) -> str:
    match = pattern.search(text)
    return match.group(0).strip() if match else ""


def _guess_name(text: str) -> str:
    match = NAME_PATTERN.search(text)
    if match:
        return match.group(1)

    # Fallback: a short, letters-only first line is usually the name header
    lines = [line.strip() for line in text.split("\n") if line.strip()]
    if lines:
        first_line = lines[0]
        if len(first_line) < MAX_NAME_LINE_LENGTH and NAME_LINE_PATTERN.match(first_line):
            return first_line
    return ""


def extract_contact_info(text: str) -> Dict[str, str]:
    """
    Extract name, email and phone from plain text.

    Each field comes from an independent pattern pass (first match wins);
    fields that cannot be found are returned as empty strings.

    Args:
        text: Plain text extracted from a résumé

    Returns:
        Dict with keys "name", "email" and "phone"
    """
    text = text or ""
    return {
        "name": _guess_name(text),
        "email": _first_match(EMAIL_PATTERN, text),
        "phone": _first_match(PHONE_PATTERN, text),
    }
