"""
Configuration for the mock interview backend.

Values are read from environment variables (loaded from `.env` by the app
entrypoint) with sensible defaults for local development. Interview
constants such as the question setting table are fixed for the process.
"""
import os
from dataclasses import dataclass
from typing import Optional, Tuple


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


# ==================== AI Completion API ====================

def get_ai_api_key() -> Optional[str]:
    """Return the completion API key (AI_API_KEY, falling back to OPENAI_API_KEY)."""
    return os.getenv("AI_API_KEY") or os.getenv("OPENAI_API_KEY")


AI_BASE_URL = os.getenv("AI_BASE_URL")  # Optional; any OpenAI-compatible endpoint
QUESTION_MODEL = os.getenv("QUESTION_MODEL", "gpt-4o-mini")
EVALUATION_MODEL = os.getenv("EVALUATION_MODEL", "gpt-4o-mini")

QUESTION_TEMPERATURE = 0.85
QUESTION_TOP_P = 0.95
QUESTION_MAX_TOKENS = 200

EVALUATION_TEMPERATURE = 0.05
EVALUATION_MAX_TOKENS = 350

QUESTION_RETRIES = int(os.getenv("QUESTION_RETRIES", "2"))
RETRY_BACKOFF_SECONDS = float(os.getenv("RETRY_BACKOFF_SECONDS", "0.6"))


# ==================== Interview Settings ====================

@dataclass(frozen=True)
class QuestionSetting:
    difficulty: str
    time_limit: int  # seconds


QUESTION_SETTINGS: Tuple[QuestionSetting, ...] = (
    QuestionSetting("Easy", 20),
    QuestionSetting("Easy", 20),
    QuestionSetting("Medium", 60),
    QuestionSetting("Medium", 60),
    QuestionSetting("Hard", 120),
    QuestionSetting("Hard", 120),
)

TOTAL_QUESTIONS = len(QUESTION_SETTINGS)
MAX_SCORE_PER_QUESTION = 10

STRONG_SCORE_THRESHOLD = 7  # score >= 7 counts as a strong area
WEAK_SCORE_THRESHOLD = 5    # score < 5 counts as an area for improvement

RESUME_CONTEXT_CHARS = 500
QUESTION_HISTORY_LIMIT = 20
QUESTION_EXCLUSION_COUNT = 10  # prior questions listed in the generation prompt

NO_ANSWER_PLACEHOLDER = "No answer provided"


# ==================== Uploads ====================

PDF_MIME_TYPE = "application/pdf"
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
ALLOWED_RESUME_MIME_TYPES = (PDF_MIME_TYPE, DOCX_MIME_TYPE)

MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "10"))
MAX_UPLOAD_BYTES = MAX_UPLOAD_MB * 1024 * 1024


# ==================== HTTP ====================

ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]

RATE_LIMIT_ENABLED = _env_bool("RATE_LIMIT_ENABLED", True)
RATE_LIMIT_UPLOADS = os.getenv("RATE_LIMIT_UPLOADS", "30/hour")
RATE_LIMIT_SESSIONS = os.getenv("RATE_LIMIT_SESSIONS", "10/hour")


API_VERSION = "1.0.0"
