"""
Question generation for the interview.

Requests one question per call from the AI client, cleans the model's
output and remembers it in the session's question memory so later prompts
steer away from repeats. Failed calls are retried with exponential
back-off; when every attempt fails a `QuestionGenerationError` is raised
so the caller can notify the candidate and offer a retry.
"""
import re
import time
from typing import Optional

from mock_interview.core.config import (
    RESUME_CONTEXT_CHARS,
    QUESTION_EXCLUSION_COUNT,
    QUESTION_RETRIES,
    RETRY_BACKOFF_SECONDS,
)
from mock_interview.core.llm_client import AICompletionClient
from mock_interview.core.session_memory import SessionMemory
from mock_interview.utils.logger import setup_logger

logger = setup_logger("question_generation")

# "Question 3:", "Q:", "Q2)", "Question 4 " but not words that merely start with Q
QUESTION_PREFIX_PATTERN = re.compile(
    r"^(?:(?:Question|Q)\s*\d*\s*[:.\-)]+|(?:Question|Q)\s*\d+)\s*",
    re.IGNORECASE,
)


class QuestionGenerationError(RuntimeError):
    """Raised when no question could be generated after all retries."""


def clean_question_text(raw_text: str) -> str:
    """Strip leading "Question N:" / "Q:" prefixes and surrounding whitespace."""
    text = (raw_text or "").strip()
    return QUESTION_PREFIX_PATTERN.sub("", text, count=1).strip()


def generate_question(
    client: AICompletionClient,
    difficulty: str,
    resume_text: str,
    memory: SessionMemory,
    retries: Optional[int] = None,
    backoff_base: Optional[float] = None
) -> str:
    """
    Generate one interview question.

    Args:
        client: AI completion client
        difficulty: Easy, Medium or Hard
        resume_text: Candidate résumé text (only the first 500 chars are sent)
        memory: Session-scoped memory of previous questions
        retries: Extra attempts after the first failure (default from config)
        backoff_base: Base seconds for exponential back-off (default from config)

    Returns:
        Cleaned question text

    Raises:
        QuestionGenerationError: If every attempt failed or returned nothing usable
    """
    if retries is None:
        retries = QUESTION_RETRIES
    if backoff_base is None:
        backoff_base = RETRY_BACKOFF_SECONDS

    resume_context = (resume_text or "")[:RESUME_CONTEXT_CHARS]
    previous_questions = memory.questions.recent(QUESTION_EXCLUSION_COUNT)

    attempt = 0
    last_error: Optional[Exception] = None

    while attempt <= retries:
        try:
            raw = client.generate_question(difficulty, resume_context, previous_questions)
            question = clean_question_text(raw)
            if not question:
                raise ValueError("Model returned an empty question")

            memory.questions.add(question)
            logger.info(f"[QUESTION] Generated {difficulty} question (attempt {attempt + 1})")
            return question
        except Exception as e:  # Any vendor/SDK error counts as a failed attempt
            last_error = e
            logger.warning(f"[QUESTION] Attempt {attempt + 1}/{retries + 1} failed: {e}")
            if attempt == retries:
                break
            time.sleep(backoff_base * (2 ** attempt))
            attempt += 1

    logger.error(f"[QUESTION] Giving up after {retries + 1} attempts: {last_error}")
    raise QuestionGenerationError(
        f"Question generation failed after {retries + 1} attempts: {last_error}"
    )
