"""
Answer evaluation pipeline.

Cheap heuristics run first and short-circuit obvious cases (no answer,
gibberish, repeated answers, off-topic answers); only the remaining answers
are sent to the AI client for rubric scoring. If the AI call fails or its
output cannot be parsed, a deterministic length-based score is used so the
interview always progresses.

Every step returns a dict with:
- score: 0-10
- feedback: short explanation shown to the interviewer
- source: which step produced the score
"""
import math
import re
from typing import Any, Dict, List

from mock_interview.core.config import NO_ANSWER_PLACEHOLDER, MAX_SCORE_PER_QUESTION
from mock_interview.core.llm_client import AICompletionClient
from mock_interview.core.session_memory import SessionMemory
from mock_interview.utils.json_utils import extract_json_object
from mock_interview.utils.logger import setup_logger

logger = setup_logger("answer_evaluation")

REPEATED_CHAR_PATTERN = re.compile(r"^(.)\1{4,}$")
NO_VOWEL_RUN_PATTERN = re.compile(r"^[^aeiouAEIOU\s]{10,}$")
WHITESPACE_PATTERN = re.compile(r"\s")
NON_ALPHANUMERIC_PATTERN = re.compile(r"[^a-z0-9]")

DUPLICATE_MIN_LENGTH = 30
GIBBERISH_MAX_UNBROKEN_LENGTH = 30
SIGNIFICANT_WORD_MIN_LENGTH = 4  # words longer than 3 characters

FALLBACK_MAX_SCORE = 8
FALLBACK_CHARS_PER_POINT = 50


def _result(score: float, feedback: str, source: str) -> Dict[str, Any]:
    return {"score": score, "feedback": feedback, "source": source}


# ==================== Heuristics ====================

def is_empty_answer(answer: str) -> bool:
    text = (answer or "").strip()
    return not text or text.lower() == NO_ANSWER_PLACEHOLDER.lower()


def is_gibberish(answer: str) -> bool:
    """Detect keyboard mashing and other non-meaningful input."""
    text = (answer or "").strip()
    return bool(
        REPEATED_CHAR_PATTERN.match(text)
        or NO_VOWEL_RUN_PATTERN.match(text)
        or (len(text) > GIBBERISH_MAX_UNBROKEN_LENGTH and not WHITESPACE_PATTERN.search(text))
    )


def normalize_answer(answer: str) -> str:
    """Lowercase and drop everything except ASCII letters and digits."""
    return NON_ALPHANUMERIC_PATTERN.sub("", (answer or "").lower())


def check_duplicate(answer: str, memory: SessionMemory) -> bool:
    """Return True if this answer was already given in the session.

    Long answers that are not duplicates are recorded so a later repeat is caught.
    """
    key = normalize_answer(answer)
    if len(key) <= DUPLICATE_MIN_LENGTH:
        return False
    if key in memory.used_answers:
        return True
    memory.used_answers.add(key)
    return False


def significant_words(question: str) -> List[str]:
    return [w for w in (question or "").lower().split() if len(w) >= SIGNIFICANT_WORD_MIN_LENGTH]


def is_off_topic(question: str, answer: str) -> bool:
    """True when the question has significant words and none of them appear in the answer."""
    words = significant_words(question)
    if not words:
        return False
    lowered = (answer or "").lower()
    return not any(word in lowered for word in words)


def fallback_score(answer: str) -> int:
    """Deterministic score used when the AI evaluation is unavailable."""
    length = len((answer or "").strip())
    return min(FALLBACK_MAX_SCORE, math.floor(length / FALLBACK_CHARS_PER_POINT))


def clamp_score(value: Any) -> float:
    """Coerce a model-provided score to a number within [0, 10]."""
    try:
        score = float(value)
    except (TypeError, ValueError):
        score = 0.0
    if math.isnan(score):
        score = 0.0
    score = max(0.0, min(float(MAX_SCORE_PER_QUESTION), score))
    return int(score) if score.is_integer() else score


# ==================== Pipeline ====================

def evaluate_answer(
    client: AICompletionClient,
    question: str,
    answer: str,
    difficulty: str,
    memory: SessionMemory
) -> Dict[str, Any]:
    """
    Score a candidate's answer.

    Args:
        client: AI completion client used for ambiguous answers
        question: Question text the answer responds to
        answer: Candidate's answer (may be the "No answer provided" placeholder)
        difficulty: Easy, Medium or Hard
        memory: Session-scoped memory holding previously used answers

    Returns:
        Evaluation dict with score, feedback and source
    """
    text = (answer or "").strip()

    if is_empty_answer(text):
        return _result(0, "No answer provided.", "empty")

    if is_gibberish(text):
        return _result(0, "Detected gibberish or random characters.", "gibberish")

    if check_duplicate(text, memory):
        return _result(1, "Duplicate answer detected. Provide a unique response.", "duplicate")

    if is_off_topic(question, text):
        return _result(0, "Your answer does not address the specific question.", "off_topic")

    try:
        raw = client.evaluate_answer(question, text, difficulty)
        payload = extract_json_object(raw)
        if "score" not in payload:
            raise ValueError("Evaluation JSON has no score")
        score = clamp_score(payload.get("score"))
        feedback = str(payload.get("feedback") or "").strip()
        logger.info(f"[EVALUATION] AI scored {difficulty} answer: {score}")
        return _result(score, feedback, "ai")
    except Exception as e:  # SDK errors and malformed output both fall back
        logger.error(f"[EVALUATION] AI evaluation failed, using fallback: {e}")
        return _result(
            fallback_score(text),
            "Basic evaluation fallback based on answer length.",
            "fallback",
        )
