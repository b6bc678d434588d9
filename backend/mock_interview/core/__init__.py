"""
Core module for the mock interview backend.

Contains the interview rules that do not depend on HTTP: configuration,
status transitions, the AI completion client, question generation and the
answer evaluation pipeline.
"""

from .state_transitions import (
    InterviewStatus,
    InvalidTransitionError,
    validate_transition,
)

from .session_memory import SessionMemory, QuestionMemory

from .llm_client import (
    AICompletionClient,
    ChatCompletionClient,
    get_ai_client,
)

from .question_generation import (
    QuestionGenerationError,
    generate_question,
    clean_question_text,
)

from .answer_evaluation import (
    evaluate_answer,
    fallback_score,
)

__all__ = [
    "InterviewStatus",
    "InvalidTransitionError",
    "validate_transition",
    "SessionMemory",
    "QuestionMemory",
    "AICompletionClient",
    "ChatCompletionClient",
    "get_ai_client",
    "QuestionGenerationError",
    "generate_question",
    "clean_question_text",
    "evaluate_answer",
    "fallback_score",
]
