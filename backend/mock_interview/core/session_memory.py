"""
Per-session de-duplication caches.

Each interview session owns one `SessionMemory`; it is passed explicitly to
question generation and answer evaluation and cleared whenever a new
interview starts or the session is reset.
"""
from typing import List, Set

from mock_interview.core.config import QUESTION_HISTORY_LIMIT


class QuestionMemory:
    """Rolling set of the most recently generated questions (oldest dropped first)."""

    def __init__(self, limit: int = QUESTION_HISTORY_LIMIT) -> None:
        self.limit = limit
        self._questions: List[str] = []

    def add(self, question: str) -> None:
        if question in self._questions:
            return
        self._questions.append(question)
        if len(self._questions) > self.limit:
            self._questions = self._questions[-self.limit:]

    def recent(self, count: int) -> List[str]:
        """Return up to `count` most recent questions, oldest first."""
        if count <= 0:
            return []
        return list(self._questions[-count:])

    def clear(self) -> None:
        self._questions.clear()

    def __contains__(self, question: object) -> bool:
        return question in self._questions

    def __len__(self) -> int:
        return len(self._questions)


class SessionMemory:
    def __init__(self, question_limit: int = QUESTION_HISTORY_LIMIT) -> None:
        self.questions = QuestionMemory(limit=question_limit)
        self.used_answers: Set[str] = set()

    def clear(self) -> None:
        self.questions.clear()
        self.used_answers.clear()
