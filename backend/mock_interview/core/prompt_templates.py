"""
Prompt templates for the two completion calls: question generation and
answer evaluation.
"""
from typing import List


EXPECTED_ANSWER_TIME = {
    "Easy": "20s",
    "Medium": "60s",
    "Hard": "120s",
}


# ==================== Question Generation ====================

QUESTION_SYSTEM_PROMPT = "You are a strict, expert interviewer."


def build_question_prompt(
    difficulty: str,
    resume_context: str,
    previous_questions: List[str]
) -> str:
    """
    Build the user prompt asking for exactly one new question.

    Args:
        difficulty: Easy, Medium or Hard
        resume_context: Truncated résumé text for personalisation
        previous_questions: Recently asked questions to steer away from
    """
    answer_time = EXPECTED_ANSWER_TIME.get(difficulty, "60s")
    avoid = " | ".join(previous_questions) if previous_questions else "none"
    return f"""You are an expert technical interviewer for Full-Stack (React/Node.js) Developer roles.
Generate ONE unique {difficulty} level interview question.
Requirements:
- Tests practical understanding and problem-solving
- Specific to React/Node.js
- Answerable in {answer_time}
- Avoid topics covered previously: {avoid}
Context: {resume_context}
Return ONLY the question text."""


# ==================== Answer Evaluation ====================

def build_evaluation_system_prompt(difficulty: str) -> str:
    """System prompt carrying the scoring rubric."""
    return f"""You are a senior FAANG interviewer evaluating a {difficulty} level React/Node.js answer.
Criteria:
- Relevance (50%)
- Accuracy (30%)
- Depth (15%)
- Clarity (5%)
Scoring 0-10. Be strict: irrelevant or generic answers max 2.
Return JSON: {{"score":<0-10>,"feedback":"<2-3 sentences>"}}"""


def build_evaluation_prompt(question: str, answer: str, difficulty: str) -> str:
    """User prompt embedding the question and the candidate's answer."""
    return f"""QUESTION: "{question}"
ANSWER: "{answer}"

This is a {difficulty} question. Provide only the JSON evaluation."""
