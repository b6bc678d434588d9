"""
LangGraph interview graph.

Drives one interview pass: six questions of increasing difficulty, each
answer scored before the next question is asked, then a final score and
summary. Each invoke advances the interview by one step and stops to wait
for the candidate (or the timer).
"""
import math
from typing import Any, Dict, List, Literal, Optional, TypedDict

from langgraph.graph import StateGraph, START, END
from langgraph.checkpoint.memory import MemorySaver

from mock_interview.core.answer_evaluation import evaluate_answer
from mock_interview.core.config import (
    QUESTION_SETTINGS,
    TOTAL_QUESTIONS,
    MAX_SCORE_PER_QUESTION,
    STRONG_SCORE_THRESHOLD,
    WEAK_SCORE_THRESHOLD,
)
from mock_interview.core.llm_client import AICompletionClient
from mock_interview.core.question_generation import QuestionGenerationError, generate_question
from mock_interview.core.session_memory import SessionMemory
from mock_interview.utils.logger import setup_logger

logger = setup_logger("interview_graph")


# ==================== State ====================

class InterviewGraphState(TypedDict, total=False):
    session_id: str
    resume_text: str
    question_index: int
    questions: List[Dict[str, Any]]  # {question, difficulty, time_limit}
    answers: List[str]
    scores: List[float]
    feedback: List[str]
    pending_answer: Optional[str]
    question_error: Optional[str]
    status: str
    final_score: Optional[int]
    summary: Optional[str]


def initial_graph_state(session_id: str, resume_text: str) -> InterviewGraphState:
    """State for the first invoke of a new interview pass."""
    return {
        "session_id": session_id,
        "resume_text": resume_text,
        "question_index": 0,
        "questions": [],
        "answers": [],
        "scores": [],
        "feedback": [],
        "pending_answer": None,
        "question_error": None,
        "status": "in-progress",
        "final_score": None,
        "summary": None,
    }


# ==================== Scoring ====================

def compute_final_score(scores: List[float]) -> int:
    """Percentage of the maximum attainable score, rounded half up."""
    max_total = TOTAL_QUESTIONS * MAX_SCORE_PER_QUESTION
    return int(math.floor(sum(scores) * 100 / max_total + 0.5))


def build_summary(final_score: int, scores: List[float]) -> str:
    strong = len([s for s in scores if s >= STRONG_SCORE_THRESHOLD])
    weak = len([s for s in scores if s < WEAK_SCORE_THRESHOLD])
    return (
        f"Interview completed with {final_score}% score. "
        f"Strong areas: {strong} questions. "
        f"Areas for improvement: {weak} questions."
    )


# ==================== Routing Logic ====================

def route_entry(state: InterviewGraphState) -> Literal["question_generation", "answer_evaluation", "finalize", "end"]:
    """
    Decide what this invoke does.

    - Interview finished → end
    - An answer arrived for the pending question → answer_evaluation
    - All questions answered → finalize
    - No question at the current index yet (first invoke or retry) → question_generation
    """
    if state.get("status") == "completed":
        return "end"

    index = state.get("question_index", 0)
    questions = state.get("questions", [])

    if state.get("pending_answer") is not None and len(questions) > index:
        return "answer_evaluation"
    if index >= TOTAL_QUESTIONS:
        return "finalize"
    if len(questions) == index:
        return "question_generation"
    return "end"


def route_after_evaluation(state: InterviewGraphState) -> Literal["question_generation", "finalize"]:
    if state.get("question_index", 0) >= TOTAL_QUESTIONS:
        return "finalize"
    return "question_generation"


# ==================== Build Graph ====================

def create_interview_graph(
    ai_client: AICompletionClient,
    memory: SessionMemory,
    retries: Optional[int] = None,
    backoff_base: Optional[float] = None
) -> StateGraph:
    """
    Build the interview graph for one session.

    Nodes close over the session's AI client and memory, so nothing is
    shared between sessions.

    Flow:
      Invoke 1 (initial state):    START → question_generation → END
      Invoke k (pending answer):   START → answer_evaluation → question_generation → END
      Invoke 6 (last answer):      START → answer_evaluation → finalize → END
      Retry (after a failed generation): START → question_generation → END
    """

    def question_generation_node(state: InterviewGraphState) -> dict:
        index = state.get("question_index", 0)
        setting = QUESTION_SETTINGS[index]

        try:
            question = generate_question(
                ai_client,
                setting.difficulty,
                state.get("resume_text", ""),
                memory,
                retries=retries,
                backoff_base=backoff_base,
            )
        except QuestionGenerationError as e:
            logger.error(f"[GRAPH] Question {index + 1} unavailable: {e}")
            return {"question_error": "Could not generate the next question. Please retry."}

        record = {
            "question": question,
            "difficulty": setting.difficulty,
            "time_limit": setting.time_limit,
        }
        return {
            "questions": list(state.get("questions", [])) + [record],
            "question_error": None,
        }

    def answer_evaluation_node(state: InterviewGraphState) -> dict:
        index = state["question_index"]
        pending = state["questions"][index]
        answer = state.get("pending_answer") or ""

        result = evaluate_answer(
            ai_client,
            pending["question"],
            answer,
            pending["difficulty"],
            memory,
        )
        logger.info(
            f"[GRAPH] Question {index + 1} scored {result['score']} ({result['source']})"
        )

        return {
            "answers": list(state.get("answers", [])) + [answer],
            "scores": list(state.get("scores", [])) + [result["score"]],
            "feedback": list(state.get("feedback", [])) + [result["feedback"]],
            "question_index": index + 1,
            "pending_answer": None,
        }

    def finalize_node(state: InterviewGraphState) -> dict:
        scores = state.get("scores", [])
        final_score = compute_final_score(scores)
        summary = build_summary(final_score, scores)
        logger.info(f"[GRAPH] Interview {state.get('session_id')} completed: {final_score}%")
        return {
            "final_score": final_score,
            "summary": summary,
            "status": "completed",
            "pending_answer": None,
        }

    graph = StateGraph(InterviewGraphState)

    graph.add_node("question_generation", question_generation_node)
    graph.add_node("answer_evaluation", answer_evaluation_node)
    graph.add_node("finalize", finalize_node)

    graph.add_conditional_edges(
        START,
        route_entry,
        {
            "question_generation": "question_generation",
            "answer_evaluation": "answer_evaluation",
            "finalize": "finalize",
            "end": END,
        }
    )
    graph.add_conditional_edges(
        "answer_evaluation",
        route_after_evaluation,
        {
            "question_generation": "question_generation",
            "finalize": "finalize",
        }
    )
    graph.add_edge("question_generation", END)
    graph.add_edge("finalize", END)

    return graph


def compile_interview_graph(
    ai_client: AICompletionClient,
    memory: SessionMemory,
    retries: Optional[int] = None,
    backoff_base: Optional[float] = None
):
    """
    Compile the graph with a MemorySaver checkpointer.

    Returns:
        Compiled graph ready for invocation (thread id = session id)
    """
    graph = create_interview_graph(ai_client, memory, retries=retries, backoff_base=backoff_base)
    checkpointer = MemorySaver()
    return graph.compile(checkpointer=checkpointer)
