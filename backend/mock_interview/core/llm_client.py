"""
AI completion client.

The interview flow only depends on the `AICompletionClient` interface
(question generation and answer evaluation), so the hosted vendor can be
swapped without touching the state machine. `ChatCompletionClient` is the
default implementation over LangChain's ChatOpenAI, which also works with
any OpenAI-compatible endpoint via AI_BASE_URL.
"""
from typing import List, Optional

from langchain_openai import ChatOpenAI
from langchain_core.messages import SystemMessage, HumanMessage

from mock_interview.core.config import (
    AI_BASE_URL,
    QUESTION_MODEL,
    EVALUATION_MODEL,
    QUESTION_TEMPERATURE,
    QUESTION_TOP_P,
    QUESTION_MAX_TOKENS,
    EVALUATION_TEMPERATURE,
    EVALUATION_MAX_TOKENS,
    get_ai_api_key,
)
from mock_interview.core.prompt_templates import (
    QUESTION_SYSTEM_PROMPT,
    build_question_prompt,
    build_evaluation_system_prompt,
    build_evaluation_prompt,
)


# ==================== Capability Interface ====================

class AICompletionClient:
    """Abstract completion capability used by the interview flow.

    Implementations return raw model text; parsing and validation happen in
    question generation and answer evaluation.
    """

    def generate_question(
        self,
        difficulty: str,
        resume_context: str,
        previous_questions: List[str]
    ) -> str:
        raise NotImplementedError

    def evaluate_answer(self, question: str, answer: str, difficulty: str) -> str:
        raise NotImplementedError


# ==================== LLM Configuration ====================

def get_llm_client(
    model: str,
    temperature: float,
    max_tokens: int,
    top_p: Optional[float] = None
) -> ChatOpenAI:
    """
    Initialize a ChatOpenAI instance for the configured endpoint.

    Args:
        model: Model name
        temperature: Controls randomness (0.0-1.0)
        max_tokens: Completion token limit
        top_p: Optional nucleus sampling value

    Returns:
        Configured ChatOpenAI instance

    Raises:
        ValueError: If no API key is configured
    """
    api_key = get_ai_api_key()
    if not api_key:
        raise ValueError("AI_API_KEY (or OPENAI_API_KEY) not found in environment variables")

    kwargs = {
        "model": model,
        "temperature": temperature,
        "api_key": api_key,
        "max_tokens": max_tokens,
        "streaming": False,
    }
    if top_p is not None:
        kwargs["top_p"] = top_p
    if AI_BASE_URL:
        kwargs["base_url"] = AI_BASE_URL

    return ChatOpenAI(**kwargs)


def invoke_llm_sync(llm: ChatOpenAI, system_prompt: str, user_message: str) -> str:
    """
    Synchronous invocation of LLM with system and user messages.

    Returns:
        LLM response as stripped string
    """
    messages = [
        SystemMessage(content=system_prompt),
        HumanMessage(content=user_message)
    ]

    response = llm.invoke(messages)
    content = response.content
    if not isinstance(content, str):
        content = str(content)
    return content.strip()


# ==================== Default Implementation ====================

class ChatCompletionClient(AICompletionClient):
    """Chat-completion backed client; LLM instances are created on first use."""

    def __init__(
        self,
        question_llm: Optional[ChatOpenAI] = None,
        evaluation_llm: Optional[ChatOpenAI] = None
    ) -> None:
        self._question_llm = question_llm
        self._evaluation_llm = evaluation_llm

    @property
    def question_llm(self) -> ChatOpenAI:
        if self._question_llm is None:
            self._question_llm = get_llm_client(
                QUESTION_MODEL,
                temperature=QUESTION_TEMPERATURE,
                max_tokens=QUESTION_MAX_TOKENS,
                top_p=QUESTION_TOP_P,
            )
        return self._question_llm

    @property
    def evaluation_llm(self) -> ChatOpenAI:
        if self._evaluation_llm is None:
            self._evaluation_llm = get_llm_client(
                EVALUATION_MODEL,
                temperature=EVALUATION_TEMPERATURE,
                max_tokens=EVALUATION_MAX_TOKENS,
            )
        return self._evaluation_llm

    def generate_question(
        self,
        difficulty: str,
        resume_context: str,
        previous_questions: List[str]
    ) -> str:
        return invoke_llm_sync(
            self.question_llm,
            QUESTION_SYSTEM_PROMPT,
            build_question_prompt(difficulty, resume_context, previous_questions),
        )

    def evaluate_answer(self, question: str, answer: str, difficulty: str) -> str:
        return invoke_llm_sync(
            self.evaluation_llm,
            build_evaluation_system_prompt(difficulty),
            build_evaluation_prompt(question, answer, difficulty),
        )


# ==================== Global Instance ====================

_ai_client: Optional[AICompletionClient] = None


def get_ai_client() -> AICompletionClient:
    """Get the process-wide AI client (created lazily)."""
    global _ai_client
    if _ai_client is None:
        _ai_client = ChatCompletionClient()
    return _ai_client
