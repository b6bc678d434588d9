"""
State transitions for an interview session.

A session moves idle -> ready -> in-progress -> completed. `reset` is the
only way back and is allowed from every state.
"""

from enum import Enum
from typing import Dict, List


class InterviewStatus(str, Enum):
    IDLE = "idle"
    READY = "ready"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class InvalidTransitionError(ValueError):
    """Raised when an operation is not allowed in the session's current state."""


def allowed_transitions() -> Dict[InterviewStatus, List[InterviewStatus]]:
    """Return the allowed forward transitions (reset is handled separately)."""
    return {
        InterviewStatus.IDLE: [InterviewStatus.READY],
        InterviewStatus.READY: [InterviewStatus.IN_PROGRESS],
        InterviewStatus.IN_PROGRESS: [InterviewStatus.COMPLETED],
        InterviewStatus.COMPLETED: [],
    }


def validate_transition(current_status: str, target_status: str) -> bool:
    """Validate if transition is allowed (string-safe API for routers/services)."""
    try:
        current = InterviewStatus(current_status)
        target = InterviewStatus(target_status)
    except ValueError:
        return False
    if target == InterviewStatus.IDLE:
        return True
    return target in allowed_transitions()[current]


def initial_status() -> InterviewStatus:
    """Initial status for a new session."""
    return InterviewStatus.IDLE


def transition(current_status: InterviewStatus, target_status: InterviewStatus) -> InterviewStatus:
    """Return `target_status` if the move is legal, otherwise raise.

    Raises:
        InvalidTransitionError: If the transition is not allowed
    """
    if not validate_transition(current_status.value, target_status.value):
        raise InvalidTransitionError(
            f"Cannot move interview from '{current_status.value}' to '{target_status.value}'"
        )
    return target_status
