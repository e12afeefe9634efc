"""Match lifecycle: PENDING moves once to ACCEPTED or REJECTED, then stops."""

from enum import Enum
from typing import Dict, List


class MatchStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


ALLOWED_TRANSITIONS: Dict[MatchStatus, List[MatchStatus]] = {
    MatchStatus.PENDING: [MatchStatus.ACCEPTED, MatchStatus.REJECTED],
    MatchStatus.ACCEPTED: [],
    MatchStatus.REJECTED: [],
}


class StateTransitionError(Exception):
    """A match status change that the lifecycle forbids."""


def get_allowed_transitions(status: MatchStatus) -> List[MatchStatus]:
    return ALLOWED_TRANSITIONS.get(status, [])


def can_transition(current_status: MatchStatus, new_status: MatchStatus) -> bool:
    return new_status in get_allowed_transitions(current_status)


def validate_transition(current_status: MatchStatus, new_status: MatchStatus) -> None:
    """Raise StateTransitionError unless current_status -> new_status is allowed."""
    if can_transition(current_status, new_status):
        return

    allowed = ", ".join(s.value for s in get_allowed_transitions(current_status)) or "none (terminal)"
    raise StateTransitionError(
        f"Invalid transition: {current_status.value} -> {new_status.value}. "
        f"Allowed from {current_status.value}: {allowed}"
    )
