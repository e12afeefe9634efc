"""Unit tests for the MatchStatus state machine"""

import pytest

from matching.status import (
    MatchStatus,
    ALLOWED_TRANSITIONS,
    StateTransitionError,
    can_transition,
    get_allowed_transitions,
    validate_transition,
)


class TestMatchStatusStateMachine:
    """Test MatchStatus enum and state transition validation"""

    def test_match_status_enum_values(self):
        """Test MatchStatus enum has all required values"""
        assert MatchStatus.PENDING.value == "PENDING"
        assert MatchStatus.ACCEPTED.value == "ACCEPTED"
        assert MatchStatus.REJECTED.value == "REJECTED"

    def test_pending_to_accepted(self):
        """Test PENDING → ACCEPTED transition"""
        assert can_transition(MatchStatus.PENDING, MatchStatus.ACCEPTED) is True

    def test_pending_to_rejected(self):
        """Test PENDING → REJECTED transition"""
        assert can_transition(MatchStatus.PENDING, MatchStatus.REJECTED) is True

    def test_pending_to_pending_not_allowed(self):
        assert can_transition(MatchStatus.PENDING, MatchStatus.PENDING) is False

    @pytest.mark.parametrize("terminal", [MatchStatus.ACCEPTED, MatchStatus.REJECTED])
    def test_terminal_states(self, terminal):
        """Test ACCEPTED and REJECTED allow no further transitions"""
        assert get_allowed_transitions(terminal) == []
        for target in MatchStatus:
            assert can_transition(terminal, target) is False

    def test_every_status_has_an_entry(self):
        assert set(ALLOWED_TRANSITIONS) == set(MatchStatus)

    def test_validate_transition_raises_with_details(self):
        with pytest.raises(StateTransitionError) as exc_info:
            validate_transition(MatchStatus.ACCEPTED, MatchStatus.REJECTED)

        assert "ACCEPTED -> REJECTED" in str(exc_info.value)

    def test_validate_transition_passes(self):
        validate_transition(MatchStatus.PENDING, MatchStatus.ACCEPTED)
