"""Unit tests for the session state machine.

Run with: pytest tests/test_lifecycle.py -v
"""

from datetime import timedelta

import pytest
from conftest import T0

from ledger.domain.errors import ActiveSessionNotFoundError, InvalidStateTransitionError
from ledger.domain.events import SessionPauseData, SessionResumeData
from ledger.domain.lifecycle import RECORDING_STATES, SessionState, require_state, session_state


class TestSessionState:
    """Tests for session_state."""

    def test_missing_session_is_not_started(self):
        """No session means NOT_STARTED."""
        assert session_state(None) is SessionState.NOT_STARTED

    def test_active(self, make_session, make_events):
        """An active session with no open pause is ACTIVE."""
        session = make_session()
        events = make_events(session, (5, SessionPauseData()), (6, SessionResumeData()))
        assert session_state(session, events) is SessionState.ACTIVE

    def test_paused(self, make_session, make_events):
        """An open pause makes the session PAUSED."""
        session = make_session()
        assert session_state(session, make_events(session, (5, SessionPauseData()))) is SessionState.PAUSED

    def test_ended(self, make_session):
        """An inactive session is ENDED regardless of events."""
        ended = make_session(is_active=False, end_time=T0 + timedelta(hours=1), cash_out=0)
        assert session_state(ended) is SessionState.ENDED


class TestRequireState:
    """Tests for require_state."""

    def test_allowed_state_passes(self, make_session):
        """An allowed state raises nothing."""
        session = make_session()
        require_state(session, SessionState.PAUSED, RECORDING_STATES, action="record", session_id="s")

    @pytest.mark.parametrize("state", [SessionState.NOT_STARTED, SessionState.ENDED])
    def test_missing_or_ended_is_not_found(self, make_session, state):
        """NOT_STARTED and ENDED surface as a missing active session."""
        session = None if state is SessionState.NOT_STARTED else make_session(is_active=False)
        with pytest.raises(ActiveSessionNotFoundError):
            require_state(session, state, frozenset({SessionState.ACTIVE}), action="pause", session_id="s")

    def test_wrong_live_state_is_invalid_transition(self, make_session):
        """Resuming an ACTIVE session is an invalid transition."""
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            require_state(
                make_session(),
                SessionState.ACTIVE,
                frozenset({SessionState.PAUSED}),
                action="resume",
                session_id="s",
            )
        assert exc_info.value.message == "Cannot resume a session that is active"
