"""Coarse session state machine.

NOT_STARTED -> ACTIVE <-> PAUSED -> ENDED. Pause state is never stored; it
is derived from the event log on every read.
"""

from collections.abc import Iterable
from enum import Enum

from ledger.domain.derivation import pair_breaks
from ledger.domain.errors import ActiveSessionNotFoundError, InvalidStateTransitionError
from ledger.domain.models import Session, SessionEvent


class SessionState(Enum):
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    PAUSED = "paused"
    ENDED = "ended"


RECORDING_STATES = frozenset({SessionState.ACTIVE, SessionState.PAUSED})


def session_state(session: Session | None, events: Iterable[SessionEvent] = ()) -> SessionState:
    if session is None:
        return SessionState.NOT_STARTED
    if not session.is_active:
        return SessionState.ENDED
    breaks = pair_breaks(events)
    if breaks and breaks[-1].is_open:
        return SessionState.PAUSED
    return SessionState.ACTIVE


def require_state(
    session: Session | None,
    state: SessionState,
    allowed: frozenset[SessionState],
    *,
    action: str,
    session_id: str,
) -> None:
    """Raise unless ``state`` is one of ``allowed``.

    A missing or ended session surfaces as not found, matching how callers
    look sessions up by "owned and active".
    """
    if state in allowed:
        return
    if session is None or state in (SessionState.NOT_STARTED, SessionState.ENDED):
        raise ActiveSessionNotFoundError(session_id)
    raise InvalidStateTransitionError(action=action, state=state.value)
