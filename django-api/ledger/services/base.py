"""Shared plumbing for ledger services."""

from collections.abc import Callable
from datetime import datetime
from typing import TypeVar

from django.utils import timezone

from ledger.domain import ActorId, EventPayload, Session, SessionId
from ledger.domain.errors import InvalidPayloadError, InvalidRecordedAtError
from ledger.domain.lifecycle import RECORDING_STATES, require_state, session_state
from ledger.stores.interfaces import SessionStore

Clock = Callable[[], datetime]

P = TypeVar("P", bound=EventPayload)


def build_payload(payload_type: type[P], **values) -> P:
    """Construct a payload, turning validation failures into a domain error."""
    try:
        return payload_type(**values)
    except (TypeError, ValueError) as exc:
        raise InvalidPayloadError(str(exc)) from exc


class LedgerService:
    """Base for services that operate on one actor's sessions."""

    def __init__(self, store: SessionStore, clock: Clock = timezone.now) -> None:
        self._store = store
        self._clock = clock

    def _recording_session(self, actor: ActorId, session_id: SessionId) -> Session:
        """Return the actor's session, row-locked, if events may be appended.

        Must be called inside ``self._store.transaction()``.

        Raises:
            ActiveSessionNotFoundError: If the session is missing, foreign or ended.
        """
        session = self._store.get_session(session_id, actor, for_update=True)
        require_state(
            session,
            session_state(session),
            RECORDING_STATES,
            action="record events for",
            session_id=str(session_id),
        )
        return session

    def _recorded_at(self, session: Session, recorded_at: datetime | None) -> datetime:
        """Resolve the time of a new event; explicit times stay within the session.

        Raises:
            InvalidRecordedAtError: If the time is before the start or in the future.
        """
        now = self._clock()
        if recorded_at is None:
            return now
        if recorded_at < session.start_time:
            raise InvalidRecordedAtError("Time cannot be before the session start")
        if recorded_at > now:
            raise InvalidRecordedAtError("Time cannot be in the future")
        return recorded_at
