"""Session lifecycle service - start, end, pause, resume and the live view.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from ledger.domain import ActorId, EventPayload, GameType, NewSession, Session
from ledger.domain.derivation import derive_live_view
from ledger.domain.errors import InvalidPayloadError, NotTournamentSessionError, SessionAlreadyActiveError
from ledger.domain.events import SessionEndData, SessionPauseData, SessionResumeData, SessionStartData, StackUpdateData
from ledger.domain.lifecycle import SessionState, require_state, session_state
from ledger.domain.results import ActiveSessionView, EndedSession, RecordedEvent, StartedSession
from ledger.services._ids import parse_session_id
from ledger.services.base import LedgerService, build_payload

logger = logging.getLogger(__name__)


class SessionService(LedgerService):
    """Service owning the coarse session state machine."""

    def start_session(
        self,
        actor: ActorId,
        *,
        buy_in: int,
        game_type: GameType | str | None = None,
        store_id: UUID | None = None,
        cash_game_id: UUID | None = None,
        tournament_id: UUID | None = None,
        initial_stack: int | None = None,
        timer_started_at: datetime | None = None,
    ) -> StartedSession:
        """Start a new active session for the actor.

        Appends ``session_start`` at sequence 1 and, when an initial stack is
        declared, a ``stack_update`` at sequence 2.

        Raises:
            SessionAlreadyActiveError: If the actor already has an active session.
            InvalidPayloadError: If the buy-in, game type or initial stack is invalid.
        """
        now = self._clock()
        try:
            new_session = NewSession(
                owner_id=actor,
                buy_in=buy_in,
                start_time=now,
                game_type=GameType(game_type) if game_type is not None else None,
                store_id=store_id,
                cash_game_id=cash_game_id,
                tournament_id=tournament_id,
                timer_started_at=timer_started_at,
            )
        except (TypeError, ValueError) as exc:
            raise InvalidPayloadError(str(exc)) from exc
        if initial_stack is not None and initial_stack < 1:
            raise InvalidPayloadError("initial_stack must be a positive integer")

        with self._store.transaction():
            if self._store.find_active_session(actor) is not None:
                logger.warning("Rejected start for %s: a session is already active", actor)
                raise SessionAlreadyActiveError()
            session = self._store.create_session(new_session)
            start_event = self._store.append_event(session, SessionStartData(), now)
            if initial_stack is not None:
                self._store.append_event(session, StackUpdateData(stack=initial_stack), now)

        logger.info("Started session %s for %s (buy-in %d)", session.id, actor, buy_in)
        return StartedSession(session_id=session.id, event_id=start_event.id, start_time=now)

    def end_session(
        self,
        actor: ActorId,
        session_id: str,
        *,
        cash_out: int,
        final_position: int | None = None,
        recorded_at: datetime | None = None,
    ) -> EndedSession:
        """End an active session; the session is immutable afterwards.

        Raises:
            InvalidIdError: If the session_id is not a valid UUID.
            ActiveSessionNotFoundError: If no owned active session matches.
            InvalidRecordedAtError: If ``recorded_at`` is before the start or in the future.
        """
        sid = parse_session_id(session_id)
        payload = build_payload(SessionEndData, cash_out=cash_out)
        if final_position is not None and final_position < 1:
            raise InvalidPayloadError("final_position must be a positive integer")

        with self._store.transaction():
            session = self._recording_session(actor, sid)
            end_time = self._recorded_at(session, recorded_at)
            end_event = self._store.append_event(session, payload, end_time)
            closed = self._store.close_session(
                sid, end_time=end_time, cash_out=cash_out, final_position=final_position
            )

        logger.info("Ended session %s (cash-out %d, buy-in %d)", sid, cash_out, closed.buy_in)
        return EndedSession(
            session_id=sid,
            event_id=end_event.id,
            end_time=end_time,
            profit_loss=cash_out - closed.buy_in,
        )

    def pause_session(self, actor: ActorId, session_id: str) -> RecordedEvent:
        """Append ``session_pause``; the session must be active and not paused."""
        return self._transition(actor, session_id, SessionPauseData(), SessionState.ACTIVE, "pause")

    def resume_session(self, actor: ActorId, session_id: str) -> RecordedEvent:
        """Append ``session_resume``; the session must be paused."""
        return self._transition(actor, session_id, SessionResumeData(), SessionState.PAUSED, "resume")

    def _transition(
        self,
        actor: ActorId,
        session_id: str,
        payload: EventPayload,
        required: SessionState,
        action: str,
    ) -> RecordedEvent:
        sid = parse_session_id(session_id)
        with self._store.transaction():
            session = self._store.get_session(sid, actor, for_update=True)
            events = self._store.list_events(sid) if session is not None else []
            state = session_state(session, events)
            require_state(session, state, frozenset({required}), action=action, session_id=str(sid))
            event = self._store.append_event(session, payload, self._clock())

        logger.info("Session %s: %s at %s", sid, action, event.recorded_at.isoformat())
        return RecordedEvent(event=event)

    def get_active_session(self, actor: ActorId) -> ActiveSessionView | None:
        """Return the actor's active session with its derived live view, if any."""
        with self._store.transaction():
            session = self._store.find_active_session(actor)
            if session is None:
                return None
            events = self._store.list_events(session.id)
        live = derive_live_view(session, events, self._clock())
        return ActiveSessionView(session=session, events=tuple(events), live=live)

    # Tournament snapshots and progress

    def _active_session(self, actor: ActorId, session_id: str, *, tournament_only: bool = False) -> Session:
        session = self._recording_session(actor, parse_session_id(session_id))
        if tournament_only and not session.is_tournament:
            raise NotTournamentSessionError(session_id)
        return session

    def _update(self, actor: ActorId, session_id: str, *, tournament_only: bool, **changes: Any) -> Session:
        with self._store.transaction():
            session = self._active_session(actor, session_id, tournament_only=tournament_only)
            updated = self._store.update_session(session.id, **changes)
        logger.info("Session %s: updated %s", session.id, ", ".join(sorted(changes)))
        return updated

    def update_tournament_override_basic(self, actor: ActorId, session_id: str, data: dict[str, Any]) -> Session:
        return self._update(actor, session_id, tournament_only=True, tournament_override_basic=data)

    def update_tournament_override_blinds(
        self, actor: ActorId, session_id: str, blind_levels: list[dict[str, Any]]
    ) -> Session:
        return self._update(actor, session_id, tournament_only=True, tournament_override_blinds=blind_levels)

    def update_tournament_override_prizes(
        self, actor: ActorId, session_id: str, prize_structures: list[dict[str, Any]]
    ) -> Session:
        return self._update(actor, session_id, tournament_only=True, tournament_override_prizes=prize_structures)

    def clear_tournament_overrides(
        self,
        actor: ActorId,
        session_id: str,
        *,
        clear_basic: bool = False,
        clear_blinds: bool = False,
        clear_prizes: bool = False,
    ) -> Session:
        """Drop session-local snapshots; with no flag set, all of them."""
        if not (clear_basic or clear_blinds or clear_prizes):
            clear_basic = clear_blinds = clear_prizes = True
        changes = {}
        if clear_basic:
            changes["tournament_override_basic"] = None
        if clear_blinds:
            changes["tournament_override_blinds"] = None
        if clear_prizes:
            changes["tournament_override_prizes"] = None
        return self._update(actor, session_id, tournament_only=False, **changes)

    def update_timer_started_at(self, actor: ActorId, session_id: str, timer_started_at: datetime | None) -> Session:
        return self._update(actor, session_id, tournament_only=False, timer_started_at=timer_started_at)

    def update_tournament_field(
        self,
        actor: ActorId,
        session_id: str,
        *,
        entries: int | None = None,
        remaining: int | None = None,
    ) -> Session:
        """Record field size; ``None`` leaves a value unchanged."""
        changes = {}
        if entries is not None:
            changes["tournament_entries"] = entries
        if remaining is not None:
            changes["tournament_remaining"] = remaining
        for name, value in changes.items():
            if value < 1:
                raise InvalidPayloadError(f"{name} must be a positive integer")
        return self._update(actor, session_id, tournament_only=False, **changes)
