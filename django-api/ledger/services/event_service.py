"""Event service - recording, editing and deleting session events.

Every write re-reads the session (row-locked) and, for edits and deletes, the
full ordered event list inside the same transaction before validating, so no
decision is taken against stale neighbours.
"""

import logging
from datetime import datetime
from uuid import UUID

from ledger.domain import ActorId, EventPayload, Position, SessionEvent
from ledger.domain.derivation import TimelineItem, group_timeline
from ledger.domain.errors import EventNotFoundError, SessionNotFoundError
from ledger.domain.events import (
    BUY_IN_TYPES,
    AddonData,
    AllInData,
    HandCompleteData,
    HandRecordedData,
    HandsPassedData,
    PlayerSeatedData,
    RebuyData,
    StackUpdateData,
)
from ledger.domain.guard import DeletionPlan, MutationGuard
from ledger.domain.results import DeletionResult, EventUpdateResult, RecordedEvent
from ledger.services._ids import parse_event_id, parse_session_id
from ledger.services.base import LedgerService, build_payload

logger = logging.getLogger(__name__)


class EventService(LedgerService):
    """Service for the session event ledger."""

    def _record(
        self,
        actor: ActorId,
        session_id: str,
        payload: EventPayload,
        recorded_at: datetime | None = None,
    ) -> RecordedEvent:
        sid = parse_session_id(session_id)
        with self._store.transaction():
            session = self._recording_session(actor, sid)
            event = self._store.append_event(session, payload, self._recorded_at(session, recorded_at))
            total = None
            if payload.event_type in BUY_IN_TYPES:
                total = self._store.adjust_buy_in(sid, payload.amount)

        logger.info("Session %s: recorded %s #%d", sid, event.event_type.value, event.sequence)
        return RecordedEvent(event=event, new_buy_in_total=total)

    def seat_player(
        self,
        actor: ActorId,
        session_id: str,
        *,
        seat_number: int,
        player_name: str,
        player_id: UUID | None = None,
    ) -> RecordedEvent:
        payload = build_payload(PlayerSeatedData, seat_number=seat_number, player_name=player_name, player_id=player_id)
        return self._record(actor, session_id, payload)

    def update_stack(
        self, actor: ActorId, session_id: str, *, amount: int, recorded_at: datetime | None = None
    ) -> RecordedEvent:
        return self._record(actor, session_id, build_payload(StackUpdateData, stack=amount), recorded_at)

    def record_rebuy(
        self,
        actor: ActorId,
        session_id: str,
        *,
        cost: int,
        chips: int | None = None,
        recorded_at: datetime | None = None,
    ) -> RecordedEvent:
        """Append a rebuy and add its cost to the aggregate buy-in total."""
        return self._record(actor, session_id, build_payload(RebuyData, cost=cost, chips=chips), recorded_at)

    def record_addon(
        self,
        actor: ActorId,
        session_id: str,
        *,
        cost: int,
        chips: int | None = None,
        recorded_at: datetime | None = None,
    ) -> RecordedEvent:
        """Append an addon and add its cost to the aggregate buy-in total."""
        return self._record(actor, session_id, build_payload(AddonData, cost=cost, chips=chips), recorded_at)

    def record_hands_passed(self, actor: ActorId, session_id: str, *, count: int) -> RecordedEvent:
        return self._record(actor, session_id, build_payload(HandsPassedData, count=count))

    def record_hand(self, actor: ActorId, session_id: str, *, hand_id: UUID) -> RecordedEvent:
        return self._record(actor, session_id, build_payload(HandRecordedData, hand_id=hand_id))

    def record_hand_complete(
        self, actor: ActorId, session_id: str, *, position: Position | str | None = None
    ) -> RecordedEvent:
        return self._record(actor, session_id, build_payload(HandCompleteData, position=position))

    def record_all_in(
        self,
        actor: ActorId,
        session_id: str,
        *,
        pot_amount: int,
        win_probability: float,
        actual_result: bool,
        run_it_times: int | None = None,
        wins_in_runout: int | None = None,
        recorded_at: datetime | None = None,
    ) -> RecordedEvent:
        payload = build_payload(
            AllInData,
            pot_amount=pot_amount,
            win_probability=win_probability,
            actual_result=actual_result,
            run_it_times=run_it_times,
            wins_in_runout=wins_in_runout,
        )
        return self._record(actor, session_id, payload, recorded_at)

    # Mutations

    def _apply_deletion(self, session_id, plan: DeletionPlan) -> DeletionResult:
        self._store.delete_events(plan.event_ids)
        if plan.buy_in_delta:
            self._store.adjust_buy_in(session_id, plan.buy_in_delta)
        return DeletionResult(deleted_event_ids=plan.event_ids)

    def delete_latest_hand_complete(self, actor: ActorId, session_id: str) -> DeletionResult:
        """Delete the most recent hand_complete, decrementing the hand counter.

        Raises:
            ActiveSessionNotFoundError: If no owned active session matches.
            NoHandCompleteError: If the session has no hand_complete events.
        """
        sid = parse_session_id(session_id)
        with self._store.transaction():
            session = self._recording_session(actor, sid)
            guard = MutationGuard(session, self._store.list_events(sid), self._clock())
            result = self._apply_deletion(sid, guard.plan_latest_hand_complete_deletion())

        logger.info("Session %s: deleted latest hand_complete %s", sid, result.deleted_event_ids[0])
        return result

    def _guarded(self, actor: ActorId, event_id: str) -> tuple[SessionEvent, MutationGuard]:
        eid = parse_event_id(event_id)
        event = self._store.get_event(eid, actor)
        if event is None:
            raise EventNotFoundError(event_id)
        session = self._store.get_session(event.session_id, actor, for_update=True)
        if session is None:
            raise EventNotFoundError(event_id)
        guard = MutationGuard(session, self._store.list_events(session.id), self._clock())
        return event, guard

    def delete_event(self, actor: ActorId, event_id: str) -> DeletionResult:
        """Delete one event; a paired pause/resume goes together.

        Raises:
            InvalidIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist or is not owned.
            SessionEndedError: If the event's session has ended.
            ImmutableEventError: For session_start / session_end.
        """
        with self._store.transaction():
            event, guard = self._guarded(actor, event_id)
            result = self._apply_deletion(event.session_id, guard.plan_deletion(event.id))

        logger.info(
            "Session %s: deleted %s (%s)",
            event.session_id,
            event.event_type.value,
            ", ".join(str(deleted) for deleted in result.deleted_event_ids),
        )
        return result

    def update_event(
        self,
        actor: ActorId,
        event_id: str,
        *,
        amount: int | None = None,
        recorded_at: datetime | None = None,
    ) -> EventUpdateResult:
        """Edit an event's amount and/or recorded time.

        Raises:
            InvalidIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist or is not owned.
            SessionEndedError: If the event's session has ended.
            ImmutableEventError: For session_start / session_end.
            AmountNotEditableError: If the type carries no editable amount.
            InvalidRecordedAtError: If the time leaves its neighbour bounds.
        """
        with self._store.transaction():
            event, guard = self._guarded(actor, event_id)
            plan = guard.plan_update(event.id, amount=amount, recorded_at=recorded_at)
            self._store.update_event(plan.event_id, plan.payload, plan.recorded_at)
            total = None
            if amount is not None and event.event_type in BUY_IN_TYPES:
                total = self._store.adjust_buy_in(event.session_id, plan.buy_in_delta)

        logger.info("Session %s: updated %s %s", event.session_id, event.event_type.value, event.id)
        return EventUpdateResult(
            event_id=event.id,
            new_amount=amount,
            new_recorded_at=recorded_at,
            new_buy_in_total=total,
        )

    # Queries

    def list_by_session(self, actor: ActorId, session_id: str) -> list[SessionEvent]:
        """Return the session's events in sequence order; ended sessions included.

        Raises:
            InvalidIdError: If the session_id is not a valid UUID.
            SessionNotFoundError: If the session does not exist or is not owned.
        """
        sid = parse_session_id(session_id)
        with self._store.transaction():
            if self._store.get_session(sid, actor) is None:
                raise SessionNotFoundError(session_id)
            return self._store.list_events(sid)

    def timeline(self, actor: ActorId, session_id: str) -> list[TimelineItem]:
        return group_timeline(self.list_by_session(actor, session_id))
