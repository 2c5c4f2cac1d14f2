"""Validation of out-of-band edits and deletes against the ordered log.

The guard never touches storage. It checks a request against a freshly read
event list and returns a plan; the service applies the plan inside the same
transaction that read the list.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from ledger.domain.derivation import in_sequence, pair_breaks
from ledger.domain.errors import (
    AmountNotEditableError,
    EventNotFoundError,
    ImmutableEventError,
    InvalidPayloadError,
    InvalidRecordedAtError,
    NoHandCompleteError,
    SessionEndedError,
)
from ledger.domain.events import (
    AMOUNT_EDITABLE_TYPES,
    BUY_IN_TYPES,
    IMMUTABLE_TYPES,
    EventPayload,
    EventType,
)
from ledger.domain.models import Session, SessionEvent
from ledger.domain.value_objects import EventId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdatePlan:
    event_id: EventId
    payload: EventPayload
    recorded_at: datetime
    buy_in_delta: int = 0


@dataclass(frozen=True)
class DeletionPlan:
    event_ids: tuple[EventId, ...]
    buy_in_delta: int = 0


class MutationGuard:
    """Guards edits and deletes for one session's events."""

    def __init__(self, session: Session, events: Iterable[SessionEvent], now: datetime) -> None:
        if not session.is_active:
            raise SessionEndedError(str(session.id))
        self._session = session
        self._events = in_sequence(events)
        self._now = now

    def _locate(self, event_id: EventId) -> int:
        for index, event in enumerate(self._events):
            if event.id == event_id:
                return index
        raise EventNotFoundError(str(event_id))

    def _reject_immutable(self, event: SessionEvent) -> None:
        if event.event_type in IMMUTABLE_TYPES:
            logger.warning("Rejected change to immutable %s event %s", event.event_type.value, event.id)
            raise ImmutableEventError(event.event_type.value)

    def _check_recorded_at(self, index: int, recorded_at: datetime) -> None:
        previous = self._events[index - 1] if index > 0 else None
        following = self._events[index + 1] if index + 1 < len(self._events) else None

        if previous is not None and recorded_at <= previous.recorded_at:
            raise InvalidRecordedAtError("Time must be after the previous event")
        if following is not None and recorded_at >= following.recorded_at:
            raise InvalidRecordedAtError("Time must be before the next event")
        if recorded_at > self._now:
            raise InvalidRecordedAtError("Time cannot be in the future")

    def plan_update(
        self,
        event_id: EventId,
        *,
        amount: int | None = None,
        recorded_at: datetime | None = None,
    ) -> UpdatePlan:
        """Validate an amount and/or time edit.

        Raises:
            EventNotFoundError: If the event is not in this session.
            ImmutableEventError: For session_start / session_end.
            AmountNotEditableError: If ``amount`` targets a type without one.
            InvalidRecordedAtError: If the time leaves its neighbour bounds.
        """
        index = self._locate(event_id)
        event = self._events[index]
        self._reject_immutable(event)

        payload = event.payload
        delta = 0
        if amount is not None:
            if event.event_type not in AMOUNT_EDITABLE_TYPES:
                raise AmountNotEditableError(event.event_type.value)
            try:
                payload = payload.with_amount(amount)
            except (TypeError, ValueError) as exc:
                raise InvalidPayloadError(str(exc)) from exc
            if event.event_type in BUY_IN_TYPES:
                delta = amount - event.payload.amount

        if recorded_at is not None:
            self._check_recorded_at(index, recorded_at)

        return UpdatePlan(
            event_id=event.id,
            payload=payload,
            recorded_at=recorded_at if recorded_at is not None else event.recorded_at,
            buy_in_delta=delta,
        )

    def plan_deletion(self, event_id: EventId) -> DeletionPlan:
        """Validate a delete; pauses and resumes go together with their pair."""
        event = self._events[self._locate(event_id)]
        self._reject_immutable(event)

        ids = [event.id]
        if event.is_a(EventType.SESSION_PAUSE, EventType.SESSION_RESUME):
            for item in pair_breaks(self._events):
                if item.resume is None:
                    continue
                if event.id == item.pause.id:
                    ids.append(item.resume.id)
                elif event.id == item.resume.id:
                    ids.append(item.pause.id)

        delta = 0
        if event.event_type in BUY_IN_TYPES:
            delta = -event.payload.amount
        return DeletionPlan(event_ids=tuple(ids), buy_in_delta=delta)

    def plan_latest_hand_complete_deletion(self) -> DeletionPlan:
        for event in reversed(self._events):
            if event.is_a(EventType.HAND_COMPLETE):
                return DeletionPlan(event_ids=(event.id,))
        raise NoHandCompleteError(str(self._session.id))
