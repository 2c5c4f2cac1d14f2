"""Return values of ledger operations."""

from dataclasses import dataclass
from datetime import datetime

from ledger.domain.derivation import LiveView
from ledger.domain.models import Session, SessionEvent
from ledger.domain.value_objects import EventId, SessionId


@dataclass(frozen=True)
class StartedSession:
    session_id: SessionId
    event_id: EventId
    start_time: datetime


@dataclass(frozen=True)
class EndedSession:
    session_id: SessionId
    event_id: EventId
    end_time: datetime
    profit_loss: int


@dataclass(frozen=True)
class RecordedEvent:
    event: SessionEvent
    new_buy_in_total: int | None = None


@dataclass(frozen=True)
class DeletionResult:
    deleted_event_ids: tuple[EventId, ...]


@dataclass(frozen=True)
class EventUpdateResult:
    event_id: EventId
    new_amount: int | None
    new_recorded_at: datetime | None
    new_buy_in_total: int | None = None


@dataclass(frozen=True)
class ActiveSessionView:
    """An in-progress session with its ordered events and derived view."""

    session: Session
    events: tuple[SessionEvent, ...]
    live: LiveView
