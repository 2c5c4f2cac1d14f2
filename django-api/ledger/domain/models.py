"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in ledger/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from ledger.domain.events import EventPayload, EventType
from ledger.domain.value_objects import ActorId, EventId, SessionId


class GameType(str, Enum):
    """Kind of game being played."""

    CASH = "cash"
    TOURNAMENT = "tournament"


@dataclass(frozen=True)
class TournamentOverrides:
    """Session-local snapshots of tournament settings.

    Edits to shared tournament templates never reach an in-progress session
    once a snapshot is taken.
    """

    basic: dict[str, Any] | None = None
    blinds: list[dict[str, Any]] | None = None
    prizes: list[dict[str, Any]] | None = None


@dataclass(frozen=True)
class Session:
    """Domain representation of a poker Session (aggregate root)."""

    id: SessionId
    owner_id: ActorId
    game_type: GameType | None
    is_active: bool
    start_time: datetime
    initial_buy_in: int
    buy_in: int
    end_time: datetime | None = None
    cash_out: int | None = None
    final_position: int | None = None
    store_id: UUID | None = None
    cash_game_id: UUID | None = None
    tournament_id: UUID | None = None
    timer_started_at: datetime | None = None
    tournament_entries: int | None = None
    tournament_remaining: int | None = None
    overrides: TournamentOverrides = field(default_factory=TournamentOverrides)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_tournament(self) -> bool:
        return self.game_type is GameType.TOURNAMENT

    @property
    def profit_loss(self) -> int | None:
        if self.cash_out is None:
            return None
        return self.cash_out - self.buy_in


@dataclass(frozen=True)
class SessionEvent:
    """Domain representation of one ledger entry."""

    id: EventId
    session_id: SessionId
    owner_id: ActorId
    payload: EventPayload
    sequence: int
    recorded_at: datetime
    created_at: datetime | None = None

    @property
    def event_type(self) -> EventType:
        return self.payload.event_type

    def is_a(self, *event_types: EventType) -> bool:
        return self.payload.event_type in event_types


@dataclass(frozen=True)
class NewSession:
    """Input for creating a session aggregate."""

    owner_id: ActorId
    buy_in: int
    start_time: datetime
    game_type: GameType | None = None
    store_id: UUID | None = None
    cash_game_id: UUID | None = None
    tournament_id: UUID | None = None
    timer_started_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.buy_in < 1:
            raise ValueError("buy_in must be a positive integer")
