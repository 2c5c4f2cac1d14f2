from ledger.domain.events import EventPayload, EventType, Position
from ledger.domain.models import GameType, NewSession, Session, SessionEvent, TournamentOverrides
from ledger.domain.value_objects import ActorId, EventId, SessionId

__all__ = [
    "Session",
    "SessionEvent",
    "NewSession",
    "GameType",
    "TournamentOverrides",
    "EventType",
    "EventPayload",
    "Position",
    "SessionId",
    "EventId",
    "ActorId",
]
