"""Parsing of caller-supplied identifiers into domain IDs."""

from ledger.domain import EventId, SessionId
from ledger.domain.errors import InvalidIdError


def parse_session_id(value: str) -> SessionId:
    try:
        return SessionId.from_string(str(value))
    except ValueError as exc:
        raise InvalidIdError("session ID") from exc


def parse_event_id(value: str) -> EventId:
    try:
        return EventId.from_string(str(value))
    except ValueError as exc:
        raise InvalidIdError("event ID") from exc
