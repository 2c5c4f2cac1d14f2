"""Domain error codes for the session ledger."""

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    """Stable error categories surfaced to callers."""

    CONFLICT = "CONFLICT"
    NOT_FOUND = "NOT_FOUND"
    INVALID_OPERATION = "INVALID_OPERATION"
    VALIDATION = "VALIDATION"


class ErrorCode(Enum):
    """Domain error codes."""

    SESSION_ALREADY_ACTIVE = "SESSION_ALREADY_ACTIVE"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    ACTIVE_SESSION_NOT_FOUND = "ACTIVE_SESSION_NOT_FOUND"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    NO_HAND_COMPLETE = "NO_HAND_COMPLETE"
    IMMUTABLE_EVENT = "IMMUTABLE_EVENT"
    AMOUNT_NOT_EDITABLE = "AMOUNT_NOT_EDITABLE"
    INVALID_RECORDED_AT = "INVALID_RECORDED_AT"
    SESSION_ENDED = "SESSION_ENDED"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    NOT_TOURNAMENT_SESSION = "NOT_TOURNAMENT_SESSION"
    INVALID_ID = "INVALID_ID"
    INVALID_PAYLOAD = "INVALID_PAYLOAD"

    @property
    def kind(self) -> ErrorKind:
        return _KINDS[self]


_KINDS = {
    ErrorCode.SESSION_ALREADY_ACTIVE: ErrorKind.CONFLICT,
    ErrorCode.SESSION_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.ACTIVE_SESSION_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.EVENT_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.NO_HAND_COMPLETE: ErrorKind.NOT_FOUND,
    ErrorCode.IMMUTABLE_EVENT: ErrorKind.INVALID_OPERATION,
    ErrorCode.AMOUNT_NOT_EDITABLE: ErrorKind.INVALID_OPERATION,
    ErrorCode.INVALID_RECORDED_AT: ErrorKind.INVALID_OPERATION,
    ErrorCode.SESSION_ENDED: ErrorKind.INVALID_OPERATION,
    ErrorCode.INVALID_STATE_TRANSITION: ErrorKind.INVALID_OPERATION,
    ErrorCode.NOT_TOURNAMENT_SESSION: ErrorKind.INVALID_OPERATION,
    ErrorCode.INVALID_ID: ErrorKind.VALIDATION,
    ErrorCode.INVALID_PAYLOAD: ErrorKind.VALIDATION,
}


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    @property
    def kind(self) -> ErrorKind:
        return self.code.kind

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class SessionAlreadyActiveError(DomainError):
    """Raised when the actor already has an active session."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.SESSION_ALREADY_ACTIVE,
            message="An active session already exists",
        )


class SessionNotFoundError(DomainError):
    """Raised when a session does not exist or is not owned by the actor."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            code=ErrorCode.SESSION_NOT_FOUND,
            message="Session not found",
        )
        self.session_id = session_id


class ActiveSessionNotFoundError(DomainError):
    """Raised when an operation needs an active session and none matches."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            code=ErrorCode.ACTIVE_SESSION_NOT_FOUND,
            message="Active session not found",
        )
        self.session_id = session_id


class EventNotFoundError(DomainError):
    """Raised when an event does not exist or is not owned by the actor."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class NoHandCompleteError(DomainError):
    """Raised when there is no hand_complete event left to delete."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            code=ErrorCode.NO_HAND_COMPLETE,
            message="No completed hand to delete",
        )
        self.session_id = session_id


class ImmutableEventError(DomainError):
    """Raised when editing or deleting session_start / session_end."""

    def __init__(self, event_type: str) -> None:
        super().__init__(
            code=ErrorCode.IMMUTABLE_EVENT,
            message=f"Events of type {event_type} cannot be changed",
        )
        self.event_type = event_type


class AmountNotEditableError(DomainError):
    """Raised when an amount is supplied for a type that carries none."""

    def __init__(self, event_type: str) -> None:
        super().__init__(
            code=ErrorCode.AMOUNT_NOT_EDITABLE,
            message=f"Amount of {event_type} events cannot be edited",
        )
        self.event_type = event_type


class InvalidRecordedAtError(DomainError):
    """Raised when a proposed time breaks adjacency bounds or is in the future."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_RECORDED_AT, message=message)


class SessionEndedError(DomainError):
    """Raised when mutating events of a session that has ended."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            code=ErrorCode.SESSION_ENDED,
            message="Events of an ended session cannot be changed",
        )
        self.session_id = session_id


class InvalidStateTransitionError(DomainError):
    """Raised when a lifecycle action is not allowed in the current state."""

    def __init__(self, action: str, state: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_STATE_TRANSITION,
            message=f"Cannot {action} a session that is {state}",
        )
        self.action = action
        self.state = state


class NotTournamentSessionError(DomainError):
    """Raised when a tournament-only operation targets a cash session."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            code=ErrorCode.NOT_TOURNAMENT_SESSION,
            message="Session is not a tournament",
        )
        self.session_id = session_id


class InvalidIdError(DomainError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self, field: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {field} format",
        )
        self.field = field


class InvalidPayloadError(DomainError):
    """Raised when event data fails payload validation."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_PAYLOAD, message=message)
