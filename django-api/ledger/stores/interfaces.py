"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Any

from ledger.domain import ActorId, EventId, EventPayload, NewSession, Session, SessionEvent, SessionId


class SessionStore(ABC):
    """Interface for session and session-event persistence."""

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Return a context manager wrapping one all-or-nothing unit of work."""
        ...

    @abstractmethod
    def create_session(self, new_session: NewSession) -> Session:
        """Insert a new active session.

        Raises:
            SessionAlreadyActiveError: If the owner already has an active session.
        """
        ...

    @abstractmethod
    def get_session(
        self, session_id: SessionId, owner_id: ActorId, *, for_update: bool = False
    ) -> Session | None:
        """Return the owner's session, optionally row-locked, or None."""
        ...

    @abstractmethod
    def find_active_session(self, owner_id: ActorId) -> Session | None:
        """Return the owner's active session, or None."""
        ...

    @abstractmethod
    def append_event(self, session: Session, payload: EventPayload, recorded_at: datetime) -> SessionEvent:
        """Assign the next sequence number and insert the event atomically."""
        ...

    @abstractmethod
    def list_events(self, session_id: SessionId) -> list[SessionEvent]:
        """Return all events of a session ordered by sequence ascending."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId, owner_id: ActorId) -> SessionEvent | None:
        """Return the owner's event by ID, or None if not found."""
        ...

    @abstractmethod
    def update_event(self, event_id: EventId, payload: EventPayload, recorded_at: datetime) -> SessionEvent:
        """Overwrite an event's payload and recorded time."""
        ...

    @abstractmethod
    def delete_events(self, event_ids: Iterable[EventId]) -> None:
        """Delete the given events."""
        ...

    @abstractmethod
    def adjust_buy_in(self, session_id: SessionId, delta: int) -> int:
        """Add ``delta`` to the aggregate buy-in total and return the new total."""
        ...

    @abstractmethod
    def close_session(
        self,
        session_id: SessionId,
        *,
        end_time: datetime,
        cash_out: int,
        final_position: int | None,
    ) -> Session:
        """Mark a session ended with its terminal aggregate fields."""
        ...

    @abstractmethod
    def update_session(self, session_id: SessionId, **changes: Any) -> Session:
        """Write tournament snapshot, timer and field changes."""
        ...
