"""Django ORM implementation of the SessionStore."""

import logging
from collections.abc import Iterable
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Any

from django.db import IntegrityError, transaction
from django.db.models import F

from ledger import models as orm
from ledger.domain import (
    ActorId,
    EventId,
    EventPayload,
    GameType,
    NewSession,
    Session,
    SessionEvent,
    SessionId,
    TournamentOverrides,
)
from ledger.domain.errors import SessionAlreadyActiveError
from ledger.domain.events import PAYLOAD_VERSION, payload_from_document
from ledger.stores.interfaces import SessionStore
from ledger.stores.sequencer import allocate_sequence

logger = logging.getLogger(__name__)

ACTIVE_SESSION_CONSTRAINT = "unique_active_session_per_owner"

_UPDATABLE_SESSION_FIELDS = frozenset(
    {
        "timer_started_at",
        "tournament_entries",
        "tournament_remaining",
        "tournament_override_basic",
        "tournament_override_blinds",
        "tournament_override_prizes",
    }
)


def to_session(row: orm.PokerSession) -> Session:
    return Session(
        id=SessionId(row.id),
        owner_id=ActorId(row.owner_id),
        game_type=GameType(row.game_type) if row.game_type else None,
        is_active=row.is_active,
        start_time=row.start_time,
        initial_buy_in=row.initial_buy_in,
        buy_in=row.buy_in,
        end_time=row.end_time,
        cash_out=row.cash_out,
        final_position=row.final_position,
        store_id=row.store_id,
        cash_game_id=row.cash_game_id,
        tournament_id=row.tournament_id,
        timer_started_at=row.timer_started_at,
        tournament_entries=row.tournament_entries,
        tournament_remaining=row.tournament_remaining,
        overrides=TournamentOverrides(
            basic=row.tournament_override_basic,
            blinds=row.tournament_override_blinds,
            prizes=row.tournament_override_prizes,
        ),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def to_event(row: orm.SessionEvent) -> SessionEvent:
    return SessionEvent(
        id=EventId(row.id),
        session_id=SessionId(row.session_id),
        owner_id=ActorId(row.owner_id),
        payload=payload_from_document(row.event_type, row.payload),
        sequence=row.sequence,
        recorded_at=row.recorded_at,
        created_at=row.created_at,
    )


class DjangoSessionStore(SessionStore):
    """Relational session store using Django ORM.

    Uses ``select_for_update`` for row locks; on backends without row locks
    (SQLite) writers are already serialized by the database.
    """

    def transaction(self) -> AbstractContextManager[None]:
        return transaction.atomic()

    def create_session(self, new_session: NewSession) -> Session:
        try:
            with transaction.atomic():
                row = orm.PokerSession.objects.create(
                    owner_id=new_session.owner_id.value,
                    store_id=new_session.store_id,
                    game_type=new_session.game_type.value if new_session.game_type else None,
                    cash_game_id=new_session.cash_game_id,
                    tournament_id=new_session.tournament_id,
                    is_active=True,
                    start_time=new_session.start_time,
                    initial_buy_in=new_session.buy_in,
                    buy_in=new_session.buy_in,
                    timer_started_at=new_session.timer_started_at,
                )
        except IntegrityError as exc:
            if ACTIVE_SESSION_CONSTRAINT in str(exc) or self._has_active(new_session.owner_id):
                raise SessionAlreadyActiveError() from exc
            raise
        return to_session(row)

    def _has_active(self, owner_id: ActorId) -> bool:
        return orm.PokerSession.objects.filter(owner_id=owner_id.value, is_active=True).exists()

    def get_session(
        self, session_id: SessionId, owner_id: ActorId, *, for_update: bool = False
    ) -> Session | None:
        queryset = orm.PokerSession.objects.filter(pk=session_id.value, owner_id=owner_id.value)
        if for_update:
            queryset = queryset.select_for_update()
        row = queryset.first()
        return to_session(row) if row else None

    def find_active_session(self, owner_id: ActorId) -> Session | None:
        row = orm.PokerSession.objects.filter(owner_id=owner_id.value, is_active=True).first()
        return to_session(row) if row else None

    def append_event(self, session: Session, payload: EventPayload, recorded_at: datetime) -> SessionEvent:
        with transaction.atomic():
            sequence = allocate_sequence(session.id.value)
            row = orm.SessionEvent.objects.create(
                session_id=session.id.value,
                owner_id=session.owner_id.value,
                event_type=payload.event_type.value,
                payload=payload.to_document(),
                payload_version=PAYLOAD_VERSION,
                sequence=sequence,
                recorded_at=recorded_at,
            )
        logger.debug("Appended %s #%d to session %s", payload.event_type.value, sequence, session.id)
        return to_event(row)

    def list_events(self, session_id: SessionId) -> list[SessionEvent]:
        rows = orm.SessionEvent.objects.filter(session_id=session_id.value).order_by("sequence")
        return [to_event(row) for row in rows]

    def get_event(self, event_id: EventId, owner_id: ActorId) -> SessionEvent | None:
        row = orm.SessionEvent.objects.filter(pk=event_id.value, owner_id=owner_id.value).first()
        return to_event(row) if row else None

    def update_event(self, event_id: EventId, payload: EventPayload, recorded_at: datetime) -> SessionEvent:
        row = orm.SessionEvent.objects.get(pk=event_id.value)
        row.payload = payload.to_document()
        row.payload_version = PAYLOAD_VERSION
        row.recorded_at = recorded_at
        row.save(update_fields=["payload", "payload_version", "recorded_at"])
        return to_event(row)

    def delete_events(self, event_ids: Iterable[EventId]) -> None:
        # Delete row by row so post_delete receivers see every event.
        for row in orm.SessionEvent.objects.filter(pk__in=[event_id.value for event_id in event_ids]):
            row.delete()

    def adjust_buy_in(self, session_id: SessionId, delta: int) -> int:
        rows = orm.PokerSession.objects.filter(pk=session_id.value)
        if delta:
            rows.update(buy_in=F("buy_in") + delta)
        return rows.values_list("buy_in", flat=True).get()

    def close_session(
        self,
        session_id: SessionId,
        *,
        end_time: datetime,
        cash_out: int,
        final_position: int | None,
    ) -> Session:
        row = orm.PokerSession.objects.get(pk=session_id.value)
        row.is_active = False
        row.end_time = end_time
        row.cash_out = cash_out
        row.final_position = final_position
        row.save(update_fields=["is_active", "end_time", "cash_out", "final_position", "updated_at"])
        return to_session(row)

    def update_session(self, session_id: SessionId, **changes: Any) -> Session:
        unknown = set(changes) - _UPDATABLE_SESSION_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")
        row = orm.PokerSession.objects.get(pk=session_id.value)
        for name, value in changes.items():
            setattr(row, name, value)
        row.save(update_fields=[*changes, "updated_at"])
        return to_session(row)
