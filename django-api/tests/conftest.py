"""Pytest configuration and shared fixtures."""

import itertools
import uuid
from datetime import UTC, datetime, timedelta

import pytest
from rest_framework.test import APIClient

from ledger.domain import ActorId, EventId, Session, SessionEvent, SessionId
from ledger.domain.events import SessionStartData
from ledger.services.event_service import EventService
from ledger.services.session_service import SessionService
from ledger.stores.django_store import DjangoSessionStore

T0 = datetime(2024, 3, 1, 19, 0, tzinfo=UTC)


class FakeClock:
    """Clock that only moves when a test says so."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> datetime:
        self.now += timedelta(**delta)
        return self.now


@pytest.fixture
def actor() -> ActorId:
    return ActorId(uuid.uuid4())


@pytest.fixture
def other_actor() -> ActorId:
    return ActorId(uuid.uuid4())


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(T0)


@pytest.fixture
def store() -> DjangoSessionStore:
    return DjangoSessionStore()


@pytest.fixture
def session_service(store, clock) -> SessionService:
    return SessionService(store, clock=clock)


@pytest.fixture
def event_service(store, clock) -> EventService:
    return EventService(store, clock=clock)


@pytest.fixture
def api_client(actor) -> APIClient:
    client = APIClient()
    client.credentials(HTTP_X_ACTOR_ID=str(actor))
    return client


@pytest.fixture
def make_session(actor):
    """Build an in-memory Session for pure domain tests."""

    def _make(**overrides) -> Session:
        values = {
            "id": SessionId(uuid.uuid4()),
            "owner_id": actor,
            "game_type": None,
            "is_active": True,
            "start_time": T0,
            "initial_buy_in": 10000,
            "buy_in": 10000,
        }
        values.update(overrides)
        return Session(**values)

    return _make


@pytest.fixture
def make_events(actor):
    """Build an ordered in-memory event log from (minutes after T0, payload) pairs.

    A ``session_start`` at T0 is always sequence 1.
    """

    def _make(session: Session, *entries) -> list[SessionEvent]:
        sequence = itertools.count(1)
        log = [(0, SessionStartData()), *entries]
        return [
            SessionEvent(
                id=EventId(uuid.uuid4()),
                session_id=session.id,
                owner_id=actor,
                payload=payload,
                sequence=next(sequence),
                recorded_at=T0 + timedelta(minutes=minutes),
            )
            for minutes, payload in log
        ]

    return _make
