"""Integration tests for DjangoSessionStore and sequence allocation.

Run with: pytest tests/test_store.py -v
"""

import pytest
from conftest import T0
from django.db import IntegrityError, transaction

from ledger import models as orm
from ledger.domain import NewSession
from ledger.domain.errors import SessionAlreadyActiveError
from ledger.domain.events import HandCompleteData, RebuyData, SessionStartData, StackUpdateData
from ledger.stores.sequencer import allocate_sequence

pytestmark = pytest.mark.django_db


@pytest.fixture
def session(store, actor):
    return store.create_session(NewSession(owner_id=actor, buy_in=10000, start_time=T0))


class TestCreateSession:
    """Tests for session creation."""

    def test_creates_active_session(self, session, actor):
        """A new session is active with buy-in equal to the initial buy-in."""
        assert session.is_active
        assert session.owner_id == actor
        assert session.initial_buy_in == session.buy_in == 10000

    def test_second_active_session_conflicts(self, store, session, actor):
        """The partial unique index allows one active session per owner."""
        with pytest.raises(SessionAlreadyActiveError):
            store.create_session(NewSession(owner_id=actor, buy_in=500, start_time=T0))

    def test_ended_sessions_do_not_conflict(self, store, session, actor):
        """An ended session leaves room for a new active one."""
        store.close_session(session.id, end_time=T0, cash_out=0, final_position=None)
        again = store.create_session(NewSession(owner_id=actor, buy_in=500, start_time=T0))
        assert again.is_active

    def test_other_owners_do_not_conflict(self, store, session, other_actor):
        """Different owners may each have an active session."""
        assert store.create_session(NewSession(owner_id=other_actor, buy_in=500, start_time=T0)).is_active


class TestSequencing:
    """Tests for per-session sequence numbers."""

    def test_sequences_strictly_increase(self, store, session):
        """Appends receive 1, 2, 3 in call order."""
        first = store.append_event(session, SessionStartData(), T0)
        second = store.append_event(session, HandCompleteData(), T0)
        third = store.append_event(session, StackUpdateData(stack=5), T0)
        assert [first.sequence, second.sequence, third.sequence] == [1, 2, 3]

    def test_deleted_numbers_are_not_reused(self, store, session):
        """A delete leaves a gap; the next append still moves forward."""
        store.append_event(session, SessionStartData(), T0)
        doomed = store.append_event(session, HandCompleteData(), T0)
        store.delete_events([doomed.id])
        assert store.append_event(session, HandCompleteData(), T0).sequence == 3

    def test_sessions_have_independent_sequences(self, store, session, other_actor):
        """Each session numbers its own events from 1."""
        store.append_event(session, SessionStartData(), T0)
        other = store.create_session(NewSession(owner_id=other_actor, buy_in=1, start_time=T0))
        assert store.append_event(other, SessionStartData(), T0).sequence == 1

    @pytest.mark.django_db(transaction=True)
    def test_allocation_requires_atomic_block(self, session):
        """allocate_sequence refuses to run in autocommit mode."""
        with pytest.raises(transaction.TransactionManagementError):
            allocate_sequence(session.id.value)

    def test_duplicate_sequence_rejected_by_database(self, store, session):
        """The (session, sequence) pair is unique."""
        event = store.append_event(session, SessionStartData(), T0)
        with pytest.raises(IntegrityError), transaction.atomic():
            orm.SessionEvent.objects.create(
                session_id=session.id.value,
                owner_id=session.owner_id.value,
                event_type="hand_complete",
                payload={},
                sequence=event.sequence,
                recorded_at=T0,
            )


class TestQueries:
    """Tests for reads and writes through the store."""

    def test_list_events_in_sequence_order(self, store, session):
        """list_events returns sequence order, not time order."""
        store.append_event(session, SessionStartData(), T0.replace(hour=22))
        store.append_event(session, HandCompleteData(), T0)
        assert [event.sequence for event in store.list_events(session.id)] == [1, 2]

    def test_get_session_scoped_to_owner(self, store, session, other_actor):
        """A foreign owner cannot see the session."""
        assert store.get_session(session.id, other_actor) is None

    def test_get_event_scoped_to_owner(self, store, session, other_actor):
        """A foreign owner cannot see the event."""
        event = store.append_event(session, SessionStartData(), T0)
        assert store.get_event(event.id, other_actor) is None

    def test_adjust_buy_in(self, store, session):
        """adjust_buy_in adds the delta and returns the new total."""
        store.append_event(session, RebuyData(cost=5000), T0)
        assert store.adjust_buy_in(session.id, 5000) == 15000
        assert store.adjust_buy_in(session.id, -5000) == 10000

    def test_update_session_rejects_other_fields(self, store, session):
        """Only tournament progress and snapshot fields are writable."""
        with pytest.raises(ValueError):
            store.update_session(session.id, buy_in=1)
