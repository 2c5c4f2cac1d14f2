"""Unit tests for MutationGuard.

Run with: pytest tests/test_guard.py -v
"""

import uuid
from datetime import timedelta

import pytest
from conftest import T0

from ledger.domain import EventId
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
    AddonData,
    AllInData,
    HandCompleteData,
    HandsPassedData,
    RebuyData,
    SessionPauseData,
    SessionResumeData,
    StackUpdateData,
)
from ledger.domain.guard import MutationGuard


def at(minutes: int):
    return T0 + timedelta(minutes=minutes)


@pytest.fixture
def session(make_session):
    return make_session()


@pytest.fixture
def events(session, make_events):
    return make_events(
        session,
        (10, StackUpdateData(stack=9000)),
        (20, RebuyData(cost=5000, chips=5000)),
        (30, SessionPauseData()),
        (40, SessionResumeData()),
        (50, HandsPassedData(count=2)),
        (55, HandCompleteData()),
    )


@pytest.fixture
def guard(session, events):
    return MutationGuard(session, events, at(60))


class TestGuardSetup:
    """Tests for guard construction."""

    def test_ended_session_rejected(self, make_session, make_events):
        """Events of an ended session cannot be changed."""
        ended = make_session(is_active=False, end_time=at(30), cash_out=100)
        with pytest.raises(SessionEndedError):
            MutationGuard(ended, make_events(ended), at(60))

    def test_unknown_event(self, guard):
        """An ID outside the session raises EventNotFoundError."""
        with pytest.raises(EventNotFoundError):
            guard.plan_deletion(EventId(uuid.uuid4()))


class TestPlanUpdate:
    """Tests for amount and time edits."""

    def test_start_is_immutable(self, guard, events):
        """session_start cannot be edited."""
        with pytest.raises(ImmutableEventError):
            guard.plan_update(events[0].id, recorded_at=at(1))

    def test_amount_on_hand_event_rejected(self, guard, events):
        """hands_passed carries no editable amount."""
        with pytest.raises(AmountNotEditableError):
            guard.plan_update(events[5].id, amount=3)

    def test_stack_amount_edit(self, guard, events):
        """A stack_update amount edit rewrites the stack."""
        plan = guard.plan_update(events[1].id, amount=12000)
        assert plan.payload == StackUpdateData(stack=12000)
        assert plan.recorded_at == events[1].recorded_at
        assert plan.buy_in_delta == 0

    def test_rebuy_amount_edit_reports_delta(self, guard, events):
        """Raising a rebuy cost by 1000 moves the buy-in total by 1000."""
        plan = guard.plan_update(events[2].id, amount=6000)
        assert plan.payload == RebuyData(cost=6000, chips=5000)
        assert plan.buy_in_delta == 1000

    def test_negative_amount_rejected(self, guard, events):
        """A negative stack is invalid."""
        with pytest.raises(InvalidPayloadError):
            guard.plan_update(events[1].id, amount=-1)

    def test_time_strictly_between_neighbours(self, guard, events):
        """A time between the neighbours is accepted."""
        plan = guard.plan_update(events[2].id, recorded_at=at(15))
        assert plan.recorded_at == at(15)

    @pytest.mark.parametrize("minutes", [10, 5])
    def test_time_not_after_previous(self, guard, events, minutes):
        """A time at or before the previous event is rejected."""
        with pytest.raises(InvalidRecordedAtError, match="after the previous"):
            guard.plan_update(events[2].id, recorded_at=at(minutes))

    @pytest.mark.parametrize("minutes", [30, 35])
    def test_time_not_before_next(self, guard, events, minutes):
        """A time at or after the next event is rejected."""
        with pytest.raises(InvalidRecordedAtError, match="before the next"):
            guard.plan_update(events[2].id, recorded_at=at(minutes))

    def test_last_event_cannot_move_into_future(self, guard, events):
        """The newest event may not be moved past now."""
        with pytest.raises(InvalidRecordedAtError, match="future"):
            guard.plan_update(events[6].id, recorded_at=at(61))

    def test_all_in_amount_edit(self, session, make_events):
        """An all-in edit rewrites the pot."""
        log = make_events(session, (5, AllInData(pot_amount=800, win_probability=40, actual_result=False)))
        plan = MutationGuard(session, log, at(10)).plan_update(log[1].id, amount=900)
        assert plan.payload.pot_amount == 900
        assert plan.payload.win_probability == 40


class TestPlanDeletion:
    """Tests for deletion planning."""

    def test_start_is_immutable(self, guard, events):
        """session_start cannot be deleted."""
        with pytest.raises(ImmutableEventError):
            guard.plan_deletion(events[0].id)

    def test_rebuy_deletion_reverses_cost(self, guard, events):
        """Deleting a rebuy subtracts its cost from the buy-in."""
        plan = guard.plan_deletion(events[2].id)
        assert plan.event_ids == (events[2].id,)
        assert plan.buy_in_delta == -5000

    def test_addon_deletion_reverses_cost(self, session, make_events):
        """Deleting an addon subtracts its cost from the buy-in."""
        log = make_events(session, (5, AddonData(cost=2500)))
        assert MutationGuard(session, log, at(10)).plan_deletion(log[1].id).buy_in_delta == -2500

    def test_pause_takes_its_resume(self, guard, events):
        """Deleting a paired pause also deletes its resume."""
        plan = guard.plan_deletion(events[3].id)
        assert set(plan.event_ids) == {events[3].id, events[4].id}

    def test_resume_takes_its_pause(self, guard, events):
        """Deleting a paired resume also deletes its pause."""
        plan = guard.plan_deletion(events[4].id)
        assert set(plan.event_ids) == {events[3].id, events[4].id}

    def test_open_pause_deleted_alone(self, session, make_events):
        """An unpaired pause is deleted on its own."""
        log = make_events(session, (5, SessionPauseData()))
        assert MutationGuard(session, log, at(10)).plan_deletion(log[1].id).event_ids == (log[1].id,)

    def test_superseded_pause_deleted_alone(self, session, make_events):
        """A pause superseded by a later pause has no partner."""
        log = make_events(session, (5, SessionPauseData()), (6, SessionPauseData()), (9, SessionResumeData()))
        plan = MutationGuard(session, log, at(10)).plan_deletion(log[1].id)
        assert plan.event_ids == (log[1].id,)

    def test_latest_hand_complete(self, session, make_events):
        """The most recent hand_complete by sequence is chosen."""
        log = make_events(session, (1, HandCompleteData()), (2, HandCompleteData()), (3, HandsPassedData(count=2)))
        plan = MutationGuard(session, log, at(10)).plan_latest_hand_complete_deletion()
        assert plan.event_ids == (log[2].id,)

    def test_latest_hand_complete_missing(self, session, make_events):
        """Without hand_complete events there is nothing to delete."""
        log = make_events(session, (1, HandsPassedData(count=2)))
        with pytest.raises(NoHandCompleteError):
            MutationGuard(session, log, at(10)).plan_latest_hand_complete_deletion()
