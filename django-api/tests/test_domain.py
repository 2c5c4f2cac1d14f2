"""Unit tests for domain primitives.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

import uuid

import pytest

from ledger.domain import ActorId, EventType, Position, SessionId
from ledger.domain.errors import (
    ErrorKind,
    InvalidIdError,
    InvalidStateTransitionError,
    SessionAlreadyActiveError,
    SessionEndedError,
)
from ledger.domain.events import (
    AddonData,
    AllInData,
    HandCompleteData,
    HandsPassedData,
    PlayerSeatedData,
    RebuyData,
    SessionEndData,
    StackUpdateData,
    payload_from_document,
)


class TestIdentifiers:
    """Tests for ID value objects."""

    def test_from_string_parses_uuid(self):
        """SessionId.from_string accepts a canonical UUID."""
        value = uuid.uuid4()
        assert SessionId.from_string(str(value)).value == value

    def test_from_string_rejects_garbage(self):
        """ActorId.from_string raises ValueError for a malformed UUID."""
        with pytest.raises(ValueError):
            ActorId.from_string("not-a-uuid")

    def test_str_is_the_uuid(self):
        """IDs render as their bare UUID."""
        value = uuid.uuid4()
        assert str(SessionId(value)) == str(value)


class TestPayloads:
    """Tests for typed event payloads."""

    def test_seat_number_bounds(self):
        """PlayerSeatedData accepts seats 1 to 9 only."""
        PlayerSeatedData(seat_number=9, player_name="Ann")
        with pytest.raises(ValueError):
            PlayerSeatedData(seat_number=10, player_name="Ann")
        with pytest.raises(ValueError):
            PlayerSeatedData(seat_number=0, player_name="Ann")

    def test_player_name_required(self):
        """PlayerSeatedData rejects a blank name."""
        with pytest.raises(ValueError):
            PlayerSeatedData(seat_number=1, player_name="  ")

    def test_hands_passed_count_positive(self):
        """HandsPassedData rejects a zero count."""
        with pytest.raises(ValueError):
            HandsPassedData(count=0)

    def test_cash_out_non_negative(self):
        """SessionEndData allows zero but not a negative cash-out."""
        assert SessionEndData(cash_out=0).cash_out == 0
        with pytest.raises(ValueError):
            SessionEndData(cash_out=-1)

    def test_hand_complete_coerces_position(self):
        """HandCompleteData turns a position string into a Position."""
        assert HandCompleteData(position="+1").position is Position.UTG_1

    def test_hand_complete_rejects_unknown_position(self):
        """HandCompleteData rejects a position outside the table."""
        with pytest.raises(ValueError):
            HandCompleteData(position="DEALER")

    def test_all_in_runout_bounds(self):
        """AllInData rejects more runout wins than runs."""
        with pytest.raises(ValueError):
            AllInData(pot_amount=100, win_probability=50, actual_result=True, run_it_times=2, wins_in_runout=3)

    def test_all_in_probability_bounds(self):
        """AllInData rejects a probability above 100."""
        with pytest.raises(ValueError):
            AllInData(pot_amount=100, win_probability=100.5, actual_result=False)

    def test_amount_maps_to_type_field(self):
        """The editable amount is stack, cost or pot depending on the type."""
        assert StackUpdateData(stack=5).amount == 5
        assert RebuyData(cost=7, chips=9).amount == 7
        assert AllInData(pot_amount=11, win_probability=10, actual_result=True).amount == 11
        assert HandsPassedData(count=3).amount is None

    def test_with_amount_keeps_other_fields(self):
        """with_amount replaces only the cost of a rebuy."""
        edited = RebuyData(cost=5000, chips=4000).with_amount(6000)
        assert edited == RebuyData(cost=6000, chips=4000)

    def test_with_amount_rejects_types_without_amount(self):
        """with_amount raises for a payload with no amount field."""
        with pytest.raises(ValueError):
            HandsPassedData(count=3).with_amount(4)


class TestPayloadDocuments:
    """Tests for stored JSON documents."""

    def test_stack_update_document_uses_amount_key(self):
        """stack_update stores its stack under ``amount``."""
        assert StackUpdateData(stack=12000).to_document() == {"amount": 12000}
        assert payload_from_document("stack_update", {"amount": 12000}) == StackUpdateData(stack=12000)

    def test_document_drops_missing_optionals(self):
        """Absent optional values are not written."""
        assert AddonData(cost=2000).to_document() == {"cost": 2000}

    def test_legacy_buy_in_document(self):
        """A rebuy stored with only ``amount`` reads it as the cost."""
        payload = payload_from_document(EventType.REBUY, {"amount": 5000})
        assert payload == RebuyData(cost=5000)

    def test_document_with_uuid(self):
        """UUIDs are stored as strings and parsed back."""
        player = uuid.uuid4()
        document = PlayerSeatedData(seat_number=3, player_name="Bo", player_id=player).to_document()
        assert document["player_id"] == str(player)
        assert payload_from_document("player_seated", document).player_id == player

    def test_malformed_document_raises_value_error(self):
        """A document missing required keys raises ValueError."""
        with pytest.raises(ValueError):
            payload_from_document("hands_passed", {})

    def test_unknown_type_raises_value_error(self):
        """An unknown event type raises ValueError."""
        with pytest.raises(ValueError):
            payload_from_document("coffee_break", {})


class TestErrors:
    """Tests for domain error categories."""

    def test_kinds(self):
        """Each error maps to its caller-facing category."""
        assert SessionAlreadyActiveError().kind is ErrorKind.CONFLICT
        assert SessionEndedError("x").kind is ErrorKind.INVALID_OPERATION
        assert InvalidIdError("session ID").kind is ErrorKind.VALIDATION

    def test_messages(self):
        """Messages name the offending input without internals."""
        assert InvalidIdError("session ID").message == "Invalid session ID format"
        error = InvalidStateTransitionError(action="pause", state="paused")
        assert error.message == "Cannot pause a session that is paused"
