"""Session event types and their payloads.

Every event type owns exactly one payload dataclass. Payloads validate
themselves at construction and convert to/from the JSON document stored in
``session_events.payload``.
"""

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, ClassVar, Self
from uuid import UUID

PAYLOAD_VERSION = 1

MAX_SEAT_NUMBER = 9


class EventType(str, Enum):
    """Closed set of session event types."""

    SESSION_START = "session_start"
    SESSION_PAUSE = "session_pause"
    SESSION_RESUME = "session_resume"
    SESSION_END = "session_end"
    PLAYER_SEATED = "player_seated"
    HAND_RECORDED = "hand_recorded"
    HANDS_PASSED = "hands_passed"
    HAND_COMPLETE = "hand_complete"
    STACK_UPDATE = "stack_update"
    REBUY = "rebuy"
    ADDON = "addon"
    ALL_IN = "all_in"


class Position(str, Enum):
    """Table positions for a 9-max game."""

    SB = "SB"
    BB = "BB"
    UTG = "UTG"
    UTG_1 = "+1"
    UTG_2 = "+2"
    LJ = "LJ"
    HJ = "HJ"
    CO = "CO"
    BTN = "BTN"


IMMUTABLE_TYPES = frozenset({EventType.SESSION_START, EventType.SESSION_END})

AMOUNT_EDITABLE_TYPES = frozenset(
    {EventType.STACK_UPDATE, EventType.REBUY, EventType.ADDON, EventType.ALL_IN}
)

BUY_IN_TYPES = frozenset({EventType.REBUY, EventType.ADDON})


def _require_positive(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer")
    if value < 1:
        raise ValueError(f"{name} must be a positive integer")


def _require_non_negative(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer")
    if value < 0:
        raise ValueError(f"{name} cannot be negative")


class EventPayload:
    """Base for typed payloads.

    ``amount_field`` names the attribute an amount edit writes to; it is
    ``None`` for types that carry no editable amount.
    """

    event_type: ClassVar[EventType]
    amount_field: ClassVar[str | None] = None

    @property
    def amount(self) -> int | None:
        if self.amount_field is None:
            return None
        return getattr(self, self.amount_field)

    def with_amount(self, amount: int) -> Self:
        if self.amount_field is None:
            raise ValueError(f"{self.event_type.value} has no amount")
        return replace(self, **{self.amount_field: amount})

    def to_document(self) -> dict[str, Any]:
        document = {}
        for field in fields(self):
            value = getattr(self, field.name)
            if value is None:
                continue
            if isinstance(value, UUID):
                value = str(value)
            elif isinstance(value, Enum):
                value = value.value
            document[field.name] = value
        return document

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> Self:
        known = {field.name for field in fields(cls)}
        return cls(**{key: value for key, value in document.items() if key in known})


@dataclass(frozen=True)
class SessionStartData(EventPayload):
    event_type: ClassVar[EventType] = EventType.SESSION_START


@dataclass(frozen=True)
class SessionPauseData(EventPayload):
    event_type: ClassVar[EventType] = EventType.SESSION_PAUSE


@dataclass(frozen=True)
class SessionResumeData(EventPayload):
    event_type: ClassVar[EventType] = EventType.SESSION_RESUME


@dataclass(frozen=True)
class SessionEndData(EventPayload):
    event_type: ClassVar[EventType] = EventType.SESSION_END

    cash_out: int

    def __post_init__(self) -> None:
        _require_non_negative("cash_out", self.cash_out)


@dataclass(frozen=True)
class PlayerSeatedData(EventPayload):
    event_type: ClassVar[EventType] = EventType.PLAYER_SEATED

    seat_number: int
    player_name: str
    player_id: UUID | None = None

    def __post_init__(self) -> None:
        _require_positive("seat_number", self.seat_number)
        if self.seat_number > MAX_SEAT_NUMBER:
            raise ValueError(f"seat_number must be between 1 and {MAX_SEAT_NUMBER}")
        if not self.player_name or not self.player_name.strip():
            raise ValueError("player_name cannot be empty")
        if isinstance(self.player_id, str):
            object.__setattr__(self, "player_id", UUID(self.player_id))


@dataclass(frozen=True)
class HandRecordedData(EventPayload):
    event_type: ClassVar[EventType] = EventType.HAND_RECORDED

    hand_id: UUID

    def __post_init__(self) -> None:
        if isinstance(self.hand_id, str):
            object.__setattr__(self, "hand_id", UUID(self.hand_id))


@dataclass(frozen=True)
class HandsPassedData(EventPayload):
    event_type: ClassVar[EventType] = EventType.HANDS_PASSED

    count: int

    def __post_init__(self) -> None:
        _require_positive("count", self.count)


@dataclass(frozen=True)
class HandCompleteData(EventPayload):
    event_type: ClassVar[EventType] = EventType.HAND_COMPLETE

    position: Position | None = None

    def __post_init__(self) -> None:
        if self.position is not None and not isinstance(self.position, Position):
            object.__setattr__(self, "position", Position(self.position))


@dataclass(frozen=True)
class StackUpdateData(EventPayload):
    event_type: ClassVar[EventType] = EventType.STACK_UPDATE
    amount_field: ClassVar[str | None] = "stack"

    stack: int

    def __post_init__(self) -> None:
        _require_non_negative("stack", self.stack)

    def to_document(self) -> dict[str, Any]:
        return {"amount": self.stack}

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> Self:
        return cls(stack=document["amount"])


@dataclass(frozen=True)
class _BuyInData(EventPayload):
    amount_field: ClassVar[str | None] = "cost"

    cost: int
    chips: int | None = None

    def __post_init__(self) -> None:
        _require_non_negative("cost", self.cost)
        if self.chips is not None:
            _require_positive("chips", self.chips)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> Self:
        # Legacy documents carry only ``amount``, which always equalled the cost.
        cost = document.get("cost", document.get("amount"))
        return cls(cost=cost, chips=document.get("chips"))


@dataclass(frozen=True)
class RebuyData(_BuyInData):
    event_type: ClassVar[EventType] = EventType.REBUY


@dataclass(frozen=True)
class AddonData(_BuyInData):
    event_type: ClassVar[EventType] = EventType.ADDON


@dataclass(frozen=True)
class AllInData(EventPayload):
    event_type: ClassVar[EventType] = EventType.ALL_IN
    amount_field: ClassVar[str | None] = "pot_amount"

    pot_amount: int
    win_probability: float
    actual_result: bool
    run_it_times: int | None = None
    wins_in_runout: int | None = None

    def __post_init__(self) -> None:
        _require_non_negative("pot_amount", self.pot_amount)
        if not 0 <= self.win_probability <= 100:
            raise ValueError("win_probability must be between 0 and 100")
        if self.run_it_times is not None and not 1 <= self.run_it_times <= 10:
            raise ValueError("run_it_times must be between 1 and 10")
        if self.wins_in_runout is not None:
            _require_non_negative("wins_in_runout", self.wins_in_runout)
            if self.run_it_times is not None and self.wins_in_runout > self.run_it_times:
                raise ValueError("wins_in_runout cannot exceed run_it_times")


PAYLOAD_TYPES: dict[EventType, type[EventPayload]] = {
    EventType.SESSION_START: SessionStartData,
    EventType.SESSION_PAUSE: SessionPauseData,
    EventType.SESSION_RESUME: SessionResumeData,
    EventType.SESSION_END: SessionEndData,
    EventType.PLAYER_SEATED: PlayerSeatedData,
    EventType.HAND_RECORDED: HandRecordedData,
    EventType.HANDS_PASSED: HandsPassedData,
    EventType.HAND_COMPLETE: HandCompleteData,
    EventType.STACK_UPDATE: StackUpdateData,
    EventType.REBUY: RebuyData,
    EventType.ADDON: AddonData,
    EventType.ALL_IN: AllInData,
}


def payload_from_document(event_type: EventType | str, document: dict[str, Any] | None) -> EventPayload:
    """Build the typed payload for ``event_type`` from a stored document.

    Raises:
        ValueError: If the type is unknown or the document does not fit it.
    """
    payload_type = PAYLOAD_TYPES[EventType(event_type)]
    try:
        return payload_type.from_document(document or {})
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Malformed {payload_type.event_type.value} payload") from exc
