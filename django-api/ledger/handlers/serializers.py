"""Serializers for request validation and domain model responses."""

from rest_framework import serializers

from ledger.domain import GameType, Position
from ledger.domain.derivation import BreakItem, EventItem, HandsItem, TimelineItem
from ledger.domain.events import MAX_SEAT_NUMBER

# Requests


class StartSessionSerializer(serializers.Serializer):
    store_id = serializers.UUIDField(required=False, allow_null=True)
    game_type = serializers.ChoiceField(
        choices=[choice.value for choice in GameType], required=False, allow_null=True
    )
    cash_game_id = serializers.UUIDField(required=False, allow_null=True)
    tournament_id = serializers.UUIDField(required=False, allow_null=True)
    buy_in = serializers.IntegerField(min_value=1)
    initial_stack = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    timer_started_at = serializers.DateTimeField(required=False, allow_null=True)


class EndSessionSerializer(serializers.Serializer):
    cash_out = serializers.IntegerField(min_value=0)
    final_position = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    recorded_at = serializers.DateTimeField(required=False)


class SeatPlayerSerializer(serializers.Serializer):
    seat_number = serializers.IntegerField(min_value=1, max_value=MAX_SEAT_NUMBER)
    player_name = serializers.CharField(min_length=1)
    player_id = serializers.UUIDField(required=False, allow_null=True)


class UpdateStackSerializer(serializers.Serializer):
    amount = serializers.IntegerField(min_value=1)
    recorded_at = serializers.DateTimeField(required=False)


class BuyInSerializer(serializers.Serializer):
    """Rebuy or addon: ``cost`` is currency paid, ``chips`` the stack received."""

    cost = serializers.IntegerField(min_value=1)
    chips = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    recorded_at = serializers.DateTimeField(required=False)


class HandsPassedSerializer(serializers.Serializer):
    count = serializers.IntegerField(min_value=1)


class RecordHandSerializer(serializers.Serializer):
    hand_id = serializers.UUIDField()


class HandCompleteSerializer(serializers.Serializer):
    position = serializers.ChoiceField(choices=[choice.value for choice in Position], required=False)


class AllInSerializer(serializers.Serializer):
    pot_amount = serializers.IntegerField(min_value=1)
    win_probability = serializers.FloatField(min_value=0, max_value=100)
    actual_result = serializers.BooleanField()
    run_it_times = serializers.IntegerField(min_value=1, max_value=10, required=False, allow_null=True)
    wins_in_runout = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    recorded_at = serializers.DateTimeField(required=False)

    def validate(self, attrs):
        run_it_times = attrs.get("run_it_times")
        wins = attrs.get("wins_in_runout")
        if run_it_times is not None and wins is not None and wins > run_it_times:
            raise serializers.ValidationError({"wins_in_runout": "Cannot exceed run_it_times."})
        return attrs


class UpdateEventSerializer(serializers.Serializer):
    amount = serializers.IntegerField(min_value=0, required=False)
    recorded_at = serializers.DateTimeField(required=False)


class TournamentBasicSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False, allow_null=True)
    buy_in = serializers.IntegerField(min_value=1)
    rake = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    starting_stack = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class BlindLevelSerializer(serializers.Serializer):
    level = serializers.IntegerField(min_value=1)
    is_break = serializers.BooleanField(default=False)
    small_blind = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    big_blind = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    ante = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    duration_minutes = serializers.IntegerField(min_value=1)


class PrizeItemSerializer(serializers.Serializer):
    prize_type = serializers.ChoiceField(choices=["percentage", "fixed_amount", "custom_prize"])
    percentage = serializers.FloatField(required=False, allow_null=True)
    fixed_amount = serializers.IntegerField(required=False, allow_null=True)
    custom_prize_label = serializers.CharField(required=False, allow_null=True)
    custom_prize_value = serializers.IntegerField(required=False, allow_null=True)
    sort_order = serializers.IntegerField(default=0)


class PrizeLevelSerializer(serializers.Serializer):
    min_position = serializers.IntegerField(min_value=1)
    max_position = serializers.IntegerField(min_value=1)
    sort_order = serializers.IntegerField(default=0)
    prize_items = PrizeItemSerializer(many=True)


class PrizeStructureSerializer(serializers.Serializer):
    min_entrants = serializers.IntegerField(min_value=1)
    max_entrants = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    sort_order = serializers.IntegerField(default=0)
    prize_levels = PrizeLevelSerializer(many=True)


class BlindsOverrideSerializer(serializers.Serializer):
    blind_levels = BlindLevelSerializer(many=True)


class PrizesOverrideSerializer(serializers.Serializer):
    prize_structures = PrizeStructureSerializer(many=True)


class ClearOverridesSerializer(serializers.Serializer):
    clear_basic = serializers.BooleanField(default=False)
    clear_blinds = serializers.BooleanField(default=False)
    clear_prizes = serializers.BooleanField(default=False)


class TimerSerializer(serializers.Serializer):
    timer_started_at = serializers.DateTimeField(allow_null=True)


class TournamentFieldSerializer(serializers.Serializer):
    entries = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    remaining = serializers.IntegerField(min_value=1, required=False, allow_null=True)


# Responses


class SessionEventSerializer(serializers.Serializer):
    """Serializer for SessionEvent domain model."""

    id = serializers.UUIDField(source="id.value")
    session_id = serializers.UUIDField(source="session_id.value")
    event_type = serializers.SerializerMethodField()
    payload = serializers.SerializerMethodField()
    sequence = serializers.IntegerField()
    recorded_at = serializers.DateTimeField()

    def get_event_type(self, event) -> str:
        return event.event_type.value

    def get_payload(self, event) -> dict:
        return event.payload.to_document()


class SessionSerializer(serializers.Serializer):
    """Serializer for Session domain model."""

    id = serializers.UUIDField(source="id.value")
    game_type = serializers.SerializerMethodField()
    is_active = serializers.BooleanField()
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()
    initial_buy_in = serializers.IntegerField()
    buy_in = serializers.IntegerField()
    cash_out = serializers.IntegerField()
    final_position = serializers.IntegerField()
    store_id = serializers.UUIDField()
    cash_game_id = serializers.UUIDField()
    tournament_id = serializers.UUIDField()
    timer_started_at = serializers.DateTimeField()
    tournament_entries = serializers.IntegerField()
    tournament_remaining = serializers.IntegerField()
    tournament_override_basic = serializers.JSONField(source="overrides.basic")
    tournament_override_blinds = serializers.JSONField(source="overrides.blinds")
    tournament_override_prizes = serializers.JSONField(source="overrides.prizes")

    def get_game_type(self, session) -> str | None:
        return session.game_type.value if session.game_type else None


class LiveViewSerializer(serializers.Serializer):
    """Serializer for the derived LiveView."""

    current_stack = serializers.IntegerField()
    is_paused = serializers.BooleanField()
    elapsed_minutes = serializers.IntegerField()
    paused_seconds = serializers.SerializerMethodField()
    hand_count = serializers.IntegerField()
    last_hand = serializers.SerializerMethodField()

    def get_paused_seconds(self, live) -> int:
        return int(live.paused_duration.total_seconds())

    def get_last_hand(self, live) -> dict | None:
        if live.last_hand is None:
            return None
        position = live.last_hand.position
        return {
            "recorded_at": serializers.DateTimeField().to_representation(live.last_hand.recorded_at),
            "position": position.value if position else None,
        }


class ActiveSessionSerializer(serializers.Serializer):
    session = SessionSerializer()
    events = SessionEventSerializer(many=True)
    live = LiveViewSerializer()


def timeline_item_data(item: TimelineItem) -> dict:
    """Render one grouped timeline item."""
    if isinstance(item, HandsItem):
        return {
            "kind": "hands",
            "count": item.count,
            "started_at": serializers.DateTimeField().to_representation(item.started_at),
            "ended_at": serializers.DateTimeField().to_representation(item.ended_at),
        }
    if isinstance(item, BreakItem):
        return {
            "kind": "break" if item.resume is not None else "ongoing_break",
            "pause": SessionEventSerializer(item.pause).data,
            "resume": SessionEventSerializer(item.resume).data if item.resume is not None else None,
            "duration_minutes": item.duration_minutes,
        }
    if isinstance(item, EventItem):
        return {"kind": "event", "event": SessionEventSerializer(item.event).data}
    raise TypeError(f"Unknown timeline item {item!r}")
