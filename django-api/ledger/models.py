"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

import uuid

from django.db import models
from django.db.models import Q

from ledger.domain.events import PAYLOAD_VERSION, EventType
from ledger.domain.models import GameType


class PokerSession(models.Model):
    """Persistence model for a poker session aggregate."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner_id = models.UUIDField()
    store_id = models.UUIDField(blank=True, null=True)
    game_type = models.CharField(
        max_length=20,
        choices=[(choice.value, choice.name.title()) for choice in GameType],
        blank=True,
        null=True,
    )
    cash_game_id = models.UUIDField(blank=True, null=True)
    tournament_id = models.UUIDField(blank=True, null=True)
    is_active = models.BooleanField(default=True)
    start_time = models.DateTimeField()
    end_time = models.DateTimeField(blank=True, null=True)
    initial_buy_in = models.PositiveIntegerField()
    buy_in = models.IntegerField()
    cash_out = models.PositiveIntegerField(blank=True, null=True)
    final_position = models.PositiveIntegerField(blank=True, null=True)
    last_sequence = models.PositiveIntegerField(default=0)
    timer_started_at = models.DateTimeField(blank=True, null=True)
    tournament_entries = models.PositiveIntegerField(blank=True, null=True)
    tournament_remaining = models.PositiveIntegerField(blank=True, null=True)
    tournament_override_basic = models.JSONField(blank=True, null=True)
    tournament_override_blinds = models.JSONField(blank=True, null=True)
    tournament_override_prizes = models.JSONField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "sessions"
        ordering = ["-start_time"]
        indexes = [
            models.Index(fields=["owner_id", "is_active"], name="sessions_owner_active_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["owner_id"],
                condition=Q(is_active=True),
                name="unique_active_session_per_owner",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.game_type or 'session'} - {self.start_time}"


class SessionEvent(models.Model):
    """Persistence model for one append-only session event."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    session = models.ForeignKey(PokerSession, on_delete=models.CASCADE, related_name="events")
    owner_id = models.UUIDField()
    event_type = models.CharField(
        max_length=50,
        choices=[(choice.value, choice.value) for choice in EventType],
    )
    payload = models.JSONField(default=dict, blank=True)
    payload_version = models.PositiveSmallIntegerField(default=PAYLOAD_VERSION)
    sequence = models.PositiveIntegerField()
    recorded_at = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "session_events"
        ordering = ["sequence"]
        indexes = [
            models.Index(fields=["session", "event_type"], name="events_session_type_idx"),
            models.Index(fields=["owner_id"], name="events_owner_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["session", "sequence"],
                name="unique_event_sequence_per_session",
            ),
        ]

    def __str__(self) -> str:
        return f"#{self.sequence} {self.event_type}"
