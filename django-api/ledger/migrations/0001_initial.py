import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="PokerSession",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("owner_id", models.UUIDField()),
                ("store_id", models.UUIDField(blank=True, null=True)),
                (
                    "game_type",
                    models.CharField(
                        blank=True,
                        choices=[("cash", "Cash"), ("tournament", "Tournament")],
                        max_length=20,
                        null=True,
                    ),
                ),
                ("cash_game_id", models.UUIDField(blank=True, null=True)),
                ("tournament_id", models.UUIDField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("start_time", models.DateTimeField()),
                ("end_time", models.DateTimeField(blank=True, null=True)),
                ("initial_buy_in", models.PositiveIntegerField()),
                ("buy_in", models.IntegerField()),
                ("cash_out", models.PositiveIntegerField(blank=True, null=True)),
                ("final_position", models.PositiveIntegerField(blank=True, null=True)),
                ("last_sequence", models.PositiveIntegerField(default=0)),
                ("timer_started_at", models.DateTimeField(blank=True, null=True)),
                ("tournament_entries", models.PositiveIntegerField(blank=True, null=True)),
                ("tournament_remaining", models.PositiveIntegerField(blank=True, null=True)),
                ("tournament_override_basic", models.JSONField(blank=True, null=True)),
                ("tournament_override_blinds", models.JSONField(blank=True, null=True)),
                ("tournament_override_prizes", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "sessions",
                "ordering": ["-start_time"],
                "indexes": [models.Index(fields=["owner_id", "is_active"], name="sessions_owner_active_idx")],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("is_active", True)),
                        fields=("owner_id",),
                        name="unique_active_session_per_owner",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="SessionEvent",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("owner_id", models.UUIDField()),
                (
                    "event_type",
                    models.CharField(
                        choices=[
                            ("session_start", "session_start"),
                            ("session_pause", "session_pause"),
                            ("session_resume", "session_resume"),
                            ("session_end", "session_end"),
                            ("player_seated", "player_seated"),
                            ("hand_recorded", "hand_recorded"),
                            ("hands_passed", "hands_passed"),
                            ("hand_complete", "hand_complete"),
                            ("stack_update", "stack_update"),
                            ("rebuy", "rebuy"),
                            ("addon", "addon"),
                            ("all_in", "all_in"),
                        ],
                        max_length=50,
                    ),
                ),
                ("payload", models.JSONField(blank=True, default=dict)),
                ("payload_version", models.PositiveSmallIntegerField(default=1)),
                ("sequence", models.PositiveIntegerField()),
                ("recorded_at", models.DateTimeField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "session",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="events",
                        to="ledger.pokersession",
                    ),
                ),
            ],
            options={
                "db_table": "session_events",
                "ordering": ["sequence"],
                "indexes": [
                    models.Index(fields=["session", "event_type"], name="events_session_type_idx"),
                    models.Index(fields=["owner_id"], name="events_owner_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("session", "sequence"),
                        name="unique_event_sequence_per_session",
                    )
                ],
            },
        ),
    ]
