from django.contrib import admin

from ledger.models import PokerSession, SessionEvent


class ReadOnlyAdminMixin:
    """Admin access is inspection only; the ledger changes through the API services."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class SessionEventInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = SessionEvent
    extra = 0
    fields = ["sequence", "event_type", "payload", "recorded_at"]
    ordering = ["sequence"]


@admin.register(PokerSession)
class PokerSessionAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ["id", "owner_id", "game_type", "is_active", "start_time", "buy_in", "cash_out"]
    list_filter = ["is_active", "game_type"]
    search_fields = ["owner_id"]
    inlines = [SessionEventInline]


@admin.register(SessionEvent)
class SessionEventAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ["session", "sequence", "event_type", "recorded_at"]
    list_filter = ["event_type"]
    search_fields = ["session__id", "owner_id"]
