"""Tests for the ledger admin.

Run with: pytest tests/test_admin.py -v
"""

import pytest

from ledger import models as orm

pytestmark = pytest.mark.django_db


@pytest.fixture
def started(session_service, event_service, actor):
    started = session_service.start_session(actor, buy_in=10000)
    rebuy = event_service.record_rebuy(actor, str(started.session_id), cost=5000)
    return started, rebuy


class TestLedgerAdmin:
    """The admin can inspect the ledger but never change it."""

    def test_event_changelist_is_viewable(self, admin_client, started):
        """Superusers can list events."""
        assert admin_client.get("/admin/ledger/sessionevent/").status_code == 200

    def test_events_cannot_be_deleted(self, admin_client, started):
        """Deleting session_start or a rebuy through the admin is forbidden."""
        session, rebuy = started
        for event_id in (session.event_id, rebuy.event.id):
            response = admin_client.post(f"/admin/ledger/sessionevent/{event_id}/delete/", {"post": "yes"})
            assert response.status_code == 403
        assert orm.SessionEvent.objects.filter(session_id=session.session_id.value).count() == 2
        assert orm.PokerSession.objects.get(pk=session.session_id.value).buy_in == 15000

    def test_events_cannot_be_edited(self, admin_client, started):
        """The change form rejects writes."""
        session, _ = started
        response = admin_client.post(
            f"/admin/ledger/sessionevent/{session.event_id}/change/",
            {"sequence": 99, "event_type": "hand_complete", "payload": "{}"},
        )
        assert response.status_code == 403
        assert orm.SessionEvent.objects.get(pk=session.event_id.value).sequence == 1

    def test_sessions_cannot_be_added_or_deleted(self, admin_client, started):
        """Sessions are neither created nor deleted through the admin."""
        session, _ = started
        assert admin_client.get("/admin/ledger/pokersession/add/").status_code == 403
        response = admin_client.post(f"/admin/ledger/pokersession/{session.session_id}/delete/", {"post": "yes"})
        assert response.status_code == 403
        assert orm.PokerSession.objects.filter(pk=session.session_id.value).exists()
