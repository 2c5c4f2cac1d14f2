"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging

from rest_framework import serializers, status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from ledger.domain import ActorId
from ledger.domain.errors import DomainError, ErrorKind
from ledger.domain.results import DeletionResult, RecordedEvent
from ledger.handlers import serializers as io
from ledger.services.event_service import EventService
from ledger.services.session_service import SessionService
from ledger.stores.django_store import DjangoSessionStore

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_OPERATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
}


def session_service() -> SessionService:
    return SessionService(DjangoSessionStore())


def event_service() -> EventService:
    return EventService(DjangoSessionStore())


def error_response(error: DomainError) -> Response:
    return Response(
        {"error": {"code": error.code.value, "message": error.message}},
        status=ERROR_STATUS[error.kind],
    )


def recorded_response(result: RecordedEvent) -> Response:
    body = {"event": io.SessionEventSerializer(result.event).data}
    if result.new_buy_in_total is not None:
        body["new_buy_in_total"] = result.new_buy_in_total
    return Response(body, status=status.HTTP_201_CREATED)


def deletion_response(result: DeletionResult) -> Response:
    return Response({"deleted_event_ids": [str(event_id) for event_id in result.deleted_event_ids]})


class LedgerAPIView(APIView):
    """Base view: resolves the actor and maps domain errors to responses."""

    session_service_factory = staticmethod(session_service)
    event_service_factory = staticmethod(event_service)

    @property
    def sessions(self) -> SessionService:
        return self.session_service_factory()

    @property
    def events(self) -> EventService:
        return self.event_service_factory()

    def actor(self, request: Request) -> ActorId:
        return request.user.actor_id

    def validated(self, serializer_class: type[serializers.Serializer], request: Request) -> dict:
        serializer = serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    def handle_exception(self, exc):
        if isinstance(exc, DomainError):
            if exc.kind in (ErrorKind.CONFLICT, ErrorKind.INVALID_OPERATION):
                logger.warning("%s %s rejected: %s", self.request.method, self.request.path, exc)
            return error_response(exc)
        return super().handle_exception(exc)


# Sessions


class SessionStartView(LedgerAPIView):
    """Handler for POST /api/sessions"""

    def post(self, request: Request) -> Response:
        data = self.validated(io.StartSessionSerializer, request)
        result = self.sessions.start_session(self.actor(request), **data)
        return Response(
            {
                "session_id": str(result.session_id),
                "event_id": str(result.event_id),
                "start_time": serializers.DateTimeField().to_representation(result.start_time),
            },
            status=status.HTTP_201_CREATED,
        )


class CurrentSessionView(LedgerAPIView):
    """Handler for GET /api/sessions/active"""

    def get(self, request: Request) -> Response:
        view = self.sessions.get_active_session(self.actor(request))
        if view is None:
            return Response({"session": None})
        return Response(io.ActiveSessionSerializer(view).data)


class SessionEndView(LedgerAPIView):
    """Handler for POST /api/sessions/{session_id}/end"""

    def post(self, request: Request, session_id: str) -> Response:
        data = self.validated(io.EndSessionSerializer, request)
        result = self.sessions.end_session(self.actor(request), session_id, **data)
        return Response(
            {
                "session_id": str(result.session_id),
                "event_id": str(result.event_id),
                "end_time": serializers.DateTimeField().to_representation(result.end_time),
                "profit_loss": result.profit_loss,
            }
        )


class SessionPauseView(LedgerAPIView):
    """Handler for POST /api/sessions/{session_id}/pause"""

    def post(self, request: Request, session_id: str) -> Response:
        return recorded_response(self.sessions.pause_session(self.actor(request), session_id))


class SessionResumeView(LedgerAPIView):
    """Handler for POST /api/sessions/{session_id}/resume"""

    def post(self, request: Request, session_id: str) -> Response:
        return recorded_response(self.sessions.resume_session(self.actor(request), session_id))


# Event recording


class SeatPlayerView(LedgerAPIView):
    """Handler for POST /api/sessions/{session_id}/seats"""

    def post(self, request: Request, session_id: str) -> Response:
        data = self.validated(io.SeatPlayerSerializer, request)
        return recorded_response(self.events.seat_player(self.actor(request), session_id, **data))


class StackUpdateView(LedgerAPIView):
    """Handler for POST /api/sessions/{session_id}/stack"""

    def post(self, request: Request, session_id: str) -> Response:
        data = self.validated(io.UpdateStackSerializer, request)
        return recorded_response(self.events.update_stack(self.actor(request), session_id, **data))


class RebuyView(LedgerAPIView):
    """Handler for POST /api/sessions/{session_id}/rebuys"""

    def post(self, request: Request, session_id: str) -> Response:
        data = self.validated(io.BuyInSerializer, request)
        return recorded_response(self.events.record_rebuy(self.actor(request), session_id, **data))


class AddonView(LedgerAPIView):
    """Handler for POST /api/sessions/{session_id}/addons"""

    def post(self, request: Request, session_id: str) -> Response:
        data = self.validated(io.BuyInSerializer, request)
        return recorded_response(self.events.record_addon(self.actor(request), session_id, **data))


class HandsPassedView(LedgerAPIView):
    """Handler for POST /api/sessions/{session_id}/hands-passed"""

    def post(self, request: Request, session_id: str) -> Response:
        data = self.validated(io.HandsPassedSerializer, request)
        return recorded_response(self.events.record_hands_passed(self.actor(request), session_id, **data))


class HandRecordedView(LedgerAPIView):
    """Handler for POST /api/sessions/{session_id}/hands"""

    def post(self, request: Request, session_id: str) -> Response:
        data = self.validated(io.RecordHandSerializer, request)
        return recorded_response(self.events.record_hand(self.actor(request), session_id, **data))


class HandCompleteView(LedgerAPIView):
    """Handler for POST /api/sessions/{session_id}/hand-completes"""

    def post(self, request: Request, session_id: str) -> Response:
        data = self.validated(io.HandCompleteSerializer, request)
        return recorded_response(self.events.record_hand_complete(self.actor(request), session_id, **data))


class LatestHandCompleteView(LedgerAPIView):
    """Handler for DELETE /api/sessions/{session_id}/hand-completes/latest"""

    def delete(self, request: Request, session_id: str) -> Response:
        return deletion_response(self.events.delete_latest_hand_complete(self.actor(request), session_id))


class AllInView(LedgerAPIView):
    """Handler for POST /api/sessions/{session_id}/all-ins"""

    def post(self, request: Request, session_id: str) -> Response:
        data = self.validated(io.AllInSerializer, request)
        return recorded_response(self.events.record_all_in(self.actor(request), session_id, **data))


# Queries


class SessionEventListView(LedgerAPIView):
    """Handler for GET /api/sessions/{session_id}/events"""

    def get(self, request: Request, session_id: str) -> Response:
        events = self.events.list_by_session(self.actor(request), session_id)
        return Response({"events": io.SessionEventSerializer(events, many=True).data})


class SessionTimelineView(LedgerAPIView):
    """Handler for GET /api/sessions/{session_id}/timeline"""

    def get(self, request: Request, session_id: str) -> Response:
        items = self.events.timeline(self.actor(request), session_id)
        return Response({"items": [io.timeline_item_data(item) for item in items]})


# Event edits


class EventDetailView(LedgerAPIView):
    """Handler for PATCH and DELETE /api/events/{event_id}"""

    def patch(self, request: Request, event_id: str) -> Response:
        data = self.validated(io.UpdateEventSerializer, request)
        result = self.events.update_event(self.actor(request), event_id, **data)
        body = {"event_id": str(result.event_id)}
        if result.new_amount is not None:
            body["amount"] = result.new_amount
        if result.new_recorded_at is not None:
            body["recorded_at"] = serializers.DateTimeField().to_representation(result.new_recorded_at)
        if result.new_buy_in_total is not None:
            body["new_buy_in_total"] = result.new_buy_in_total
        return Response(body)

    def delete(self, request: Request, event_id: str) -> Response:
        return deletion_response(self.events.delete_event(self.actor(request), event_id))


# Tournament


class TournamentBasicView(LedgerAPIView):
    """Handler for PUT /api/sessions/{session_id}/tournament/basic"""

    def put(self, request: Request, session_id: str) -> Response:
        data = self.validated(io.TournamentBasicSerializer, request)
        session = self.sessions.update_tournament_override_basic(self.actor(request), session_id, dict(data))
        return Response(io.SessionSerializer(session).data)


class TournamentBlindsView(LedgerAPIView):
    """Handler for PUT /api/sessions/{session_id}/tournament/blinds"""

    def put(self, request: Request, session_id: str) -> Response:
        data = self.validated(io.BlindsOverrideSerializer, request)
        levels = [dict(level) for level in data["blind_levels"]]
        session = self.sessions.update_tournament_override_blinds(self.actor(request), session_id, levels)
        return Response(io.SessionSerializer(session).data)


class TournamentPrizesView(LedgerAPIView):
    """Handler for PUT /api/sessions/{session_id}/tournament/prizes"""

    def put(self, request: Request, session_id: str) -> Response:
        serializer = io.PrizesOverrideSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        # Round-trip through the serializer to get plain JSON-ready dicts.
        structures = serializer.data["prize_structures"]
        session = self.sessions.update_tournament_override_prizes(self.actor(request), session_id, structures)
        return Response(io.SessionSerializer(session).data)


class TournamentOverridesView(LedgerAPIView):
    """Handler for DELETE /api/sessions/{session_id}/tournament/overrides"""

    def delete(self, request: Request, session_id: str) -> Response:
        data = self.validated(io.ClearOverridesSerializer, request)
        session = self.sessions.clear_tournament_overrides(self.actor(request), session_id, **data)
        return Response(io.SessionSerializer(session).data)


class TournamentTimerView(LedgerAPIView):
    """Handler for PUT /api/sessions/{session_id}/tournament/timer"""

    def put(self, request: Request, session_id: str) -> Response:
        data = self.validated(io.TimerSerializer, request)
        session = self.sessions.update_timer_started_at(self.actor(request), session_id, data["timer_started_at"])
        return Response(io.SessionSerializer(session).data)


class TournamentFieldView(LedgerAPIView):
    """Handler for PATCH /api/sessions/{session_id}/tournament/field"""

    def patch(self, request: Request, session_id: str) -> Response:
        data = self.validated(io.TournamentFieldSerializer, request)
        session = self.sessions.update_tournament_field(self.actor(request), session_id, **data)
        return Response(io.SessionSerializer(session).data)
