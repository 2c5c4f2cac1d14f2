"""Actor identification for ledger requests.

Real authentication lives outside this service; an upstream gateway passes
the authenticated actor's ID in a header and every handler forwards it to the
services explicitly.
"""

from dataclasses import dataclass

from django.conf import settings
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication
from rest_framework.request import Request

from ledger.domain import ActorId


@dataclass(frozen=True)
class ActorPrincipal:
    """Request user carrying the actor ID."""

    actor_id: ActorId
    is_authenticated: bool = True
    is_anonymous: bool = False


def _meta_key(header: str) -> str:
    return "HTTP_" + header.upper().replace("-", "_")


class ActorHeaderAuthentication(BaseAuthentication):
    """Authenticate a request by its actor header."""

    def authenticate(self, request: Request) -> tuple[ActorPrincipal, None] | None:
        raw = request.META.get(_meta_key(settings.LEDGER_ACTOR_HEADER))
        if not raw:
            return None
        try:
            actor_id = ActorId.from_string(raw)
        except ValueError as exc:
            raise exceptions.AuthenticationFailed("Invalid actor ID") from exc
        return ActorPrincipal(actor_id=actor_id), None

    def authenticate_header(self, request: Request) -> str:
        return settings.LEDGER_ACTOR_HEADER
