"""Per-session sequence allocation.

Each session row carries a ``last_sequence`` counter. Allocation is one
``UPDATE ... SET last_sequence = last_sequence + 1`` followed by a read of the
new value inside the caller's transaction, so the row stays locked until the
event insert commits and two appends to the same session can never observe the
same number. Deleted events leave gaps; the counter never moves backwards.
"""

from uuid import UUID

from django.db import transaction
from django.db.models import F

from ledger.models import PokerSession


def allocate_sequence(session_pk: UUID) -> int:
    """Reserve and return the next sequence number for a session.

    Raises:
        TransactionManagementError: If called outside an atomic block.
        PokerSession.DoesNotExist: If the session row is gone.
    """
    if not transaction.get_connection().in_atomic_block:
        raise transaction.TransactionManagementError("Sequence allocation requires an atomic block")

    rows = PokerSession.objects.filter(pk=session_pk)
    if not rows.update(last_sequence=F("last_sequence") + 1):
        raise PokerSession.DoesNotExist(f"Session {session_pk} does not exist")
    return rows.values_list("last_sequence", flat=True).get()
