"""Django signals for ledger persistence logging."""

import logging

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from ledger.models import PokerSession, SessionEvent

logger = logging.getLogger(__name__)


@receiver(post_save, sender=SessionEvent)
def log_event_saved(sender, instance, created, **kwargs):
    """Log every event write with its session and sequence."""
    logger.debug(
        "%s event %s #%d in session %s",
        "Inserted" if created else "Updated",
        instance.event_type,
        instance.sequence,
        instance.session_id,
    )


@receiver(post_delete, sender=SessionEvent)
def log_event_deleted(sender, instance, **kwargs):
    logger.debug("Deleted event %s #%d from session %s", instance.event_type, instance.sequence, instance.session_id)


@receiver(post_save, sender=PokerSession)
def log_session_saved(sender, instance, created, **kwargs):
    if created:
        logger.debug("Created session %s for owner %s", instance.pk, instance.owner_id)
    elif not instance.is_active:
        logger.debug("Session %s is closed (buy-in %d)", instance.pk, instance.buy_in)
