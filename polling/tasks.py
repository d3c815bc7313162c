"""
Celery tasks for the polling app.

- `delete_session_batch` / `reset_session_batch`: one bounded cascade step
  each; a step that filled its batch enqueues the next one itself.
- `end_stale_sessions`: periodic sweep (see CELERY_BEAT_SCHEDULE) that
  force-ends active sessions past the staleness cutoff.
"""
from datetime import timedelta
import logging

from celery import shared_task
from django.conf import settings
from django.db import OperationalError
from django.utils import timezone

from . import cascade
from .models import Session

logger = logging.getLogger(__name__)


@shared_task(autoretry_for=(OperationalError,), retry_backoff=True, max_retries=5)
def delete_session_batch(session_id: int) -> str:
    """Delete one batch of a session's rows; re-enqueue while work remains."""
    if cascade.delete_step(session_id):
        delete_session_batch.delay(session_id)
        return f"Session {session_id}: delete continues"
    return f"Session {session_id}: deleted"


@shared_task(autoretry_for=(OperationalError,), retry_backoff=True, max_retries=5)
def reset_session_batch(session_id: int) -> str:
    """Delete one batch of a session's audience data; re-enqueue while work remains."""
    if cascade.reset_step(session_id):
        reset_session_batch.delay(session_id)
        return f"Session {session_id}: reset continues"
    return f"Session {session_id}: reset"


def stale_cutoff(now=None):
    now = now or timezone.now()
    return now - timedelta(hours=settings.POLLING_STALE_SESSION_HOURS)


@shared_task
def end_stale_sessions() -> int:
    """
    End every active session whose staleness clock is older than the cutoff.

    The clock is the creation time unless POLLING_STALE_SESSION_CLOCK is
    "activity", in which case the last write to the session counts.
    Returns the number of sessions ended.
    """
    clock = "updated_at" if settings.POLLING_STALE_SESSION_CLOCK == "activity" else "created_at"
    qs = Session.objects.filter(status=Session.STATUS_ACTIVE, **{f"{clock}__lt": stale_cutoff()})

    count = 0
    for session in qs.iterator():
        session.status = Session.STATUS_ENDED
        session.save(update_fields=["status", "updated_at"])
        count += 1
    if count:
        logger.info("Ended %s stale session(s)", count)
    return count
