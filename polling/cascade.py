"""
Bounded cascade steps for deleting or resetting a session.

A step removes at most one batch from the first collection that still has
rows, in this order:

    responses -> participants -> questions -> the session row

(reset stops after participants).  When a full batch came back the step
reports that more work remains and the caller schedules another step;
otherwise it moves on to the next collection.  No cursor is kept: the
phase is whichever collection is still non-empty, so re-running a step
after a crash converges to the same end state.
"""
from __future__ import annotations

import logging

from django.conf import settings
from django.db import transaction

from audience import stores

from .models import Question, Session

logger = logging.getLogger(__name__)


def _delete_questions(session_id: int, limit: int) -> int:
    # The pointer must go before the row it points at.
    Session.objects.filter(pk=session_id, active_question__isnull=False).update(
        active_question=None, question_started_at=None, active_question_index=None
    )
    ids = list(
        Question.objects.filter(session_id=session_id).order_by("pk").values_list("pk", flat=True)[:limit]
    )
    if ids:
        Question.objects.filter(pk__in=ids).delete()
    return len(ids)


RESET_PHASES = (
    ("responses", stores.delete_responses_for_session),
    ("participants", stores.delete_participants_for_session),
)
DELETE_PHASES = RESET_PHASES + (("questions", _delete_questions),)


def _run_phases(session_id: int, phases, batch_size: int) -> bool:
    for name, delete_batch in phases:
        removed = delete_batch(session_id, batch_size)
        if removed:
            logger.info("Cascade on session %s removed %s %s", session_id, removed, name)
        if removed >= batch_size:
            return True
    return False


@transaction.atomic
def delete_step(session_id: int, batch_size: int | None = None) -> bool:
    """
    Run one full-delete step.  Returns True when another step is needed.
    """
    batch_size = batch_size or settings.POLLING_DELETE_BATCH_SIZE
    if _run_phases(session_id, DELETE_PHASES, batch_size):
        return True
    deleted, _ = Session.objects.filter(pk=session_id).delete()
    if deleted:
        logger.info("Session %s deleted", session_id)
    return False


@transaction.atomic
def reset_step(session_id: int, batch_size: int | None = None) -> bool:
    """
    Run one reset step (questions and the session row are kept).
    Returns True when another step is needed.
    """
    batch_size = batch_size or settings.POLLING_DELETE_BATCH_SIZE
    more = _run_phases(session_id, RESET_PHASES, batch_size)
    if not more:
        logger.info("Session %s reset complete", session_id)
    return more
