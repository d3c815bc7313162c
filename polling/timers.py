"""
Active question pointer and countdown.

The server only stamps when a question went live.  The remaining time is
derived by every reader from the question's limit, that stamp and the
reader's own clock, using `remaining_seconds` below; clients must use the
same rounding (ceil) so all screens show the same second.
"""
from __future__ import annotations

import datetime as dt
import logging
import math
from typing import Optional

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from .exceptions import QuestionNotFound, SessionNotFound
from .models import Question, Session

logger = logging.getLogger(__name__)


def to_epoch_ms(value: Optional[dt.datetime]) -> Optional[int]:
    if value is None:
        return None
    return int(value.timestamp() * 1000)


def remaining_seconds(time_limit: Optional[int], started_at_ms: Optional[int], now_ms: int) -> Optional[int]:
    """
    Seconds left on a timed question.

    `remaining = max(0, ceil(time_limit - (now - started_at) / 1000))`;
    None when the question is untimed or was never started.
    """
    if not time_limit or time_limit <= 0 or started_at_ms is None:
        return None
    return max(0, math.ceil(time_limit - (now_ms - started_at_ms) / 1000))


def question_remaining_seconds(session: Session, now: Optional[dt.datetime] = None) -> Optional[int]:
    """Remaining time of the session's active question at `now`."""
    question = session.active_question
    if question is None:
        return None
    now = now or timezone.now()
    return remaining_seconds(question.time_limit, to_epoch_ms(session.question_started_at), to_epoch_ms(now))


@transaction.atomic
def set_active_question(session_id: int, question_id: Optional[int]) -> Session:
    """
    Point the session at `question_id` (stamping the start time) or clear
    the pointer when `question_id` is None.
    """
    try:
        session = Session.objects.select_for_update().get(pk=session_id)
    except Session.DoesNotExist:
        raise SessionNotFound()

    if question_id is not None:
        try:
            question = Question.objects.get(pk=question_id)
        except Question.DoesNotExist:
            raise QuestionNotFound()
        if question.session_id != session.id:
            raise ValidationError({"question_id": "Question does not belong to this session."})
        session.active_question = question
        session.question_started_at = timezone.now()
    else:
        session.active_question = None
        session.question_started_at = None

    session.active_question_index = None
    session.save(update_fields=["active_question", "question_started_at", "active_question_index", "updated_at"])
    logger.info("Session %s active question -> %s", session.id, question_id)
    return session
