# audience/services.py
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from django.db import transaction
from django.utils import timezone

from polling.exceptions import InvalidState, ParticipantNotFound, QuestionNotFound, SessionNotFound
from polling.models import Question, Session
from polling.timers import remaining_seconds, to_epoch_ms

from . import stores
from .models import Participant, Response

logger = logging.getLogger(__name__)


@transaction.atomic
def join_session(session_id: int, unique_id: str, name: Optional[str] = None) -> Participant:
    """
    Register a device in a session, or return its existing participant.

    Re-joins are always allowed; new devices are refused once the session
    has ended or `max_participants` is reached.
    """
    try:
        session = Session.objects.select_for_update().get(pk=session_id)
    except Session.DoesNotExist:
        raise SessionNotFound()
    if session.is_ended:
        raise InvalidState("This session has ended.")

    existing = Participant.objects.filter(session=session, unique_id=unique_id).first()
    if existing:
        if name and name != existing.name:
            existing.name = name
            existing.save(update_fields=["name"])
        return existing

    if session.max_participants:
        if Participant.objects.filter(session=session).count() >= session.max_participants:
            raise InvalidState("Session is full.")

    participant = Participant.objects.create(session=session, unique_id=unique_id, name=name or None)
    logger.info("Participant %s joined session %s", participant.id, session.id)
    return participant


@transaction.atomic
def submit_response(session_id: int, question_id: int, participant_id: int, answer: str) -> Response:
    """Record (or replace) a participant's answer to the live question."""
    try:
        session = Session.objects.get(pk=session_id)
    except Session.DoesNotExist:
        raise SessionNotFound()
    if session.status != Session.STATUS_ACTIVE:
        raise InvalidState("Session is not active.")
    if session.active_question_id != question_id:
        raise InvalidState("This question is no longer active.")

    try:
        question = Question.objects.get(pk=question_id)
    except Question.DoesNotExist:
        raise QuestionNotFound()

    now = timezone.now()
    left = remaining_seconds(question.time_limit, to_epoch_ms(session.question_started_at), to_epoch_ms(now))
    if left == 0:
        raise InvalidState("Time is up for this question.")

    if not Participant.objects.filter(pk=participant_id, session_id=session.id).exists():
        raise InvalidState("Participant has not joined this session.")

    response, created = Response.objects.update_or_create(
        question_id=question_id,
        participant_id=participant_id,
        defaults={
            "session_id": session.id,
            "answer": answer,
            "answered_at": now,
            "question_started_at": session.question_started_at,
        },
    )
    logger.debug("Response %s %s for question %s", response.id, "created" if created else "updated", question_id)
    return response


# -----------------------------
# Reads
# -----------------------------

def _require_session(session_id: int) -> None:
    if not Session.objects.filter(pk=session_id).exists():
        raise SessionNotFound()


def list_participants(session_id: int) -> List[Participant]:
    _require_session(session_id)
    return list(stores.list_participants(session_id))


def get_participant(session_id: int, unique_id: str) -> Participant:
    """The participant a device joined as; lets a reloaded page resume."""
    _require_session(session_id)
    participant = stores.find_participant(session_id, unique_id)
    if participant is None:
        raise ParticipantNotFound()
    return participant


def has_responded(question_id: int, participant_id: int) -> bool:
    if not Question.objects.filter(pk=question_id).exists():
        raise QuestionNotFound()
    return stores.has_responded(question_id, participant_id)


def response_counts(session_id: int) -> Dict[int, int]:
    _require_session(session_id)
    return stores.response_counts_by_question(session_id)
