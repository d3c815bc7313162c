"""
Question operations for a session.

Every write re-reads the owning session under a row lock inside the same
transaction, so the mutability decision in `guards` is never based on a
status older than the request itself.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from django.db import transaction
from rest_framework.exceptions import ValidationError

from audience import stores

from .exceptions import QuestionNotFound, SessionNotFound
from .guards import plan_new_question, plan_question_update, require_draft
from .models import Question, Session

logger = logging.getLogger(__name__)


def _lock_session(session_id: int) -> Session:
    try:
        return Session.objects.select_for_update().get(pk=session_id)
    except Session.DoesNotExist:
        raise SessionNotFound()


def get_question(question_id: int) -> Question:
    try:
        return Question.objects.get(pk=question_id)
    except Question.DoesNotExist:
        raise QuestionNotFound()


def list_questions(session_id: int) -> List[Question]:
    if not Session.objects.filter(pk=session_id).exists():
        raise SessionNotFound()
    return list(Question.objects.filter(session_id=session_id).order_by("sort_order", "id"))


@transaction.atomic
def create_question(session_id: int, fields: Dict[str, Any]) -> Question:
    """Append a question at the end of the session (draft only)."""
    session = _lock_session(session_id)
    values = plan_new_question(session, fields)
    sort_order = Question.objects.filter(session=session).count()
    question = Question.objects.create(session=session, sort_order=sort_order, **values)
    logger.info("Question %s created in session %s at position %s", question.id, session.id, sort_order)
    return question


@transaction.atomic
def update_question(question_id: int, changes: Dict[str, Any]) -> Question:
    question = get_question(question_id)
    session = _lock_session(question.session_id)
    try:
        question.refresh_from_db()
    except Question.DoesNotExist:
        raise QuestionNotFound()
    updates = plan_question_update(session, question, changes)
    if not updates:
        return question
    for name, value in updates.items():
        setattr(question, name, value)
    question.save(update_fields=[*updates, "updated_at"])
    return question


@transaction.atomic
def delete_question(question_id: int) -> None:
    """
    Delete a question and its responses (draft only).

    Remaining questions keep their `sort_order`; gaps are left in place.
    """
    question = get_question(question_id)
    session = _lock_session(question.session_id)
    require_draft(session)

    if session.active_question_id == question.id:
        session.active_question = None
        session.question_started_at = None
        session.save(update_fields=["active_question", "question_started_at", "updated_at"])

    removed = stores.delete_responses_for_question(question.id)
    question.delete()
    logger.info("Question %s deleted from session %s (%s responses)", question_id, session.id, removed)


@transaction.atomic
def reorder_questions(session_id: int, ordered_ids: List[int]) -> List[Question]:
    """Rewrite `sort_order` so the questions follow `ordered_ids` (draft only)."""
    session = _lock_session(session_id)
    require_draft(session)

    if len(set(ordered_ids)) != len(ordered_ids):
        raise ValidationError({"question_ids": "Duplicate question ids."})

    by_id = Question.objects.in_bulk(ordered_ids)
    foreign = [qid for qid in ordered_ids if qid not in by_id or by_id[qid].session_id != session.id]
    if foreign:
        raise ValidationError({"question_ids": f"Not questions of this session: {foreign}"})

    questions = []
    for position, qid in enumerate(ordered_ids):
        question = by_id[qid]
        question.sort_order = position
        questions.append(question)
    Question.objects.bulk_update(questions, ["sort_order"])
    return questions


@transaction.atomic
def reset_question_results(question_id: int) -> int:
    """
    Remove every response to one question so it can be asked again.
    Allowed in any status; returns how many responses were removed.
    """
    question = get_question(question_id)
    removed = stores.delete_responses_for_question(question.id)
    logger.info("Question %s results reset (%s responses)", question.id, removed)
    return removed
