"""
Question mutability rules.

What a presenter may change on a question depends on the session status:

=========  ==========================  ===============================  ==========================
status     structural                  title / show_results / time      MC display fields
                                       limit
=========  ==========================  ===============================  ==========================
draft      allowed                     allowed                          allowed
active     rejected                    allowed                          allowed (content only)
ended      rejected                    rejected                         rejected
=========  ==========================  ===============================  ==========================

Structural means changing `type` or `allow_multiple`, and creating,
deleting or reordering questions.  The MC display fields are `options`,
`option_images`, `chart_layout` and `correct_answer`.

`plan_question_update` never writes; it returns the exact field values to
store, so a rejected update leaves the row untouched.
"""
from __future__ import annotations

import logging
from typing import Any, Dict

from rest_framework.exceptions import ValidationError

from .exceptions import InvalidState
from .models import Question, Session

logger = logging.getLogger(__name__)

STRUCTURAL_FIELDS = ("type", "allow_multiple")
FREE_FIELDS = ("title", "show_results", "time_limit")
MC_DISPLAY_FIELDS = ("options", "option_images", "chart_layout", "correct_answer")
EDITABLE_FIELDS = STRUCTURAL_FIELDS + FREE_FIELDS + MC_DISPLAY_FIELDS

NOT_IN_DRAFT = "Cannot modify questions: session is not in draft."
SESSION_ENDED = "Cannot modify questions: session has ended."
TYPE_WHILE_LIVE = "Cannot change type while live."


def _reject(message: str) -> None:
    logger.debug("Rejected question change: %s", message)
    raise InvalidState(message)


def require_draft(session: Session) -> None:
    """Gate structural operations (create, delete, reorder)."""
    if session.is_ended:
        _reject(SESSION_ENDED)
    if not session.is_draft:
        _reject(NOT_IN_DRAFT)


def normalize_time_limit(value):
    """Zero, negative or missing limits all mean untimed."""
    if value is None or value <= 0:
        return None
    return int(value)


def _check_mc_shape(question_type: str, values: Dict[str, Any]) -> None:
    if question_type == Question.TYPE_MULTIPLE_CHOICE:
        return
    stray = [name for name in Question.MC_FIELDS if values.get(name) is not None]
    if stray:
        raise ValidationError({name: "Only multiple-choice questions accept this field." for name in stray})


def _check_option_images(options, images) -> None:
    if images is not None and len(images) > len(options or []):
        raise ValidationError({"option_images": "There are more option images than options."})


def plan_new_question(session: Session, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Return the field values for a question about to be appended to `session`."""
    require_draft(session)
    values = dict(fields)
    values["time_limit"] = normalize_time_limit(values.get("time_limit"))
    _check_mc_shape(values["type"], values)
    if values["type"] == Question.TYPE_MULTIPLE_CHOICE:
        values["options"] = values.get("options") or []
    _check_option_images(values.get("options"), values.get("option_images"))
    return values


def plan_question_update(session: Session, question: Question, changes: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate `changes` against the session status and return the field
    values to write.

    Raises InvalidState when the status forbids a requested change, and
    ValidationError when MC-only fields are sent for a non-MC question.
    """
    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError({name: "This field cannot be updated." for name in sorted(unknown)})

    if session.is_ended:
        _reject(SESSION_ENDED)

    updates = dict(changes)
    if "time_limit" in updates:
        updates["time_limit"] = normalize_time_limit(updates["time_limit"])

    # Re-sending the current value of a structural field is not a change.
    for name in STRUCTURAL_FIELDS:
        if name in updates and updates[name] == getattr(question, name):
            del updates[name]

    new_type = updates.get("type", question.type)
    type_changed = new_type != question.type

    if not session.is_draft:
        if type_changed:
            _reject(TYPE_WHILE_LIVE)
        if "allow_multiple" in updates:
            _reject(NOT_IN_DRAFT)

    _check_mc_shape(new_type, updates)

    if type_changed:
        if new_type == Question.TYPE_MULTIPLE_CHOICE:
            updates["options"] = updates.get("options") or []
            for name in Question.MC_FIELDS:
                updates.setdefault(name, None)
        else:
            for name in Question.MC_FIELDS:
                updates[name] = None

    _check_option_images(
        updates.get("options", question.options),
        updates.get("option_images", question.option_images),
    )
    return updates
