# polling/services.py
"""
Session lifecycle operations.

Each function is one self-contained request handler: it re-reads what it
needs, decides, and writes inside its own transaction.  Destructive
operations (delete, reset) only validate and enqueue the first cascade
step; they return before the cascade has finished.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from uuid import uuid4

from django.core.files.storage import default_storage
from django.db import transaction
from django.db.models import Q
from rest_framework.exceptions import ValidationError

from audience import stores

from .codes import create_with_unique_code, normalize_code
from .exceptions import SessionNotFound
from .models import Question, Session
from .state import check_transition
from .tasks import delete_session_batch, reset_session_batch

logger = logging.getLogger(__name__)

BRANDING_IMAGE_FIELDS = {
    "logo": "brand_logo_id",
    "background": "brand_background_image_id",
}

# Question fields carried over when a session is duplicated.
COPIED_QUESTION_FIELDS = (
    "title",
    "type",
    "options",
    "option_images",
    "sort_order",
    "time_limit",
    "chart_layout",
    "allow_multiple",
    "correct_answer",
    "show_results",
)


# -----------------------------
# Reads
# -----------------------------

def get_session(session_id: int) -> Session:
    try:
        return Session.objects.select_related("active_question").get(pk=session_id)
    except Session.DoesNotExist:
        raise SessionNotFound()


def get_session_by_code(code: str) -> Session:
    session = Session.objects.select_related("active_question").filter(code=normalize_code(code)).first()
    if session is None:
        raise SessionNotFound()
    return session


def list_sessions_by_presenter(presenter_id: str):
    return Session.objects.filter(presenter_id=presenter_id).order_by("-created_at", "-id")


def get_session_stats(session_id: int) -> Dict[str, int]:
    if not Session.objects.filter(pk=session_id).exists():
        raise SessionNotFound()
    return {
        "question_count": Question.objects.filter(session_id=session_id).count(),
        "participant_count": stores.count_participants_for_session(session_id),
        "response_count": stores.count_responses_for_session(session_id),
    }


def _lock(session_id: int) -> Session:
    try:
        return Session.objects.select_for_update().get(pk=session_id)
    except Session.DoesNotExist:
        raise SessionNotFound()


# -----------------------------
# Create / duplicate
# -----------------------------

@transaction.atomic
def create_session(title: str, presenter_id: str, presenter_name: str = "") -> Session:
    """Create a draft session with a fresh join code."""
    session = create_with_unique_code(
        lambda code: Session.objects.create(
            code=code,
            title=title,
            presenter_id=presenter_id,
            presenter_name=presenter_name,
            status=Session.STATUS_DRAFT,
        )
    )
    logger.info("Session %s created with code %s", session.id, session.code)
    return session


@transaction.atomic
def duplicate_session(session_id: int) -> Session:
    """
    Copy a session's settings, branding and questions into a new draft.
    Participants and responses are not copied.
    """
    source = get_session(session_id)
    copied = {name: getattr(source, name) for name in Session.BRANDING_FIELDS}

    session = create_with_unique_code(
        lambda code: Session.objects.create(
            code=code,
            title=f"{source.title} (copy)",
            presenter_id=source.presenter_id,
            presenter_name=source.presenter_name,
            status=Session.STATUS_DRAFT,
            max_participants=source.max_participants,
            **copied,
        )
    )
    Question.objects.bulk_create(
        Question(session=session, **{name: getattr(q, name) for name in COPIED_QUESTION_FIELDS})
        for q in Question.objects.filter(session_id=source.id).order_by("sort_order", "id")
    )
    logger.info("Session %s duplicated into %s", source.id, session.id)
    return session


# -----------------------------
# Status
# -----------------------------

@transaction.atomic
def set_session_status(session_id: int, status: str) -> Session:
    session = _lock(session_id)
    check_transition(session.status, status)
    if session.status != status:
        previous = session.status
        session.status = status
        session.save(update_fields=["status", "updated_at"])
        logger.info("Session %s: %s -> %s", session.id, previous, status)
    return session


def start_session(session_id: int) -> Session:
    return set_session_status(session_id, Session.STATUS_ACTIVE)


def end_session(session_id: int) -> Session:
    return set_session_status(session_id, Session.STATUS_ENDED)


def reopen_session(session_id: int) -> Session:
    return set_session_status(session_id, Session.STATUS_ACTIVE)


# -----------------------------
# Field updates (any status)
# -----------------------------

@transaction.atomic
def update_title(session_id: int, title: str) -> Session:
    session = _lock(session_id)
    session.title = title
    session.save(update_fields=["title", "updated_at"])
    return session


@transaction.atomic
def update_max_participants(session_id: int, max_participants: Optional[int]) -> Session:
    session = _lock(session_id)
    session.max_participants = max_participants or None
    session.save(update_fields=["max_participants", "updated_at"])
    return session


@transaction.atomic
def update_branding(session_id: int, fields: Dict[str, Any]) -> Session:
    unknown = set(fields) - set(Session.BRANDING_FIELDS)
    if unknown:
        raise ValidationError({name: "Not a branding field." for name in sorted(unknown)})
    session = _lock(session_id)
    if not fields:
        return session
    for name, value in fields.items():
        setattr(session, name, value)
    session.save(update_fields=[*fields, "updated_at"])
    return session


@transaction.atomic
def clear_branding_image(session_id: int, kind: str) -> Session:
    """
    Drop a branding image reference and delete the stored object.

    Duplicated sessions share image objects, so the object is only
    deleted once nothing else references it.  No-op when nothing is
    set.
    """
    try:
        field = BRANDING_IMAGE_FIELDS[kind]
    except KeyError:
        raise ValidationError({"kind": f"Expected one of {sorted(BRANDING_IMAGE_FIELDS)}."})

    session = _lock(session_id)
    reference = getattr(session, field)
    if not reference:
        return session

    setattr(session, field, None)
    session.save(update_fields=[field, "updated_at"])

    # Checked after the save, so only other references count.
    shared = Session.objects.filter(
        Q(brand_logo_id=reference) | Q(brand_background_image_id=reference)
    ).exists()
    if shared:
        logger.info("Session %s dropped %s image %s (still used elsewhere)", session.id, kind, reference)
    else:
        default_storage.delete(reference)
        logger.info("Session %s cleared %s image %s", session.id, kind, reference)
    return session


# -----------------------------
# Uploads
# -----------------------------

def save_upload(upload) -> str:
    """
    Store an uploaded file (branding or option image) and return its
    storage reference, the value kept in `brand_*_id` and `option_images`.
    """
    key = f"uploads/{uuid4().hex}_{upload.name}"
    name = default_storage.save(key, upload)
    logger.info("Stored upload %s", name)
    return name


def get_upload_url(reference: str) -> Optional[str]:
    """Public URL of a stored object, or None when it does not exist."""
    if not reference or not default_storage.exists(reference):
        return None
    return default_storage.url(reference)


# -----------------------------
# Cascades (fire-and-forget)
# -----------------------------

def delete_session(session_id: int) -> None:
    """Enqueue the batched delete of a session and everything under it."""
    if not Session.objects.filter(pk=session_id).exists():
        raise SessionNotFound()
    delete_session_batch.delay(session_id)
    logger.info("Session %s delete enqueued", session_id)


def reset_session(session_id: int) -> None:
    """
    Clear the live question, then enqueue the batched removal of the
    session's participants and responses.  Questions are kept.
    """
    with transaction.atomic():
        session = _lock(session_id)
        session.active_question = None
        session.question_started_at = None
        session.active_question_index = None
        session.save(update_fields=["active_question", "question_started_at", "active_question_index", "updated_at"])
    reset_session_batch.delay(session_id)
    logger.info("Session %s reset enqueued", session_id)
