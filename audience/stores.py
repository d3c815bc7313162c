"""
Participant and response stores.

These are the only entry points the polling lifecycle uses to touch
audience data: bounded deletes for the session cascade, counts for
session stats, per-question aggregation for results, and the read-only
lookups behind the participant and response endpoints.
"""
from __future__ import annotations

import unicodedata
from collections import Counter
from typing import Dict, Optional

from django.db.models import Count, QuerySet

from .models import Participant, Response


def _delete_batch(queryset: QuerySet, limit: int) -> int:
    """Delete at most `limit` rows of `queryset`; return how many were picked."""
    ids = list(queryset.order_by("pk").values_list("pk", flat=True)[:limit])
    if ids:
        queryset.model.objects.filter(pk__in=ids).delete()
    return len(ids)


# -----------------------------
# Responses
# -----------------------------

def delete_responses_for_session(session_id: int, limit: int) -> int:
    return _delete_batch(Response.objects.filter(session_id=session_id), limit)


def delete_responses_for_question(question_id: int) -> int:
    deleted, _ = Response.objects.filter(question_id=question_id).delete()
    return deleted


def count_responses_for_session(session_id: int) -> int:
    return Response.objects.filter(session_id=session_id).count()


def response_counts_by_question(session_id: int) -> Dict[int, int]:
    """Number of responses per question id; questions without answers are absent."""
    rows = (
        Response.objects.filter(session_id=session_id)
        .values("question_id")
        .annotate(total=Count("id"))
        .order_by()
    )
    return {row["question_id"]: row["total"] for row in rows}


def has_responded(question_id: int, participant_id: int) -> bool:
    return Response.objects.filter(question_id=question_id, participant_id=participant_id).exists()


_PUNCTUATION = {
    "—": "--",
    "–": "-",
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
    "…": "...",
}


def safe_key(answer: str) -> str:
    """Fold an answer to printable ASCII so it can be used as a result key."""
    text = unicodedata.normalize("NFD", answer)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    for src, dst in _PUNCTUATION.items():
        text = text.replace(src, dst)
    return "".join(ch for ch in text if " " <= ch <= "~")


def aggregate_results(question) -> Dict[str, object]:
    """
    Count answers for `question`.

    Multi-select answers arrive as one comma-separated string and are
    counted per option.
    """
    counts: Counter = Counter()
    total = 0
    multi = bool(question.allow_multiple)
    for answer in Response.objects.filter(question_id=question.id).values_list("answer", flat=True):
        total += 1
        if multi and "," in answer:
            for part in answer.split(","):
                part = part.strip()
                if part:
                    counts[safe_key(part)] += 1
        else:
            counts[safe_key(answer)] += 1
    return {"total_responses": total, "counts": dict(counts)}


# -----------------------------
# Participants
# -----------------------------

def delete_participants_for_session(session_id: int, limit: int) -> int:
    return _delete_batch(Participant.objects.filter(session_id=session_id), limit)


def count_participants_for_session(session_id: int) -> int:
    return Participant.objects.filter(session_id=session_id).count()


def list_participants(session_id: int) -> QuerySet:
    return Participant.objects.filter(session_id=session_id).order_by("joined_at", "id")


def find_participant(session_id: int, unique_id: str) -> Optional[Participant]:
    return Participant.objects.filter(session_id=session_id, unique_id=unique_id).first()
