"""
Join code allocation.

Codes are drawn from an alphabet without the glyphs people confuse when
reading a projected screen (I/O/0/1).  Six characters give about 10^9
codes, so a lookup-and-retry loop almost never iterates; it is still
bounded and falls back to a longer code before giving up.

The lookup is not atomic with the insert.  `create_with_unique_code`
closes that gap by relying on the unique index: the insert runs in a
savepoint and a conflict on `code` simply triggers another allocation.
"""
from __future__ import annotations

import logging
import secrets
from typing import Callable, TypeVar

from django.conf import settings
from django.db import IntegrityError, transaction

from .exceptions import CodeSpaceExhausted
from .models import Session

logger = logging.getLogger(__name__)

CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"

T = TypeVar("T")


def generate_code(length: int | None = None) -> str:
    """Return a random code of `length` characters (default 6)."""
    length = length or settings.POLLING_CODE_LENGTH
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


def _candidate_lengths() -> list[int]:
    lengths = [settings.POLLING_CODE_LENGTH]
    if settings.POLLING_CODE_FALLBACK_LENGTH > settings.POLLING_CODE_LENGTH:
        lengths.append(settings.POLLING_CODE_FALLBACK_LENGTH)
    return lengths


def _candidates():
    """Yield candidate codes: the attempt budget at each length in turn."""
    for length in _candidate_lengths():
        for _ in range(settings.POLLING_CODE_MAX_ATTEMPTS):
            yield generate_code(length)


def allocate_unique_code() -> str:
    """
    Return a code no existing session holds.

    Raises CodeSpaceExhausted when every attempt collided.
    """
    for code in _candidates():
        if not Session.objects.filter(code=code).exists():
            return code
        logger.debug("Join code collision on %s; retrying", code)
    raise CodeSpaceExhausted()


def create_with_unique_code(insert: Callable[[str], T]) -> T:
    """
    Call `insert(code)` with freshly allocated codes until one commits.

    `insert` must perform the INSERT carrying the code; a unique-constraint
    violation rolls back only its savepoint and another code is tried.
    """
    for _ in range(len(_candidate_lengths()) * settings.POLLING_CODE_MAX_ATTEMPTS):
        code = allocate_unique_code()
        try:
            with transaction.atomic():
                return insert(code)
        except IntegrityError:
            if not Session.objects.filter(code=code).exists():
                raise
            logger.warning("Join code %s was taken concurrently; reallocating", code)
    raise CodeSpaceExhausted()
