"""
Session status transitions.

    draft --start--> active --end--> ended
                       ^               |
                       +----reopen-----+

Writing the status a session already has is accepted as a no-op so a
retried request does not fail; every other pair is rejected.
"""
from .exceptions import InvalidState
from .models import Session

ALLOWED_TRANSITIONS = {
    (Session.STATUS_DRAFT, Session.STATUS_ACTIVE),
    (Session.STATUS_ACTIVE, Session.STATUS_ENDED),
    (Session.STATUS_ENDED, Session.STATUS_ACTIVE),
}


def is_transition_allowed(current: str, target: str) -> bool:
    return current == target or (current, target) in ALLOWED_TRANSITIONS


def check_transition(current: str, target: str) -> None:
    if not is_transition_allowed(current, target):
        raise InvalidState(f"Cannot move a session from '{current}' to '{target}'.")
