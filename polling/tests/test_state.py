import pytest

from polling import services
from polling.exceptions import InvalidState
from polling.models import Session
from polling.state import check_transition, is_transition_allowed

DRAFT, ACTIVE, ENDED = Session.STATUS_DRAFT, Session.STATUS_ACTIVE, Session.STATUS_ENDED


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        (DRAFT, ACTIVE, True),
        (ACTIVE, ENDED, True),
        (ENDED, ACTIVE, True),
        (DRAFT, DRAFT, True),
        (ACTIVE, ACTIVE, True),
        (ENDED, ENDED, True),
        (DRAFT, ENDED, False),
        (ACTIVE, DRAFT, False),
        (ENDED, DRAFT, False),
    ],
)
def test_transition_table(current, target, allowed):
    assert is_transition_allowed(current, target) is allowed
    if not allowed:
        with pytest.raises(InvalidState):
            check_transition(current, target)


@pytest.mark.django_db
def test_start_end_reopen(draft_session):
    assert services.start_session(draft_session.id).status == ACTIVE
    assert services.end_session(draft_session.id).status == ENDED
    assert services.reopen_session(draft_session.id).status == ACTIVE


@pytest.mark.django_db
def test_rejected_transition_keeps_status(draft_session):
    with pytest.raises(InvalidState):
        services.end_session(draft_session.id)
    draft_session.refresh_from_db()
    assert draft_session.status == DRAFT


@pytest.mark.django_db
def test_repeating_current_status_is_a_noop(draft_session):
    services.start_session(draft_session.id)
    again = services.start_session(draft_session.id)
    assert again.status == ACTIVE
