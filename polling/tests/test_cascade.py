"""
Batched delete and reset cascades.

Tests run with a batch size of 5 and eager Celery, so each cascade
triggered through the service layer has finished when the call returns.
"""
import pytest

from audience.models import Participant, Response
from polling import cascade, services
from polling.exceptions import SessionNotFound
from polling.models import Question, Session


def _counts(session_id):
    return (
        Question.objects.filter(session_id=session_id).count(),
        Participant.objects.filter(session_id=session_id).count(),
        Response.objects.filter(session_id=session_id).count(),
    )


@pytest.fixture
def busy_session(draft_session, mc_question, make_question, populate):
    """Four questions, six participants, 24 responses: several batches per phase."""
    for i in range(3):
        make_question(draft_session, title=f"Q{i}")
    populate(draft_session, participants=6)
    return draft_session


@pytest.mark.django_db
def test_delete_removes_everything(busy_session, presenter_id, make_question, populate):
    bystander = services.create_session("Keep me", presenter_id)
    make_question(bystander)
    populate(bystander, participants=2)

    services.delete_session(busy_session.id)

    assert not Session.objects.filter(pk=busy_session.id).exists()
    assert _counts(busy_session.id) == (0, 0, 0)
    assert _counts(bystander.id) == (1, 2, 2)


@pytest.mark.django_db
def test_delete_of_live_session_clears_pointer_first(live_session, populate):
    populate(live_session, participants=7)
    services.delete_session(live_session.id)
    assert not Session.objects.filter(pk=live_session.id).exists()
    assert _counts(live_session.id) == (0, 0, 0)


@pytest.mark.django_db
def test_delete_takes_several_bounded_steps(busy_session):
    steps = 0
    while cascade.delete_step(busy_session.id, batch_size=5):
        steps += 1
        assert Session.objects.filter(pk=busy_session.id).exists()
    # 24 responses, 6 participants, 4 questions in batches of 5.
    assert steps == 5
    assert not Session.objects.filter(pk=busy_session.id).exists()


@pytest.mark.django_db
def test_interrupted_delete_converges_on_rerun(busy_session):
    cascade.delete_step(busy_session.id, batch_size=5)
    cascade.delete_step(busy_session.id, batch_size=5)
    assert Response.objects.filter(session_id=busy_session.id).count() == 14

    services.delete_session(busy_session.id)
    assert _counts(busy_session.id) == (0, 0, 0)
    assert not Session.objects.filter(pk=busy_session.id).exists()


@pytest.mark.django_db
def test_step_on_missing_session_is_harmless(busy_session):
    services.delete_session(busy_session.id)
    assert cascade.delete_step(busy_session.id) is False
    assert cascade.reset_step(busy_session.id) is False
    with pytest.raises(SessionNotFound):
        services.delete_session(busy_session.id)


@pytest.mark.django_db
def test_reset_keeps_questions_and_clears_live_question(live_session, populate):
    populate(live_session, participants=8)
    services.reset_session(live_session.id)

    live_session.refresh_from_db()
    assert live_session.status == Session.STATUS_ACTIVE
    assert live_session.active_question_id is None
    assert live_session.question_started_at is None
    assert _counts(live_session.id) == (1, 0, 0)


@pytest.mark.django_db
def test_reset_is_repeatable(busy_session):
    services.reset_session(busy_session.id)
    services.reset_session(busy_session.id)
    assert _counts(busy_session.id) == (4, 0, 0)


@pytest.mark.django_db
def test_reset_unknown_session():
    with pytest.raises(SessionNotFound):
        services.reset_session(424242)
