from datetime import timedelta

import pytest
from rest_framework.exceptions import ValidationError

from polling import services
from polling.exceptions import QuestionNotFound
from polling.models import Question
from polling.timers import question_remaining_seconds, remaining_seconds, set_active_question


@pytest.mark.parametrize(
    "elapsed_ms,expected",
    [
        (0, 30),
        (400, 30),
        (1000, 29),
        (29_400, 1),
        (30_000, 0),
        (30_100, 0),
        (90_000, 0),
    ],
)
def test_remaining_seconds_rounds_up_and_floors_at_zero(elapsed_ms, expected):
    start = 1_700_000_000_000
    assert remaining_seconds(30, start, start + elapsed_ms) == expected


@pytest.mark.parametrize("limit", [None, 0, -3])
def test_untimed_questions_have_no_countdown(limit):
    assert remaining_seconds(limit, 1_000, 2_000) is None


def test_unstarted_question_has_no_countdown():
    assert remaining_seconds(30, None, 2_000) is None


@pytest.mark.django_db
def test_set_active_question_stamps_start(live_session, mc_question):
    assert live_session.active_question_id == mc_question.id
    assert live_session.question_started_at is not None

    later = live_session.question_started_at + timedelta(milliseconds=29_400)
    assert question_remaining_seconds(live_session, now=later) == 1
    later = live_session.question_started_at + timedelta(milliseconds=30_100)
    assert question_remaining_seconds(live_session, now=later) == 0


@pytest.mark.django_db
def test_clearing_active_question_clears_stamp(live_session):
    session = set_active_question(live_session.id, None)
    session.refresh_from_db()
    assert session.active_question_id is None
    assert session.question_started_at is None
    assert question_remaining_seconds(session) is None


@pytest.mark.django_db
def test_switching_question_restamps(live_session, draft_session):
    # Creating questions needs a draft session, so add this one through the ORM.
    second = Question.objects.create(session=draft_session, title="Next", type=Question.TYPE_RATING, sort_order=1)
    first_stamp = live_session.question_started_at
    session = set_active_question(live_session.id, second.id)
    assert session.active_question_id == second.id
    assert session.question_started_at >= first_stamp


@pytest.mark.django_db
def test_question_from_another_session_rejected(live_session, presenter_id, make_question):
    other = services.create_session("Other", presenter_id)
    foreign = make_question(other)
    with pytest.raises(ValidationError):
        set_active_question(live_session.id, foreign.id)
    live_session.refresh_from_db()
    assert live_session.active_question_id != foreign.id


@pytest.mark.django_db
def test_unknown_question_rejected(live_session):
    with pytest.raises(QuestionNotFound):
        set_active_question(live_session.id, 999_999)
