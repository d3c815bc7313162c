"""
Common test fixtures for the polling API.

Provides factories for sessions, questions, participants and responses
built through the service layer, so fixtures obey the same lifecycle
rules as real requests.
"""
import pytest
from django.utils import timezone

from audience.models import Participant, Response
from polling import questions as question_ops
from polling import services
from polling.models import Question
from polling.timers import set_active_question


@pytest.fixture
def presenter_id():
    return "presenter-1"


@pytest.fixture
def draft_session(db, presenter_id):
    """A draft session with no questions."""
    return services.create_session("Weekly all-hands", presenter_id, "Ada")


@pytest.fixture
def make_question(db):
    """Append a question to a (draft) session."""

    def _make(session, title="Pick one", type=Question.TYPE_MULTIPLE_CHOICE, **fields):
        if type == Question.TYPE_MULTIPLE_CHOICE:
            fields.setdefault("options", ["A", "B", "C"])
        return question_ops.create_question(session.id, {"title": title, "type": type, **fields})

    return _make


@pytest.fixture
def mc_question(draft_session, make_question):
    return make_question(draft_session, time_limit=30)


@pytest.fixture
def live_session(draft_session, mc_question):
    """An active session whose first question is live."""
    services.start_session(draft_session.id)
    return set_active_question(draft_session.id, mc_question.id)


@pytest.fixture
def make_participant(db):
    def _make(session, unique_id, name=None):
        return Participant.objects.create(session=session, unique_id=unique_id, name=name)

    return _make


@pytest.fixture
def populate(make_participant):
    """
    Fill `session` with `participants` devices, each answering every
    question once.  Rows are written directly so any status works.
    """
    def _populate(session, participants=3):
        now = timezone.now()
        people = [make_participant(session, f"device-{session.id}-{i}") for i in range(participants)]
        rows = [
            Response(session=session, question=q, participant=p, answer="A", answered_at=now)
            for q in Question.objects.filter(session=session)
            for p in people
        ]
        Response.objects.bulk_create(rows)
        return people

    return _populate
