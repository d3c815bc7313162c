from datetime import timedelta

import pytest
from django.utils import timezone

from polling import services
from polling.models import Session
from polling.tasks import delete_session_batch, end_stale_sessions, reset_session_batch


def _age(session, hours, field="created_at"):
    Session.objects.filter(pk=session.pk).update(**{field: timezone.now() - timedelta(hours=hours)})


@pytest.fixture
def active_session(draft_session):
    return services.start_session(draft_session.id)


@pytest.mark.django_db
def test_stale_active_sessions_are_ended(active_session, presenter_id):
    fresh = services.start_session(services.create_session("Fresh", presenter_id).id)
    old_draft = services.create_session("Old draft", presenter_id)
    _age(active_session, 30)
    _age(old_draft, 30)

    assert end_stale_sessions() == 1

    active_session.refresh_from_db()
    fresh.refresh_from_db()
    old_draft.refresh_from_db()
    assert active_session.status == Session.STATUS_ENDED
    assert fresh.status == Session.STATUS_ACTIVE
    assert old_draft.status == Session.STATUS_DRAFT


@pytest.mark.django_db
def test_sweep_is_idempotent(active_session):
    _age(active_session, 30)
    assert end_stale_sessions() == 1
    assert end_stale_sessions() == 0


@pytest.mark.django_db
def test_activity_clock_spares_recently_used_sessions(active_session, settings):
    settings.POLLING_STALE_SESSION_CLOCK = "activity"
    _age(active_session, 30)
    assert end_stale_sessions() == 0

    _age(active_session, 30, field="updated_at")
    assert end_stale_sessions() == 1


@pytest.mark.django_db
def test_cutoff_follows_setting(active_session, settings):
    settings.POLLING_STALE_SESSION_HOURS = 48
    _age(active_session, 30)
    assert end_stale_sessions() == 0


@pytest.mark.django_db
def test_batch_tasks_report_completion(draft_session):
    assert reset_session_batch(draft_session.id) == f"Session {draft_session.id}: reset"
    assert delete_session_batch(draft_session.id) == f"Session {draft_session.id}: deleted"
    assert not Session.objects.filter(pk=draft_session.id).exists()
