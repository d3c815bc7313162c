"""
Question mutability per session status.

Every (status, field) cell of the rules table is exercised; a rejected
change must leave the whole stored question untouched.
"""
import pytest
from rest_framework.exceptions import ValidationError

from polling import questions as question_ops
from polling import services
from polling.exceptions import InvalidState, QuestionNotFound
from polling.guards import EDITABLE_FIELDS, NOT_IN_DRAFT, SESSION_ENDED, TYPE_WHILE_LIVE
from polling.models import Question

# A valid new value for each editable field of the 3-option MC fixture question.
NEW_VALUES = {
    "title": "Reworded",
    "show_results": Question.SHOW_AFTER_CLOSE,
    "time_limit": 45,
    "options": ["A", "B", "C (fixed typo)"],
    "option_images": ["uploads/a.png", "uploads/b.png"],
    "chart_layout": "donut",
    "correct_answer": "B",
    "allow_multiple": True,
    "type": Question.TYPE_OPEN_ENDED,
}

# None means the change is allowed; otherwise the InvalidState detail.
RULES = {
    "draft": {field: None for field in NEW_VALUES},
    "active": {
        **{field: None for field in NEW_VALUES},
        "type": TYPE_WHILE_LIVE,
        "allow_multiple": NOT_IN_DRAFT,
    },
    "ended": {field: SESSION_ENDED for field in NEW_VALUES},
}

CELLS = [(status, field, outcome) for status, row in RULES.items() for field, outcome in row.items()]


def _snapshot(question):
    question.refresh_from_db()
    return {name: getattr(question, name) for name in (*EDITABLE_FIELDS, "sort_order", "session_id")}


def _move_to(session, status):
    if status in ("active", "ended"):
        services.start_session(session.id)
    if status == "ended":
        services.end_session(session.id)


def test_table_covers_every_editable_field():
    assert set(NEW_VALUES) == set(EDITABLE_FIELDS)


@pytest.mark.django_db
@pytest.mark.parametrize("status,field,outcome", CELLS)
def test_mutability_table(draft_session, mc_question, status, field, outcome):
    _move_to(draft_session, status)
    before = _snapshot(mc_question)
    changes = {field: NEW_VALUES[field]}

    if outcome is None:
        updated = question_ops.update_question(mc_question.id, changes)
        assert getattr(updated, field) == NEW_VALUES[field]
        updated.refresh_from_db()
        assert getattr(updated, field) == NEW_VALUES[field]
    else:
        with pytest.raises(InvalidState) as exc:
            question_ops.update_question(mc_question.id, changes)
        assert exc.value.detail == outcome
        assert _snapshot(mc_question) == before


# -----------------------------
# Draft
# -----------------------------

@pytest.mark.django_db
def test_draft_type_change_away_from_mc_clears_mc_fields(mc_question):
    question_ops.update_question(mc_question.id, {"allow_multiple": True, "chart_layout": "pie"})
    updated = question_ops.update_question(mc_question.id, {"type": Question.TYPE_WORD_CLOUD})
    assert updated.type == Question.TYPE_WORD_CLOUD
    for name in Question.MC_FIELDS:
        assert getattr(updated, name) is None


@pytest.mark.django_db
def test_draft_type_change_to_mc_initialises_options(draft_session, make_question):
    q = make_question(draft_session, title="Say a word", type=Question.TYPE_WORD_CLOUD)
    updated = question_ops.update_question(q.id, {"type": Question.TYPE_MULTIPLE_CHOICE})
    assert updated.options == []
    updated = question_ops.update_question(q.id, {"type": Question.TYPE_MULTIPLE_CHOICE, "options": ["x", "y"]})
    assert updated.options == ["x", "y"]


@pytest.mark.django_db
def test_mc_fields_rejected_on_other_types(draft_session, make_question):
    q = make_question(draft_session, title="Say a word", type=Question.TYPE_WORD_CLOUD)
    before = _snapshot(q)
    with pytest.raises(ValidationError):
        question_ops.update_question(q.id, {"options": ["nope"]})
    assert _snapshot(q) == before


@pytest.mark.django_db
def test_more_images_than_options_rejected(mc_question):
    with pytest.raises(ValidationError):
        question_ops.update_question(mc_question.id, {"option_images": ["a", "b", "c", "d"]})


@pytest.mark.django_db
def test_shrinking_options_below_stored_images_rejected(draft_session, mc_question):
    question_ops.update_question(mc_question.id, {"option_images": ["a.png", "b.png", "c.png"]})
    services.start_session(draft_session.id)
    before = _snapshot(mc_question)

    with pytest.raises(ValidationError):
        question_ops.update_question(mc_question.id, {"options": ["A"]})
    assert _snapshot(mc_question) == before


@pytest.mark.django_db
def test_non_positive_time_limit_means_untimed(mc_question):
    assert question_ops.update_question(mc_question.id, {"time_limit": 0}).time_limit is None
    assert question_ops.update_question(mc_question.id, {"time_limit": -5}).time_limit is None


@pytest.mark.django_db
def test_unknown_fields_rejected(mc_question):
    with pytest.raises(ValidationError):
        question_ops.update_question(mc_question.id, {"sort_order": 4})


@pytest.mark.django_db
def test_update_of_question_deleted_meanwhile(mc_question, monkeypatch):
    lock = question_ops._lock_session

    def lock_after_concurrent_delete(session_id):
        Question.objects.filter(pk=mc_question.pk).delete()
        return lock(session_id)

    monkeypatch.setattr(question_ops, "_lock_session", lock_after_concurrent_delete)
    with pytest.raises(QuestionNotFound):
        question_ops.update_question(mc_question.id, {"title": "Gone"})


# -----------------------------
# Active / ended
# -----------------------------

@pytest.mark.django_db
def test_active_accepts_unchanged_type(draft_session, mc_question):
    services.start_session(draft_session.id)
    updated = question_ops.update_question(
        mc_question.id, {"type": Question.TYPE_MULTIPLE_CHOICE, "title": "Same type"}
    )
    assert updated.title == "Same type"


@pytest.mark.django_db
@pytest.mark.parametrize("status,message", [("active", NOT_IN_DRAFT), ("ended", SESSION_ENDED)])
def test_structural_operations_need_draft(draft_session, mc_question, status, message):
    _move_to(draft_session, status)
    with pytest.raises(InvalidState) as exc:
        question_ops.create_question(draft_session.id, {"title": "Late", "type": Question.TYPE_RATING})
    assert exc.value.detail == message
    with pytest.raises(InvalidState):
        question_ops.delete_question(mc_question.id)
    with pytest.raises(InvalidState):
        question_ops.reorder_questions(draft_session.id, [mc_question.id])
    assert Question.objects.filter(session=draft_session).count() == 1
