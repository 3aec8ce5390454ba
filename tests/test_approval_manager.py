"""Tests for the public event approval workflow."""

import pytest

from core.exceptions import ConflictError, ForbiddenError, NotFoundError
from models.comment import CommentModel
from models.event import EventModel, EventType, PublicEventModel
from models.rating import RatingModel
from utils.approval_manager import ApprovalManager, ApprovalState, approval_state
from utils.comment_manager import CommentManager
from utils.rating_manager import RatingManager


@pytest.fixture
def approvals(db):
    return ApprovalManager(db)


def _variant(db, event_id):
    return db.query(PublicEventModel).filter(PublicEventModel.event_id == event_id).one()


def test_approve_twice_restamps_approver(db, approvals, make_event, student, admin, super_admin):
    event = make_event(student, EventType.PUBLIC)
    assert approval_state(_variant(db, event.event_id)) == ApprovalState.PENDING

    first = approvals.approve_event(event.event_id, admin)
    assert first.approved is True
    assert _variant(db, event.event_id).approver_id == admin.user_id

    second = approvals.approve_event(event.event_id, super_admin)
    assert second.approved is True
    assert _variant(db, event.event_id).approver_id == super_admin.user_id
    assert approval_state(_variant(db, event.event_id)) == ApprovalState.APPROVED


def test_student_cannot_review(approvals, make_event, student):
    event = make_event(student, EventType.PUBLIC)
    with pytest.raises(ForbiddenError):
        approvals.approve_event(event.event_id, student)
    with pytest.raises(ForbiddenError):
        approvals.reject_event(event.event_id, student)
    with pytest.raises(ForbiddenError):
        approvals.list_pending(student)


def test_list_pending(approvals, make_event, student, admin, super_admin):
    pending = make_event(student, EventType.PUBLIC)
    make_event(super_admin, EventType.PUBLIC)
    make_event(admin, EventType.PRIVATE)

    assert [e.event_id for e in approvals.list_pending(admin)] == [pending.event_id]

    approvals.approve_event(pending.event_id, admin)
    assert approvals.list_pending(admin) == []


def test_reject_deletes_event_and_dependents(db, approvals, make_event, student, admin, super_admin):
    event = make_event(student, EventType.PUBLIC)
    # Super admins see pending events and can already comment and rate
    CommentManager(db).add_comment(event.event_id, super_admin, "Needs a room number")
    RatingManager(db).rate_event(event.event_id, super_admin, 2)

    approvals.reject_event(event.event_id, admin)

    assert db.query(EventModel).filter(EventModel.event_id == event.event_id).count() == 0
    assert db.query(PublicEventModel).count() == 0
    assert db.query(CommentModel).count() == 0
    assert db.query(RatingModel).count() == 0


def test_only_public_events_can_be_reviewed(approvals, make_event, admin):
    private = make_event(admin, EventType.PRIVATE)
    with pytest.raises(NotFoundError):
        approvals.approve_event(private.event_id, admin)
    with pytest.raises(NotFoundError):
        approvals.reject_event(999, admin)


def test_approved_event_cannot_be_rejected(db, approvals, make_event, student, admin):
    event = make_event(student, EventType.PUBLIC)
    approvals.approve_event(event.event_id, admin)

    with pytest.raises(ConflictError):
        approvals.reject_event(event.event_id, admin)

    assert approval_state(_variant(db, event.event_id)) == ApprovalState.APPROVED
