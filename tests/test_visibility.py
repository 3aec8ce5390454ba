"""Tests for the event visibility and mutation policy."""

import pytest

from core.exceptions import ForbiddenError
from models.event import (
    EventModel,
    EventType,
    PrivateEventModel,
    PublicEventModel,
    RsoEventModel,
)
from models.rso import RsoModel
from schemas.identity import Identity, Role
from utils.visibility import (
    can_mutate,
    can_view,
    ensure_can_delete_college,
    ensure_can_delete_event,
    ensure_can_delete_rso,
)

COLLEGE = 10
OTHER_COLLEGE = 20
RSO = 7


class FakeMemberships:
    def __init__(self, pairs=()):
        self.pairs = set(pairs)

    def exists_by_user_and_rso(self, user_id, rso_id):
        return (user_id, rso_id) in self.pairs


def _event(event_type, created_by=1, college_id=COLLEGE):
    return EventModel(
        event_id=100, event_type=event_type.value, college_id=college_id, created_by=created_by
    )


def _user(user_id=2, role=Role.STUDENT, college_id=COLLEGE):
    return Identity(user_id=user_id, role=role, college_id=college_id)


NO_MEMBERS = FakeMemberships()


class TestCanView:

    def test_super_admin_sees_everything(self):
        boss = _user(role=Role.SUPER_ADMIN, college_id=None)
        pending = PublicEventModel(event_id=100, approved=False)
        assert can_view(boss, _event(EventType.PUBLIC), pending, NO_MEMBERS)
        assert can_view(boss, _event(EventType.PRIVATE, college_id=OTHER_COLLEGE), None, NO_MEMBERS)
        assert can_view(boss, _event(EventType.RSO), None, NO_MEMBERS)

    @pytest.mark.parametrize("role", [Role.STUDENT, Role.ADMIN])
    def test_unapproved_public_event_is_hidden(self, role):
        variant = PublicEventModel(event_id=100, approved=False)
        assert not can_view(_user(role=role), _event(EventType.PUBLIC), variant, NO_MEMBERS)

    def test_unapproved_public_event_hidden_from_its_creator(self):
        variant = PublicEventModel(event_id=100, approved=False)
        creator = _user(user_id=1)
        assert not can_view(creator, _event(EventType.PUBLIC, created_by=1), variant, NO_MEMBERS)

    def test_approved_public_event_is_visible_to_anyone(self):
        variant = PublicEventModel(event_id=100, approved=True, approver_id=9)
        outsider = _user(college_id=None)
        assert can_view(outsider, _event(EventType.PUBLIC), variant, NO_MEMBERS)

    def test_private_event_visible_within_college(self):
        variant = PrivateEventModel(event_id=100, admin_id=1)
        assert can_view(_user(college_id=COLLEGE), _event(EventType.PRIVATE), variant, NO_MEMBERS)

    def test_private_event_hidden_from_other_college(self):
        variant = PrivateEventModel(event_id=100, admin_id=1)
        assert not can_view(
            _user(college_id=OTHER_COLLEGE), _event(EventType.PRIVATE), variant, NO_MEMBERS
        )

    def test_private_event_hidden_from_unaffiliated_user(self):
        variant = PrivateEventModel(event_id=100, admin_id=1)
        assert not can_view(_user(college_id=None), _event(EventType.PRIVATE), variant, NO_MEMBERS)

    def test_null_college_is_not_a_wildcard(self):
        event = _event(EventType.PRIVATE, college_id=None)
        assert not can_view(_user(college_id=None), event, None, NO_MEMBERS)

    def test_rso_event_visible_to_members_only(self):
        variant = RsoEventModel(event_id=100, rso_id=RSO)
        members = FakeMemberships({(2, RSO)})
        assert can_view(_user(user_id=2), _event(EventType.RSO), variant, members)
        assert not can_view(_user(user_id=3), _event(EventType.RSO), variant, members)

    def test_rso_event_membership_ignores_college(self):
        variant = RsoEventModel(event_id=100, rso_id=RSO)
        members = FakeMemberships({(2, RSO)})
        visitor = _user(user_id=2, college_id=OTHER_COLLEGE)
        assert can_view(visitor, _event(EventType.RSO), variant, members)

    def test_missing_variant_denies(self):
        members = FakeMemberships({(2, RSO)})
        assert not can_view(_user(), _event(EventType.RSO), None, members)
        assert not can_view(_user(), _event(EventType.PUBLIC), None, members)

    def test_mismatched_variant_denies(self):
        wrong = PublicEventModel(event_id=100, approved=True)
        assert not can_view(_user(), _event(EventType.RSO), wrong, FakeMemberships({(2, RSO)}))

    def test_unknown_event_type_denies(self):
        event = EventModel(event_id=100, event_type="SECRET", college_id=COLLEGE, created_by=1)
        assert not can_view(_user(), event, None, NO_MEMBERS)


class TestCanMutate:

    def test_creator_may_mutate(self):
        assert can_mutate(_user(user_id=1), _event(EventType.PRIVATE, created_by=1), None)

    def test_super_admin_may_mutate(self):
        boss = _user(user_id=5, role=Role.SUPER_ADMIN)
        assert can_mutate(boss, _event(EventType.PUBLIC, created_by=1), None)

    def test_rso_admin_may_mutate_hosted_event(self):
        variant = RsoEventModel(event_id=100, rso_id=RSO)
        host = _user(user_id=4, role=Role.ADMIN)
        assert can_mutate(host, _event(EventType.RSO, created_by=1), variant, rso_admin_id=4)

    def test_plain_member_may_not_mutate(self):
        variant = RsoEventModel(event_id=100, rso_id=RSO)
        member = _user(user_id=3)
        assert not can_mutate(member, _event(EventType.RSO, created_by=1), variant, rso_admin_id=4)

    def test_rso_admin_id_ignored_for_non_rso_events(self):
        admin = _user(user_id=4, role=Role.ADMIN)
        assert not can_mutate(admin, _event(EventType.PRIVATE, created_by=1), None, rso_admin_id=4)

    def test_admin_role_alone_is_not_enough(self):
        admin = _user(user_id=4, role=Role.ADMIN)
        assert not can_mutate(admin, _event(EventType.PUBLIC, created_by=1), None)


class TestDeletionChecks:

    @pytest.mark.parametrize("role", [Role.STUDENT, Role.ADMIN])
    def test_only_super_admin_deletes_colleges(self, role):
        with pytest.raises(ForbiddenError):
            ensure_can_delete_college(_user(role=role))
        ensure_can_delete_college(_user(role=Role.SUPER_ADMIN))

    def test_rso_deletion_requires_rso_admin(self):
        rso = RsoModel(rso_id=RSO, admin_id=4, college_id=COLLEGE)
        ensure_can_delete_rso(_user(user_id=4, role=Role.ADMIN), rso)
        ensure_can_delete_rso(_user(user_id=9, role=Role.SUPER_ADMIN), rso)
        with pytest.raises(ForbiddenError):
            ensure_can_delete_rso(_user(user_id=5, role=Role.ADMIN), rso)

    def test_event_deletion_follows_can_mutate(self):
        event = _event(EventType.PRIVATE, created_by=1)
        ensure_can_delete_event(_user(user_id=1), event, None)
        with pytest.raises(ForbiddenError):
            ensure_can_delete_event(_user(user_id=2), event, None)
