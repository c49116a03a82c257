"""
Unit tests for the swarm membership registry.

Tests:
- request_to_join() state checks (unknown swarm, creator, duplicate)
- approve() creator-only, pending-only, one-way
- is_swarm_creator_or_member() for creator, approved, pending, stranger
- list_members() / list_requests()
"""

import pytest

from hyvmind_core.db.enums import MembershipStatus
from hyvmind_core.errors import (
    AlreadyRequested,
    Forbidden,
    NoPendingRequest,
    NotFound,
    SelfJoin,
    Unauthorized,
)
from hyvmind_core.graph import membership
from hyvmind_core.graph.profiles import Profile, save_caller_user_profile
from hyvmind_core.graph.store import create_swarm
from tests.conftest import ALICE, ANONYMOUS, BOB, CAROL


@pytest.fixture
def open_swarm(session, curation_id) -> str:
    """A swarm created by ALICE with no members yet."""
    return create_swarm(session, ALICE, "Open", [], curation_id)


class TestRequestToJoin:
    def test_unknown_swarm(self, session) -> None:
        with pytest.raises(NotFound):
            membership.request_to_join(session, BOB, "missing")

    def test_creator_cannot_join(self, session, open_swarm) -> None:
        with pytest.raises(SelfJoin):
            membership.request_to_join(session, ALICE, open_swarm)

    def test_duplicate_pending(self, session, open_swarm) -> None:
        membership.request_to_join(session, BOB, open_swarm)
        with pytest.raises(AlreadyRequested):
            membership.request_to_join(session, BOB, open_swarm)

    def test_duplicate_after_approval(self, session, open_swarm) -> None:
        membership.request_to_join(session, BOB, open_swarm)
        membership.approve(session, ALICE, open_swarm, BOB)
        with pytest.raises(AlreadyRequested):
            membership.request_to_join(session, BOB, open_swarm)

    def test_anonymous_rejected(self, session, open_swarm) -> None:
        with pytest.raises(Unauthorized):
            membership.request_to_join(session, ANONYMOUS, open_swarm)


class TestApprove:
    def test_only_creator_approves(self, session, open_swarm) -> None:
        membership.request_to_join(session, BOB, open_swarm)
        with pytest.raises(Forbidden):
            membership.approve(session, CAROL, open_swarm, BOB)

    def test_no_pending_request(self, session, open_swarm) -> None:
        with pytest.raises(NoPendingRequest):
            membership.approve(session, ALICE, open_swarm, BOB)

    def test_approve_twice(self, session, open_swarm) -> None:
        membership.request_to_join(session, BOB, open_swarm)
        membership.approve(session, ALICE, open_swarm, BOB)
        with pytest.raises(NoPendingRequest):
            membership.approve(session, ALICE, open_swarm, BOB)


class TestAccessPredicate:
    def test_creator(self, session, open_swarm) -> None:
        assert membership.is_swarm_creator_or_member(session, ALICE, open_swarm)

    def test_pending_is_not_member(self, session, open_swarm) -> None:
        membership.request_to_join(session, BOB, open_swarm)
        assert not membership.is_swarm_creator_or_member(session, BOB, open_swarm)

    def test_approved_is_member(self, session, open_swarm) -> None:
        membership.request_to_join(session, BOB, open_swarm)
        membership.approve(session, ALICE, open_swarm, BOB)
        assert membership.is_swarm_creator_or_member(session, BOB, open_swarm)

    def test_stranger(self, session, open_swarm) -> None:
        assert not membership.is_swarm_creator_or_member(session, CAROL, open_swarm)

    def test_no_swarm(self, session) -> None:
        assert not membership.is_swarm_creator_or_member(session, ALICE, None)
        assert not membership.is_swarm_creator_or_member(session, ALICE, "missing")


class TestListing:
    def test_list_members_only_approved(self, session, open_swarm) -> None:
        membership.request_to_join(session, BOB, open_swarm)
        membership.request_to_join(session, CAROL, open_swarm)
        membership.approve(session, ALICE, open_swarm, CAROL)
        assert membership.list_members(session, open_swarm) == [CAROL]

    def test_list_requests_with_profile_names(self, session, open_swarm) -> None:
        save_caller_user_profile(session, BOB, Profile(name="Bob"))
        membership.request_to_join(session, BOB, open_swarm)
        membership.request_to_join(session, CAROL, open_swarm)
        membership.approve(session, ALICE, open_swarm, BOB)

        requests = membership.list_requests(session, ALICE, open_swarm)
        assert [(r.principal, r.status, r.profile_name) for r in requests] == [
            (BOB, MembershipStatus.approved, "Bob"),
            (CAROL, MembershipStatus.pending, None),
        ]

    def test_list_requests_creator_only(self, session, open_swarm) -> None:
        with pytest.raises(Forbidden):
            membership.list_requests(session, BOB, open_swarm)
