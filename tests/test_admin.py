"""
Unit tests for roles, profiles and the administrative reset.

Tests:
- Role resolution: anonymous guest, default user, configured and assigned admins
- assign_role() permission and bypass
- Profile save/get
- reset_all_data(): wipes graph state, keeps profiles and roles, idempotent
"""

import pytest
from sqlalchemy import func, select

from hyvmind_core.db.enums import Role
from hyvmind_core.db.models import BuzzScore, Curation, RoleAssignment, SwarmMembership, UserProfile, VoteTally
from hyvmind_core.errors import InvalidInput, Unauthorized
from hyvmind_core.graph.access import assign_role, get_role, is_admin
from hyvmind_core.graph.admin import reset_all_data
from hyvmind_core.graph.profiles import Profile, get_caller_user_profile, save_caller_user_profile
from hyvmind_core.graph.store import create_location
from hyvmind_core.settings import settings
from tests.conftest import ALICE, ANONYMOUS, BOB, CAROL


def _count(session, model) -> int:
    return session.scalar(select(func.count()).select_from(model))


@pytest.fixture
def admin(session) -> str:
    assign_role(session, CAROL, Role.admin, bypass=True)
    return CAROL


class TestRoles:
    @pytest.mark.parametrize("caller", [None, "", "  ", ANONYMOUS])
    def test_anonymous_is_guest(self, session, caller) -> None:
        assert get_role(session, caller) == Role.guest

    def test_default_user(self, session) -> None:
        assert get_role(session, ALICE) == Role.user
        assert not is_admin(session, ALICE)

    def test_configured_admin(self, session, monkeypatch) -> None:
        monkeypatch.setattr(settings, "admin_principals", [BOB])
        assert is_admin(session, BOB)

    def test_assign_requires_admin(self, session) -> None:
        with pytest.raises(Unauthorized):
            assign_role(session, BOB, Role.admin, caller=ALICE)

    def test_admin_assigns_and_demotes(self, session, admin) -> None:
        assign_role(session, BOB, Role.admin, caller=admin)
        assert is_admin(session, BOB)
        assign_role(session, BOB, Role.guest, caller=admin)
        assert get_role(session, BOB) == Role.guest

    def test_anonymous_cannot_hold_role(self, session, admin) -> None:
        with pytest.raises(Unauthorized):
            assign_role(session, ANONYMOUS, Role.user, caller=admin)


class TestProfiles:
    def test_missing(self, session) -> None:
        assert get_caller_user_profile(session, ALICE) is None

    def test_save_and_overwrite(self, session) -> None:
        save_caller_user_profile(session, ALICE, Profile(name=" Alice ", social_url="https://example.org/a"))
        assert get_caller_user_profile(session, ALICE) == Profile(name="Alice", social_url="https://example.org/a")
        save_caller_user_profile(session, ALICE, Profile(name="A.", social_url=""))
        assert get_caller_user_profile(session, ALICE) == Profile(name="A.", social_url=None)

    def test_blank_name(self, session) -> None:
        with pytest.raises(InvalidInput):
            save_caller_user_profile(session, ALICE, Profile(name=" "))

    def test_anonymous(self, session) -> None:
        with pytest.raises(Unauthorized):
            get_caller_user_profile(session, ANONYMOUS)


class TestReset:
    def test_requires_admin(self, session, swarm_id) -> None:
        with pytest.raises(Unauthorized):
            reset_all_data(session, ALICE)
        assert _count(session, Curation) == 1

    def test_wipes_graph_keeps_profiles_and_roles(self, session, swarm_id, admin) -> None:
        create_location(session, ALICE, "S1", "{x}", "", [], swarm_id)
        save_caller_user_profile(session, ALICE, Profile(name="Alice"))

        counts = reset_all_data(session, admin)

        assert counts["curation"] == 1
        assert counts["law_token"] == 1
        for model in (Curation, VoteTally, BuzzScore, SwarmMembership):
            assert _count(session, model) == 0
        assert _count(session, UserProfile) == 1
        assert _count(session, RoleAssignment) == 1

    def test_idempotent(self, session, admin) -> None:
        reset_all_data(session, admin)
        assert set(reset_all_data(session, admin).values()) == {0}
