"""
Tests for the administration CLI.

Tests:
- grant-role bootstraps an admin without a caller
- leaderboard and graph-stats render from the configured database
- reset requires confirmation and keeps roles
"""

import pytest
from typer.testing import CliRunner

from hyvmind_core import cli
from hyvmind_core.db import session as db_session
from hyvmind_core.db.enums import Role
from hyvmind_core.db.models import Curation, RoleAssignment
from hyvmind_core.graph.access import get_role
from hyvmind_core.graph.store import create_curation
from hyvmind_core.graph.voting import credit_buzz
from tests.conftest import ALICE, BOB

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_sessions(monkeypatch, session_factory):
    monkeypatch.setattr(db_session, "SessionLocal", session_factory)
    return session_factory


class TestGrantRole:
    def test_bootstrap_admin(self, session_factory) -> None:
        result = runner.invoke(cli.app, ["grant-role", ALICE])
        assert result.exit_code == 0
        with session_factory() as session:
            assert get_role(session, ALICE) == Role.admin

    def test_explicit_role(self, session_factory) -> None:
        result = runner.invoke(cli.app, ["grant-role", BOB, "--role", "guest"])
        assert result.exit_code == 0
        with session_factory() as session:
            assert get_role(session, BOB) == Role.guest


class TestReports:
    def test_empty_leaderboard(self) -> None:
        result = runner.invoke(cli.app, ["leaderboard"])
        assert result.exit_code == 0
        assert "No BUZZ scores yet" in result.output

    def test_leaderboard(self, session_factory) -> None:
        with session_factory() as session:
            credit_buzz(session, ALICE, 7)
            session.commit()
        result = runner.invoke(cli.app, ["leaderboard"])
        assert result.exit_code == 0
        assert ALICE in result.output

    def test_graph_stats(self, session_factory) -> None:
        with session_factory() as session:
            create_curation(session, ALICE, "Law", "IND")
            session.commit()
        result = runner.invoke(cli.app, ["graph-stats"])
        assert result.exit_code == 0
        assert "curations" in result.output


class TestReset:
    def test_aborts_without_confirmation(self, session_factory) -> None:
        with session_factory() as session:
            create_curation(session, ALICE, "Law", "IND")
            session.commit()
        result = runner.invoke(cli.app, ["reset"], input="n\n")
        assert result.exit_code != 0
        with session_factory() as session:
            assert session.query(Curation).count() == 1

    def test_reset_keeps_roles(self, session_factory) -> None:
        runner.invoke(cli.app, ["grant-role", ALICE])
        with session_factory() as session:
            create_curation(session, ALICE, "Law", "IND")
            session.commit()
        result = runner.invoke(cli.app, ["reset", "--yes"])
        assert result.exit_code == 0
        with session_factory() as session:
            assert session.query(Curation).count() == 0
            assert session.query(RoleAssignment).count() == 1
