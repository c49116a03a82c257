"""
Unit tests for law-token parsing, validation and extraction.

Tests:
- validate_content() accepts well-formed and empty content
- validate_content() rejects unmatched, nested, reversed and empty braces
- scan_tokens() ordering, trimming and trailing-buffer flush
- token_sequence() derivation
- Extraction deduplicates within a swarm but not across swarms
"""

import pytest
from sqlalchemy import func, select

from hyvmind_core.db.models import LawToken, Location, LocationLawToken
from hyvmind_core.errors import InvalidInput
from hyvmind_core.graph.law_tokens import scan_tokens, token_sequence, validate_content
from hyvmind_core.graph.store import create_location, create_swarm
from tests.conftest import ALICE, BOB


class TestValidateContent:
    """Tests for validate_content()."""

    @pytest.mark.parametrize(
        "content",
        ["", "   ", "no tokens here", "{means} the state", "{a} and {b} and {c}"],
    )
    def test_valid(self, content: str) -> None:
        validate_content(content)

    def test_unmatched_counts(self) -> None:
        with pytest.raises(InvalidInput, match="Unmatched curly braces: found 2 opening and 1 closing"):
            validate_content("{a} and {b")

    def test_closing_before_opening(self) -> None:
        with pytest.raises(InvalidInput, match="closing brace without matching opening brace"):
            validate_content("}a{")

    def test_nested_braces_rejected(self) -> None:
        """`{{x}}` is rejected rather than flattened into `x`."""
        with pytest.raises(InvalidInput, match="Nested curly braces"):
            validate_content("{{x}}")

    @pytest.mark.parametrize("content", ["{}", "text { } text", "{\t}"])
    def test_empty_token(self, content: str) -> None:
        with pytest.raises(InvalidInput, match="Empty tokens are not allowed"):
            validate_content(content)


class TestScanTokens:
    """Tests for scan_tokens()."""

    def test_order_and_trim(self) -> None:
        assert scan_tokens("{ appropriate authority } may appoint {officer}") == [
            "appropriate authority",
            "officer",
        ]

    def test_duplicates_preserved(self) -> None:
        assert scan_tokens("{a} {a}") == ["a", "a"]

    def test_unterminated_trailing_buffer_flushed(self) -> None:
        assert scan_tokens("{a} and {b") == ["a", "b"]

    def test_empty_content(self) -> None:
        assert scan_tokens("") == []

    def test_stray_closing_brace_ignored(self) -> None:
        assert scan_tokens("x } {y}") == ["y"]


class TestTokenSequence:
    """Tests for token_sequence()."""

    def test_concatenates_groups(self) -> None:
        assert token_sequence("the {state} means {government} here") == "{state}{government}"

    def test_no_groups(self) -> None:
        assert token_sequence("plain text") == ""


class TestExtraction:
    """Law-token creation through create_location()."""

    def test_tokens_created_and_linked(self, session, swarm_id) -> None:
        created = create_location(session, ALICE, "S1", "{means} the {state}", "", [], swarm_id)
        labels = [session.get(LawToken, i).token_label for i in created.law_token_ids]
        assert labels == ["means", "state"]
        assert created.new_law_token_count == 2

    def test_dedup_within_swarm(self, session, swarm_id) -> None:
        first = create_location(session, ALICE, "S1", "the {appropriate authority}", "", [], swarm_id)
        second = create_location(session, BOB, "S2", "an {appropriate authority} may", "", [], swarm_id)

        assert first.law_token_ids == second.law_token_ids
        assert second.new_law_token_count == 0
        assert session.scalar(select(func.count()).select_from(LawToken)) == 1
        linked = set(
            session.scalars(
                select(LocationLawToken.location_id).where(
                    LocationLawToken.law_token_id == first.law_token_ids[0]
                )
            )
        )
        assert linked == {first.node_id, second.node_id}

    def test_repeated_token_in_one_location(self, session, swarm_id) -> None:
        created = create_location(session, ALICE, "S1", "{a} then {a}", "", [], swarm_id)
        assert len(created.law_token_ids) == 1
        assert created.new_law_token_count == 1
        assert session.scalar(select(func.count()).select_from(LocationLawToken)) == 1

    def test_no_dedup_across_swarms(self, session, curation_id, swarm_id) -> None:
        other_swarm = create_swarm(session, ALICE, "Other", [], curation_id)
        first = create_location(session, ALICE, "S1", "{appropriate authority}", "", [], swarm_id)
        second = create_location(session, ALICE, "S1", "{appropriate authority}", "", [], other_swarm)

        assert first.law_token_ids != second.law_token_ids
        assert second.new_law_token_count == 1
        assert session.scalar(select(func.count()).select_from(LawToken)) == 2

    def test_original_token_sequence_derived_when_missing(self, session, swarm_id) -> None:
        created = create_location(session, ALICE, "S1", "{a} and {b}", "", [], swarm_id)
        assert session.get(Location, created.node_id).original_token_sequence == "{a}{b}"

    def test_original_token_sequence_kept_when_given(self, session, swarm_id) -> None:
        created = create_location(session, ALICE, "S1", "{a} and {b}", "{a}", [], swarm_id)
        assert session.get(Location, created.node_id).original_token_sequence == "{a}"
