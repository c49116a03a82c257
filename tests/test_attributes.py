"""
Unit tests for the custom-attribute catalogue and search.

Tests:
- Key and value listings are distinct and sorted
- Search matches exact key/value pairs on locations and interpretation tokens
- Parent context labels
"""

import pytest

from hyvmind_core.db.enums import NodeType
from hyvmind_core.graph.attributes import (
    get_all_custom_attribute_keys,
    get_attribute_values_for_key,
    search_nodes_by_attribute,
)
from hyvmind_core.graph.store import CustomAttribute, create_interpretation_token, create_location
from tests.conftest import ALICE, BOB


@pytest.fixture
def attributed(session, swarm_id):
    location = create_location(
        session,
        ALICE,
        "Section 2",
        "{court} means",
        "",
        [CustomAttribute(key="act", value="CPC"), CustomAttribute(key="year", value="1908")],
        swarm_id,
    )
    other = create_location(
        session, BOB, "Section 3", "", "", [CustomAttribute(key="act", value="IPC")], swarm_id
    )
    interpretation_id = create_interpretation_token(
        session,
        BOB,
        "Civil court",
        "",
        location.law_token_ids[0],
        "narrows",
        other.node_id,
        "appliesTo",
        [CustomAttribute(key="act", value="CPC")],
    )
    return location.node_id, other.node_id, interpretation_id


class TestCatalogue:
    def test_empty(self, session) -> None:
        assert get_all_custom_attribute_keys(session) == []
        assert get_attribute_values_for_key(session, "act") == []

    def test_keys_sorted_distinct(self, session, attributed) -> None:
        assert get_all_custom_attribute_keys(session) == ["act", "year"]

    def test_values_sorted_distinct(self, session, attributed) -> None:
        assert get_attribute_values_for_key(session, "act") == ["CPC", "IPC"]
        assert get_attribute_values_for_key(session, "missing") == []


class TestSearch:
    def test_matches_both_node_kinds(self, session, attributed) -> None:
        location_id, _, interpretation_id = attributed
        results = search_nodes_by_attribute(session, "act", "CPC")
        assert [(r.id, r.node_type) for r in results] == [
            (location_id, NodeType.location),
            (interpretation_id, NodeType.interpretation_token),
        ]

    def test_parent_context(self, session, attributed) -> None:
        location_result, interpretation_result = search_nodes_by_attribute(session, "act", "CPC")
        assert location_result.name == "Section 2"
        assert location_result.parent_context == "Swarm: Defs"
        assert interpretation_result.parent_context == "Law Token: court"

    def test_exact_match_only(self, session, attributed) -> None:
        assert search_nodes_by_attribute(session, "act", "cpc") == []
        assert search_nodes_by_attribute(session, "year", "CPC") == []
