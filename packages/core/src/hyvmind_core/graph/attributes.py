"""Custom-attribute catalogue and search over locations and interpretation tokens."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from sqlalchemy import select
from sqlalchemy.orm import Session

from hyvmind_core.db.enums import NodeType
from hyvmind_core.db.models import InterpretationToken, LawToken, Location, Swarm


@dataclass
class SearchResult:
    id: str
    name: str
    node_type: NodeType
    parent_context: str | None


def _attributed_nodes(session: Session) -> Iterator[tuple[NodeType, Location | InterpretationToken]]:
    for location in session.scalars(select(Location).order_by(Location.order_index)):
        yield NodeType.location, location
    for token in session.scalars(select(InterpretationToken).order_by(InterpretationToken.order_index)):
        yield NodeType.interpretation_token, token


def get_all_custom_attribute_keys(session: Session) -> list[str]:
    keys = {
        attribute["key"]
        for _, node in _attributed_nodes(session)
        for attribute in node.custom_attributes
        if attribute.get("key", "").strip()
    }
    return sorted(keys)


def get_attribute_values_for_key(session: Session, key: str) -> list[str]:
    values = {
        attribute["value"]
        for _, node in _attributed_nodes(session)
        for attribute in node.custom_attributes
        if attribute.get("key") == key
    }
    return sorted(values)


def search_nodes_by_attribute(session: Session, key: str, value: str) -> list[SearchResult]:
    results: list[SearchResult] = []
    for node_type, node in _attributed_nodes(session):
        if not any(a.get("key") == key and a.get("value") == value for a in node.custom_attributes):
            continue
        if node_type == NodeType.location:
            swarm = session.get(Swarm, node.parent_swarm_id)
            results.append(
                SearchResult(
                    id=node.node_id,
                    name=node.title,
                    node_type=node_type,
                    parent_context=f"Swarm: {swarm.name}" if swarm is not None else None,
                )
            )
        else:
            law_token = session.get(LawToken, node.from_law_token_id)
            results.append(
                SearchResult(
                    id=node.node_id,
                    name=node.title,
                    node_type=node_type,
                    parent_context=f"Law Token: {law_token.token_label}" if law_token is not None else None,
                )
            )
    return results
