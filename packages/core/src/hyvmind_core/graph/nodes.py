"""
Polymorphic node lookup.

Node ids are opaque strings shared by five tables. Everything that has to
treat "a node" generically (permission checks, vote deltas, tree labels)
goes through the dispatch tables below. Each table is keyed by `NodeType`
and checked for completeness at import time, so adding a node type fails
loudly until every resolver knows about it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hyvmind_core.db.enums import NodeType
from hyvmind_core.db.models import Curation, InterpretationToken, LawToken, Location, Swarm
from hyvmind_core.errors import NotFound

NodeRow = Union[Curation, Swarm, Location, LawToken, InterpretationToken]

NODE_MODELS: dict[NodeType, type] = {
    NodeType.curation: Curation,
    NodeType.swarm: Swarm,
    NodeType.location: Location,
    NodeType.law_token: LawToken,
    NodeType.interpretation_token: InterpretationToken,
}


@dataclass(frozen=True)
class ResolvedNode:
    node_type: NodeType
    row: NodeRow

    @property
    def node_id(self) -> str:
        return self.row.node_id

    @property
    def creator(self) -> str:
        return self.row.creator

    @property
    def label(self) -> str:
        return _LABELS[self.node_type](self.row)


def next_order_index(session: Session, model: type) -> int:
    current = session.scalar(select(func.max(model.order_index)))
    return (current or 0) + 1


def resolve_node(session: Session, node_id: str) -> ResolvedNode | None:
    for node_type, model in NODE_MODELS.items():
        row = session.get(model, node_id)
        if row is not None:
            return ResolvedNode(node_type=node_type, row=row)
    return None


def get_node(session: Session, node_id: str) -> ResolvedNode:
    node = resolve_node(session, node_id)
    if node is None:
        raise NotFound(f"Node does not exist: {node_id}", details={"node_id": node_id})
    return node


def _curation_swarm(session: Session, row: Curation) -> str | None:
    return None


def _swarm_swarm(session: Session, row: Swarm) -> str | None:
    return row.node_id


def _location_swarm(session: Session, row: Location) -> str | None:
    return row.parent_swarm_id


def _law_token_swarm(session: Session, row: LawToken) -> str | None:
    location = session.get(Location, row.parent_location_id)
    return location.parent_swarm_id if location is not None else None


def _interpretation_token_swarm(session: Session, row: InterpretationToken) -> str | None:
    law_token = session.get(LawToken, row.from_law_token_id)
    return _law_token_swarm(session, law_token) if law_token is not None else None


_SWARM_RESOLVERS: dict[NodeType, Callable[[Session, NodeRow], str | None]] = {
    NodeType.curation: _curation_swarm,
    NodeType.swarm: _swarm_swarm,
    NodeType.location: _location_swarm,
    NodeType.law_token: _law_token_swarm,
    NodeType.interpretation_token: _interpretation_token_swarm,
}

_LABELS: dict[NodeType, Callable[[NodeRow], str]] = {
    NodeType.curation: lambda row: row.name,
    NodeType.swarm: lambda row: row.name,
    NodeType.location: lambda row: row.title,
    NodeType.law_token: lambda row: row.token_label,
    NodeType.interpretation_token: lambda row: row.title,
}

for _table in (NODE_MODELS, _SWARM_RESOLVERS, _LABELS):
    _missing = set(NodeType) - set(_table)
    if _missing:
        raise RuntimeError(f"Node dispatch table is missing node types: {sorted(t.value for t in _missing)}")


def node_swarm_id(session: Session, node: ResolvedNode) -> str | None:
    return _SWARM_RESOLVERS[node.node_type](session, node.row)


def get_node_swarm_id(session: Session, node_id: str) -> str | None:
    """Swarm that owns `node_id`; None for curations and unknown ids."""
    node = resolve_node(session, node_id)
    if node is None:
        return None
    return node_swarm_id(session, node)


def get_node_creator(session: Session, node_id: str) -> str | None:
    node = resolve_node(session, node_id)
    return node.creator if node is not None else None
