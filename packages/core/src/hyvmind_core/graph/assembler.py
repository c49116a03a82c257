"""
Graph read model.

`get_graph_data` rebuilds the whole picture on every call: flat node lists,
the nested Curation -> Swarm -> Location -> LawToken -> InterpretationToken
tree and a flat edge list. Node counts are annotation-sized, so there is no
caching.
"""

from __future__ import annotations

from collections import defaultdict

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from sqlalchemy import select
from sqlalchemy.orm import Session

from hyvmind_core.db.enums import EdgeKind, NodeType
from hyvmind_core.db.models import Curation, InterpretationToken, LawToken, Location, LocationLawToken, Swarm
from hyvmind_core.graph.voting import VoteData, get_all_vote_data


class GraphModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class CustomAttributeOut(GraphModel):
    key: str
    value: str


class CurationOut(GraphModel):
    id: str
    name: str
    jurisdiction: str
    creator: str


class SwarmOut(GraphModel):
    id: str
    name: str
    tags: list[str]
    parent_curation_id: str
    creator: str


class LocationOut(GraphModel):
    id: str
    title: str
    content: str
    original_token_sequence: str
    custom_attributes: list[CustomAttributeOut]
    parent_swarm_id: str
    creator: str
    version: int
    law_token_ids: list[str]


class LawTokenOut(GraphModel):
    id: str
    token_label: str
    meaning: str
    parent_location_id: str
    creator: str


class InterpretationTokenOut(GraphModel):
    id: str
    title: str
    context: str
    from_law_token_id: str
    from_relationship_type: str
    to_node_id: str
    to_relationship_type: str
    custom_attributes: list[CustomAttributeOut]
    creator: str


class GraphEdge(GraphModel):
    source: str
    target: str
    kind: EdgeKind


class GraphNode(GraphModel):
    id: str
    node_type: NodeType
    token_label: str
    parent_id: str | None = None
    children: list[GraphNode] = Field(default_factory=list)


class DiscardedNode(GraphModel):
    id: str
    label: str
    node_type: NodeType


class GraphData(GraphModel):
    curations: list[CurationOut]
    swarms: list[SwarmOut]
    locations: list[LocationOut]
    law_tokens: list[LawTokenOut]
    interpretation_tokens: list[InterpretationTokenOut]
    root_nodes: list[GraphNode]
    edges: list[GraphEdge]
    discarded_nodes: list[DiscardedNode] = Field(default_factory=list)


def _all(session: Session, model: type) -> list:
    return list(session.scalars(select(model).order_by(model.order_index)))


def get_graph_data(session: Session) -> GraphData:
    curations = _all(session, Curation)
    swarms = _all(session, Swarm)
    locations = _all(session, Location)
    law_tokens = _all(session, LawToken)
    interpretation_tokens = _all(session, InterpretationToken)
    relations = _all(session, LocationLawToken)

    law_tokens_by_id = {t.node_id: t for t in law_tokens}
    swarms_by_curation: dict[str, list[Swarm]] = defaultdict(list)
    for swarm in swarms:
        swarms_by_curation[swarm.parent_curation_id].append(swarm)
    locations_by_swarm: dict[str, list[Location]] = defaultdict(list)
    for location in locations:
        locations_by_swarm[location.parent_swarm_id].append(location)
    law_token_ids_by_location: dict[str, list[str]] = defaultdict(list)
    for relation in relations:
        law_token_ids_by_location[relation.location_id].append(relation.law_token_id)
    interpretations_by_law_token: dict[str, list[InterpretationToken]] = defaultdict(list)
    for token in interpretation_tokens:
        interpretations_by_law_token[token.from_law_token_id].append(token)

    def interpretation_node(token: InterpretationToken) -> GraphNode:
        return GraphNode(
            id=token.node_id,
            node_type=NodeType.interpretation_token,
            token_label=token.title,
            parent_id=token.from_law_token_id,
        )

    def law_token_node(token: LawToken, location_id: str) -> GraphNode:
        return GraphNode(
            id=token.node_id,
            node_type=NodeType.law_token,
            token_label=token.token_label,
            parent_id=location_id,
            children=[interpretation_node(i) for i in interpretations_by_law_token[token.node_id]],
        )

    def location_node(location: Location) -> GraphNode:
        # A shared law token is nested under every location that references it.
        return GraphNode(
            id=location.node_id,
            node_type=NodeType.location,
            token_label=location.title,
            parent_id=location.parent_swarm_id,
            children=[
                law_token_node(law_tokens_by_id[law_token_id], location.node_id)
                for law_token_id in law_token_ids_by_location[location.node_id]
                if law_token_id in law_tokens_by_id
            ],
        )

    def swarm_node(swarm: Swarm) -> GraphNode:
        return GraphNode(
            id=swarm.node_id,
            node_type=NodeType.swarm,
            token_label=swarm.name,
            parent_id=swarm.parent_curation_id,
            children=[location_node(l) for l in locations_by_swarm[swarm.node_id]],
        )

    root_nodes = [
        GraphNode(
            id=curation.node_id,
            node_type=NodeType.curation,
            token_label=curation.name,
            children=[swarm_node(s) for s in swarms_by_curation[curation.node_id]],
        )
        for curation in curations
    ]

    edges = [
        GraphEdge(source=r.location_id, target=r.law_token_id, kind=EdgeKind.location_law_token) for r in relations
    ]
    edges += [
        GraphEdge(source=t.from_law_token_id, target=t.node_id, kind=EdgeKind.interpretation_from)
        for t in interpretation_tokens
    ]
    edges += [
        GraphEdge(source=t.node_id, target=t.to_node_id, kind=EdgeKind.interpretation_to)
        for t in interpretation_tokens
    ]

    return GraphData(
        curations=[
            CurationOut(id=c.node_id, name=c.name, jurisdiction=c.jurisdiction, creator=c.creator) for c in curations
        ],
        swarms=[
            SwarmOut(
                id=s.node_id,
                name=s.name,
                tags=list(s.tags),
                parent_curation_id=s.parent_curation_id,
                creator=s.creator,
            )
            for s in swarms
        ],
        locations=[
            LocationOut(
                id=l.node_id,
                title=l.title,
                content=l.content,
                original_token_sequence=l.original_token_sequence,
                custom_attributes=[CustomAttributeOut(**a) for a in l.custom_attributes],
                parent_swarm_id=l.parent_swarm_id,
                creator=l.creator,
                version=l.version,
                law_token_ids=law_token_ids_by_location[l.node_id],
            )
            for l in locations
        ],
        law_tokens=[
            LawTokenOut(
                id=t.node_id,
                token_label=t.token_label,
                meaning=t.meaning,
                parent_location_id=t.parent_location_id,
                creator=t.creator,
            )
            for t in law_tokens
        ],
        interpretation_tokens=[
            InterpretationTokenOut(
                id=t.node_id,
                title=t.title,
                context=t.context,
                from_law_token_id=t.from_law_token_id,
                from_relationship_type=t.from_relationship_type,
                to_node_id=t.to_node_id,
                to_relationship_type=t.to_relationship_type,
                custom_attributes=[CustomAttributeOut(**a) for a in t.custom_attributes],
                creator=t.creator,
            )
            for t in interpretation_tokens
        ],
        root_nodes=root_nodes,
        edges=edges,
    )


def filter_discarded(
    root_nodes: list[GraphNode], votes: dict[str, VoteData]
) -> tuple[list[GraphNode], list[DiscardedNode]]:
    """
    Drop every node whose downvotes strictly exceed its upvotes, with its subtree.

    Curations are never discarded. Returns the pruned tree and the discarded
    subtree roots (a shared law token is reported once per occurrence).
    """
    discarded: list[DiscardedNode] = []

    def visit(node: GraphNode) -> GraphNode | None:
        tally = votes.get(node.id)
        if node.node_type != NodeType.curation and tally is not None and tally.is_discarded:
            discarded.append(DiscardedNode(id=node.id, label=node.token_label, node_type=node.node_type))
            return None
        children = [kept for kept in (visit(child) for child in node.children) if kept is not None]
        return node.model_copy(update={"children": children})

    filtered = [kept for kept in (visit(root) for root in root_nodes) if kept is not None]
    return filtered, discarded


def get_filtered_graph_data(session: Session) -> GraphData:
    graph = get_graph_data(session)
    root_nodes, discarded = filter_discarded(graph.root_nodes, get_all_vote_data(session))
    return graph.model_copy(update={"root_nodes": root_nodes, "discarded_nodes": discarded})
