"""Node creation endpoints."""

from fastapi import APIRouter
from pydantic import Field

from hyvmind_api.deps import Caller, DbSession, command
from hyvmind_api.schemas import CamelModel, CustomAttributeIn, NodeIdResponse
from hyvmind_core.graph.store import (
    CustomAttribute,
    create_curation,
    create_interpretation_token,
    create_location,
    create_swarm,
)

router = APIRouter()


class CreateCurationRequest(CamelModel):
    name: str
    jurisdiction: str


class CreateSwarmRequest(CamelModel):
    name: str
    tags: list[str] = Field(default_factory=list)
    parent_curation_id: str


class CreateLocationRequest(CamelModel):
    title: str
    content: str = ""
    original_token_sequence: str = ""
    custom_attributes: list[CustomAttributeIn] = Field(default_factory=list)
    parent_swarm_id: str


class CreateLocationResponse(CamelModel):
    """Created location plus every law token it references, available immediately."""

    id: str
    law_token_ids: list[str]
    new_law_token_count: int


class CreateInterpretationTokenRequest(CamelModel):
    title: str
    context: str = ""
    from_law_token_id: str
    from_relationship_type: str
    to_node_id: str
    to_relationship_type: str
    custom_attributes: list[CustomAttributeIn] = Field(default_factory=list)


def _attributes(items: list[CustomAttributeIn]) -> list[CustomAttribute]:
    return [CustomAttribute(key=a.key, value=a.value) for a in items]


@router.post("/curations", response_model=NodeIdResponse, status_code=201)
def post_curation(db: DbSession, caller: Caller, body: CreateCurationRequest) -> NodeIdResponse:
    """Create a top-level curation."""
    with command(db):
        node_id = create_curation(db, caller, body.name, body.jurisdiction)
    return NodeIdResponse(id=node_id)


@router.post("/swarms", response_model=NodeIdResponse, status_code=201)
def post_swarm(db: DbSession, caller: Caller, body: CreateSwarmRequest) -> NodeIdResponse:
    """Create a swarm under a curation; the name may come back postfixed."""
    with command(db):
        node_id = create_swarm(db, caller, body.name, body.tags, body.parent_curation_id)
    return NodeIdResponse(id=node_id)


@router.post("/locations", response_model=CreateLocationResponse, status_code=201)
def post_location(db: DbSession, caller: Caller, body: CreateLocationRequest) -> CreateLocationResponse:
    """Create a location and extract its law tokens."""
    with command(db):
        created = create_location(
            db,
            caller,
            body.title,
            body.content,
            body.original_token_sequence,
            _attributes(body.custom_attributes),
            body.parent_swarm_id,
        )
    return CreateLocationResponse(
        id=created.node_id,
        law_token_ids=created.law_token_ids,
        new_law_token_count=created.new_law_token_count,
    )


@router.post("/interpretation-tokens", response_model=NodeIdResponse, status_code=201)
def post_interpretation_token(
    db: DbSession, caller: Caller, body: CreateInterpretationTokenRequest
) -> NodeIdResponse:
    """Annotate a law token, linking it to another node."""
    with command(db):
        node_id = create_interpretation_token(
            db,
            caller,
            body.title,
            body.context,
            body.from_law_token_id,
            body.from_relationship_type,
            body.to_node_id,
            body.to_relationship_type,
            _attributes(body.custom_attributes),
        )
    return NodeIdResponse(id=node_id)
