"""Custom attribute search endpoints."""

from fastapi import APIRouter, Query

from hyvmind_api.deps import Caller, DbSession
from hyvmind_api.schemas import CamelModel
from hyvmind_core.db.enums import NodeType
from hyvmind_core.graph import attributes
from hyvmind_core.graph.access import require_user

router = APIRouter()


class SearchResultResponse(CamelModel):
    id: str
    name: str
    node_type: NodeType
    parent_context: str | None


@router.get("/keys", response_model=list[str])
def list_keys(db: DbSession, caller: Caller) -> list[str]:
    require_user(db, caller)
    return attributes.get_all_custom_attribute_keys(db)


@router.get("/search", response_model=list[SearchResultResponse])
def search(
    db: DbSession,
    caller: Caller,
    key: str = Query(min_length=1),
    value: str = Query(),
) -> list[SearchResultResponse]:
    """Locations and interpretation tokens carrying exactly `key`=`value`."""
    require_user(db, caller)
    return [
        SearchResultResponse(id=r.id, name=r.name, node_type=r.node_type, parent_context=r.parent_context)
        for r in attributes.search_nodes_by_attribute(db, key, value)
    ]


@router.get("/{key}/values", response_model=list[str])
def list_values(db: DbSession, caller: Caller, key: str) -> list[str]:
    require_user(db, caller)
    return attributes.get_attribute_values_for_key(db, key)
