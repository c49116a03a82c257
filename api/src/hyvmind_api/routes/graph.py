"""Graph read model endpoint."""

from fastapi import APIRouter, Query

from hyvmind_api.deps import DbSession
from hyvmind_core.graph.assembler import GraphData, get_filtered_graph_data, get_graph_data

router = APIRouter()


@router.get("/graph", response_model=GraphData)
def graph(
    db: DbSession,
    hide_discarded: bool = Query(default=False, description="Prune nodes with more downvotes than upvotes"),
) -> GraphData:
    """Full graph: flat node lists, nested tree and edges. Public."""
    if hide_discarded:
        return get_filtered_graph_data(db)
    return get_graph_data(db)
