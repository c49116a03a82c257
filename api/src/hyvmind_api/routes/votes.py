"""Voting endpoints."""

from fastapi import APIRouter

from hyvmind_api.deps import Caller, DbSession, command
from hyvmind_api.schemas import CamelModel
from hyvmind_core.graph import voting

router = APIRouter()


class VoteDataResponse(CamelModel):
    upvotes: int
    downvotes: int


class MyVoteResponse(CamelModel):
    """`voted` is true for an upvote, false for a downvote and null when not voted."""

    voted: bool | None


@router.post("/{node_id}/upvote", status_code=204)
def upvote(db: DbSession, caller: Caller, node_id: str) -> None:
    with command(db):
        voting.upvote_node(db, caller, node_id)


@router.post("/{node_id}/downvote", status_code=204)
def downvote(db: DbSession, caller: Caller, node_id: str) -> None:
    with command(db):
        voting.downvote_node(db, caller, node_id)


@router.get("/{node_id}/votes", response_model=VoteDataResponse)
def get_votes(db: DbSession, node_id: str) -> VoteDataResponse:
    """Public vote tally; unknown nodes report (0, 0)."""
    data = voting.get_vote_data(db, node_id)
    return VoteDataResponse(upvotes=data.upvotes, downvotes=data.downvotes)


@router.get("/{node_id}/my-vote", response_model=MyVoteResponse)
def get_my_vote(db: DbSession, caller: Caller, node_id: str) -> MyVoteResponse:
    return MyVoteResponse(voted=voting.has_user_voted(db, caller, node_id))
