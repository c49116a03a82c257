"""BUZZ leaderboard endpoint."""

from fastapi import APIRouter

from hyvmind_api.deps import Caller, DbSession
from hyvmind_api.schemas import CamelModel
from hyvmind_core.graph.access import require_user
from hyvmind_core.graph.voting import get_buzz_leaderboard

router = APIRouter()


class LeaderboardEntryResponse(CamelModel):
    principal: str
    score: int
    profile_name: str | None


@router.get("/leaderboard", response_model=list[LeaderboardEntryResponse])
def leaderboard(db: DbSession, caller: Caller) -> list[LeaderboardEntryResponse]:
    """Principals with a positive score, highest first."""
    require_user(db, caller)
    return [
        LeaderboardEntryResponse(principal=e.principal, score=e.score, profile_name=e.profile_name)
        for e in get_buzz_leaderboard(db)
    ]
