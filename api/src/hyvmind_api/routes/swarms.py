"""Swarm membership endpoints."""

from fastapi import APIRouter

from hyvmind_api.deps import Caller, DbSession, command
from hyvmind_api.schemas import CamelModel
from hyvmind_core.db.enums import MembershipStatus
from hyvmind_core.graph import membership
from hyvmind_core.graph.access import require_user
from hyvmind_core.graph.store import get_swarms_by_creator

router = APIRouter()


class ApproveRequest(CamelModel):
    member: str


class MembershipInfoResponse(CamelModel):
    principal: str
    status: MembershipStatus
    profile_name: str | None


class SwarmSummary(CamelModel):
    id: str
    name: str
    tags: list[str]
    parent_curation_id: str
    creator: str


@router.get("/mine", response_model=list[SwarmSummary])
def list_my_swarms(db: DbSession, caller: Caller) -> list[SwarmSummary]:
    """Swarms created by the caller."""
    return [
        SwarmSummary(
            id=s.node_id,
            name=s.name,
            tags=list(s.tags),
            parent_curation_id=s.parent_curation_id,
            creator=s.creator,
        )
        for s in get_swarms_by_creator(db, caller)
    ]


@router.post("/{swarm_id}/join-requests", status_code=204)
def request_to_join(db: DbSession, caller: Caller, swarm_id: str) -> None:
    """Ask the swarm creator for membership."""
    with command(db):
        membership.request_to_join(db, caller, swarm_id)


@router.get("/{swarm_id}/join-requests", response_model=list[MembershipInfoResponse])
def list_join_requests(db: DbSession, caller: Caller, swarm_id: str) -> list[MembershipInfoResponse]:
    """All membership records of a swarm (creator only)."""
    return [
        MembershipInfoResponse(principal=info.principal, status=info.status, profile_name=info.profile_name)
        for info in membership.list_requests(db, caller, swarm_id)
    ]


@router.post("/{swarm_id}/members", status_code=204)
def approve_join_request(db: DbSession, caller: Caller, swarm_id: str, body: ApproveRequest) -> None:
    """Approve a pending request (creator only)."""
    with command(db):
        membership.approve(db, caller, swarm_id, body.member)


@router.get("/{swarm_id}/members", response_model=list[str])
def list_members(db: DbSession, caller: Caller, swarm_id: str) -> list[str]:
    """Approved members of a swarm."""
    require_user(db, caller)
    return membership.list_members(db, swarm_id)
