"""Administration endpoints."""

from fastapi import APIRouter

from hyvmind_api.deps import Caller, DbSession, command
from hyvmind_api.schemas import CamelModel
from hyvmind_core.db.enums import Role
from hyvmind_core.graph.access import assign_role, get_role
from hyvmind_core.graph.admin import reset_all_data

router = APIRouter()


class ResetResponse(CamelModel):
    deleted: dict[str, int]


class RoleBody(CamelModel):
    role: Role


class CallerRoleResponse(CamelModel):
    role: Role
    is_admin: bool


@router.get("/me", response_model=CallerRoleResponse)
def whoami(db: DbSession, caller: Caller) -> CallerRoleResponse:
    role = get_role(db, caller)
    return CallerRoleResponse(role=role, is_admin=role == Role.admin)


@router.put("/roles/{principal}", status_code=204)
def put_role(db: DbSession, caller: Caller, principal: str, body: RoleBody) -> None:
    with command(db):
        assign_role(db, principal, body.role, caller=caller)


@router.post("/reset", response_model=ResetResponse)
def reset(db: DbSession, caller: Caller) -> ResetResponse:
    """Wipe graph, votes, BUZZ and memberships. Profiles and roles survive."""
    with command(db):
        deleted = reset_all_data(db, caller)
    return ResetResponse(deleted=deleted)
