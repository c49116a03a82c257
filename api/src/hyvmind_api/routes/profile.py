"""Caller profile endpoints."""

from fastapi import APIRouter

from hyvmind_api.deps import Caller, DbSession, command
from hyvmind_api.schemas import CamelModel
from hyvmind_core.graph.profiles import Profile, get_caller_user_profile, save_caller_user_profile

router = APIRouter()


class ProfileBody(CamelModel):
    name: str
    social_url: str | None = None


@router.get("", response_model=ProfileBody | None)
def get_profile(db: DbSession, caller: Caller) -> ProfileBody | None:
    profile = get_caller_user_profile(db, caller)
    if profile is None:
        return None
    return ProfileBody(name=profile.name, social_url=profile.social_url)


@router.put("", status_code=204)
def put_profile(db: DbSession, caller: Caller, body: ProfileBody) -> None:
    with command(db):
        save_caller_user_profile(db, caller, Profile(name=body.name, social_url=body.social_url))
