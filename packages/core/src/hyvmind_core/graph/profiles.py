from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from hyvmind_core.db.models import UserProfile
from hyvmind_core.errors import InvalidInput
from hyvmind_core.graph.access import require_user


@dataclass
class Profile:
    name: str
    social_url: str | None = None


def save_caller_user_profile(session: Session, caller: str | None, profile: Profile) -> None:
    caller = require_user(session, caller)
    name = (profile.name or "").strip()
    if not name:
        raise InvalidInput("Profile name must not be empty")
    social_url = (profile.social_url or "").strip() or None

    row = session.get(UserProfile, caller)
    if row is None:
        session.add(UserProfile(principal=caller, name=name, social_url=social_url))
    else:
        row.name = name
        row.social_url = social_url
    session.flush()


def get_caller_user_profile(session: Session, caller: str | None) -> Profile | None:
    caller = require_user(session, caller)
    row = session.get(UserProfile, caller)
    if row is None:
        return None
    return Profile(name=row.name, social_url=row.social_url)
