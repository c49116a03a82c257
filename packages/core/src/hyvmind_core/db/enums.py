from __future__ import annotations

import enum


class NodeType(str, enum.Enum):
    curation = "curation"
    swarm = "swarm"
    location = "location"
    law_token = "lawToken"
    interpretation_token = "interpretationToken"


class MembershipStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"


class VoteDirection(str, enum.Enum):
    up = "up"
    down = "down"


class Role(str, enum.Enum):
    guest = "guest"
    user = "user"
    admin = "admin"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]


_ROLE_RANK = {Role.guest: 0, Role.user: 1, Role.admin: 2}


class EdgeKind(str, enum.Enum):
    location_law_token = "locationLawToken"
    interpretation_from = "interpretationFrom"
    interpretation_to = "interpretationTo"
