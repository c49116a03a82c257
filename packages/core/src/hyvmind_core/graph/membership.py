"""Swarm membership registry: join requests, approvals and the access predicate."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from hyvmind_core.db.enums import MembershipStatus
from hyvmind_core.db.models import Swarm, SwarmMembership, UserProfile
from hyvmind_core.errors import AlreadyRequested, Forbidden, NoPendingRequest, NotFound, SelfJoin
from hyvmind_core.graph.access import require_user
from hyvmind_core.graph.nodes import next_order_index

logger = logging.getLogger(__name__)


@dataclass
class MembershipInfo:
    principal: str
    status: MembershipStatus
    profile_name: str | None


def _get_swarm(session: Session, swarm_id: str) -> Swarm:
    swarm = session.get(Swarm, swarm_id)
    if swarm is None:
        raise NotFound(f"Swarm does not exist: {swarm_id}", details={"swarm_id": swarm_id})
    return swarm


def is_swarm_creator_or_member(session: Session, caller: str | None, swarm_id: str | None) -> bool:
    if caller is None or swarm_id is None:
        return False
    swarm = session.get(Swarm, swarm_id)
    if swarm is None:
        return False
    if swarm.creator == caller:
        return True
    record = session.get(SwarmMembership, (swarm_id, caller))
    return record is not None and record.status == MembershipStatus.approved


def request_to_join(session: Session, caller: str | None, swarm_id: str) -> None:
    caller = require_user(session, caller)
    swarm = _get_swarm(session, swarm_id)
    if swarm.creator == caller:
        raise SelfJoin("Swarm creator cannot request to join their own swarm")
    if session.get(SwarmMembership, (swarm_id, caller)) is not None:
        raise AlreadyRequested("Membership already requested for this swarm", details={"swarm_id": swarm_id})

    session.add(
        SwarmMembership(
            swarm_id=swarm_id,
            member=caller,
            status=MembershipStatus.pending,
            order_index=next_order_index(session, SwarmMembership),
        )
    )
    session.flush()
    logger.info("join requested swarm=%s member=%s", swarm_id, caller)


def approve(session: Session, caller: str | None, swarm_id: str, member: str) -> None:
    caller = require_user(session, caller)
    swarm = _get_swarm(session, swarm_id)
    if swarm.creator != caller:
        raise Forbidden("Only the swarm creator can approve membership requests")

    record = session.get(SwarmMembership, (swarm_id, member))
    if record is None or record.status != MembershipStatus.pending:
        raise NoPendingRequest("No pending request found for this member", details={"member": member})

    record.status = MembershipStatus.approved
    record.approved_at = datetime.utcnow()
    session.flush()
    logger.info("join approved swarm=%s member=%s", swarm_id, member)


def list_members(session: Session, swarm_id: str) -> list[str]:
    """Approved members in request order; the creator is not listed."""
    return list(
        session.scalars(
            select(SwarmMembership.member)
            .where(SwarmMembership.swarm_id == swarm_id)
            .where(SwarmMembership.status == MembershipStatus.approved)
            .order_by(SwarmMembership.order_index)
        )
    )


def list_requests(session: Session, caller: str | None, swarm_id: str) -> list[MembershipInfo]:
    caller = require_user(session, caller)
    swarm = _get_swarm(session, swarm_id)
    if swarm.creator != caller:
        raise Forbidden("Only the swarm creator can view membership requests")

    rows = session.execute(
        select(SwarmMembership.member, SwarmMembership.status, UserProfile.name)
        .outerjoin(UserProfile, UserProfile.principal == SwarmMembership.member)
        .where(SwarmMembership.swarm_id == swarm_id)
        .order_by(SwarmMembership.order_index)
    ).all()
    return [MembershipInfo(principal=row.member, status=row.status, profile_name=row.name) for row in rows]
