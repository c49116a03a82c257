"""
Node creation commands.

Nodes are never updated or deleted individually (only by a global reset).
Every command validates and checks permissions before it writes, so a
failure leaves the session exactly as it found it.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hyvmind_core.db.enums import NodeType
from hyvmind_core.db.models import Curation, InterpretationToken, LawToken, Location, Swarm
from hyvmind_core.errors import AlreadyExists, InvalidInput, NotFound, ParentNotFound, Unauthorized
from hyvmind_core.graph.access import require_user
from hyvmind_core.graph.law_tokens import extract_law_tokens, token_sequence, validate_content
from hyvmind_core.graph.membership import is_swarm_creator_or_member
from hyvmind_core.graph.nodes import next_order_index, node_swarm_id, resolve_node
from hyvmind_core.graph.voting import INTERPRETATION_TOKEN_CREATION_CREDIT, auto_upvote, credit_buzz
from hyvmind_core.identity import (
    curation_id_for,
    interpretation_token_id_for,
    location_id_for,
    swarm_id_for,
)

logger = logging.getLogger(__name__)

_JURISDICTION = re.compile(r"^[A-Z]{3}$")


@dataclass
class CustomAttribute:
    key: str
    value: str

    def as_dict(self) -> dict[str, str]:
        return {"key": self.key, "value": self.value}


@dataclass
class LocationCreated:
    node_id: str
    law_token_ids: list[str] = field(default_factory=list)
    new_law_token_count: int = 0


def _require_text(value: str, field_name: str) -> str:
    if value is None or not value.strip():
        raise InvalidInput(f"{field_name} must not be empty")
    return value.strip()


def _clean_attributes(attributes: list[CustomAttribute] | None) -> list[dict[str, str]]:
    # Rows where both key and value are blank are form padding.
    return [
        CustomAttribute(key=a.key.strip(), value=a.value.strip()).as_dict()
        for a in attributes or []
        if a.key.strip() or a.value.strip()
    ]


def unique_swarm_name(session: Session, name: str) -> str:
    """`name`, or the first free `name_N` (N = 1, 2, ...) across all swarms."""
    taken = set(session.scalars(select(Swarm.name).order_by(Swarm.order_index)))
    if name not in taken:
        return name
    counter = 1
    while f"{name}_{counter}" in taken:
        counter += 1
    return f"{name}_{counter}"


def versioned_title(session: Session, swarm_id: str, title: str) -> tuple[str, int]:
    existing = session.scalar(
        select(func.count())
        .select_from(Location)
        .where(Location.parent_swarm_id == swarm_id)
        .where(Location.title_base == title)
    ) or 0
    version = existing + 1
    taken = set(session.scalars(select(Location.title).where(Location.parent_swarm_id == swarm_id)))
    if version == 1 and title not in taken:
        return title, 1
    # A literal "X (v2)" typed by a user can occupy a generated title; skip past it.
    version = max(version, 2)
    while f"{title} (v{version})" in taken:
        version += 1
    return f"{title} (v{version})", version


def create_curation(session: Session, caller: str | None, name: str, jurisdiction: str) -> str:
    caller = require_user(session, caller)
    name = _require_text(name, "Curation name")
    jurisdiction = (jurisdiction or "").strip().upper()
    if not _JURISDICTION.match(jurisdiction):
        raise InvalidInput(
            f"Jurisdiction must be an ISO 3166-1 alpha-3 code, got {jurisdiction!r}",
            details={"jurisdiction": jurisdiction},
        )

    node_id = curation_id_for(name=name, jurisdiction=jurisdiction, creator=caller)
    if session.get(Curation, node_id) is not None:
        raise AlreadyExists(
            "You already created a curation with this name and jurisdiction",
            details={"node_id": node_id},
        )

    session.add(
        Curation(
            node_id=node_id,
            order_index=next_order_index(session, Curation),
            name=name,
            jurisdiction=jurisdiction,
            creator=caller,
        )
    )
    session.flush()
    logger.info("curation created id=%s name=%r creator=%s", node_id, name, caller)
    return node_id


def create_swarm(session: Session, caller: str | None, name: str, tags: list[str], parent_curation_id: str) -> str:
    caller = require_user(session, caller)
    name = _require_text(name, "Swarm name")
    if session.get(Curation, parent_curation_id) is None:
        raise ParentNotFound("Parent curation does not exist", details={"parent_curation_id": parent_curation_id})

    final_name = unique_swarm_name(session, name)
    node_id = swarm_id_for(name=final_name, creator=caller)
    session.add(
        Swarm(
            node_id=node_id,
            order_index=next_order_index(session, Swarm),
            name=final_name,
            tags=[t.strip() for t in tags or [] if t.strip()],
            parent_curation_id=parent_curation_id,
            creator=caller,
        )
    )
    session.flush()
    auto_upvote(session, node_id, caller)
    logger.info("swarm created id=%s name=%r creator=%s", node_id, final_name, caller)
    return node_id


def create_location(
    session: Session,
    caller: str | None,
    title: str,
    content: str,
    original_token_sequence: str,
    custom_attributes: list[CustomAttribute] | None,
    parent_swarm_id: str,
) -> LocationCreated:
    caller = require_user(session, caller)
    title = _require_text(title, "Location title")
    content = (content or "").strip()
    if session.get(Swarm, parent_swarm_id) is None:
        raise ParentNotFound("Parent swarm does not exist", details={"parent_swarm_id": parent_swarm_id})
    if not is_swarm_creator_or_member(session, caller, parent_swarm_id):
        raise Unauthorized("Unauthorized: Only swarm creator or approved members can create locations")
    validate_content(content)

    final_title, version = versioned_title(session, parent_swarm_id, title)
    node_id = location_id_for(swarm_id=parent_swarm_id, title=final_title, creator=caller)
    location = Location(
        node_id=node_id,
        order_index=next_order_index(session, Location),
        title=final_title,
        title_base=title,
        version=version,
        content=content,
        original_token_sequence=original_token_sequence or token_sequence(content),
        custom_attributes=_clean_attributes(custom_attributes),
        parent_swarm_id=parent_swarm_id,
        creator=caller,
    )
    session.add(location)
    session.flush()
    auto_upvote(session, node_id, caller)

    extraction = extract_law_tokens(session, caller, location)
    logger.info(
        "location created id=%s title=%r swarm=%s law_tokens=%d new=%d",
        node_id,
        final_title,
        parent_swarm_id,
        len(extraction.law_token_ids),
        extraction.created_count,
    )
    return LocationCreated(
        node_id=node_id,
        law_token_ids=extraction.law_token_ids,
        new_law_token_count=extraction.created_count,
    )


def create_interpretation_token(
    session: Session,
    caller: str | None,
    title: str,
    context: str,
    from_law_token_id: str,
    from_relationship_type: str,
    to_node_id: str,
    to_relationship_type: str,
    custom_attributes: list[CustomAttribute] | None,
) -> str:
    caller = require_user(session, caller)
    title = _require_text(title, "Interpretation token title")
    from_relationship_type = _require_text(from_relationship_type, "From relationship type")
    to_relationship_type = _require_text(to_relationship_type, "To relationship type")

    law_token = session.get(LawToken, from_law_token_id)
    if law_token is None:
        raise NotFound("From law token does not exist", details={"from_law_token_id": from_law_token_id})
    from_node = resolve_node(session, from_law_token_id)
    if not is_swarm_creator_or_member(session, caller, node_swarm_id(session, from_node)):
        raise Unauthorized("Unauthorized: Only swarm creator or approved members can create interpretation tokens")

    to_node = resolve_node(session, to_node_id)
    if to_node is None:
        raise NotFound("Target node does not exist", details={"to_node_id": to_node_id})
    if to_node.node_type == NodeType.curation:
        raise InvalidInput("Interpretation tokens cannot point at a curation")
    if not is_swarm_creator_or_member(session, caller, node_swarm_id(session, to_node)):
        raise Unauthorized("Unauthorized: Only swarm creator or approved members of the target swarm can link to it")

    node_id = interpretation_token_id_for(
        from_law_token_id=from_law_token_id, to_node_id=to_node_id, title=title, creator=caller
    )
    if session.get(InterpretationToken, node_id) is not None:
        raise AlreadyExists(
            "You already created an interpretation token with this title between these nodes",
            details={"node_id": node_id},
        )

    session.add(
        InterpretationToken(
            node_id=node_id,
            order_index=next_order_index(session, InterpretationToken),
            title=title,
            context=(context or "").strip(),
            from_law_token_id=from_law_token_id,
            from_relationship_type=from_relationship_type,
            to_node_id=to_node_id,
            to_relationship_type=to_relationship_type,
            custom_attributes=_clean_attributes(custom_attributes),
            creator=caller,
        )
    )
    session.flush()
    auto_upvote(session, node_id, caller)
    credit_buzz(session, caller, INTERPRETATION_TOKEN_CREATION_CREDIT)
    logger.info("interpretation token created id=%s from=%s to=%s creator=%s", node_id, from_law_token_id, to_node_id, caller)
    return node_id


def get_swarms_by_creator(session: Session, caller: str | None) -> list[Swarm]:
    caller = require_user(session, caller)
    return list(session.scalars(select(Swarm).where(Swarm.creator == caller).order_by(Swarm.order_index)))
