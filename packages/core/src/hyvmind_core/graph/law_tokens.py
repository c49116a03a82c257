"""
Law-token extraction from location content.

Location content marks legal concepts with curly brackets, e.g.
"the {appropriate authority} may appoint". Each bracketed text becomes a
LawToken node. Tokens are shared within a swarm: the same text appearing in
another location of the same swarm links to the existing token instead of
creating a new one. Across swarms the same text always yields a new token.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.orm import Session

from hyvmind_core.db.models import LawToken, Location, LocationLawToken
from hyvmind_core.errors import AlreadyExists, InvalidInput
from hyvmind_core.graph.nodes import next_order_index
from hyvmind_core.graph.voting import LAW_TOKEN_CREATION_CREDIT, auto_upvote, credit_buzz
from hyvmind_core.identity import law_token_id_for

logger = logging.getLogger(__name__)

_TOKEN_GROUP = re.compile(r"\{[^}]+\}")
_EMPTY_TOKEN = re.compile(r"\{\s*\}")


@dataclass
class ExtractionResult:
    law_token_ids: list[str] = field(default_factory=list)
    created_count: int = 0


def validate_content(content: str) -> None:
    """Reject malformed bracket syntax. Empty content is valid and has no tokens."""
    if not content or not content.strip():
        return

    opening = content.count("{")
    closing = content.count("}")
    if opening != closing:
        raise InvalidInput(
            f"Unmatched curly braces: found {opening} opening and {closing} closing braces. "
            "Each '{' must have a matching '}'.",
            details={"opening": opening, "closing": closing},
        )

    depth = 0
    for position, char in enumerate(content):
        if char == "{":
            depth += 1
            if depth > 1:
                raise InvalidInput(
                    "Nested curly braces are not supported. "
                    "Each token should be wrapped in a single pair of braces like {token}.",
                    details={"position": position},
                )
        elif char == "}":
            depth -= 1
            if depth < 0:
                raise InvalidInput(
                    "Invalid brace sequence: closing brace without matching opening brace.",
                    details={"position": position},
                )

    if _EMPTY_TOKEN.search(content):
        raise InvalidInput(
            "Empty tokens are not allowed. Each token must contain at least one non-whitespace character."
        )


def scan_tokens(content: str) -> list[str]:
    """
    Left-to-right scan returning trimmed token texts in order of appearance.

    Does not validate; `validate_content` must run first for user input.
    An unterminated trailing buffer is emitted if non-empty.
    """
    tokens: list[str] = []
    buffer: list[str] | None = None
    for char in content:
        if char == "{":
            if buffer is None:
                buffer = []
        elif char == "}":
            if buffer is not None:
                text = "".join(buffer).strip()
                if text:
                    tokens.append(text)
                buffer = None
        elif buffer is not None:
            buffer.append(char)

    if buffer is not None:
        text = "".join(buffer).strip()
        if text:
            tokens.append(text)
    return tokens


def token_sequence(content: str) -> str:
    """Concatenation of every `{...}` group, braces included."""
    return "".join(_TOKEN_GROUP.findall(content))


def find_swarm_law_token(session: Session, swarm_id: str, label: str) -> LawToken | None:
    return session.scalars(
        select(LawToken)
        .join(Location, Location.node_id == LawToken.parent_location_id)
        .where(Location.parent_swarm_id == swarm_id)
        .where(LawToken.token_label == label)
        .order_by(LawToken.order_index)
        .limit(1)
    ).first()


def _link(session: Session, location_id: str, law_token_id: str) -> None:
    if session.get(LocationLawToken, (location_id, law_token_id)) is not None:
        return
    session.add(
        LocationLawToken(
            location_id=location_id,
            law_token_id=law_token_id,
            order_index=next_order_index(session, LocationLawToken),
        )
    )
    session.flush()


def extract_law_tokens(session: Session, caller: str, location: Location) -> ExtractionResult:
    """
    Create or reuse law tokens for every bracketed text in `location.content`.

    The location must already be flushed. New tokens are auto-upvoted and the
    caller is credited once for the whole batch.
    """
    result = ExtractionResult()
    swarm_id = location.parent_swarm_id

    for label in scan_tokens(location.content):
        existing = find_swarm_law_token(session, swarm_id, label)
        if existing is not None:
            logger.debug("reusing law token id=%s label=%r swarm=%s", existing.node_id, label, swarm_id)
            law_token_id = existing.node_id
        else:
            law_token_id = law_token_id_for(location_id=location.node_id, label=label, creator=caller)
            if session.get(LawToken, law_token_id) is not None:
                raise AlreadyExists(f"Law token already exists: {law_token_id}")
            session.add(
                LawToken(
                    node_id=law_token_id,
                    order_index=next_order_index(session, LawToken),
                    token_label=label,
                    meaning="",
                    parent_location_id=location.node_id,
                    creator=caller,
                )
            )
            session.flush()
            auto_upvote(session, law_token_id, caller)
            result.created_count += 1

        _link(session, location.node_id, law_token_id)
        if law_token_id not in result.law_token_ids:
            result.law_token_ids.append(law_token_id)

    credit_buzz(session, caller, LAW_TOKEN_CREATION_CREDIT * result.created_count)
    return result
