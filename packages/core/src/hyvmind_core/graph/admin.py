"""Administrative reset of all graph, vote, BUZZ and membership state."""

from __future__ import annotations

import logging

from sqlalchemy import delete
from sqlalchemy.orm import Session

from hyvmind_core.db.models import (
    BuzzScore,
    Curation,
    InterpretationToken,
    LawToken,
    Location,
    LocationLawToken,
    Swarm,
    SwarmMembership,
    UserVote,
    VoteTally,
)
from hyvmind_core.graph.access import require_admin

logger = logging.getLogger(__name__)

# Children before parents so foreign keys never dangle mid-reset.
# UserProfile and RoleAssignment are deliberately absent: they survive a reset.
RESET_ORDER: tuple[type, ...] = (
    UserVote,
    VoteTally,
    BuzzScore,
    SwarmMembership,
    InterpretationToken,
    LocationLawToken,
    LawToken,
    Location,
    Swarm,
    Curation,
)


def wipe_graph_state(session: Session) -> dict[str, int]:
    counts: dict[str, int] = {}
    for model in RESET_ORDER:
        result = session.execute(delete(model))
        counts[model.__tablename__] = result.rowcount or 0
    session.flush()
    return counts


def reset_all_data(session: Session, caller: str | None) -> dict[str, int]:
    """Admin-only wipe; running it on empty state is a no-op returning zero counts."""
    caller = require_admin(session, caller)
    counts = wipe_graph_state(session)
    logger.warning("all data reset by=%s deleted=%s", caller, counts)
    return counts
