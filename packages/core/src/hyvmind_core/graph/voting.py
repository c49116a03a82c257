"""
Votes and BUZZ reputation.

Per (node, user) a vote goes `unvoted -> up` or `unvoted -> down` and never
changes again. Node tallies only grow. BUZZ is credited to node creators:
law tokens are worth +3 on creation and +/-1 per vote, interpretation tokens
+5 on creation and +/-2 per vote; other node types carry no BUZZ.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from hyvmind_core.db.enums import NodeType, VoteDirection
from hyvmind_core.db.models import BuzzScore, UserProfile, UserVote, VoteTally
from hyvmind_core.errors import AlreadyVoted, CurationNotVoteable, Unauthorized
from hyvmind_core.graph.access import require_user
from hyvmind_core.graph.membership import is_swarm_creator_or_member
from hyvmind_core.graph.nodes import ResolvedNode, get_node, next_order_index, node_swarm_id
from hyvmind_core.settings import settings

logger = logging.getLogger(__name__)

LAW_TOKEN_CREATION_CREDIT = 3
INTERPRETATION_TOKEN_CREATION_CREDIT = 5

VOTE_BUZZ_DELTAS: dict[NodeType, int] = {
    NodeType.curation: 0,
    NodeType.swarm: 0,
    NodeType.location: 0,
    NodeType.law_token: 1,
    NodeType.interpretation_token: 2,
}


@dataclass
class VoteData:
    upvotes: int = 0
    downvotes: int = 0

    @property
    def is_discarded(self) -> bool:
        return self.downvotes > self.upvotes


@dataclass
class LeaderboardEntry:
    principal: str
    score: int
    profile_name: str | None


def _tally(session: Session, node_id: str) -> VoteTally:
    tally = session.get(VoteTally, node_id)
    if tally is None:
        tally = VoteTally(node_id=node_id, upvotes=0, downvotes=0)
        session.add(tally)
    return tally


def credit_buzz(session: Session, principal: str, delta: int) -> None:
    if delta == 0:
        return
    ledger = session.get(BuzzScore, principal)
    if ledger is None:
        ledger = BuzzScore(principal=principal, score=0, order_index=next_order_index(session, BuzzScore))
        session.add(ledger)
    ledger.score += delta
    session.flush()
    logger.debug("buzz principal=%s delta=%+d score=%d", principal, delta, ledger.score)


def get_buzz_score(session: Session, principal: str) -> int:
    ledger = session.get(BuzzScore, principal)
    return ledger.score if ledger is not None else 0


def auto_upvote(session: Session, node_id: str, creator: str) -> None:
    """Seed a freshly created node at (1, 0), recorded as its creator's vote. No BUZZ."""
    tally = _tally(session, node_id)
    tally.upvotes += 1
    session.add(UserVote(principal=creator, node_id=node_id, direction=VoteDirection.up))
    session.flush()


def _check_can_vote(session: Session, caller: str, node: ResolvedNode) -> None:
    if node.node_type == NodeType.curation:
        raise CurationNotVoteable("Curations cannot be voted on")
    if node.node_type == NodeType.swarm:
        return
    if not is_swarm_creator_or_member(session, caller, node_swarm_id(session, node)):
        raise Unauthorized("Unauthorized: only swarm creator or approved members can vote on this node")


def _vote(session: Session, caller: str | None, node_id: str, direction: VoteDirection) -> None:
    caller = require_user(session, caller)
    node = get_node(session, node_id)
    _check_can_vote(session, caller, node)
    if session.get(UserVote, (caller, node_id)) is not None:
        raise AlreadyVoted("You have already voted on this node", details={"node_id": node_id})

    tally = _tally(session, node_id)
    if direction == VoteDirection.up:
        tally.upvotes += 1
    else:
        tally.downvotes += 1
    session.add(UserVote(principal=caller, node_id=node_id, direction=direction))
    session.flush()

    delta = VOTE_BUZZ_DELTAS[node.node_type]
    credit_buzz(session, node.creator, delta if direction == VoteDirection.up else -delta)
    logger.info(
        "vote node=%s type=%s label=%r direction=%s voter=%s",
        node_id,
        node.node_type.value,
        node.label,
        direction.value,
        caller,
    )


def upvote_node(session: Session, caller: str | None, node_id: str) -> None:
    _vote(session, caller, node_id, VoteDirection.up)


def downvote_node(session: Session, caller: str | None, node_id: str) -> None:
    _vote(session, caller, node_id, VoteDirection.down)


def get_vote_data(session: Session, node_id: str) -> VoteData:
    tally = session.get(VoteTally, node_id)
    if tally is None:
        return VoteData()
    return VoteData(upvotes=tally.upvotes, downvotes=tally.downvotes)


def get_all_vote_data(session: Session) -> dict[str, VoteData]:
    return {
        tally.node_id: VoteData(upvotes=tally.upvotes, downvotes=tally.downvotes)
        for tally in session.scalars(select(VoteTally))
    }


def has_user_voted(session: Session, caller: str | None, node_id: str) -> bool | None:
    """True for an upvote, False for a downvote, None when the caller has not voted."""
    caller = require_user(session, caller)
    vote = session.get(UserVote, (caller, node_id))
    if vote is None:
        return None
    return vote.direction == VoteDirection.up


def get_buzz_leaderboard(session: Session, limit: int | None = None) -> list[LeaderboardEntry]:
    limit = settings.leaderboard_limit if limit is None else limit
    rows = session.execute(
        select(BuzzScore.principal, BuzzScore.score, UserProfile.name)
        .outerjoin(UserProfile, UserProfile.principal == BuzzScore.principal)
        .where(BuzzScore.score > 0)
        .order_by(BuzzScore.score.desc(), BuzzScore.order_index)
        .limit(limit)
    ).all()
    return [LeaderboardEntry(principal=row.principal, score=row.score, profile_name=row.name) for row in rows]
