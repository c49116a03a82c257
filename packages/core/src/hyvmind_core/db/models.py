from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hyvmind_core.db.base import Base
from hyvmind_core.db.enums import MembershipStatus, Role, VoteDirection

NODE_ID = String(36)
PRINCIPAL = String(128)


class Curation(Base):
    __tablename__ = "curation"

    node_id: Mapped[str] = mapped_column(NODE_ID, primary_key=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(512), nullable=False)
    # ISO 3166-1 alpha-3
    jurisdiction: Mapped[str] = mapped_column(String(3), nullable=False)
    creator: Mapped[str] = mapped_column(PRINCIPAL, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)


class Swarm(Base):
    __tablename__ = "swarm"

    node_id: Mapped[str] = mapped_column(NODE_ID, primary_key=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    # Globally unique; collisions are resolved with a `_N` postfix before insert.
    name: Mapped[str] = mapped_column(String(512), nullable=False, unique=True)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    parent_curation_id: Mapped[str] = mapped_column(NODE_ID, ForeignKey("curation.node_id"), nullable=False)
    creator: Mapped[str] = mapped_column(PRINCIPAL, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)

    curation: Mapped[Curation] = relationship()

    __table_args__ = (Index("ix_swarm_parent_order", "parent_curation_id", "order_index"),)


class Location(Base):
    __tablename__ = "location"

    node_id: Mapped[str] = mapped_column(NODE_ID, primary_key=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    # Versioned display title, e.g. "Sec 1 (v2)".
    title: Mapped[str] = mapped_column(String(1024), nullable=False)
    # Title as requested; versioning counts rows sharing it within the swarm.
    title_base: Mapped[str] = mapped_column(String(1024), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    original_token_sequence: Mapped[str] = mapped_column(Text, nullable=False, default="")
    custom_attributes: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    parent_swarm_id: Mapped[str] = mapped_column(NODE_ID, ForeignKey("swarm.node_id"), nullable=False)
    creator: Mapped[str] = mapped_column(PRINCIPAL, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)

    swarm: Mapped[Swarm] = relationship()

    __table_args__ = (
        UniqueConstraint("parent_swarm_id", "title", name="uq_location_swarm_title"),
        Index("ix_location_swarm_title_base", "parent_swarm_id", "title_base"),
    )


class LawToken(Base):
    __tablename__ = "law_token"

    node_id: Mapped[str] = mapped_column(NODE_ID, primary_key=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    token_label: Mapped[str] = mapped_column(String(1024), nullable=False)
    meaning: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # Location the token was first extracted from; other locations link via LocationLawToken.
    parent_location_id: Mapped[str] = mapped_column(NODE_ID, ForeignKey("location.node_id"), nullable=False)
    creator: Mapped[str] = mapped_column(PRINCIPAL, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)

    location: Mapped[Location] = relationship()

    __table_args__ = (Index("ix_law_token_label", "token_label"),)


class LocationLawToken(Base):
    __tablename__ = "location_law_token"

    location_id: Mapped[str] = mapped_column(NODE_ID, ForeignKey("location.node_id"), primary_key=True)
    law_token_id: Mapped[str] = mapped_column(NODE_ID, ForeignKey("law_token.node_id"), primary_key=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)


class InterpretationToken(Base):
    __tablename__ = "interpretation_token"

    node_id: Mapped[str] = mapped_column(NODE_ID, primary_key=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(String(1024), nullable=False)
    context: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # "from" edge: law token -> this token
    from_law_token_id: Mapped[str] = mapped_column(NODE_ID, ForeignKey("law_token.node_id"), nullable=False)
    from_relationship_type: Mapped[str] = mapped_column(String(256), nullable=False)
    # "to" edge: this token -> any node except a curation
    to_node_id: Mapped[str] = mapped_column(NODE_ID, nullable=False)
    to_relationship_type: Mapped[str] = mapped_column(String(256), nullable=False)
    custom_attributes: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    creator: Mapped[str] = mapped_column(PRINCIPAL, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)

    from_law_token: Mapped[LawToken] = relationship()

    __table_args__ = (
        Index("ix_interpretation_token_from", "from_law_token_id"),
        Index("ix_interpretation_token_to", "to_node_id"),
    )


class VoteTally(Base):
    __tablename__ = "vote_tally"

    node_id: Mapped[str] = mapped_column(NODE_ID, primary_key=True)
    upvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    downvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class UserVote(Base):
    __tablename__ = "user_vote"

    principal: Mapped[str] = mapped_column(PRINCIPAL, primary_key=True)
    node_id: Mapped[str] = mapped_column(NODE_ID, primary_key=True)
    direction: Mapped[VoteDirection] = mapped_column(Enum(VoteDirection, native_enum=False), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)


class BuzzScore(Base):
    __tablename__ = "buzz_score"

    principal: Mapped[str] = mapped_column(PRINCIPAL, primary_key=True)
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Leaderboard tie-break: order of the principal's first scoring event.
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)


class SwarmMembership(Base):
    __tablename__ = "swarm_membership"

    swarm_id: Mapped[str] = mapped_column(NODE_ID, ForeignKey("swarm.node_id"), primary_key=True)
    member: Mapped[str] = mapped_column(PRINCIPAL, primary_key=True)
    status: Mapped[MembershipStatus] = mapped_column(
        Enum(MembershipStatus, native_enum=False), nullable=False, default=MembershipStatus.pending
    )
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    requested_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class UserProfile(Base):
    __tablename__ = "user_profile"

    principal: Mapped[str] = mapped_column(PRINCIPAL, primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    social_url: Mapped[str | None] = mapped_column(Text, nullable=True)


class RoleAssignment(Base):
    __tablename__ = "role_assignment"

    principal: Mapped[str] = mapped_column(PRINCIPAL, primary_key=True)
    role: Mapped[Role] = mapped_column(Enum(Role, native_enum=False), nullable=False)
