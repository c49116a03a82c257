"""Initial graph, membership and reputation schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

NODE_ID = sa.String(length=36)
PRINCIPAL = sa.String(length=128)


def upgrade() -> None:
    op.create_table(
        "curation",
        sa.Column("node_id", NODE_ID, primary_key=True),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=512), nullable=False),
        sa.Column("jurisdiction", sa.String(length=3), nullable=False),
        sa.Column("creator", PRINCIPAL, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "swarm",
        sa.Column("node_id", NODE_ID, primary_key=True),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=512), nullable=False, unique=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("parent_curation_id", NODE_ID, sa.ForeignKey("curation.node_id"), nullable=False),
        sa.Column("creator", PRINCIPAL, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_swarm_parent_order", "swarm", ["parent_curation_id", "order_index"])

    op.create_table(
        "location",
        sa.Column("node_id", NODE_ID, primary_key=True),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=1024), nullable=False),
        sa.Column("title_base", sa.String(length=1024), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("original_token_sequence", sa.Text(), nullable=False),
        sa.Column("custom_attributes", sa.JSON(), nullable=False),
        sa.Column("parent_swarm_id", NODE_ID, sa.ForeignKey("swarm.node_id"), nullable=False),
        sa.Column("creator", PRINCIPAL, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("parent_swarm_id", "title", name="uq_location_swarm_title"),
    )
    op.create_index("ix_location_swarm_title_base", "location", ["parent_swarm_id", "title_base"])

    op.create_table(
        "law_token",
        sa.Column("node_id", NODE_ID, primary_key=True),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("token_label", sa.String(length=1024), nullable=False),
        sa.Column("meaning", sa.Text(), nullable=False),
        sa.Column("parent_location_id", NODE_ID, sa.ForeignKey("location.node_id"), nullable=False),
        sa.Column("creator", PRINCIPAL, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_law_token_label", "law_token", ["token_label"])

    op.create_table(
        "location_law_token",
        sa.Column("location_id", NODE_ID, sa.ForeignKey("location.node_id"), primary_key=True),
        sa.Column("law_token_id", NODE_ID, sa.ForeignKey("law_token.node_id"), primary_key=True),
        sa.Column("order_index", sa.Integer(), nullable=False),
    )

    op.create_table(
        "interpretation_token",
        sa.Column("node_id", NODE_ID, primary_key=True),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=1024), nullable=False),
        sa.Column("context", sa.Text(), nullable=False),
        sa.Column("from_law_token_id", NODE_ID, sa.ForeignKey("law_token.node_id"), nullable=False),
        sa.Column("from_relationship_type", sa.String(length=256), nullable=False),
        sa.Column("to_node_id", NODE_ID, nullable=False),
        sa.Column("to_relationship_type", sa.String(length=256), nullable=False),
        sa.Column("custom_attributes", sa.JSON(), nullable=False),
        sa.Column("creator", PRINCIPAL, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_interpretation_token_from", "interpretation_token", ["from_law_token_id"])
    op.create_index("ix_interpretation_token_to", "interpretation_token", ["to_node_id"])

    op.create_table(
        "vote_tally",
        sa.Column("node_id", NODE_ID, primary_key=True),
        sa.Column("upvotes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("downvotes", sa.Integer(), nullable=False, server_default="0"),
    )

    op.create_table(
        "user_vote",
        sa.Column("principal", PRINCIPAL, primary_key=True),
        sa.Column("node_id", NODE_ID, primary_key=True),
        sa.Column("direction", sa.String(length=4), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "buzz_score",
        sa.Column("principal", PRINCIPAL, primary_key=True),
        sa.Column("score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("order_index", sa.Integer(), nullable=False),
    )

    op.create_table(
        "swarm_membership",
        sa.Column("swarm_id", NODE_ID, sa.ForeignKey("swarm.node_id"), primary_key=True),
        sa.Column("member", PRINCIPAL, primary_key=True),
        sa.Column("status", sa.String(length=8), nullable=False, server_default="pending"),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("requested_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "user_profile",
        sa.Column("principal", PRINCIPAL, primary_key=True),
        sa.Column("name", sa.String(length=256), nullable=False),
        sa.Column("social_url", sa.Text(), nullable=True),
    )

    op.create_table(
        "role_assignment",
        sa.Column("principal", PRINCIPAL, primary_key=True),
        sa.Column("role", sa.String(length=5), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("role_assignment")
    op.drop_table("user_profile")
    op.drop_table("swarm_membership")
    op.drop_table("buzz_score")
    op.drop_table("user_vote")
    op.drop_table("vote_tally")
    op.drop_index("ix_interpretation_token_to", table_name="interpretation_token")
    op.drop_index("ix_interpretation_token_from", table_name="interpretation_token")
    op.drop_table("interpretation_token")
    op.drop_table("location_law_token")
    op.drop_index("ix_law_token_label", table_name="law_token")
    op.drop_table("law_token")
    op.drop_index("ix_location_swarm_title_base", table_name="location")
    op.drop_table("location")
    op.drop_index("ix_swarm_parent_order", table_name="swarm")
    op.drop_table("swarm")
    op.drop_table("curation")
