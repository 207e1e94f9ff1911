"""Graph schema: profiles, follows, blocks, reports

Revision ID: 001
Revises:
Create Date: 2026-10-19

Tables created:
  - profiles  Accounts the graph hangs off, with cached follower/following counts
  - follows   Directed follow edges (follower → followee); CASCADE on profile delete
  - blocks    Directed block edges (blocker blocks blocked); CASCADE on profile delete
  - reports   User reports, tagged with the surface they came from

Report context is stored as VARCHAR (non-native enum) so new contexts need no
type migration.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _edge_table(name: str, pk: str, source: str, target: str) -> None:
    op.create_table(
        name,
        sa.Column(
            pk,
            postgresql.UUID(as_uuid=True),
            nullable=False,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column(source, postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(target, postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint(pk, name=f"pk_{name}"),
        sa.ForeignKeyConstraint(
            [source], ["profiles.id"], name=f"fk_{name}_{source}_profiles", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            [target], ["profiles.id"], name=f"fk_{name}_{target}_profiles", ondelete="CASCADE"
        ),
        sa.UniqueConstraint(source, target, name=f"uq_{name}_pair"),
        sa.CheckConstraint(f"{source} != {target}", name=f"ck_{name}_no_self"),
    )
    op.create_index(f"ix_{name}_{source}", name, [source])
    op.create_index(f"ix_{name}_{target}", name, [target])


# ─────────────────────────────────────────────────────────────────────────────
#  UPGRADE
# ─────────────────────────────────────────────────────────────────────────────

def upgrade() -> None:
    # ── 1. profiles ───────────────────────────────────────────────────────────
    op.create_table(
        "profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("username", sa.String(30), nullable=False),
        sa.Column("display_name", sa.String(50), nullable=True),
        sa.Column("snacc_pic_url", sa.String(500), nullable=True),
        sa.Column("followers_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("following_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_profiles"),
        sa.CheckConstraint(
            "followers_count >= 0", name="ck_profiles_followers_count_non_negative"
        ),
        sa.CheckConstraint(
            "following_count >= 0", name="ck_profiles_following_count_non_negative"
        ),
    )
    op.create_index("ix_profiles_username", "profiles", ["username"], unique=True)

    # ── 2. follows / blocks ───────────────────────────────────────────────────
    _edge_table("follows", "follow_id", "follower_id", "followee_id")
    _edge_table("blocks", "block_id", "blocker_id", "blocked_id")

    # ── 3. reports ────────────────────────────────────────────────────────────
    op.create_table(
        "reports",
        sa.Column(
            "report_id",
            postgresql.UUID(as_uuid=True),
            nullable=False,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("reporter_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("target_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("context", sa.String(20), nullable=False),
        sa.Column("reason", sa.String(500), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("report_id", name="pk_reports"),
        sa.ForeignKeyConstraint(
            ["reporter_id"], ["profiles.id"], name="fk_reports_reporter_id_profiles", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["target_id"], ["profiles.id"], name="fk_reports_target_id_profiles", ondelete="CASCADE"
        ),
    )
    op.create_index("ix_reports_reporter_id", "reports", ["reporter_id"])
    op.create_index("ix_reports_target_id", "reports", ["target_id"])


# ─────────────────────────────────────────────────────────────────────────────
#  DOWNGRADE
# ─────────────────────────────────────────────────────────────────────────────

def downgrade() -> None:
    op.drop_table("reports")
    op.drop_table("blocks")
    op.drop_table("follows")
    op.drop_table("profiles")
