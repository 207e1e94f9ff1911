"""
Profiles: the account row the social graph hangs off.

Only the columns the graph reads or maintains live here; everything else about
an account belongs to the auth service that issues its tokens.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(sa.String(30), unique=True, nullable=False, index=True)
    display_name: Mapped[str | None] = mapped_column(sa.String(50), nullable=True)
    snacc_pic_url: Mapped[str | None] = mapped_column(sa.String(500), nullable=True)

    # Cached edge counts. Maintained best-effort by follow/unfollow; see
    # social_graph.service.reconcile_counts for the repair path.
    followers_count: Mapped[int] = mapped_column(
        sa.Integer, nullable=False, default=0, server_default="0"
    )
    following_count: Mapped[int] = mapped_column(
        sa.Integer, nullable=False, default=0, server_default="0"
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_now
    )

    __table_args__ = (
        sa.CheckConstraint("followers_count >= 0", name="followers_count_non_negative"),
        sa.CheckConstraint("following_count >= 0", name="following_count_non_negative"),
    )
