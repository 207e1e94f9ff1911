"""
Profiles: pure business logic (zero FastAPI imports).
"""
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import UserHiddenByBlock, UserNotFound
from app.profiles.models import Profile
from app.social_graph import edges
from app.social_graph.models import Block


def _select_profile(*extra: sa.ColumnElement) -> sa.Select:
    # Counters are written with bulk UPDATEs that skip the identity map.
    return (
        sa.select(Profile, *extra)
        .execution_options(populate_existing=True)
    )


async def get_profile(session: AsyncSession, user_id: uuid.UUID) -> Profile:
    """Load a profile by PK; raise 404 if not found."""
    result = await edges.execute(session, _select_profile().where(Profile.id == user_id))
    profile = result.scalar_one_or_none()
    if profile is None:
        raise UserNotFound()
    return profile


async def get_profile_for_viewer(
    session: AsyncSession,
    user_id: uuid.UUID,
    viewer_id: uuid.UUID,
) -> Profile:
    """Load a profile and verify it hasn't blocked the viewer.

    Single query instead of separate block-check + profile-load.
    Raises UserNotFound (404) or UserHiddenByBlock (404).
    """
    blocked_sq = sa.exists().where(
        Block.blocker_id == user_id,
        Block.blocked_id == viewer_id,
    )
    result = await edges.execute(
        session, _select_profile(blocked_sq).where(Profile.id == user_id)
    )
    row = result.one_or_none()
    if row is None:
        raise UserNotFound()
    profile, is_blocked = row.tuple()
    if is_blocked:
        raise UserHiddenByBlock()
    return profile
