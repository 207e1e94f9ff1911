"""
Social graph domain: edge store operations.

The only module that issues statements against the follows / blocks tables and
the cached profile counters. Each function is one round trip; none of them
commit. Connection-level failures surface as StoreUnavailable and are never
retried here.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    AlreadyBlocked,
    AlreadyFollowing,
    Conflict,
    StoreUnavailable,
    UserNotFound,
)
from app.profiles.models import Profile
from app.social_graph.models import Block, Follow, Report
from app.social_graph.state import BlockEdges, FollowEdges

logger = logging.getLogger(__name__)


async def execute(session: AsyncSession, stmt: sa.Executable) -> Any:
    """session.execute with connection failures mapped to StoreUnavailable."""
    try:
        return await session.execute(stmt)
    except (OperationalError, InterfaceError) as exc:
        logger.error("Edge store unreachable: %s", exc.__class__.__name__)
        raise StoreUnavailable() from exc


async def flush(session: AsyncSession) -> None:
    """session.flush with connection failures mapped to StoreUnavailable."""
    try:
        await session.flush()
    except (OperationalError, InterfaceError) as exc:
        logger.error("Edge store unreachable on flush: %s", exc.__class__.__name__)
        raise StoreUnavailable() from exc


def _is_pair_violation(exc: IntegrityError, table: str) -> bool:
    # PostgreSQL names the constraint; SQLite only names the table and columns.
    message = str(exc.orig)
    return f"uq_{table}_pair" in message or f"UNIQUE constraint failed: {table}." in message


def _is_foreign_key_violation(exc: IntegrityError) -> bool:
    return "foreign key" in str(exc.orig).lower()


async def _insert(
    session: AsyncSession, row: Any, duplicate: type[Conflict] | None = None
) -> None:
    """Add and flush one row. A pair-unique clash becomes `duplicate`, a dangling
    profile reference becomes UserNotFound; any other integrity error propagates."""
    session.add(row)
    try:
        await flush(session)
    except IntegrityError as exc:
        if duplicate is not None and _is_pair_violation(exc, row.__tablename__):
            raise duplicate() from exc
        if _is_foreign_key_violation(exc):
            raise UserNotFound() from exc
        raise


def _pair(left: Any, right: Any, a: uuid.UUID, b: uuid.UUID) -> sa.ColumnElement[bool]:
    """Match the ordered pair (a, b) or (b, a) on two columns."""
    return sa.or_(
        sa.and_(left == a, right == b),
        sa.and_(left == b, right == a),
    )


# ── Queries ────────────────────────────────────────────────────────────────────

async def query_block_edges(
    session: AsyncSession, a: uuid.UUID, b: uuid.UUID
) -> BlockEdges:
    result = await execute(
        session,
        sa.select(Block.blocker_id, Block.blocked_id).where(
            _pair(Block.blocker_id, Block.blocked_id, a, b)
        ),
    )
    rows = {(blocker, blocked) for blocker, blocked in result.all()}
    return BlockEdges(a_blocks_b=(a, b) in rows, b_blocks_a=(b, a) in rows)


async def query_follow_edges(
    session: AsyncSession, a: uuid.UUID, b: uuid.UUID
) -> FollowEdges:
    result = await execute(
        session,
        sa.select(Follow.follower_id, Follow.followee_id).where(
            _pair(Follow.follower_id, Follow.followee_id, a, b)
        ),
    )
    rows = {(follower, followee) for follower, followee in result.all()}
    return FollowEdges(a_follows_b=(a, b) in rows, b_follows_a=(b, a) in rows)


# ── Follow edges ───────────────────────────────────────────────────────────────

async def insert_follow_edge(
    session: AsyncSession, follower_id: uuid.UUID, followee_id: uuid.UUID
) -> Follow:
    edge = Follow(follower_id=follower_id, followee_id=followee_id)
    # A duplicate here means a concurrent follow on the same pair won the race.
    await _insert(session, edge, AlreadyFollowing)
    return edge


async def delete_follow_edge(
    session: AsyncSession, follower_id: uuid.UUID, followee_id: uuid.UUID
) -> bool:
    """Return True if an edge was removed."""
    result = await execute(
        session,
        sa.delete(Follow).where(
            Follow.follower_id == follower_id,
            Follow.followee_id == followee_id,
        ),
    )
    return result.rowcount > 0


# ── Block edges ────────────────────────────────────────────────────────────────

async def insert_block_edge(
    session: AsyncSession, blocker_id: uuid.UUID, blocked_id: uuid.UUID
) -> Block:
    edge = Block(blocker_id=blocker_id, blocked_id=blocked_id)
    await _insert(session, edge, AlreadyBlocked)
    return edge


async def delete_block_edge(
    session: AsyncSession, blocker_id: uuid.UUID, blocked_id: uuid.UUID
) -> bool:
    result = await execute(
        session,
        sa.delete(Block).where(
            Block.blocker_id == blocker_id,
            Block.blocked_id == blocked_id,
        ),
    )
    return result.rowcount > 0


# ── Reports ────────────────────────────────────────────────────────────────────

async def insert_report(session: AsyncSession, report: Report) -> Report:
    await _insert(session, report)
    return report


# ── Cached counters ────────────────────────────────────────────────────────────

def _clamped(column: Any, delta: int) -> sa.ColumnElement[int]:
    return sa.case((column + delta < 0, 0), else_=column + delta)


async def adjust_follower_count(
    session: AsyncSession, account_id: uuid.UUID, delta: int
) -> None:
    await execute(
        session,
        sa.update(Profile)
        .where(Profile.id == account_id)
        .values(followers_count=_clamped(Profile.followers_count, delta))
        .execution_options(synchronize_session=False),
    )


async def adjust_following_count(
    session: AsyncSession, account_id: uuid.UUID, delta: int
) -> None:
    await execute(
        session,
        sa.update(Profile)
        .where(Profile.id == account_id)
        .values(following_count=_clamped(Profile.following_count, delta))
        .execution_options(synchronize_session=False),
    )


async def set_counts(
    session: AsyncSession, account_id: uuid.UUID, *, followers: int, following: int
) -> None:
    await execute(
        session,
        sa.update(Profile)
        .where(Profile.id == account_id)
        .values(followers_count=followers, following_count=following)
        .execution_options(synchronize_session=False),
    )


async def count_followers(session: AsyncSession, account_id: uuid.UUID) -> int:
    result = await execute(
        session,
        sa.select(sa.func.count()).select_from(Follow).where(Follow.followee_id == account_id),
    )
    return result.scalar_one()


async def count_following(session: AsyncSession, account_id: uuid.UUID) -> int:
    result = await execute(
        session,
        sa.select(sa.func.count()).select_from(Follow).where(Follow.follower_id == account_id),
    )
    return result.scalar_one()
