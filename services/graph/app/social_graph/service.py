"""
Social graph domain: pure business logic (zero FastAPI imports).

State rules:
  resolve:   self → none, no permissions; any block edge → blocked / blocked_by,
             follow edges ignored; otherwise follow edges → none / following /
             follower / mutual, then the fixed permission table
  message:   mutual follow and no block in either direction
  follow:    cannot follow self, cannot follow across a block, no duplicates
  unfollow / remove_follower / unblock:  the edge must exist
  block:     cannot block self, no duplicates; follow cleanup is optional
             (cascade_follows) and never restored by unblock
  report:    cannot report self; reason 1..500 chars after trimming

Edge mutations and counter updates share the caller's transaction. Counter
updates are best-effort: a failure is logged and the edge mutation stands;
reconcile_counts recomputes both counters from the edge set.
"""
from __future__ import annotations

import logging
import uuid
from collections.abc import Awaitable, Callable

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    AlreadyBlocked,
    AlreadyFollowing,
    CannotActOnSelf,
    CannotBlockSelf,
    CannotFollowSelf,
    CannotReportSelf,
    FollowForbidden,
    InvalidReportReason,
    NotAFollower,
    NotBlocked,
    NotFollowing,
    StoreUnavailable,
)
from app.profiles.models import Profile
from app.social_graph import edges
from app.social_graph.constants import (
    REPORT_CONTEXT_DISPLAY_NAMES,
    REPORT_REASON_MAX_LENGTH,
    REPORT_REASONS,
    FollowAction,
    ReportContext,
)
from app.social_graph.models import Block, Follow, Report
from app.social_graph.state import (
    SELF_ELIGIBILITY,
    SELF_STATE,
    FollowEdges,
    MessageEligibility,
    RelationshipState,
    classify_blocks,
    classify_follows,
    eligibility_for,
    state_for,
)

logger = logging.getLogger(__name__)


# ── Resolution ─────────────────────────────────────────────────────────────────

async def resolve(
    session: AsyncSession,
    viewer_id: uuid.UUID,
    target_id: uuid.UUID,
) -> RelationshipState:
    if viewer_id == target_id:
        return SELF_STATE
    blocks = await edges.query_block_edges(session, viewer_id, target_id)
    blocked = classify_blocks(blocks)
    if blocked is not None:
        return state_for(blocked)
    follows = await edges.query_follow_edges(session, viewer_id, target_id)
    return state_for(classify_follows(follows))


async def check_message_eligibility(
    session: AsyncSession,
    viewer_id: uuid.UUID,
    target_id: uuid.UUID,
) -> MessageEligibility:
    """Explain whether the viewer may DM the target without building the full state."""
    if viewer_id == target_id:
        return SELF_ELIGIBILITY
    blocks = await edges.query_block_edges(session, viewer_id, target_id)
    if blocks.any:
        return eligibility_for(blocks, FollowEdges())
    follows = await edges.query_follow_edges(session, viewer_id, target_id)
    return eligibility_for(blocks, follows)


# ── Counters ───────────────────────────────────────────────────────────────────

async def _adjust_counts(
    session: AsyncSession,
    follower_id: uuid.UUID,
    followee_id: uuid.UUID,
    delta: int,
) -> None:
    """follower's following_count and followee's followers_count move by delta.

    Both statements run under a SAVEPOINT: a failure rolls back only the counters
    and leaves the enclosing transaction (and the edge write) usable.
    """
    try:
        async with session.begin_nested():
            await edges.adjust_following_count(session, follower_id, delta)
            await edges.adjust_follower_count(session, followee_id, delta)
    except (SQLAlchemyError, StoreUnavailable):
        logger.warning(
            "Counter update failed for follow edge %s -> %s (delta %+d); "
            "counts will drift until reconciled",
            follower_id,
            followee_id,
            delta,
            exc_info=True,
        )


async def reconcile_counts(
    session: AsyncSession, account_id: uuid.UUID
) -> tuple[int, int]:
    """Recompute (followers_count, following_count) from the edge set and store them."""
    followers = await edges.count_followers(session, account_id)
    following = await edges.count_following(session, account_id)
    await edges.set_counts(session, account_id, followers=followers, following=following)
    logger.info(
        "Reconciled counts for %s: followers=%d following=%d", account_id, followers, following
    )
    return followers, following


# ── Actions ────────────────────────────────────────────────────────────────────

async def follow(
    session: AsyncSession,
    viewer_id: uuid.UUID,
    target_id: uuid.UUID,
) -> Follow:
    if viewer_id == target_id:
        raise CannotFollowSelf()
    if (await edges.query_block_edges(session, viewer_id, target_id)).any:
        raise FollowForbidden()
    if (await edges.query_follow_edges(session, viewer_id, target_id)).a_follows_b:
        raise AlreadyFollowing()
    edge = await edges.insert_follow_edge(session, viewer_id, target_id)
    await _adjust_counts(session, viewer_id, target_id, +1)
    logger.info("%s followed %s", viewer_id, target_id)
    return edge


async def unfollow(
    session: AsyncSession,
    viewer_id: uuid.UUID,
    target_id: uuid.UUID,
) -> None:
    if viewer_id == target_id:
        raise CannotActOnSelf()
    if not await edges.delete_follow_edge(session, viewer_id, target_id):
        raise NotFollowing()
    await _adjust_counts(session, viewer_id, target_id, -1)
    logger.info("%s unfollowed %s", viewer_id, target_id)


async def remove_follower(
    session: AsyncSession,
    viewer_id: uuid.UUID,
    target_id: uuid.UUID,
) -> None:
    """Drop the target → viewer edge: the viewer removes someone who follows them."""
    if viewer_id == target_id:
        raise CannotActOnSelf()
    if not await edges.delete_follow_edge(session, target_id, viewer_id):
        raise NotAFollower()
    await _adjust_counts(session, target_id, viewer_id, -1)
    logger.info("%s removed follower %s", viewer_id, target_id)


async def block(
    session: AsyncSession,
    viewer_id: uuid.UUID,
    target_id: uuid.UUID,
    *,
    cascade_follows: bool = True,
) -> Block:
    if viewer_id == target_id:
        raise CannotBlockSelf()
    if (await edges.query_block_edges(session, viewer_id, target_id)).a_blocks_b:
        raise AlreadyBlocked()
    edge = await edges.insert_block_edge(session, viewer_id, target_id)
    if cascade_follows:
        if await edges.delete_follow_edge(session, viewer_id, target_id):
            await _adjust_counts(session, viewer_id, target_id, -1)
        if await edges.delete_follow_edge(session, target_id, viewer_id):
            await _adjust_counts(session, target_id, viewer_id, -1)
    logger.info("%s blocked %s (cascade_follows=%s)", viewer_id, target_id, cascade_follows)
    return edge


async def unblock(
    session: AsyncSession,
    viewer_id: uuid.UUID,
    target_id: uuid.UUID,
) -> None:
    if viewer_id == target_id:
        raise CannotActOnSelf()
    if not await edges.delete_block_edge(session, viewer_id, target_id):
        raise NotBlocked()
    logger.info("%s unblocked %s", viewer_id, target_id)


ActionThunk = Callable[[], Awaitable[object]]


def action_handlers(
    session: AsyncSession,
    viewer_id: uuid.UUID,
    target_id: uuid.UUID,
    *,
    cascade_follows: bool = True,
) -> dict[FollowAction, ActionThunk]:
    """One entry per FollowAction; adding an action without a handler fails the test suite."""
    return {
        FollowAction.FOLLOW: lambda: follow(session, viewer_id, target_id),
        FollowAction.UNFOLLOW: lambda: unfollow(session, viewer_id, target_id),
        FollowAction.REMOVE_FOLLOWER: lambda: remove_follower(session, viewer_id, target_id),
        FollowAction.BLOCK: lambda: block(
            session, viewer_id, target_id, cascade_follows=cascade_follows
        ),
        FollowAction.UNBLOCK: lambda: unblock(session, viewer_id, target_id),
    }


async def perform_action(
    session: AsyncSession,
    viewer_id: uuid.UUID,
    target_id: uuid.UUID,
    action: FollowAction,
    *,
    cascade_follows: bool = True,
) -> None:
    """Run one relationship action. The caller re-resolves afterwards."""
    handlers = action_handlers(
        session, viewer_id, target_id, cascade_follows=cascade_follows
    )
    await handlers[action]()


# ── Block visibility check ─────────────────────────────────────────────────────

async def is_blocked_by(
    session: AsyncSession,
    *,
    blocked_id: uuid.UUID,
    blocker_id: uuid.UUID,
) -> bool:
    """Return True if blocker_id has blocked blocked_id."""
    blocks = await edges.query_block_edges(session, blocker_id, blocked_id)
    return blocks.a_blocks_b


# ── Following / Followers lists ────────────────────────────────────────────────

async def get_following(
    session: AsyncSession,
    user_id: uuid.UUID,
    *,
    viewer_id: uuid.UUID,
    page: int,
    size: int,
) -> tuple[list[tuple[Follow, Profile, bool]], int]:
    """
    Return (rows, total) where each row is (Follow, Profile[followee], is_followed_by_viewer).
    """
    total_r = await edges.execute(
        session,
        sa.select(sa.func.count()).select_from(Follow).where(Follow.follower_id == user_id)
    )
    total = total_r.scalar_one()

    rows_r = await edges.execute(
        session,
        sa.select(Follow, Profile)
        .join(Profile, Profile.id == Follow.followee_id)
        .where(Follow.follower_id == user_id)
        .order_by(Follow.created_at.desc())
        .limit(size)
        .offset((page - 1) * size)
    )
    rows = rows_r.all()

    followed_set = await _batch_followed_by(session, viewer_id, [p.id for _, p in rows])
    return [(f, p, p.id in followed_set) for f, p in rows], total


async def get_followers(
    session: AsyncSession,
    user_id: uuid.UUID,
    *,
    viewer_id: uuid.UUID,
    page: int,
    size: int,
) -> tuple[list[tuple[Follow, Profile, bool]], int]:
    """
    Return (rows, total) where each row is (Follow, Profile[follower], is_followed_by_viewer).
    """
    total_r = await edges.execute(
        session,
        sa.select(sa.func.count()).select_from(Follow).where(Follow.followee_id == user_id)
    )
    total = total_r.scalar_one()

    rows_r = await edges.execute(
        session,
        sa.select(Follow, Profile)
        .join(Profile, Profile.id == Follow.follower_id)
        .where(Follow.followee_id == user_id)
        .order_by(Follow.created_at.desc())
        .limit(size)
        .offset((page - 1) * size)
    )
    rows = rows_r.all()

    followed_set = await _batch_followed_by(session, viewer_id, [p.id for _, p in rows])
    return [(f, p, p.id in followed_set) for f, p in rows], total


async def _batch_followed_by(
    session: AsyncSession,
    viewer_id: uuid.UUID,
    target_ids: list[uuid.UUID],
) -> set[uuid.UUID]:
    """Return the subset of target_ids that viewer_id follows."""
    if not target_ids:
        return set()
    result = await edges.execute(
        session,
        sa.select(Follow.followee_id).where(
            Follow.follower_id == viewer_id,
            Follow.followee_id.in_(target_ids),
        )
    )
    return {row[0] for row in result.all()}


# ── Blocked list ───────────────────────────────────────────────────────────────

async def get_blocked(
    session: AsyncSession,
    user_id: uuid.UUID,
    *,
    page: int,
    size: int,
) -> tuple[list[tuple[Block, Profile]], int]:
    total_r = await edges.execute(
        session,
        sa.select(sa.func.count()).select_from(Block).where(Block.blocker_id == user_id)
    )
    total = total_r.scalar_one()
    rows_r = await edges.execute(
        session,
        sa.select(Block, Profile)
        .join(Profile, Profile.id == Block.blocked_id)
        .where(Block.blocker_id == user_id)
        .order_by(Block.created_at.desc())
        .limit(size)
        .offset((page - 1) * size)
    )
    return [(b, p) for b, p in rows_r.all()], total


# ── Report ─────────────────────────────────────────────────────────────────────

def report_reasons(context: ReportContext) -> tuple[str, ...]:
    return REPORT_REASONS.get(context, ("Other",))


def context_display_name(context: ReportContext) -> str:
    return REPORT_CONTEXT_DISPLAY_NAMES.get(context, "Unknown")


async def create_report(
    session: AsyncSession,
    reporter_id: uuid.UUID,
    target_id: uuid.UUID,
    context: ReportContext,
    reason: str,
) -> Report:
    if reporter_id == target_id:
        raise CannotReportSelf()
    reason = reason.strip()
    if not reason:
        raise InvalidReportReason("Report reason is required.")
    if len(reason) > REPORT_REASON_MAX_LENGTH:
        raise InvalidReportReason(
            f"Report reason cannot exceed {REPORT_REASON_MAX_LENGTH} characters."
        )
    report = Report(
        reporter_id=reporter_id,
        target_id=target_id,
        context=context,
        reason=reason,
    )
    await edges.insert_report(session, report)
    logger.info("%s reported %s (%s)", reporter_id, target_id, context.value)
    return report


async def get_reports(
    session: AsyncSession,
    reporter_id: uuid.UUID,
    *,
    page: int,
    size: int,
) -> tuple[list[Report], int]:
    """The reporter's own reports, newest first."""
    total = (
        await edges.execute(
            session,
            sa.select(sa.func.count()).select_from(Report).where(Report.reporter_id == reporter_id)
        )
    ).scalar_one()
    rows = (
        await edges.execute(
            session,
            sa.select(Report)
            .where(Report.reporter_id == reporter_id)
            .order_by(Report.created_at.desc())
            .limit(size)
            .offset((page - 1) * size)
        )
    ).scalars().all()
    return list(rows), total
