"""
Social graph domain: request orchestration.
"""
from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import UserHiddenByBlock
from app.profiles import service as profile_svc
from app.social_graph import service as svc
from app.social_graph.constants import FollowAction, ReportContext
from app.social_graph.models import Report
from app.social_graph.schemas import (
    BlockedListItem,
    BlockedListResponse,
    FollowListItem,
    FollowListResponse,
    MessageEligibilityResponse,
    ReconciledCountsResponse,
    RelationshipStateResponse,
    ReportListResponse,
    ReportReasonsResponse,
    ReportRequest,
    ReportResponse,
    SocialUserRef,
)
from app.social_graph.state import RelationshipState


def _state(state: RelationshipState) -> RelationshipStateResponse:
    return RelationshipStateResponse.model_validate(state)


def _report(report: Report) -> ReportResponse:
    return ReportResponse(
        id=report.report_id,
        target_id=report.target_id,
        context=report.context,
        context_display_name=svc.context_display_name(report.context),
        reason=report.reason,
        created_at=report.created_at,
    )


# ── Relationship state ─────────────────────────────────────────────────────────

async def get_relationship(
    session: AsyncSession,
    viewer_id: uuid.UUID,
    target_id: uuid.UUID,
) -> RelationshipStateResponse:
    return _state(await svc.resolve(session, viewer_id, target_id))


async def apply_action(
    session: AsyncSession,
    viewer_id: uuid.UUID,
    target_id: uuid.UUID,
    action: FollowAction,
    *,
    cascade_follows: bool,
) -> RelationshipStateResponse:
    """Run the action, then hand back the freshly resolved state for the pair."""
    await profile_svc.get_profile(session, target_id)
    await svc.perform_action(
        session, viewer_id, target_id, action, cascade_follows=cascade_follows
    )
    return _state(await svc.resolve(session, viewer_id, target_id))


async def get_message_eligibility(
    session: AsyncSession,
    viewer_id: uuid.UUID,
    target_id: uuid.UUID,
) -> MessageEligibilityResponse:
    eligibility = await svc.check_message_eligibility(session, viewer_id, target_id)
    return MessageEligibilityResponse(
        can_dm=eligibility.can_dm,
        reason=eligibility.reason,
        message=eligibility.message,
    )


# ── Single actions ─────────────────────────────────────────────────────────────

async def follow_user(
    session: AsyncSession,
    follower_id: uuid.UUID,
    followee_id: uuid.UUID,
) -> dict:
    await profile_svc.get_profile(session, followee_id)
    await svc.follow(session, follower_id, followee_id)
    return {"message": "Followed successfully."}


async def unfollow_user(
    session: AsyncSession,
    follower_id: uuid.UUID,
    followee_id: uuid.UUID,
) -> None:
    await svc.unfollow(session, follower_id, followee_id)


async def remove_follower(
    session: AsyncSession,
    user_id: uuid.UUID,
    follower_id: uuid.UUID,
) -> None:
    await svc.remove_follower(session, user_id, follower_id)


async def block_user(
    session: AsyncSession,
    blocker_id: uuid.UUID,
    blocked_id: uuid.UUID,
    *,
    cascade_follows: bool,
) -> dict:
    await profile_svc.get_profile(session, blocked_id)
    await svc.block(session, blocker_id, blocked_id, cascade_follows=cascade_follows)
    return {"message": "User blocked."}


async def unblock_user(
    session: AsyncSession,
    blocker_id: uuid.UUID,
    blocked_id: uuid.UUID,
) -> None:
    await svc.unblock(session, blocker_id, blocked_id)


# ── Lists ──────────────────────────────────────────────────────────────────────

async def list_following(
    session: AsyncSession,
    user_id: uuid.UUID,
    viewer_id: uuid.UUID,
    page: int,
    size: int,
) -> FollowListResponse:
    rows, total = await svc.get_following(
        session, user_id, viewer_id=viewer_id, page=page, size=size
    )
    items = [
        FollowListItem(
            id=f.follow_id,
            user=SocialUserRef.model_validate(p),
            created_at=f.created_at,
            is_followed_by_me=is_followed,
        )
        for f, p, is_followed in rows
    ]
    return FollowListResponse(items=items, total=total, page=page, size=size)


async def list_followers(
    session: AsyncSession,
    user_id: uuid.UUID,
    viewer_id: uuid.UUID,
    page: int,
    size: int,
) -> FollowListResponse:
    rows, total = await svc.get_followers(
        session, user_id, viewer_id=viewer_id, page=page, size=size
    )
    items = [
        FollowListItem(
            id=f.follow_id,
            user=SocialUserRef.model_validate(p),
            created_at=f.created_at,
            is_followed_by_me=is_followed,
        )
        for f, p, is_followed in rows
    ]
    return FollowListResponse(items=items, total=total, page=page, size=size)


async def view_user_following(
    session: AsyncSession,
    user_id: uuid.UUID,
    viewer_id: uuid.UUID,
    page: int,
    size: int,
) -> FollowListResponse:
    """List another user's following; 404 if that user has blocked the viewer."""
    await profile_svc.get_profile(session, user_id)
    if await svc.is_blocked_by(session, blocked_id=viewer_id, blocker_id=user_id):
        raise UserHiddenByBlock()
    return await list_following(session, user_id, viewer_id, page, size)


async def view_user_followers(
    session: AsyncSession,
    user_id: uuid.UUID,
    viewer_id: uuid.UUID,
    page: int,
    size: int,
) -> FollowListResponse:
    """List another user's followers; 404 if that user has blocked the viewer."""
    await profile_svc.get_profile(session, user_id)
    if await svc.is_blocked_by(session, blocked_id=viewer_id, blocker_id=user_id):
        raise UserHiddenByBlock()
    return await list_followers(session, user_id, viewer_id, page, size)


async def list_blocked(
    session: AsyncSession,
    user_id: uuid.UUID,
    page: int,
    size: int,
) -> BlockedListResponse:
    rows, total = await svc.get_blocked(session, user_id, page=page, size=size)
    items = [
        BlockedListItem(id=b.block_id, user=SocialUserRef.model_validate(p), created_at=b.created_at)
        for b, p in rows
    ]
    return BlockedListResponse(items=items, total=total, page=page, size=size)


# ── Reports ────────────────────────────────────────────────────────────────────

async def report_user(
    session: AsyncSession,
    reporter_id: uuid.UUID,
    target_id: uuid.UUID,
    body: ReportRequest,
) -> ReportResponse:
    await profile_svc.get_profile(session, target_id)
    report = await svc.create_report(session, reporter_id, target_id, body.context, body.reason)
    return _report(report)


async def list_my_reports(
    session: AsyncSession,
    reporter_id: uuid.UUID,
    page: int,
    size: int,
) -> ReportListResponse:
    reports, total = await svc.get_reports(session, reporter_id, page=page, size=size)
    return ReportListResponse(
        items=[_report(r) for r in reports], total=total, page=page, size=size
    )


def get_report_reasons(context: ReportContext) -> ReportReasonsResponse:
    return ReportReasonsResponse(
        context=context,
        context_display_name=svc.context_display_name(context),
        reasons=list(svc.report_reasons(context)),
    )


# ── Admin ──────────────────────────────────────────────────────────────────────

async def admin_reconcile_counts(
    session: AsyncSession,
    user_id: uuid.UUID,
) -> ReconciledCountsResponse:
    await profile_svc.get_profile(session, user_id)
    followers, following = await svc.reconcile_counts(session, user_id)
    return ReconciledCountsResponse(
        user_id=user_id, followers_count=followers, following_count=following
    )
