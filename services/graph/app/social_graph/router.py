"""
Social graph domain: user-facing routes.

All routes prefixed /api/v1/users (same prefix as the profile router; the
sub-paths don't overlap).

Routes:
  GET    /me/following                  Who I follow (paginated)
  GET    /me/followers                  Who follows me (paginated)
  GET    /me/blocked                    My block list (paginated)
  GET    /me/reports                    Reports I submitted (paginated)
  GET    /{user_id}/relationship        Relationship + permissions towards a user
  POST   /{user_id}/relationship        Perform an action, get the new state back
  GET    /{user_id}/message-eligibility Can I DM this user, and why not
  POST   /{user_id}/follow              Follow a user  (50/hour rate limit)
  DELETE /{user_id}/follow              Unfollow
  DELETE /{user_id}/follower            Remove a user who follows me
  POST   /{user_id}/block               Block
  DELETE /{user_id}/block               Unblock
  POST   /{user_id}/report              Report a user
  GET    /{user_id}/following           View user's following (404 if they blocked me)
  GET    /{user_id}/followers           View user's followers (404 if they blocked me)

Note: /me/... routes must be registered before /{user_id}/... routes of the same
shape so Starlette's literal-path matching takes precedence.
"""

import uuid

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.config import Settings, get_settings
from app.database import get_db
from app.rate_limit import limiter
from app.social_graph import controller as ctrl
from app.social_graph.constants import ReportContext
from app.social_graph.schemas import (
    BlockedListResponse,
    FollowListResponse,
    MessageEligibilityResponse,
    RelationshipActionRequest,
    RelationshipStateResponse,
    ReportListResponse,
    ReportReasonsResponse,
    ReportRequest,
    ReportResponse,
)
from shared.models.pagination import PaginationParams, pagination_params
from shared.models.user import CurrentUser

router = APIRouter(prefix="/users", tags=["social-graph"])
reports_router = APIRouter(prefix="/reports", tags=["social-graph"])


# ── Own lists ──────────────────────────────────────────────────────────────────

@router.get("/me/following", response_model=FollowListResponse, summary="Who I follow")
async def my_following(
    params: PaginationParams = Depends(pagination_params),
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> FollowListResponse:
    return await ctrl.list_following(
        session, current_user.id, current_user.id, params.page, params.size
    )


@router.get("/me/followers", response_model=FollowListResponse, summary="Who follows me")
async def my_followers(
    params: PaginationParams = Depends(pagination_params),
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> FollowListResponse:
    return await ctrl.list_followers(
        session, current_user.id, current_user.id, params.page, params.size
    )


@router.get("/me/blocked", response_model=BlockedListResponse, summary="My block list")
async def my_blocked(
    params: PaginationParams = Depends(pagination_params),
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> BlockedListResponse:
    return await ctrl.list_blocked(session, current_user.id, params.page, params.size)


@router.get("/me/reports", response_model=ReportListResponse, summary="Reports I submitted")
async def my_reports(
    params: PaginationParams = Depends(pagination_params),
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> ReportListResponse:
    return await ctrl.list_my_reports(session, current_user.id, params.page, params.size)


# ── Relationship state ─────────────────────────────────────────────────────────

@router.get(
    "/{user_id}/relationship",
    response_model=RelationshipStateResponse,
    summary="Relationship towards a user",
    description=(
        "Blocks in either direction win over follows. Re-fetch after any action: "
        "the result is a point-in-time snapshot."
    ),
)
async def get_relationship(
    user_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> RelationshipStateResponse:
    return await ctrl.get_relationship(session, current_user.id, user_id)


@router.post(
    "/{user_id}/relationship",
    response_model=RelationshipStateResponse,
    summary="Perform a relationship action",
    description="follow / unfollow / remove_follower / block / unblock. Returns the new state.",
)
async def perform_action(
    user_id: uuid.UUID,
    body: RelationshipActionRequest,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> RelationshipStateResponse:
    return await ctrl.apply_action(
        session,
        current_user.id,
        user_id,
        body.action,
        cascade_follows=settings.cascade_follows_on_block,
    )


@router.get(
    "/{user_id}/message-eligibility",
    response_model=MessageEligibilityResponse,
    summary="Direct-message eligibility",
)
async def message_eligibility(
    user_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> MessageEligibilityResponse:
    return await ctrl.get_message_eligibility(session, current_user.id, user_id)


# ── Follow ─────────────────────────────────────────────────────────────────────

@router.post(
    "/{user_id}/follow",
    status_code=status.HTTP_200_OK,
    summary="Follow a user",
    description="Rate-limited to 50 follow actions per hour.",
)
@limiter.limit("50/hour")
async def follow_user(
    request: Request,
    user_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> dict:
    return await ctrl.follow_user(session, current_user.id, user_id)


@router.delete(
    "/{user_id}/follow",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Unfollow a user",
)
async def unfollow_user(
    user_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> None:
    await ctrl.unfollow_user(session, current_user.id, user_id)


@router.delete(
    "/{user_id}/follower",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a follower",
)
async def remove_follower(
    user_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> None:
    await ctrl.remove_follower(session, current_user.id, user_id)


# ── Block ──────────────────────────────────────────────────────────────────────

@router.post(
    "/{user_id}/block",
    status_code=status.HTTP_200_OK,
    summary="Block a user",
)
async def block_user(
    user_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> dict:
    return await ctrl.block_user(
        session, current_user.id, user_id, cascade_follows=settings.cascade_follows_on_block
    )


@router.delete(
    "/{user_id}/block",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Unblock a user",
    description="Follows removed by the block are not restored.",
)
async def unblock_user(
    user_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> None:
    await ctrl.unblock_user(session, current_user.id, user_id)


# ── Report ─────────────────────────────────────────────────────────────────────

@router.post(
    "/{user_id}/report",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Report a user",
)
async def report_user(
    user_id: uuid.UUID,
    body: ReportRequest,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> ReportResponse:
    return await ctrl.report_user(session, current_user.id, user_id, body)


@reports_router.get(
    "/reasons",
    response_model=ReportReasonsResponse,
    summary="Predefined report reasons for a context",
)
async def report_reasons(
    context: ReportContext,
    current_user: CurrentUser = Depends(get_current_user),
) -> ReportReasonsResponse:
    return ctrl.get_report_reasons(context)


# ── Another user's lists ───────────────────────────────────────────────────────

@router.get(
    "/{user_id}/following",
    response_model=FollowListResponse,
    summary="View a user's following",
)
async def user_following(
    user_id: uuid.UUID,
    params: PaginationParams = Depends(pagination_params),
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> FollowListResponse:
    return await ctrl.view_user_following(
        session, user_id, current_user.id, params.page, params.size
    )


@router.get(
    "/{user_id}/followers",
    response_model=FollowListResponse,
    summary="View a user's followers",
)
async def user_followers(
    user_id: uuid.UUID,
    params: PaginationParams = Depends(pagination_params),
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> FollowListResponse:
    return await ctrl.view_user_followers(
        session, user_id, current_user.id, params.page, params.size
    )
