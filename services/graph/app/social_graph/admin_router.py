"""
Social graph domain: admin-facing routes.

Routes:
  POST /api/v1/admin/social/accounts/{user_id}/reconcile-counts
       Recompute cached follower/following counts from the edge set

Requires: ADMIN or SUPER_ADMIN role.
"""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import require_admin
from app.database import get_db
from app.social_graph import controller as ctrl
from app.social_graph.schemas import ReconciledCountsResponse
from shared.models.user import CurrentUser

router = APIRouter(prefix="/admin/social", tags=["admin-social-graph"])


@router.post(
    "/accounts/{user_id}/reconcile-counts",
    response_model=ReconciledCountsResponse,
    summary="[Admin] Reconcile cached follow counts",
    description=(
        "Counter updates on follow/unfollow are best-effort. This recounts the "
        "account's follow edges and overwrites both cached counters."
    ),
)
async def reconcile_counts(
    user_id: uuid.UUID,
    admin: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> ReconciledCountsResponse:
    return await ctrl.admin_reconcile_counts(session, user_id)
