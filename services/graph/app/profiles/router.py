"""
Profiles: router.

Routes:
  GET /api/v1/users/{user_id}   Public profile plus the viewer's relationship to it

All routes require a valid Bearer token.
"""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.database import get_db
from app.profiles import controller as ctrl
from app.profiles.schemas import ProfileResponse
from shared.models.user import CurrentUser

router = APIRouter(prefix="/users", tags=["profile"])


@router.get(
    "/{user_id}",
    response_model=ProfileResponse,
    summary="Get any user's public profile",
    description="Returns 404 if that user has blocked you.",
)
async def get_user(
    user_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    return await ctrl.get_user(session, user_id, viewer_id=current_user.id)
