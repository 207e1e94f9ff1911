"""
Profiles: request orchestration (thin glue between router and service).
"""
from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.profiles.schemas import ProfileResponse
from app.profiles.service import get_profile_for_viewer
from app.social_graph import service as social_svc
from app.social_graph.schemas import RelationshipStateResponse


async def get_user(
    session: AsyncSession,
    user_id: uuid.UUID,
    *,
    viewer_id: uuid.UUID,
) -> ProfileResponse:
    # A profile that blocked the viewer answers exactly like a missing one.
    profile = await get_profile_for_viewer(session, user_id, viewer_id)
    state = await social_svc.resolve(session, viewer_id, user_id)
    response = ProfileResponse.model_validate(profile)
    response.relationship = RelationshipStateResponse.model_validate(state)
    return response
