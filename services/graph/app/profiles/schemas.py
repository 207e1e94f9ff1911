"""
Profiles: Pydantic V2 response schemas.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.social_graph.schemas import RelationshipStateResponse


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    display_name: str | None
    snacc_pic_url: str | None
    followers_count: int
    following_count: int
    created_at: datetime
    relationship: RelationshipStateResponse | None = None
