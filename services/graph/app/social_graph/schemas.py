"""
Social graph domain: Pydantic V2 request/response schemas.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.social_graph.constants import (
    REPORT_REASON_MAX_LENGTH,
    FollowAction,
    MessageEligibilityReason,
    Relationship,
    ReportContext,
)
from shared.models.pagination import PaginatedResponse


class _Base(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


# ── Embedded user reference (used inside list items) ───────────────────────────

class SocialUserRef(BaseModel):
    """Minimal profile embedded in follow/block list items."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    display_name: str | None
    snacc_pic_url: str | None


# ── Relationship state ─────────────────────────────────────────────────────────

class RelationshipStateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    relationship: Relationship
    can_follow: bool
    can_unfollow: bool
    can_remove_follower: bool
    can_message: bool
    can_view_private_content: bool


class RelationshipActionRequest(_Base):
    action: FollowAction


class MessageEligibilityResponse(BaseModel):
    can_dm: bool
    reason: MessageEligibilityReason
    message: str


# ── Lists ──────────────────────────────────────────────────────────────────────

class FollowListItem(BaseModel):
    id: uuid.UUID           # follow_id
    user: SocialUserRef     # the other party (followee or follower depending on the list)
    created_at: datetime
    is_followed_by_me: bool


class BlockedListItem(BaseModel):
    id: uuid.UUID           # block_id
    user: SocialUserRef
    created_at: datetime


FollowListResponse = PaginatedResponse[FollowListItem]
BlockedListResponse = PaginatedResponse[BlockedListItem]


# ── Report ─────────────────────────────────────────────────────────────────────

class ReportRequest(_Base):
    context: ReportContext
    reason: str = Field(min_length=1, max_length=REPORT_REASON_MAX_LENGTH)


class ReportResponse(BaseModel):
    id: uuid.UUID
    target_id: uuid.UUID
    context: ReportContext
    context_display_name: str
    reason: str
    created_at: datetime


ReportListResponse = PaginatedResponse[ReportResponse]


class ReportReasonsResponse(BaseModel):
    context: ReportContext
    context_display_name: str
    reasons: list[str]


# ── Admin ──────────────────────────────────────────────────────────────────────

class ReconciledCountsResponse(BaseModel):
    user_id: uuid.UUID
    followers_count: int
    following_count: int
