"""
Social graph domain: relationship classification (no I/O).

edges.py answers "which edges exist between A and B"; this module turns those
answers into a RelationshipState or a MessageEligibility. Block edges are
consulted first everywhere: if either account blocked the other, follow edges
between them are ignored.
"""
from __future__ import annotations

from dataclasses import dataclass

from app.social_graph.constants import (
    MESSAGE_ELIGIBILITY_COPY,
    MessageEligibilityReason,
    Relationship,
)


@dataclass(frozen=True)
class BlockEdges:
    a_blocks_b: bool = False
    b_blocks_a: bool = False

    @property
    def any(self) -> bool:
        return self.a_blocks_b or self.b_blocks_a


@dataclass(frozen=True)
class FollowEdges:
    a_follows_b: bool = False
    b_follows_a: bool = False

    @property
    def mutual(self) -> bool:
        return self.a_follows_b and self.b_follows_a

    @property
    def one_way(self) -> bool:
        return self.a_follows_b != self.b_follows_a


@dataclass(frozen=True)
class RelationshipState:
    """Point-in-time snapshot; re-resolve after any mutation on the pair."""

    relationship: Relationship
    can_follow: bool = False
    can_unfollow: bool = False
    can_remove_follower: bool = False
    can_message: bool = False
    can_view_private_content: bool = False


@dataclass(frozen=True)
class MessageEligibility:
    can_dm: bool
    reason: MessageEligibilityReason

    @property
    def message(self) -> str:
        return MESSAGE_ELIGIBILITY_COPY[self.reason]


PERMISSION_TABLE: dict[Relationship, RelationshipState] = {
    Relationship.NONE: RelationshipState(Relationship.NONE, can_follow=True),
    Relationship.FOLLOWING: RelationshipState(Relationship.FOLLOWING, can_unfollow=True),
    Relationship.FOLLOWER: RelationshipState(
        Relationship.FOLLOWER, can_follow=True, can_remove_follower=True
    ),
    Relationship.MUTUAL: RelationshipState(
        Relationship.MUTUAL,
        can_unfollow=True,
        can_remove_follower=True,
        can_message=True,
        can_view_private_content=True,
    ),
    Relationship.BLOCKED: RelationshipState(Relationship.BLOCKED),
    Relationship.BLOCKED_BY: RelationshipState(Relationship.BLOCKED_BY),
}

# Viewer == target: nothing to act on.
SELF_STATE = RelationshipState(Relationship.NONE)
SELF_ELIGIBILITY = MessageEligibility(False, MessageEligibilityReason.NOT_FOLLOWING)


def classify_blocks(blocks: BlockEdges) -> Relationship | None:
    """Viewer is A. Return blocked/blocked_by, or None if no block edge exists."""
    if blocks.a_blocks_b:
        return Relationship.BLOCKED
    if blocks.b_blocks_a:
        return Relationship.BLOCKED_BY
    return None


def classify_follows(follows: FollowEdges) -> Relationship:
    """Viewer is A."""
    if follows.mutual:
        return Relationship.MUTUAL
    if follows.a_follows_b:
        return Relationship.FOLLOWING
    if follows.b_follows_a:
        return Relationship.FOLLOWER
    return Relationship.NONE


def state_for(relationship: Relationship) -> RelationshipState:
    return PERMISSION_TABLE[relationship]


def eligibility_for(blocks: BlockEdges, follows: FollowEdges) -> MessageEligibility:
    """Messaging needs a mutual follow and no block in either direction.

    Uses the same block-first precedence as relationship resolution, so
    ``can_dm`` always equals ``state_for(...).can_message`` for the same edges.
    """
    if blocks.any:
        return MessageEligibility(False, MessageEligibilityReason.BLOCKED)
    if follows.mutual:
        return MessageEligibility(True, MessageEligibilityReason.MUTUAL_FOLLOW)
    if follows.one_way:
        return MessageEligibility(False, MessageEligibilityReason.ONE_WAY_FOLLOW)
    return MessageEligibility(False, MessageEligibilityReason.NOT_FOLLOWING)
