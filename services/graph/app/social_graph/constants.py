"""
Social graph domain: enums, limits and fixed copy.
"""
from __future__ import annotations

import enum


class Relationship(str, enum.Enum):
    """Directed relationship of the viewer towards a target account."""

    NONE = "none"
    FOLLOWING = "following"      # viewer follows target
    FOLLOWER = "follower"        # target follows viewer
    MUTUAL = "mutual"
    BLOCKED = "blocked"          # viewer blocked target
    BLOCKED_BY = "blocked_by"    # target blocked viewer


class FollowAction(str, enum.Enum):
    FOLLOW = "follow"
    UNFOLLOW = "unfollow"
    REMOVE_FOLLOWER = "remove_follower"
    BLOCK = "block"
    UNBLOCK = "unblock"


class MessageEligibilityReason(str, enum.Enum):
    MUTUAL_FOLLOW = "mutual_follow"
    NOT_FOLLOWING = "not_following"
    BLOCKED = "blocked"
    ONE_WAY_FOLLOW = "one_way_follow"


MESSAGE_ELIGIBILITY_COPY: dict[MessageEligibilityReason, str] = {
    MessageEligibilityReason.MUTUAL_FOLLOW: "You can send direct messages",
    MessageEligibilityReason.BLOCKED: "Cannot send messages",
    MessageEligibilityReason.ONE_WAY_FOLLOW: "Follow each other to send messages",
    MessageEligibilityReason.NOT_FOLLOWING: "Follow each other to send messages",
}


class ReportContext(str, enum.Enum):
    VIDEO_CALL = "video_call"
    SNACC = "snacc"
    PROFILE = "profile"
    MESSAGE = "message"


REPORT_REASON_MAX_LENGTH: int = 500

REPORT_CONTEXT_DISPLAY_NAMES: dict[ReportContext, str] = {
    ReportContext.PROFILE: "Profile",
    ReportContext.SNACC: "Snacc",
    ReportContext.VIDEO_CALL: "Video Call",
    ReportContext.MESSAGE: "Message",
}

REPORT_REASONS: dict[ReportContext, tuple[str, ...]] = {
    ReportContext.PROFILE: (
        "Inappropriate profile picture",
        "Offensive username or bio",
        "Impersonation",
        "Spam or fake account",
        "Underage user",
        "Other",
    ),
    ReportContext.SNACC: (
        "Harassment or bullying",
        "Hate speech",
        "Spam",
        "Inappropriate content",
        "Violence or threats",
        "Self-harm content",
        "Other",
    ),
    ReportContext.VIDEO_CALL: (
        "Inappropriate behavior",
        "Nudity or sexual content",
        "Harassment",
        "Hate speech",
        "Violence or threats",
        "Spam or scam",
        "Other",
    ),
    ReportContext.MESSAGE: (
        "Harassment",
        "Spam",
        "Threats or violence",
        "Inappropriate content",
        "Scam or fraud",
        "Other",
    ),
}
