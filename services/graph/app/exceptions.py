"""
Graph service: domain-specific HTTP exceptions.

Five families, one per failure class the relationship core can report:

  InvalidOperation  422  the action targets yourself, or the input is malformed
  Conflict          409  the edge being created already exists
  NotFound          404  the edge (or account) being acted on does not exist
  Forbidden         403  the current relationship forbids the action
  Unavailable       503  the edge store could not be reached

Concrete exceptions preset their detail message so call sites never pass one.
Nothing here is retried by the service; callers re-resolve and decide.
"""
from fastapi import HTTPException, status


# ── Families ──────────────────────────────────────────────────────────────────

class InvalidOperation(HTTPException):
    def __init__(self, detail: str = "This operation is not allowed.") -> None:
        # Literal: Starlette renamed the 422 constant in 0.48.
        super().__init__(status_code=422, detail=detail)


class Conflict(HTTPException):
    def __init__(self, detail: str = "This relationship already exists.") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found.") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class Forbidden(HTTPException):
    def __init__(self, detail: str = "This action is not allowed.") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class Unavailable(HTTPException):
    def __init__(self, detail: str = "Service temporarily unavailable.") -> None:
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)


# ── Self-targeting ────────────────────────────────────────────────────────────

class CannotFollowSelf(InvalidOperation):
    def __init__(self) -> None:
        super().__init__("You cannot follow yourself.")


class CannotBlockSelf(InvalidOperation):
    def __init__(self) -> None:
        super().__init__("You cannot block yourself.")


class CannotActOnSelf(InvalidOperation):
    """Unfollow / remove-follower / unblock aimed at your own account."""

    def __init__(self) -> None:
        super().__init__("You cannot perform this action on yourself.")


class CannotReportSelf(InvalidOperation):
    def __init__(self) -> None:
        super().__init__("You cannot report yourself.")


class InvalidReportReason(InvalidOperation):
    def __init__(self, detail: str) -> None:
        super().__init__(detail)


# ── Duplicate edges ───────────────────────────────────────────────────────────

class AlreadyFollowing(Conflict):
    def __init__(self) -> None:
        super().__init__("You are already following this user.")


class AlreadyBlocked(Conflict):
    def __init__(self) -> None:
        super().__init__("You have already blocked this user.")


# ── Missing edges / accounts ──────────────────────────────────────────────────

class NotFollowing(NotFound):
    def __init__(self) -> None:
        super().__init__("You are not following this user.")


class NotAFollower(NotFound):
    def __init__(self) -> None:
        super().__init__("This user is not following you.")


class NotBlocked(NotFound):
    def __init__(self) -> None:
        super().__init__("You have not blocked this user.")


class UserNotFound(NotFound):
    def __init__(self) -> None:
        super().__init__("User not found.")


class UserHiddenByBlock(NotFound):
    """Target user has blocked the current user. Same 404 as a missing user so the block does not leak."""

    def __init__(self) -> None:
        super().__init__("User not found.")


# ── Relationship-gated ────────────────────────────────────────────────────────

class FollowForbidden(Forbidden):
    """A block exists between the two accounts, in either direction."""

    def __init__(self) -> None:
        super().__init__("You cannot follow this user.")


# ── Store ─────────────────────────────────────────────────────────────────────

class StoreUnavailable(Unavailable):
    def __init__(self) -> None:
        super().__init__("The relationship store is unavailable. Please try again shortly.")
