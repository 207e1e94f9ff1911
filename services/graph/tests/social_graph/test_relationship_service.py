import uuid

import pytest
import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    AlreadyBlocked,
    AlreadyFollowing,
    CannotActOnSelf,
    CannotBlockSelf,
    CannotFollowSelf,
    Conflict,
    Forbidden,
    InvalidOperation,
    NotAFollower,
    NotBlocked,
    NotFollowing,
    NotFound,
    StoreUnavailable,
    UserNotFound,
)
from app.profiles.models import Profile
from app.social_graph import edges
from app.social_graph import service as svc
from app.social_graph.constants import FollowAction, Relationship

COMPLEMENT = {
    Relationship.NONE: Relationship.NONE,
    Relationship.FOLLOWING: Relationship.FOLLOWER,
    Relationship.FOLLOWER: Relationship.FOLLOWING,
    Relationship.MUTUAL: Relationship.MUTUAL,
    Relationship.BLOCKED: Relationship.BLOCKED_BY,
    Relationship.BLOCKED_BY: Relationship.BLOCKED,
}


async def _assert_complementary(session: AsyncSession, a, b) -> None:
    forward = await svc.resolve(session, a, b)
    backward = await svc.resolve(session, b, a)
    assert backward.relationship is COMPLEMENT[forward.relationship]


# ── resolve ───────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_resolve_self_is_none_without_permissions(db_session, make_profile) -> None:
    a = await make_profile("alice")
    state = await svc.resolve(db_session, a, a)
    assert state.relationship is Relationship.NONE
    assert not (state.can_follow or state.can_unfollow or state.can_remove_follower)
    assert not (state.can_message or state.can_view_private_content)


@pytest.mark.asyncio
async def test_walkthrough_follow_then_follow_back(db_session, make_profile) -> None:
    u1 = await make_profile("u1")
    u2 = await make_profile("u2")

    state = await svc.resolve(db_session, u1, u2)
    assert state.relationship is Relationship.NONE
    assert state.can_follow
    assert not (state.can_unfollow or state.can_remove_follower or state.can_message)

    await svc.perform_action(db_session, u1, u2, FollowAction.FOLLOW)
    state = await svc.resolve(db_session, u1, u2)
    assert state.relationship is Relationship.FOLLOWING
    assert state.can_unfollow and not state.can_follow

    reverse = await svc.resolve(db_session, u2, u1)
    assert reverse.relationship is Relationship.FOLLOWER
    assert reverse.can_follow and reverse.can_remove_follower

    await svc.perform_action(db_session, u2, u1, FollowAction.FOLLOW)
    for viewer, target in ((u1, u2), (u2, u1)):
        state = await svc.resolve(db_session, viewer, target)
        assert state.relationship is Relationship.MUTUAL
        assert state.can_message and state.can_view_private_content


@pytest.mark.asyncio
async def test_block_wins_over_follow_edges(db_session, make_profile) -> None:
    a = await make_profile("alice")
    b = await make_profile("bob")
    await svc.follow(db_session, a, b)
    await svc.follow(db_session, b, a)
    await svc.block(db_session, b, a, cascade_follows=False)

    state = await svc.resolve(db_session, a, b)
    assert state.relationship is Relationship.BLOCKED_BY
    assert not any(
        (
            state.can_follow,
            state.can_unfollow,
            state.can_remove_follower,
            state.can_message,
            state.can_view_private_content,
        )
    )
    assert (await svc.resolve(db_session, b, a)).relationship is Relationship.BLOCKED


@pytest.mark.asyncio
async def test_resolve_is_complementary_through_a_sequence(db_session, make_profile) -> None:
    a = await make_profile("alice")
    b = await make_profile("bob")
    await _assert_complementary(db_session, a, b)
    await svc.follow(db_session, a, b)
    await _assert_complementary(db_session, a, b)
    await svc.follow(db_session, b, a)
    await _assert_complementary(db_session, a, b)
    await svc.unfollow(db_session, a, b)
    await _assert_complementary(db_session, a, b)
    await svc.block(db_session, a, b)
    await _assert_complementary(db_session, a, b)


# ── follow ────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_follow_twice_conflicts(db_session, make_profile) -> None:
    a = await make_profile("alice")
    b = await make_profile("bob")
    await svc.perform_action(db_session, a, b, FollowAction.FOLLOW)
    with pytest.raises(AlreadyFollowing) as exc_info:
        await svc.perform_action(db_session, a, b, FollowAction.FOLLOW)
    assert isinstance(exc_info.value, Conflict)
    assert exc_info.value.status_code == 409


@pytest.mark.asyncio
async def test_follow_after_block_is_forbidden(db_session, make_profile) -> None:
    a = await make_profile("alice")
    b = await make_profile("bob")
    await svc.perform_action(db_session, a, b, FollowAction.BLOCK)
    assert (await svc.resolve(db_session, a, b)).relationship is Relationship.BLOCKED
    with pytest.raises(Forbidden):
        await svc.perform_action(db_session, a, b, FollowAction.FOLLOW)
    # Blocked side cannot follow either.
    with pytest.raises(Forbidden):
        await svc.perform_action(db_session, b, a, FollowAction.FOLLOW)


@pytest.mark.asyncio
async def test_block_checked_before_duplicate(db_session, make_profile) -> None:
    a = await make_profile("alice")
    b = await make_profile("bob")
    await svc.follow(db_session, a, b)
    await svc.block(db_session, b, a, cascade_follows=False)
    # The stale a -> b edge is still there, but the block decides.
    with pytest.raises(Forbidden):
        await svc.follow(db_session, a, b)


@pytest.mark.parametrize("action", list(FollowAction))
@pytest.mark.asyncio
async def test_self_targeted_actions_are_invalid(db_session, make_profile, action) -> None:
    a = await make_profile("alice")
    with pytest.raises(InvalidOperation) as exc_info:
        await svc.perform_action(db_session, a, a, action)
    assert exc_info.value.status_code == 422


@pytest.mark.asyncio
async def test_self_errors_are_specific(db_session, make_profile) -> None:
    a = await make_profile("alice")
    with pytest.raises(CannotFollowSelf):
        await svc.follow(db_session, a, a)
    with pytest.raises(CannotBlockSelf):
        await svc.block(db_session, a, a)
    with pytest.raises(CannotActOnSelf):
        await svc.unfollow(db_session, a, a)


# ── unfollow / remove_follower / unblock ──────────────────────────────────────

@pytest.mark.asyncio
async def test_missing_edges_are_not_found(db_session, make_profile) -> None:
    a = await make_profile("alice")
    b = await make_profile("bob")
    with pytest.raises(NotFollowing):
        await svc.perform_action(db_session, a, b, FollowAction.UNFOLLOW)
    with pytest.raises(NotAFollower):
        await svc.perform_action(db_session, a, b, FollowAction.REMOVE_FOLLOWER)
    with pytest.raises(NotBlocked) as exc_info:
        await svc.perform_action(db_session, a, b, FollowAction.UNBLOCK)
    assert isinstance(exc_info.value, NotFound)


@pytest.mark.asyncio
async def test_remove_follower_drops_incoming_edge(db_session, make_profile, read_counts) -> None:
    a = await make_profile("alice")
    b = await make_profile("bob")
    await svc.follow(db_session, b, a)
    await svc.perform_action(db_session, a, b, FollowAction.REMOVE_FOLLOWER)
    assert (await svc.resolve(db_session, a, b)).relationship is Relationship.NONE
    assert await read_counts(a) == (0, 0)
    assert await read_counts(b) == (0, 0)


@pytest.mark.asyncio
async def test_block_twice_conflicts(db_session, make_profile) -> None:
    a = await make_profile("alice")
    b = await make_profile("bob")
    await svc.block(db_session, a, b)
    with pytest.raises(AlreadyBlocked):
        await svc.block(db_session, a, b)


@pytest.mark.asyncio
async def test_both_sides_may_block(db_session, make_profile) -> None:
    a = await make_profile("alice")
    b = await make_profile("bob")
    await svc.block(db_session, a, b)
    await svc.block(db_session, b, a)
    assert (await svc.resolve(db_session, a, b)).relationship is Relationship.BLOCKED
    assert (await svc.resolve(db_session, b, a)).relationship is Relationship.BLOCKED
    await svc.unblock(db_session, a, b)
    assert (await svc.resolve(db_session, a, b)).relationship is Relationship.BLOCKED_BY


# ── block cascade ─────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_block_cascade_removes_follows_in_both_directions(
    db_session, make_profile, read_counts
) -> None:
    a = await make_profile("alice")
    b = await make_profile("bob")
    await svc.follow(db_session, a, b)
    await svc.follow(db_session, b, a)
    await svc.block(db_session, a, b, cascade_follows=True)

    follows = await edges.query_follow_edges(db_session, a, b)
    assert not follows.a_follows_b and not follows.b_follows_a
    assert await read_counts(a) == (0, 0)
    assert await read_counts(b) == (0, 0)


@pytest.mark.asyncio
async def test_block_without_cascade_keeps_stale_follows(
    db_session, make_profile, read_counts
) -> None:
    a = await make_profile("alice")
    b = await make_profile("bob")
    await svc.follow(db_session, a, b)
    await svc.block(db_session, a, b, cascade_follows=False)

    assert (await edges.query_follow_edges(db_session, a, b)).a_follows_b
    assert await read_counts(b) == (1, 0)
    assert (await svc.resolve(db_session, a, b)).relationship is Relationship.BLOCKED


@pytest.mark.asyncio
async def test_unblock_does_not_restore_follows(db_session, make_profile) -> None:
    a = await make_profile("alice")
    b = await make_profile("bob")
    await svc.follow(db_session, a, b)
    await svc.follow(db_session, b, a)
    await svc.block(db_session, a, b)
    await svc.unblock(db_session, a, b)
    assert (await svc.resolve(db_session, a, b)).relationship is Relationship.NONE


# ── counters ──────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_follow_and_unfollow_move_counters(db_session, make_profile, read_counts) -> None:
    a = await make_profile("alice")
    b = await make_profile("bob")
    await svc.follow(db_session, a, b)
    assert await read_counts(a) == (0, 1)
    assert await read_counts(b) == (1, 0)
    await svc.unfollow(db_session, a, b)
    assert await read_counts(a) == (0, 0)
    assert await read_counts(b) == (0, 0)


@pytest.mark.asyncio
async def test_counters_never_go_negative(db_session, make_profile, read_counts) -> None:
    a = await make_profile("alice")
    await edges.adjust_follower_count(db_session, a, -3)
    await edges.adjust_following_count(db_session, a, -1)
    assert await read_counts(a) == (0, 0)


@pytest.mark.asyncio
async def test_counter_failure_does_not_fail_follow(
    db_session, make_profile, monkeypatch, caplog
) -> None:
    a = await make_profile("alice")
    b = await make_profile("bob")

    async def broken(*args, **kwargs):
        raise StoreUnavailable()

    monkeypatch.setattr(edges, "adjust_following_count", broken)
    await svc.follow(db_session, a, b)

    assert (await svc.resolve(db_session, a, b)).relationship is Relationship.FOLLOWING
    assert "counts will drift" in caplog.text


@pytest.mark.asyncio
async def test_reconcile_counts_repairs_drift(db_session, make_profile, read_counts) -> None:
    a = await make_profile("alice")
    b = await make_profile("bob")
    c = await make_profile("carol")
    await svc.follow(db_session, b, a)
    await svc.follow(db_session, c, a)
    await svc.follow(db_session, a, c)
    await edges.set_counts(db_session, a, followers=7, following=0)

    assert await svc.reconcile_counts(db_session, a) == (2, 1)
    assert await read_counts(a) == (2, 1)


@pytest.mark.asyncio
async def test_store_outage_maps_to_unavailable(db_session, monkeypatch) -> None:
    async def down(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))

    monkeypatch.setattr(db_session, "execute", down)
    with pytest.raises(StoreUnavailable) as exc_info:
        await svc.resolve(db_session, uuid.uuid4(), uuid.uuid4())
    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_counter_statement_failure_keeps_edge(
    db_session, make_profile, read_counts, monkeypatch, caplog
) -> None:
    a = await make_profile("alice")
    b = await make_profile("bob")

    async def violates_check(session, account_id, delta):
        await edges.execute(
            session,
            sa.update(Profile)
            .where(Profile.id == account_id)
            .values(followers_count=-1)
            .execution_options(synchronize_session=False),
        )

    monkeypatch.setattr(edges, "adjust_follower_count", violates_check)
    await svc.follow(db_session, a, b)
    await db_session.commit()

    assert (await edges.query_follow_edges(db_session, a, b)).a_follows_b
    # The following_count bump ran first and was rolled back with the failed statement.
    assert await read_counts(a) == (0, 0)
    assert await read_counts(b) == (0, 0)
    assert "counts will drift" in caplog.text


# ── insert error mapping ──────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_duplicate_edge_insert_is_conflict(db_session, make_profile) -> None:
    a = await make_profile("alice")
    b = await make_profile("bob")
    await edges.insert_follow_edge(db_session, a, b)
    with pytest.raises(AlreadyFollowing):
        await edges.insert_follow_edge(db_session, a, b)


@pytest.mark.asyncio
async def test_duplicate_block_insert_is_conflict(db_session, make_profile) -> None:
    a = await make_profile("alice")
    b = await make_profile("bob")
    await edges.insert_block_edge(db_session, a, b)
    with pytest.raises(AlreadyBlocked):
        await edges.insert_block_edge(db_session, a, b)


@pytest.mark.asyncio
async def test_edge_to_missing_profile_is_not_found(db_session, make_profile) -> None:
    a = await make_profile("alice")
    await db_session.execute(sa.text("PRAGMA foreign_keys=ON"))
    with pytest.raises(UserNotFound):
        await edges.insert_follow_edge(db_session, a, uuid.uuid4())


@pytest.mark.asyncio
async def test_other_integrity_errors_propagate(db_session, make_profile) -> None:
    a = await make_profile("alice")
    with pytest.raises(IntegrityError):
        await edges.insert_follow_edge(db_session, a, a)
