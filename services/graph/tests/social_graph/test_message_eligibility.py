import pytest

from app.social_graph import service as svc
from app.social_graph.constants import MessageEligibilityReason


@pytest.mark.asyncio
async def test_mutual_follow_can_dm(db_session, make_profile) -> None:
    a = await make_profile("alice")
    b = await make_profile("bob")
    await svc.follow(db_session, a, b)
    await svc.follow(db_session, b, a)

    result = await svc.check_message_eligibility(db_session, a, b)
    assert result.can_dm
    assert result.reason is MessageEligibilityReason.MUTUAL_FOLLOW
    assert result.message == "You can send direct messages"


@pytest.mark.asyncio
async def test_one_way_follow_cannot_dm(db_session, make_profile) -> None:
    a = await make_profile("alice")
    b = await make_profile("bob")
    await svc.follow(db_session, a, b)

    for viewer, target in ((a, b), (b, a)):
        result = await svc.check_message_eligibility(db_session, viewer, target)
        assert not result.can_dm
        assert result.reason is MessageEligibilityReason.ONE_WAY_FOLLOW
        assert result.message == "Follow each other to send messages"


@pytest.mark.asyncio
async def test_strangers_cannot_dm(db_session, make_profile) -> None:
    a = await make_profile("alice")
    b = await make_profile("bob")
    result = await svc.check_message_eligibility(db_session, a, b)
    assert not result.can_dm
    assert result.reason is MessageEligibilityReason.NOT_FOLLOWING


@pytest.mark.asyncio
async def test_block_with_stale_mutual_follows_is_blocked(db_session, make_profile) -> None:
    """Follow edges left behind by a block never make the pair messageable."""
    a = await make_profile("alice")
    b = await make_profile("bob")
    await svc.follow(db_session, a, b)
    await svc.follow(db_session, b, a)
    await svc.block(db_session, a, b, cascade_follows=False)

    for viewer, target in ((a, b), (b, a)):
        result = await svc.check_message_eligibility(db_session, viewer, target)
        state = await svc.resolve(db_session, viewer, target)
        assert not result.can_dm
        assert result.reason is MessageEligibilityReason.BLOCKED
        assert result.message == "Cannot send messages"
        assert result.can_dm == state.can_message


@pytest.mark.asyncio
async def test_eligibility_matches_can_message(db_session, make_profile) -> None:
    a = await make_profile("alice")
    b = await make_profile("bob")

    async def _check() -> None:
        result = await svc.check_message_eligibility(db_session, a, b)
        state = await svc.resolve(db_session, a, b)
        assert result.can_dm == state.can_message

    await _check()
    await svc.follow(db_session, a, b)
    await _check()
    await svc.follow(db_session, b, a)
    await _check()
    await svc.block(db_session, b, a)
    await _check()


@pytest.mark.asyncio
async def test_self_cannot_dm(db_session, make_profile) -> None:
    a = await make_profile("alice")
    result = await svc.check_message_eligibility(db_session, a, a)
    assert not result.can_dm
