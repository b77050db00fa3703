from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.pm_common.errors import InternalError
from src.pm_market.domain.clock import ManualBlockClock
from src.pm_market.infrastructure.block_clock import RedisBlockClock


class TestManualBlockClock:
    @pytest.mark.asyncio
    async def test_starts_at_given_block(self) -> None:
        assert await ManualBlockClock(7).current_block() == 7

    @pytest.mark.asyncio
    async def test_set_and_advance(self) -> None:
        clock = ManualBlockClock()
        clock.set_block(10)
        assert await clock.current_block() == 10
        assert clock.advance() == 11
        assert clock.advance(5) == 16

    def test_cannot_regress(self) -> None:
        clock = ManualBlockClock(10)
        with pytest.raises(ValueError):
            clock.set_block(9)

    def test_same_block_allowed(self) -> None:
        clock = ManualBlockClock(10)
        clock.set_block(10)


def _redis_returning(value) -> MagicMock:
    redis = MagicMock()
    redis.get = AsyncMock(return_value=value)
    return redis


class TestRedisBlockClock:
    @pytest.mark.asyncio
    async def test_reads_height(self) -> None:
        redis = _redis_returning("1234")
        with patch(
            "src.pm_market.infrastructure.block_clock.get_redis",
            AsyncMock(return_value=redis),
        ):
            assert await RedisBlockClock(key="height").current_block() == 1234
        redis.get.assert_awaited_once_with("height")

    @pytest.mark.asyncio
    async def test_missing_key_is_block_zero(self) -> None:
        with patch(
            "src.pm_market.infrastructure.block_clock.get_redis",
            AsyncMock(return_value=_redis_returning(None)),
        ):
            assert await RedisBlockClock(key="height").current_block() == 0

    @pytest.mark.asyncio
    async def test_garbage_value_raises(self) -> None:
        with patch(
            "src.pm_market.infrastructure.block_clock.get_redis",
            AsyncMock(return_value=_redis_returning("not-a-number")),
        ):
            with pytest.raises(InternalError):
                await RedisBlockClock(key="height").current_block()
