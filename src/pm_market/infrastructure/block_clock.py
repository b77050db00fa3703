"""RedisBlockClock — reads the chain head height published by the indexer."""

import logging

from config.settings import settings
from src.pm_common.errors import InternalError
from src.pm_common.redis_client import get_redis

logger = logging.getLogger(__name__)


class RedisBlockClock:
    def __init__(self, key: str | None = None) -> None:
        self._key = key or settings.BLOCK_HEIGHT_KEY

    async def current_block(self) -> int:
        redis = await get_redis()
        raw = await redis.get(self._key)
        if raw is None:
            logger.warning("Block height key %s not set; treating as block 0", self._key)
            return 0
        try:
            return int(raw)
        except ValueError:
            raise InternalError(f"Block height key {self._key} holds {raw!r}") from None
