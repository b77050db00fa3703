"""InMemoryConfigRepository — config row lives in InMemorySession tables."""

from dataclasses import replace

from src.pm_common.memory_store import InMemorySession
from src.pm_settlement.domain.models import ProtocolConfig


class InMemoryConfigRepository:
    def __init__(self, defaults: ProtocolConfig) -> None:
        self._defaults = defaults

    async def get_config(
        self, db: InMemorySession, for_update: bool = False
    ) -> ProtocolConfig:
        if db.tables.config is None:
            return replace(self._defaults)
        return replace(db.tables.config)

    async def save_config(self, db: InMemorySession, config: ProtocolConfig) -> ProtocolConfig:
        db.tables.config = replace(config)
        return replace(config)
