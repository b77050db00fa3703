"""Repository Protocol for the protocol configuration row."""

from typing import Any, Protocol

from src.pm_settlement.domain.models import ProtocolConfig


class ConfigRepositoryProtocol(Protocol):
    async def get_config(self, db: Any, for_update: bool = False) -> ProtocolConfig: ...

    async def save_config(self, db: Any, config: ProtocolConfig) -> ProtocolConfig: ...
