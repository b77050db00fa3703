# src/pm_market/domain/repository.py
"""Repository Protocol — dependency inversion for testability.

Unit tests inject the in-memory implementation or a mock that conforms to
this Protocol. Infrastructure layer provides the PostgreSQL implementation.
`db` is an AsyncSession or an InMemorySession, matching the implementation.
"""

from typing import Any, Protocol

from src.pm_market.domain.models import Market


class MarketRepositoryProtocol(Protocol):
    async def get_market(
        self, db: Any, market_id: int, for_update: bool = False
    ) -> Market | None: ...

    async def list_markets(self, db: Any) -> list[Market]: ...

    async def next_market_id(self, db: Any) -> int: ...

    async def count_markets(self, db: Any) -> int: ...

    async def insert_market(self, db: Any, market: Market) -> Market: ...

    async def update_market(self, db: Any, market: Market) -> Market: ...
