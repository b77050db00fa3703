"""InMemoryMarketRepository — MarketRepositoryProtocol over InMemorySession tables.

Returns copies so callers must go through update_market to persist changes.
"""

from dataclasses import replace

from src.pm_common.errors import InternalError
from src.pm_common.memory_store import InMemorySession
from src.pm_market.domain.models import Market


class InMemoryMarketRepository:
    async def get_market(
        self, db: InMemorySession, market_id: int, for_update: bool = False
    ) -> Market | None:
        market = db.tables.markets.get(market_id)
        return replace(market) if market is not None else None

    async def list_markets(self, db: InMemorySession) -> list[Market]:
        return [replace(db.tables.markets[k]) for k in sorted(db.tables.markets)]

    async def next_market_id(self, db: InMemorySession) -> int:
        market_id = db.tables.market_count
        db.tables.market_count += 1
        return market_id

    async def count_markets(self, db: InMemorySession) -> int:
        return db.tables.market_count

    async def insert_market(self, db: InMemorySession, market: Market) -> Market:
        if market.id in db.tables.markets:
            raise InternalError(f"Market id already used: {market.id}")
        db.tables.markets[market.id] = replace(market)
        return replace(market)

    async def update_market(self, db: InMemorySession, market: Market) -> Market:
        if market.id not in db.tables.markets:
            raise InternalError(f"Failed to update market {market.id}")
        db.tables.markets[market.id] = replace(market)
        return replace(market)
