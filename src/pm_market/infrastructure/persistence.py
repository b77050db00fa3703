"""MarketRepository — PostgreSQL implementation of MarketRepositoryProtocol.

All queries use raw text() SQL (no ORM).
The market counter lives in the single protocol_config row; incrementing it
inside the caller's transaction keeps ids gap-free (a rollback undoes it).
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.enums import MarketStatus
from src.pm_common.errors import InternalError
from src.pm_market.domain.models import Market

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_MARKET_COLUMNS = """
    id, start_price, end_price,
    total_up_stake, total_down_stake,
    start_block, end_block,
    status, resolved_block
"""

_GET_MARKET_SQL = text(f"SELECT {_MARKET_COLUMNS} FROM markets WHERE id = :market_id")

_GET_MARKET_FOR_UPDATE_SQL = text(
    f"SELECT {_MARKET_COLUMNS} FROM markets WHERE id = :market_id FOR UPDATE"
)

_LIST_MARKETS_SQL = text(f"SELECT {_MARKET_COLUMNS} FROM markets ORDER BY id")

_NEXT_MARKET_ID_SQL = text("""
    UPDATE protocol_config
    SET market_count = market_count + 1,
        updated_at = NOW()
    WHERE id = 1
    RETURNING market_count - 1 AS market_id
""")

_COUNT_MARKETS_SQL = text("SELECT market_count FROM protocol_config WHERE id = 1")

_INSERT_MARKET_SQL = text(f"""
    INSERT INTO markets
        (id, start_price, end_price, total_up_stake, total_down_stake,
         start_block, end_block, status, resolved_block)
    VALUES
        (:id, :start_price, :end_price, :total_up_stake, :total_down_stake,
         :start_block, :end_block, :status, :resolved_block)
    RETURNING {_MARKET_COLUMNS}
""")

_UPDATE_MARKET_SQL = text(f"""
    UPDATE markets
    SET end_price = :end_price,
        total_up_stake = :total_up_stake,
        total_down_stake = :total_down_stake,
        status = :status,
        resolved_block = :resolved_block,
        updated_at = NOW()
    WHERE id = :id
    RETURNING {_MARKET_COLUMNS}
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------

def _row_to_market(row: object) -> Market:
    return Market(
        id=row.id,  # type: ignore[attr-defined]
        start_price=row.start_price,  # type: ignore[attr-defined]
        end_price=row.end_price,  # type: ignore[attr-defined]
        total_up_stake=row.total_up_stake,  # type: ignore[attr-defined]
        total_down_stake=row.total_down_stake,  # type: ignore[attr-defined]
        start_block=row.start_block,  # type: ignore[attr-defined]
        end_block=row.end_block,  # type: ignore[attr-defined]
        status=MarketStatus(row.status),  # type: ignore[attr-defined]
        resolved_block=row.resolved_block,  # type: ignore[attr-defined]
    )


def _market_params(market: Market) -> dict[str, object]:
    return {
        "id": market.id,
        "start_price": market.start_price,
        "end_price": market.end_price,
        "total_up_stake": market.total_up_stake,
        "total_down_stake": market.total_down_stake,
        "start_block": market.start_block,
        "end_block": market.end_block,
        "status": market.status.value,
        "resolved_block": market.resolved_block,
    }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class MarketRepository:
    async def get_market(
        self, db: AsyncSession, market_id: int, for_update: bool = False
    ) -> Market | None:
        sql = _GET_MARKET_FOR_UPDATE_SQL if for_update else _GET_MARKET_SQL
        result = await db.execute(sql, {"market_id": market_id})
        row = result.fetchone()
        return _row_to_market(row) if row else None

    async def list_markets(self, db: AsyncSession) -> list[Market]:
        result = await db.execute(_LIST_MARKETS_SQL)
        return [_row_to_market(row) for row in result.fetchall()]

    async def next_market_id(self, db: AsyncSession) -> int:
        row = (await db.execute(_NEXT_MARKET_ID_SQL)).fetchone()
        if row is None:
            raise InternalError("protocol_config row is missing")
        return int(row.market_id)

    async def count_markets(self, db: AsyncSession) -> int:
        count = (await db.execute(_COUNT_MARKETS_SQL)).scalar_one_or_none()
        return int(count or 0)

    async def insert_market(self, db: AsyncSession, market: Market) -> Market:
        row = (await db.execute(_INSERT_MARKET_SQL, _market_params(market))).fetchone()
        if row is None:
            raise InternalError(f"Failed to insert market {market.id}")
        return _row_to_market(row)

    async def update_market(self, db: AsyncSession, market: Market) -> Market:
        row = (await db.execute(_UPDATE_MARKET_SQL, _market_params(market))).fetchone()
        if row is None:
            raise InternalError(f"Failed to update market {market.id}")
        return _row_to_market(row)
