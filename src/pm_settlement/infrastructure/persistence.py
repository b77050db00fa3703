"""ConfigRepository — the single protocol_config row (id = 1).

The row is seeded by migration 005; market_count in the same row is owned
by MarketRepository.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.errors import InternalError
from src.pm_settlement.domain.models import ProtocolConfig

_GET_CONFIG_SQL = text(
    "SELECT oracle_id, minimum_stake, fee_percentage FROM protocol_config WHERE id = 1"
)

_GET_CONFIG_FOR_UPDATE_SQL = text(
    "SELECT oracle_id, minimum_stake, fee_percentage FROM protocol_config"
    " WHERE id = 1 FOR UPDATE"
)

_SAVE_CONFIG_SQL = text("""
    UPDATE protocol_config
    SET oracle_id = :oracle_id,
        minimum_stake = :minimum_stake,
        fee_percentage = :fee_percentage,
        updated_at = NOW()
    WHERE id = 1
    RETURNING oracle_id, minimum_stake, fee_percentage
""")


def _row_to_config(row: object) -> ProtocolConfig:
    return ProtocolConfig(
        oracle_id=row.oracle_id,  # type: ignore[attr-defined]
        minimum_stake=row.minimum_stake,  # type: ignore[attr-defined]
        fee_percentage=row.fee_percentage,  # type: ignore[attr-defined]
    )


class ConfigRepository:
    async def get_config(self, db: AsyncSession, for_update: bool = False) -> ProtocolConfig:
        sql = _GET_CONFIG_FOR_UPDATE_SQL if for_update else _GET_CONFIG_SQL
        row = (await db.execute(sql)).fetchone()
        if row is None:
            raise InternalError("protocol_config row is missing")
        return _row_to_config(row)

    async def save_config(self, db: AsyncSession, config: ProtocolConfig) -> ProtocolConfig:
        row = (
            await db.execute(
                _SAVE_CONFIG_SQL,
                {
                    "oracle_id": config.oracle_id,
                    "minimum_stake": config.minimum_stake,
                    "fee_percentage": config.fee_percentage,
                },
            )
        ).fetchone()
        if row is None:
            raise InternalError("protocol_config row is missing")
        return _row_to_config(row)
