"""PositionRepository — PostgreSQL implementation of PositionRepositoryProtocol.

Transaction ownership: the CALLER (Settlement Engine) commits or rolls back.
The (market_id, participant_id) UNIQUE constraint backs the no-restake rule.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.enums import PositionStatus, Side
from src.pm_common.errors import DuplicatePositionError, InternalError
from src.pm_position.domain.models import Position

_POSITION_COLUMNS = """
    market_id, participant_id, side, stake, created_block,
    status, payout, fee
"""

_GET_POSITION_SQL = text(f"""
    SELECT {_POSITION_COLUMNS}
    FROM positions
    WHERE market_id = :market_id AND participant_id = :participant_id
""")

_GET_POSITION_FOR_UPDATE_SQL = text(f"""
    SELECT {_POSITION_COLUMNS}
    FROM positions
    WHERE market_id = :market_id AND participant_id = :participant_id
    FOR UPDATE
""")

_LIST_POSITIONS_SQL = text(f"""
    SELECT {_POSITION_COLUMNS}
    FROM positions
    WHERE market_id = :market_id
    ORDER BY created_at, participant_id
""")

_INSERT_POSITION_SQL = text(f"""
    INSERT INTO positions
        (market_id, participant_id, side, stake, created_block, status)
    VALUES
        (:market_id, :participant_id, :side, :stake, :created_block, :status)
    ON CONFLICT (market_id, participant_id) DO NOTHING
    RETURNING {_POSITION_COLUMNS}
""")

_UPDATE_POSITION_SQL = text(f"""
    UPDATE positions
    SET status = :status,
        payout = :payout,
        fee = :fee,
        updated_at = NOW()
    WHERE market_id = :market_id AND participant_id = :participant_id
    RETURNING {_POSITION_COLUMNS}
""")


def _row_to_position(row: object) -> Position:
    return Position(
        market_id=row.market_id,  # type: ignore[attr-defined]
        participant_id=row.participant_id,  # type: ignore[attr-defined]
        side=Side(row.side),  # type: ignore[attr-defined]
        stake=row.stake,  # type: ignore[attr-defined]
        created_block=row.created_block,  # type: ignore[attr-defined]
        status=PositionStatus(row.status),  # type: ignore[attr-defined]
        payout=row.payout,  # type: ignore[attr-defined]
        fee=row.fee,  # type: ignore[attr-defined]
    )


class PositionRepository:
    async def get_position(
        self,
        db: AsyncSession,
        market_id: int,
        participant_id: str,
        for_update: bool = False,
    ) -> Position | None:
        sql = _GET_POSITION_FOR_UPDATE_SQL if for_update else _GET_POSITION_SQL
        result = await db.execute(
            sql, {"market_id": market_id, "participant_id": participant_id}
        )
        row = result.fetchone()
        return _row_to_position(row) if row else None

    async def list_positions(self, db: AsyncSession, market_id: int) -> list[Position]:
        result = await db.execute(_LIST_POSITIONS_SQL, {"market_id": market_id})
        return [_row_to_position(row) for row in result.fetchall()]

    async def add_position(self, db: AsyncSession, position: Position) -> Position:
        result = await db.execute(
            _INSERT_POSITION_SQL,
            {
                "market_id": position.market_id,
                "participant_id": position.participant_id,
                "side": position.side.value,
                "stake": position.stake,
                "created_block": position.created_block,
                "status": position.status.value,
            },
        )
        row = result.fetchone()
        if row is None:
            # ON CONFLICT DO NOTHING returned no row: the pair already exists
            raise DuplicatePositionError(position.market_id, position.participant_id)
        return _row_to_position(row)

    async def save_position(self, db: AsyncSession, position: Position) -> Position:
        result = await db.execute(
            _UPDATE_POSITION_SQL,
            {
                "market_id": position.market_id,
                "participant_id": position.participant_id,
                "status": position.status.value,
                "payout": position.payout,
                "fee": position.fee,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError(
                f"Position missing for {position.participant_id} on market {position.market_id}"
            )
        return _row_to_position(row)
