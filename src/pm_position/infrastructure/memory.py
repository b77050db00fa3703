"""InMemoryPositionRepository — PositionRepositoryProtocol over InMemorySession tables."""

from dataclasses import replace

from src.pm_common.errors import DuplicatePositionError, InternalError
from src.pm_common.memory_store import InMemorySession
from src.pm_position.domain.models import Position


class InMemoryPositionRepository:
    async def get_position(
        self,
        db: InMemorySession,
        market_id: int,
        participant_id: str,
        for_update: bool = False,
    ) -> Position | None:
        position = db.tables.positions.get((market_id, participant_id))
        return replace(position) if position is not None else None

    async def list_positions(self, db: InMemorySession, market_id: int) -> list[Position]:
        # dicts keep insertion order, which matches stake admission order
        return [
            replace(p) for (mid, _), p in db.tables.positions.items() if mid == market_id
        ]

    async def add_position(self, db: InMemorySession, position: Position) -> Position:
        key = (position.market_id, position.participant_id)
        if key in db.tables.positions:
            raise DuplicatePositionError(position.market_id, position.participant_id)
        db.tables.positions[key] = replace(position)
        return replace(position)

    async def save_position(self, db: InMemorySession, position: Position) -> Position:
        key = (position.market_id, position.participant_id)
        if key not in db.tables.positions:
            raise InternalError(
                f"Position missing for {position.participant_id} on market {position.market_id}"
            )
        db.tables.positions[key] = replace(position)
        return replace(position)
