"""Repository Protocol for the Position Ledger.

Consumed only by the Settlement Engine, which enforces every invariant
before calling add_position / save_position.
"""

from typing import Any, Protocol

from src.pm_position.domain.models import Position


class PositionRepositoryProtocol(Protocol):
    async def get_position(
        self, db: Any, market_id: int, participant_id: str, for_update: bool = False
    ) -> Position | None: ...

    async def list_positions(self, db: Any, market_id: int) -> list[Position]: ...

    async def add_position(self, db: Any, position: Position) -> Position: ...

    async def save_position(self, db: Any, position: Position) -> Position: ...
