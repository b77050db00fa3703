# src/pm_admin/application/service.py
"""Admin application service — read-only conservation report."""
from typing import Any

from src.pm_custody.domain.models import ESCROW_ACCOUNT_ID
from src.pm_custody.domain.repository import CustodyProtocol
from src.pm_custody.infrastructure.persistence import AccountCustody
from src.pm_market.domain.repository import MarketRepositoryProtocol
from src.pm_market.infrastructure.persistence import MarketRepository
from src.pm_position.domain.repository import PositionRepositoryProtocol
from src.pm_position.infrastructure.persistence import PositionRepository
from src.pm_settlement.domain.invariants import (
    verify_escrow_solvency,
    verify_market_conservation,
)


class AdminService:
    def __init__(
        self,
        markets: MarketRepositoryProtocol | None = None,
        positions: PositionRepositoryProtocol | None = None,
        custody: CustodyProtocol | None = None,
    ) -> None:
        self._markets: MarketRepositoryProtocol = markets or MarketRepository()
        self._positions: PositionRepositoryProtocol = positions or PositionRepository()
        self._custody: CustodyProtocol = custody or AccountCustody()

    async def verify_all_invariants(self, db: Any) -> dict[str, object]:
        """Run per-market (C-1..C-4) and escrow solvency (C-G) checks."""
        violations: list[str] = []
        books = []
        for market in await self._markets.list_markets(db):
            positions = await self._positions.list_positions(db, market.id)
            violations.extend(verify_market_conservation(market, positions))
            books.append((market, positions))
        escrow = await self._custody.balance_of(db, ESCROW_ACCOUNT_ID)
        violations.extend(verify_escrow_solvency(escrow, books))
        return {
            "ok": len(violations) == 0,
            "markets_checked": len(books),
            "violations": violations,
        }
