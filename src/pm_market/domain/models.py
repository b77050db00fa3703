"""Domain models for pm_market — the Market record and its lifecycle guards.

Phase is derived from the block height; only the one-way status flag is stored.
"""

from dataclasses import dataclass

from src.pm_common.enums import MarketPhase, MarketStatus, Side
from src.pm_common.errors import (
    AlreadyResolvedError,
    InvalidParameterError,
    MarketNotEndedError,
)


@dataclass
class Market:
    id: int
    start_price: int
    start_block: int
    end_block: int
    total_up_stake: int = 0
    total_down_stake: int = 0
    end_price: int | None = None
    status: MarketStatus = MarketStatus.UNRESOLVED
    resolved_block: int | None = None

    @property
    def resolved(self) -> bool:
        return self.status == MarketStatus.RESOLVED

    @property
    def total_stake(self) -> int:
        return self.total_up_stake + self.total_down_stake

    def stake_on(self, side: Side) -> int:
        return self.total_up_stake if side == Side.UP else self.total_down_stake

    def phase_at(self, block: int) -> MarketPhase:
        if self.resolved:
            return MarketPhase.RESOLVED
        if block < self.start_block:
            return MarketPhase.PENDING
        if block < self.end_block:
            return MarketPhase.OPEN
        return MarketPhase.CLOSED

    @property
    def winning_side(self) -> Side | None:
        """UP only on a strict price increase; a tie or a drop resolves DOWN."""
        if not self.resolved or self.end_price is None:
            return None
        return Side.UP if self.end_price > self.start_price else Side.DOWN

    def add_stake(self, side: Side, amount: int) -> None:
        if self.resolved:
            raise AlreadyResolvedError(self.id)  # totals are frozen
        if side == Side.UP:
            self.total_up_stake += amount
        else:
            self.total_down_stake += amount

    def resolve(self, end_price: int, block: int) -> None:
        """UNRESOLVED -> RESOLVED. Irreversible; rejects every other transition."""
        if end_price <= 0:
            raise InvalidParameterError(f"end_price must be positive, got {end_price}")
        if block < self.end_block:
            raise MarketNotEndedError(self.id, self.end_block, block)
        if self.resolved:
            raise AlreadyResolvedError(self.id)
        self.end_price = end_price
        self.resolved_block = block
        self.status = MarketStatus.RESOLVED
