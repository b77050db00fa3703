"""Pydantic schemas for pm_market API requests and responses.

Request models only check types; range checks (positive prices, window
ordering) live in the Settlement Engine so every caller gets the same
error codes.
"""

from pydantic import BaseModel

from src.pm_common.enums import MarketPhase
from src.pm_market.domain.models import Market

# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class CreateMarketRequest(BaseModel):
    start_price: int
    start_block: int
    end_block: int


class ResolveMarketRequest(BaseModel):
    end_price: int


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class CreateMarketResponse(BaseModel):
    market_id: int


class MarketCountResponse(BaseModel):
    market_count: int


class MarketDetail(BaseModel):
    id: int
    start_price: int
    end_price: int | None
    total_up_stake: int
    total_down_stake: int
    total_stake: int
    start_block: int
    end_block: int
    resolved: bool
    resolved_block: int | None
    winning_side: str | None
    phase: MarketPhase
    current_block: int

    @classmethod
    def from_domain(cls, m: Market, current_block: int) -> "MarketDetail":
        return cls(
            id=m.id,
            start_price=m.start_price,
            end_price=m.end_price,
            total_up_stake=m.total_up_stake,
            total_down_stake=m.total_down_stake,
            total_stake=m.total_stake,
            start_block=m.start_block,
            end_block=m.end_block,
            resolved=m.resolved,
            resolved_block=m.resolved_block,
            winning_side=m.winning_side.value if m.winning_side else None,
            phase=m.phase_at(current_block),
            current_block=current_block,
        )
