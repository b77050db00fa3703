"""Pydantic schemas for prediction, claim and position endpoints."""

from pydantic import BaseModel

from src.pm_common.amounts import amount_to_display
from src.pm_position.domain.models import Position


class PredictionRequest(BaseModel):
    side: str   # parsed by the engine: "UP" | "DOWN"
    stake: int


class PredictionResponse(BaseModel):
    market_id: int
    accepted: bool


class ClaimResponse(BaseModel):
    market_id: int
    payout: int
    payout_display: str

    @classmethod
    def from_payout(cls, market_id: int, payout: int) -> "ClaimResponse":
        return cls(market_id=market_id, payout=payout, payout_display=amount_to_display(payout))


class PositionDetail(BaseModel):
    market_id: int
    participant_id: str
    side: str
    stake: int
    stake_display: str
    created_block: int
    claimed: bool
    payout: int | None
    fee: int | None

    @classmethod
    def from_domain(cls, p: Position) -> "PositionDetail":
        return cls(
            market_id=p.market_id,
            participant_id=p.participant_id,
            side=p.side.value,
            stake=p.stake,
            stake_display=amount_to_display(p.stake),
            created_block=p.created_block,
            claimed=p.claimed,
            payout=p.payout,
            fee=p.fee,
        )
