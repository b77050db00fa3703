"""Domain models for pm_position — one Position per (market, participant)."""

from dataclasses import dataclass

from src.pm_common.enums import PositionStatus, Side
from src.pm_common.errors import AlreadyClaimedError, InvalidPredictionError


def parse_side(value: Side | str) -> Side:
    """Boundary parser: only the two Side variants get past this point."""
    if isinstance(value, Side):
        return value
    try:
        return Side(str(value).strip().upper())
    except ValueError:
        raise InvalidPredictionError(f"side must be UP or DOWN, got {value!r}") from None


@dataclass
class Position:
    market_id: int
    participant_id: str
    side: Side
    stake: int
    created_block: int
    status: PositionStatus = PositionStatus.OPEN
    payout: int | None = None   # set at claim, net of fee
    fee: int | None = None      # set at claim

    @property
    def claimed(self) -> bool:
        return self.status == PositionStatus.CLAIMED

    def mark_claimed(self, payout: int, fee: int) -> None:
        """OPEN -> CLAIMED, exactly once."""
        if self.claimed:
            raise AlreadyClaimedError(self.market_id, self.participant_id)
        self.payout = payout
        self.fee = fee
        self.status = PositionStatus.CLAIMED
