"""Proportional payout arithmetic — integer floor division only.

    gross_share = floor(stake * total_stake / winning_stake)
    fee         = floor(gross_share * fee_percentage / 100)
    payout      = gross_share - fee

Truncation dust stays in escrow; it is never redistributed.
"""

from dataclasses import dataclass

from src.pm_common.amounts import floor_div


@dataclass(frozen=True)
class ClaimBreakdown:
    gross_share: int
    fee: int
    payout: int


def calc_fee(gross_share: int, fee_percentage: int) -> int:
    """Floor division fee: (gross_share x fee_percentage) // 100."""
    if not (0 <= fee_percentage <= 100):
        raise ValueError(f"fee_percentage must be between 0 and 100, got {fee_percentage}")
    return floor_div(gross_share * fee_percentage, 100)


def compute_claim(
    stake: int, total_stake: int, winning_stake: int, fee_percentage: int
) -> ClaimBreakdown:
    """Split one winning position's share of the pool into payout and fee.

    winning_stake always includes the claimant's own stake, so it is never
    zero on a legitimate claim; anything else is a caller bug.
    """
    if stake <= 0:
        raise ValueError(f"stake must be positive, got {stake}")
    if winning_stake < stake:
        raise ValueError(
            f"winning_stake {winning_stake} must include the claimant's stake {stake}"
        )
    if total_stake < winning_stake:
        raise ValueError(
            f"total_stake {total_stake} is smaller than winning_stake {winning_stake}"
        )
    gross_share = floor_div(stake * total_stake, winning_stake)
    fee = calc_fee(gross_share, fee_percentage)
    return ClaimBreakdown(gross_share=gross_share, fee=fee, payout=gross_share - fee)
