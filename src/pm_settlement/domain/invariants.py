"""Conservation checks over markets, positions and the escrow balance.

Per-market:
  C-1: total_up_stake + total_down_stake == sum of position stakes
  C-2: each side total == sum of that side's position stakes
  C-3: sum(payout + fee) over claimed positions <= total staked
  C-4: once every winner has claimed, 0 <= residual < number of winning positions
Global:
  C-G: escrow balance >= everything escrow still owes
       (total stake of unresolved markets + gross shares of unclaimed winners)
"""

import logging

from src.pm_common.enums import Side
from src.pm_market.domain.models import Market
from src.pm_position.domain.models import Position
from src.pm_settlement.domain.payout import compute_claim

logger = logging.getLogger(__name__)


def _paid_out(positions: list[Position]) -> int:
    return sum((p.payout or 0) + (p.fee or 0) for p in positions if p.claimed)


def verify_market_conservation(market: Market, positions: list[Position]) -> list[str]:
    """Return violation strings for one market; empty list when consistent."""
    violations: list[str] = []
    staked = sum(p.stake for p in positions)
    if market.total_stake != staked:
        violations.append(
            f"C-1 violated: market={market.id} totals={market.total_stake} "
            f"!= position stakes={staked}"
        )

    for side in (Side.UP, Side.DOWN):
        side_sum = sum(p.stake for p in positions if p.side == side)
        if market.stake_on(side) != side_sum:
            violations.append(
                f"C-2 violated: market={market.id} {side.value} total="
                f"{market.stake_on(side)} != position stakes={side_sum}"
            )

    paid = _paid_out(positions)
    if paid > staked:
        violations.append(
            f"C-3 violated: market={market.id} paid out {paid} > staked {staked}"
        )

    winning_side = market.winning_side
    if winning_side is not None:
        winners = [p for p in positions if p.side == winning_side]
        if winners and all(p.claimed for p in winners):
            residual = staked - paid
            if not (0 <= residual < len(winners)):
                violations.append(
                    f"C-4 violated: market={market.id} residual={residual} "
                    f"outside [0, {len(winners)})"
                )

    for msg in violations:
        logger.error(msg)
    return violations


def outstanding_obligation(market: Market, positions: list[Position]) -> int:
    """Value escrow still owes for this market (fee legs included)."""
    winning_side = market.winning_side
    if winning_side is None:
        return market.total_stake
    owed = 0
    for p in positions:
        if p.side == winning_side and not p.claimed:
            # fee_percentage 0: gross share is what leaves escrow across both legs
            owed += compute_claim(
                p.stake, market.total_stake, market.stake_on(winning_side), 0
            ).gross_share
    return owed


def verify_escrow_solvency(
    escrow_balance: int, books: list[tuple[Market, list[Position]]]
) -> list[str]:
    """Check C-G across every market. Returns list of violation strings."""
    violations: list[str] = []
    owed = sum(outstanding_obligation(m, ps) for m, ps in books)
    if escrow_balance < owed:
        msg = f"C-G violated: escrow balance {escrow_balance} < outstanding obligations {owed}"
        violations.append(msg)
        logger.error(msg)
    else:
        logger.debug("Escrow solvent: balance=%d, owed=%d", escrow_balance, owed)
    return violations
