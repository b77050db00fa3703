"""SettlementEngine — serialized orchestrator for the market lifecycle and claims.

Every state-changing operation:
  1. takes the engine lock (one operation at a time, total order),
  2. reads the current block once,
  3. checks every precondition before any write,
  4. moves value through custody, then writes the ledgers,
  5. commits; any exception rolls the whole operation back.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from src.pm_common.enums import LedgerEntryType, MarketPhase, Side
from src.pm_common.errors import (
    AlreadyClaimedError,
    DuplicatePositionError,
    InsufficientBalanceError,
    InvalidParameterError,
    InvalidPredictionError,
    MarketClosedError,
    MarketEndedError,
    MarketNotFoundError,
    MarketNotStartedError,
    PositionNotFoundError,
    UnauthorizedError,
)
from src.pm_custody.domain.models import ESCROW_ACCOUNT_ID
from src.pm_custody.domain.repository import CustodyProtocol
from src.pm_market.domain.clock import BlockClockProtocol
from src.pm_market.domain.models import Market
from src.pm_market.domain.repository import MarketRepositoryProtocol
from src.pm_position.domain.models import Position, parse_side
from src.pm_position.domain.repository import PositionRepositoryProtocol
from src.pm_settlement.domain.payout import compute_claim
from src.pm_settlement.domain.repository import ConfigRepositoryProtocol

logger = logging.getLogger(__name__)


class SettlementEngine:
    def __init__(
        self,
        admin_id: str,
        clock: BlockClockProtocol,
        markets: MarketRepositoryProtocol,
        positions: PositionRepositoryProtocol,
        config: ConfigRepositoryProtocol,
        custody: CustodyProtocol,
        escrow_account: str = ESCROW_ACCOUNT_ID,
    ) -> None:
        self._admin_id = admin_id
        self._clock = clock
        self._markets = markets
        self._positions = positions
        self._config = config
        self._custody = custody
        self._escrow = escrow_account
        self._lock = asyncio.Lock()

    @property
    def admin_id(self) -> str:
        return self._admin_id

    @asynccontextmanager
    async def _operation(self, db: Any) -> AsyncIterator[None]:
        async with self._lock:
            try:
                yield
                await db.commit()
            except Exception:
                await db.rollback()
                raise

    def _require_admin(self, caller: str) -> None:
        if caller != self._admin_id:
            raise UnauthorizedError(caller, "administrator")

    # ------------------------------------------------------------------
    # Market lifecycle
    # ------------------------------------------------------------------

    async def create_market(
        self, db: Any, caller: str, start_price: int, start_block: int, end_block: int
    ) -> int:
        async with self._operation(db):
            self._require_admin(caller)
            if start_price <= 0:
                raise InvalidParameterError(f"start_price must be positive, got {start_price}")
            if start_block < 0:
                raise InvalidParameterError(f"start_block must be >= 0, got {start_block}")
            if end_block <= start_block:
                raise InvalidParameterError(
                    f"end_block {end_block} must be greater than start_block {start_block}"
                )
            market_id = await self._markets.next_market_id(db)
            await self._markets.insert_market(
                db,
                Market(
                    id=market_id,
                    start_price=start_price,
                    start_block=start_block,
                    end_block=end_block,
                ),
            )
        logger.info(
            "Market created: id=%d start_price=%d window=[%d, %d)",
            market_id, start_price, start_block, end_block,
        )
        return market_id

    async def make_prediction(
        self, db: Any, caller: str, market_id: int, side: Side | str, stake: int
    ) -> bool:
        async with self._operation(db):
            if caller == self._escrow:
                raise UnauthorizedError(caller, "participant")
            block = await self._clock.current_block()
            market = await self._markets.get_market(db, market_id, for_update=True)
            if market is None:
                raise MarketNotFoundError(market_id)
            phase = market.phase_at(block)
            if phase == MarketPhase.PENDING:
                raise MarketNotStartedError(market_id)
            if phase != MarketPhase.OPEN:
                raise MarketEndedError(market_id)

            chosen = parse_side(side)
            config = await self._config.get_config(db)
            if stake <= 0 or stake < config.minimum_stake:
                raise InvalidPredictionError(
                    f"stake {stake} is below the minimum {config.minimum_stake}"
                )
            # One position per participant per market: a second stake would
            # otherwise inflate the side totals past the position record.
            if await self._positions.get_position(db, market_id, caller) is not None:
                raise DuplicatePositionError(market_id, caller)
            available = await self._custody.balance_of(db, caller)
            if available < stake:
                raise InsufficientBalanceError(stake, available)

            await self._custody.transfer(
                db, caller, self._escrow, stake, LedgerEntryType.STAKE, market_id
            )
            await self._positions.add_position(
                db,
                Position(
                    market_id=market_id,
                    participant_id=caller,
                    side=chosen,
                    stake=stake,
                    created_block=block,
                ),
            )
            market.add_stake(chosen, stake)
            await self._markets.update_market(db, market)
        logger.info(
            "Stake admitted: market=%d participant=%s side=%s stake=%d block=%d",
            market_id, caller, chosen.value, stake, block,
        )
        return True

    async def resolve_market(
        self, db: Any, caller: str, market_id: int, end_price: int
    ) -> bool:
        async with self._operation(db):
            config = await self._config.get_config(db)
            if caller != config.oracle_id:
                raise UnauthorizedError(caller, "oracle")
            if end_price <= 0:
                raise InvalidParameterError(f"end_price must be positive, got {end_price}")
            market = await self._markets.get_market(db, market_id, for_update=True)
            if market is None:
                raise MarketNotFoundError(market_id)
            block = await self._clock.current_block()
            market.resolve(end_price, block)
            await self._markets.update_market(db, market)
        logger.info(
            "Market resolved: id=%d start_price=%d end_price=%d winner=%s block=%d",
            market_id, market.start_price, end_price, market.winning_side.value, block,
        )
        return True

    async def claim_winnings(self, db: Any, caller: str, market_id: int) -> int:
        async with self._operation(db):
            market = await self._markets.get_market(db, market_id, for_update=True)
            if market is None:
                raise MarketNotFoundError(market_id)
            if not market.resolved:
                raise MarketClosedError(market_id)
            position = await self._positions.get_position(
                db, market_id, caller, for_update=True
            )
            if position is None:
                raise PositionNotFoundError(market_id, caller)
            if position.claimed:
                raise AlreadyClaimedError(market_id, caller)
            winning_side = market.winning_side
            if position.side != winning_side:
                raise InvalidPredictionError(
                    f"{position.side.value} position lost; winning side is {winning_side.value}"
                )

            config = await self._config.get_config(db)
            breakdown = compute_claim(
                position.stake,
                market.total_stake,
                market.stake_on(winning_side),
                config.fee_percentage,
            )
            if breakdown.payout > 0:
                await self._custody.transfer(
                    db, self._escrow, caller, breakdown.payout,
                    LedgerEntryType.PAYOUT, market_id,
                )
            if breakdown.fee > 0:
                await self._custody.transfer(
                    db, self._escrow, self._admin_id, breakdown.fee,
                    LedgerEntryType.FEE, market_id,
                )
            position.mark_claimed(breakdown.payout, breakdown.fee)
            await self._positions.save_position(db, position)
        logger.info(
            "Winnings claimed: market=%d participant=%s gross=%d fee=%d payout=%d",
            market_id, caller, breakdown.gross_share, breakdown.fee, breakdown.payout,
        )
        return breakdown.payout

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    async def set_oracle_id(self, db: Any, caller: str, oracle_id: str) -> bool:
        async with self._operation(db):
            self._require_admin(caller)
            if not oracle_id or not oracle_id.strip():
                raise InvalidParameterError("oracle_id must be non-empty")
            config = await self._config.get_config(db, for_update=True)
            config.oracle_id = oracle_id
            await self._config.save_config(db, config)
        logger.info("Oracle changed to %s", oracle_id)
        return True

    async def set_minimum_stake(self, db: Any, caller: str, minimum_stake: int) -> bool:
        async with self._operation(db):
            self._require_admin(caller)
            if minimum_stake <= 0:
                raise InvalidParameterError(
                    f"minimum_stake must be positive, got {minimum_stake}"
                )
            config = await self._config.get_config(db, for_update=True)
            config.minimum_stake = minimum_stake
            await self._config.save_config(db, config)
        logger.info("Minimum stake set to %d", minimum_stake)
        return True

    async def set_fee_percentage(self, db: Any, caller: str, fee_percentage: int) -> bool:
        async with self._operation(db):
            self._require_admin(caller)
            if not (0 <= fee_percentage <= 100):
                raise InvalidParameterError(
                    f"fee_percentage must be between 0 and 100, got {fee_percentage}"
                )
            config = await self._config.get_config(db, for_update=True)
            config.fee_percentage = fee_percentage
            await self._config.save_config(db, config)
        logger.info("Fee percentage set to %d", fee_percentage)
        return True

    async def withdraw_fees(self, db: Any, caller: str, amount: int) -> int:
        async with self._operation(db):
            self._require_admin(caller)
            if amount <= 0:
                raise InvalidParameterError(f"amount must be positive, got {amount}")
            balance = await self._custody.balance_of(db, self._escrow)
            if amount > balance:
                raise InsufficientBalanceError(amount, balance)
            await self._custody.transfer(
                db, self._escrow, self._admin_id, amount, LedgerEntryType.FEE_WITHDRAWAL
            )
        logger.info("Fees withdrawn: amount=%d escrow_before=%d", amount, balance)
        return amount

    # ------------------------------------------------------------------
    # Read accessors (no lock, no commit)
    # ------------------------------------------------------------------

    async def get_market(self, db: Any, market_id: int) -> Market | None:
        return await self._markets.get_market(db, market_id)

    async def get_phase(self, db: Any, market_id: int) -> MarketPhase:
        market = await self._markets.get_market(db, market_id)
        if market is None:
            raise MarketNotFoundError(market_id)
        return market.phase_at(await self._clock.current_block())

    async def get_position(
        self, db: Any, market_id: int, participant_id: str
    ) -> Position | None:
        return await self._positions.get_position(db, market_id, participant_id)

    async def get_contract_balance(self, db: Any) -> int:
        return await self._custody.balance_of(db, self._escrow)

    async def get_market_count(self, db: Any) -> int:
        return await self._markets.count_markets(db)

    async def get_oracle_id(self, db: Any) -> str:
        return (await self._config.get_config(db)).oracle_id

    async def get_minimum_stake(self, db: Any) -> int:
        return (await self._config.get_config(db)).minimum_stake

    async def get_fee_percentage(self, db: Any) -> int:
        return (await self._config.get_config(db)).fee_percentage

    async def current_block(self) -> int:
        return await self._clock.current_block()
