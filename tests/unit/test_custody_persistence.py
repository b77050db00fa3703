from unittest.mock import AsyncMock, MagicMock

import pytest

from src.pm_common.enums import LedgerEntryType
from src.pm_common.errors import InsufficientBalanceError, InvalidParameterError
from src.pm_custody.infrastructure.persistence import AccountCustody


def _fetchone_result(row) -> MagicMock:
    result = MagicMock()
    result.fetchone.return_value = row
    return result


def _scalar_result(value) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalar_one.return_value = value
    return result


def _balance_row(balance: int) -> MagicMock:
    row = MagicMock()
    row.balance = balance
    return row


@pytest.fixture
def custody() -> AccountCustody:
    return AccountCustody()


class TestAccountCustody:
    @pytest.mark.asyncio
    async def test_balance_of_missing_account_is_zero(self, custody: AccountCustody) -> None:
        db = MagicMock()
        db.execute = AsyncMock(return_value=_scalar_result(None))
        assert await custody.balance_of(db, "nobody") == 0

    @pytest.mark.asyncio
    async def test_transfer_debits_credits_and_writes_ledger(
        self, custody: AccountCustody
    ) -> None:
        db = MagicMock()
        db.execute = AsyncMock(side_effect=[
            _fetchone_result(_balance_row(9_000_000)),   # debit
            _scalar_result(1_000_000),                   # credit
            MagicMock(),                                 # ledger (from)
            MagicMock(),                                 # ledger (to)
        ])
        await custody.transfer(
            db, "alice", "ESCROW", 1_000_000, LedgerEntryType.STAKE, market_id=0
        )
        assert db.execute.await_count == 4
        from_entry = db.execute.await_args_list[2].args[1]
        to_entry = db.execute.await_args_list[3].args[1]
        assert from_entry["account_id"] == "alice"
        assert from_entry["amount"] == -1_000_000
        assert from_entry["balance_after"] == 9_000_000
        assert from_entry["reference_id"] == "0"
        assert to_entry["account_id"] == "ESCROW"
        assert to_entry["amount"] == 1_000_000
        assert to_entry["entry_type"] == "STAKE"

    @pytest.mark.asyncio
    async def test_failed_debit_raises_with_available(self, custody: AccountCustody) -> None:
        db = MagicMock()
        db.execute = AsyncMock(side_effect=[
            _fetchone_result(None),
            _scalar_result(250),
        ])
        with pytest.raises(InsufficientBalanceError) as exc_info:
            await custody.transfer(db, "alice", "ESCROW", 1_000, LedgerEntryType.STAKE)
        assert "250" in exc_info.value.message
        assert db.execute.await_count == 2

    @pytest.mark.asyncio
    async def test_non_positive_amount_rejected(self, custody: AccountCustody) -> None:
        db = MagicMock()
        db.execute = AsyncMock()
        with pytest.raises(InvalidParameterError):
            await custody.transfer(db, "alice", "ESCROW", 0, LedgerEntryType.STAKE)
        db.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_entries_filters_by_market(self, custody: AccountCustody) -> None:
        row = MagicMock()
        row.id, row.account_id, row.entry_type = 1, "alice", "STAKE"
        row.amount, row.balance_after = -5, 95
        row.reference_type, row.reference_id = "MARKET", "3"
        result = MagicMock()
        result.fetchall.return_value = [row]
        db = MagicMock()
        db.execute = AsyncMock(return_value=result)
        entries = await custody.list_entries(db, market_id=3)
        assert db.execute.call_args.args[1] == {"reference_id": "3"}
        assert entries[0].amount == -5
