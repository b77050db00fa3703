"""AccountCustody — PostgreSQL implementation of CustodyProtocol.

Balance mutations use atomic UPDATE ... RETURNING. A result of 0 rows on the
debit leg means the source account cannot cover the amount.

Transaction ownership: the CALLER commits or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.enums import LedgerEntryType
from src.pm_common.errors import InsufficientBalanceError, InvalidParameterError
from src.pm_custody.domain.models import LedgerEntry

_GET_BALANCE_SQL = text("SELECT balance FROM accounts WHERE account_id = :account_id")

_DEBIT_SQL = text("""
    UPDATE accounts
    SET balance = balance - :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE account_id = :account_id AND balance >= :amount
    RETURNING balance
""")

_CREDIT_SQL = text("""
    INSERT INTO accounts (account_id, balance)
    VALUES (:account_id, :amount)
    ON CONFLICT (account_id) DO UPDATE
        SET balance = accounts.balance + EXCLUDED.balance,
            version = accounts.version + 1,
            updated_at = NOW()
    RETURNING balance
""")

_INSERT_LEDGER_SQL = text("""
    INSERT INTO ledger_entries
        (account_id, entry_type, amount, balance_after, reference_type, reference_id)
    VALUES
        (:account_id, :entry_type, :amount, :balance_after, :reference_type, :reference_id)
""")

_LIST_LEDGER_SQL = text("""
    SELECT id, account_id, entry_type, amount, balance_after,
           reference_type, reference_id
    FROM ledger_entries
    WHERE (CAST(:reference_id AS TEXT) IS NULL
           OR (reference_type = 'MARKET' AND reference_id = CAST(:reference_id AS TEXT)))
    ORDER BY id
""")


def _row_to_entry(row: object) -> LedgerEntry:
    return LedgerEntry(
        id=row.id,  # type: ignore[attr-defined]
        account_id=row.account_id,  # type: ignore[attr-defined]
        entry_type=row.entry_type,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        balance_after=row.balance_after,  # type: ignore[attr-defined]
        reference_type=row.reference_type,  # type: ignore[attr-defined]
        reference_id=row.reference_id,  # type: ignore[attr-defined]
    )


class AccountCustody:
    async def balance_of(self, db: AsyncSession, account_id: str) -> int:
        balance = (
            await db.execute(_GET_BALANCE_SQL, {"account_id": account_id})
        ).scalar_one_or_none()
        return int(balance or 0)

    async def transfer(
        self,
        db: AsyncSession,
        from_account: str,
        to_account: str,
        amount: int,
        entry_type: LedgerEntryType,
        market_id: int | None = None,
    ) -> None:
        if amount <= 0:
            raise InvalidParameterError(f"transfer amount must be positive, got {amount}")

        row = (
            await db.execute(_DEBIT_SQL, {"account_id": from_account, "amount": amount})
        ).fetchone()
        if row is None:
            available = await self.balance_of(db, from_account)
            raise InsufficientBalanceError(amount, available)
        from_balance = int(row.balance)

        to_balance = int(
            (
                await db.execute(_CREDIT_SQL, {"account_id": to_account, "amount": amount})
            ).scalar_one()
        )

        reference_type = "MARKET" if market_id is not None else None
        reference_id = str(market_id) if market_id is not None else None
        for account_id, signed, balance_after in (
            (from_account, -amount, from_balance),
            (to_account, amount, to_balance),
        ):
            await db.execute(
                _INSERT_LEDGER_SQL,
                {
                    "account_id": account_id,
                    "entry_type": entry_type.value,
                    "amount": signed,
                    "balance_after": balance_after,
                    "reference_type": reference_type,
                    "reference_id": reference_id,
                },
            )

    async def list_entries(
        self, db: AsyncSession, market_id: int | None = None
    ) -> list[LedgerEntry]:
        reference_id = str(market_id) if market_id is not None else None
        result = await db.execute(_LIST_LEDGER_SQL, {"reference_id": reference_id})
        return [_row_to_entry(row) for row in result.fetchall()]
