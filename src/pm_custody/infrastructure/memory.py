"""InMemoryCustody — CustodyProtocol over InMemorySession tables.

fund() stands in for the external deposit path so tests can give
participants a balance before they stake. A deposit is its own committed
unit of work, so a later rollback never takes it back.
"""

from src.pm_common.enums import LedgerEntryType
from src.pm_common.errors import InsufficientBalanceError, InvalidParameterError
from src.pm_common.memory_store import InMemorySession
from src.pm_custody.domain.models import LedgerEntry


class InMemoryCustody:
    async def balance_of(self, db: InMemorySession, account_id: str) -> int:
        return db.tables.accounts.get(account_id, 0)

    async def fund(self, db: InMemorySession, account_id: str, amount: int) -> None:
        if amount <= 0:
            raise InvalidParameterError(f"fund amount must be positive, got {amount}")
        db.tables.accounts[account_id] = db.tables.accounts.get(account_id, 0) + amount
        await db.commit()

    async def transfer(
        self,
        db: InMemorySession,
        from_account: str,
        to_account: str,
        amount: int,
        entry_type: LedgerEntryType,
        market_id: int | None = None,
    ) -> None:
        if amount <= 0:
            raise InvalidParameterError(f"transfer amount must be positive, got {amount}")
        accounts = db.tables.accounts
        available = accounts.get(from_account, 0)
        if available < amount:
            raise InsufficientBalanceError(amount, available)

        accounts[from_account] = available - amount
        accounts[to_account] = accounts.get(to_account, 0) + amount

        reference_type = "MARKET" if market_id is not None else None
        reference_id = str(market_id) if market_id is not None else None
        entries = db.tables.ledger_entries
        for account_id, signed in ((from_account, -amount), (to_account, amount)):
            entries.append(
                LedgerEntry(
                    id=len(entries) + 1,
                    account_id=account_id,
                    entry_type=entry_type.value,
                    amount=signed,
                    balance_after=accounts[account_id],
                    reference_type=reference_type,
                    reference_id=reference_id,
                )
            )

    async def list_entries(
        self, db: InMemorySession, market_id: int | None = None
    ) -> list[LedgerEntry]:
        if market_id is None:
            return list(db.tables.ledger_entries)
        return [
            e
            for e in db.tables.ledger_entries
            if e.reference_type == "MARKET" and e.reference_id == str(market_id)
        ]
