"""Custody Protocol — the value-movement collaborator of the Settlement Engine.

Every transfer is all-or-nothing: it either debits and credits in full or
raises (InsufficientBalanceError) without touching either balance. It runs
inside the caller's transaction, so a later failure in the same operation
rolls the transfer back too.
"""

from typing import Any, Protocol

from src.pm_common.enums import LedgerEntryType
from src.pm_custody.domain.models import LedgerEntry


class CustodyProtocol(Protocol):
    async def balance_of(self, db: Any, account_id: str) -> int: ...

    async def transfer(
        self,
        db: Any,
        from_account: str,
        to_account: str,
        amount: int,
        entry_type: LedgerEntryType,
        market_id: int | None = None,
    ) -> None: ...

    async def list_entries(
        self, db: Any, market_id: int | None = None
    ) -> list[LedgerEntry]: ...
