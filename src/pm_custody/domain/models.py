"""Domain models for pm_custody — balances and the append-only transfer ledger."""

from dataclasses import dataclass

ESCROW_ACCOUNT_ID = "ESCROW"


@dataclass
class LedgerEntry:
    account_id: str
    entry_type: str                  # LedgerEntryType value
    amount: int                      # signed: positive=credit, negative=debit
    balance_after: int
    reference_type: str | None = None
    reference_id: str | None = None
    id: int | None = None            # BIGSERIAL; None until persisted
