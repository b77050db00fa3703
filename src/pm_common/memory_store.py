"""In-memory store — isolated stand-in for the PostgreSQL tables.

InMemorySession exposes the same commit()/rollback() surface that the
Settlement Engine uses on an AsyncSession, so every operation keeps its
all-or-nothing guarantee: rollback() restores the tables to the last commit.
One session per test case gives a fully isolated ledger.
"""

import copy
from dataclasses import dataclass, field
from typing import Any


@dataclass
class MemoryTables:
    markets: dict[int, Any] = field(default_factory=dict)
    positions: dict[tuple[int, str], Any] = field(default_factory=dict)
    accounts: dict[str, int] = field(default_factory=dict)
    ledger_entries: list[Any] = field(default_factory=list)
    config: Any = None
    market_count: int = 0


class InMemorySession:
    def __init__(self, tables: MemoryTables | None = None) -> None:
        self.tables = tables if tables is not None else MemoryTables()
        self._committed = copy.deepcopy(self.tables)

    async def commit(self) -> None:
        self._committed = copy.deepcopy(self.tables)

    async def rollback(self) -> None:
        restored = copy.deepcopy(self._committed)
        self.tables.markets = restored.markets
        self.tables.positions = restored.positions
        self.tables.accounts = restored.accounts
        self.tables.ledger_entries = restored.ledger_entries
        self.tables.config = restored.config
        self.tables.market_count = restored.market_count
