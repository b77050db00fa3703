"""Shared test fixtures.

Every test gets its own InMemorySession and engine, so ledgers never leak
between test cases.
"""

import os

# Settings() requires JWT_SECRET; set it before anything imports config.settings
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")

import pytest  # noqa: E402

from src.pm_common.memory_store import InMemorySession  # noqa: E402
from src.pm_custody.infrastructure.memory import InMemoryCustody  # noqa: E402
from src.pm_market.domain.clock import ManualBlockClock  # noqa: E402
from src.pm_settlement.domain.models import ProtocolConfig  # noqa: E402
from src.pm_settlement.engine.engine import SettlementEngine  # noqa: E402
from src.pm_settlement.engine.factory import build_in_memory_engine  # noqa: E402


@pytest.fixture
def clock() -> ManualBlockClock:
    return ManualBlockClock(0)


@pytest.fixture
def db() -> InMemorySession:
    return InMemorySession()


@pytest.fixture
def engine_and_custody(
    clock: ManualBlockClock,
) -> tuple[SettlementEngine, InMemoryCustody]:
    return build_in_memory_engine(
        clock,
        admin_id="ADMIN",
        config=ProtocolConfig(oracle_id="ORACLE", minimum_stake=1_000_000, fee_percentage=2),
    )


@pytest.fixture
def engine(engine_and_custody: tuple[SettlementEngine, InMemoryCustody]) -> SettlementEngine:
    return engine_and_custody[0]


@pytest.fixture
def custody(engine_and_custody: tuple[SettlementEngine, InMemoryCustody]) -> InMemoryCustody:
    return engine_and_custody[1]
