"""Engine assembly for the PostgreSQL + Redis deployment and for in-memory use."""

from functools import lru_cache

from config.settings import settings
from src.pm_custody.infrastructure.memory import InMemoryCustody
from src.pm_custody.infrastructure.persistence import AccountCustody
from src.pm_market.domain.clock import BlockClockProtocol
from src.pm_market.infrastructure.block_clock import RedisBlockClock
from src.pm_market.infrastructure.memory import InMemoryMarketRepository
from src.pm_market.infrastructure.persistence import MarketRepository
from src.pm_position.infrastructure.memory import InMemoryPositionRepository
from src.pm_position.infrastructure.persistence import PositionRepository
from src.pm_settlement.domain.models import ProtocolConfig
from src.pm_settlement.engine.engine import SettlementEngine
from src.pm_settlement.infrastructure.memory import InMemoryConfigRepository
from src.pm_settlement.infrastructure.persistence import ConfigRepository


def default_protocol_config() -> ProtocolConfig:
    return ProtocolConfig(
        oracle_id=settings.DEFAULT_ORACLE_ID,
        minimum_stake=settings.DEFAULT_MINIMUM_STAKE,
        fee_percentage=settings.DEFAULT_FEE_PERCENTAGE,
    )


@lru_cache
def get_engine() -> SettlementEngine:
    """FastAPI dependency: one engine (one operation lock) per process."""
    return SettlementEngine(
        admin_id=settings.ADMIN_ID,
        clock=RedisBlockClock(),
        markets=MarketRepository(),
        positions=PositionRepository(),
        config=ConfigRepository(),
        custody=AccountCustody(),
    )


def build_in_memory_engine(
    clock: BlockClockProtocol,
    admin_id: str | None = None,
    config: ProtocolConfig | None = None,
) -> tuple[SettlementEngine, InMemoryCustody]:
    """Engine over InMemorySession tables; returns the custody so callers can fund accounts."""
    custody = InMemoryCustody()
    engine = SettlementEngine(
        admin_id=admin_id or settings.ADMIN_ID,
        clock=clock,
        markets=InMemoryMarketRepository(),
        positions=InMemoryPositionRepository(),
        config=InMemoryConfigRepository(config or default_protocol_config()),
        custody=custody,
    )
    return engine, custody
