from unittest.mock import AsyncMock, MagicMock

import pytest

from src.pm_common.errors import InternalError
from src.pm_settlement.domain.models import ProtocolConfig
from src.pm_settlement.infrastructure.persistence import ConfigRepository


def _config_row(oracle_id: str = "ORACLE", minimum_stake: int = 1_000_000, fee: int = 2):
    row = MagicMock()
    row.oracle_id = oracle_id
    row.minimum_stake = minimum_stake
    row.fee_percentage = fee
    return row


def _db_returning(row) -> MagicMock:
    result = MagicMock()
    result.fetchone.return_value = row
    db = MagicMock()
    db.execute = AsyncMock(return_value=result)
    return db


class TestConfigRepository:
    @pytest.mark.asyncio
    async def test_get_config(self) -> None:
        db = _db_returning(_config_row())
        config = await ConfigRepository().get_config(db)
        assert config == ProtocolConfig("ORACLE", 1_000_000, 2)

    @pytest.mark.asyncio
    async def test_get_config_for_update(self) -> None:
        db = _db_returning(_config_row())
        await ConfigRepository().get_config(db, for_update=True)
        assert "FOR UPDATE" in str(db.execute.call_args.args[0])

    @pytest.mark.asyncio
    async def test_missing_row(self) -> None:
        with pytest.raises(InternalError):
            await ConfigRepository().get_config(_db_returning(None))

    @pytest.mark.asyncio
    async def test_save_config(self) -> None:
        db = _db_returning(_config_row(fee=5))
        saved = await ConfigRepository().save_config(db, ProtocolConfig("ORACLE", 1_000_000, 5))
        assert saved.fee_percentage == 5
        assert db.execute.call_args.args[1]["fee_percentage"] == 5
