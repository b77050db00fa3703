"""005: create protocol_config table

Revision ID: 005
Revises: 004
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

from config.settings import settings

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE protocol_config (
            id              SMALLINT    PRIMARY KEY DEFAULT 1,
            oracle_id       VARCHAR(64) NOT NULL,
            minimum_stake   BIGINT      NOT NULL,
            fee_percentage  SMALLINT    NOT NULL,
            market_count    BIGINT      NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_protocol_config_single_row  CHECK (id = 1),
            CONSTRAINT ck_protocol_config_min_stake   CHECK (minimum_stake > 0),
            CONSTRAINT ck_protocol_config_fee         CHECK (fee_percentage BETWEEN 0 AND 100),
            CONSTRAINT ck_protocol_config_count_gte_0 CHECK (market_count >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_protocol_config_updated_at
            BEFORE UPDATE ON protocol_config
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    # Seed the single row from settings; market ids start at 0
    op.execute(
        sa.text(
            "INSERT INTO protocol_config (id, oracle_id, minimum_stake, fee_percentage)"
            " VALUES (1, :oracle_id, :minimum_stake, :fee_percentage)"
        ).bindparams(
            oracle_id=settings.DEFAULT_ORACLE_ID,
            minimum_stake=settings.DEFAULT_MINIMUM_STAKE,
            fee_percentage=settings.DEFAULT_FEE_PERCENTAGE,
        )
    )
    op.execute("COMMENT ON TABLE protocol_config IS 'Single row: oracle, minimum stake, fee, market counter';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS protocol_config CASCADE;")
