"""003: create markets table

Revision ID: 003
Revises: 002
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE markets (
            id                  BIGINT      PRIMARY KEY,
            start_price         BIGINT      NOT NULL,
            end_price           BIGINT,
            total_up_stake      BIGINT      NOT NULL DEFAULT 0,
            total_down_stake    BIGINT      NOT NULL DEFAULT 0,
            start_block         BIGINT      NOT NULL,
            end_block           BIGINT      NOT NULL,
            status              VARCHAR(20) NOT NULL DEFAULT 'UNRESOLVED',
            resolved_block      BIGINT,
            created_at          TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_markets_id_gte_0          CHECK (id >= 0),
            CONSTRAINT ck_markets_start_price_gt_0  CHECK (start_price > 0),
            CONSTRAINT ck_markets_up_stake_gte_0    CHECK (total_up_stake >= 0),
            CONSTRAINT ck_markets_down_stake_gte_0  CHECK (total_down_stake >= 0),
            CONSTRAINT ck_markets_window            CHECK (end_block > start_block),
            CONSTRAINT ck_markets_status CHECK (status IN ('UNRESOLVED', 'RESOLVED')),
            CONSTRAINT ck_markets_resolution CHECK (
                (status = 'UNRESOLVED' AND end_price IS NULL AND resolved_block IS NULL)
                OR (status = 'RESOLVED' AND end_price > 0 AND resolved_block >= end_block)
            )
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_markets_updated_at
            BEFORE UPDATE ON markets
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE markets IS 'Binary Up/Down markets — window, stake totals, resolution';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS markets CASCADE;")
