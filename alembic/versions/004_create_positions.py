"""004: create positions table

Revision ID: 004
Revises: 003
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE positions (
            id              UUID        PRIMARY KEY DEFAULT gen_random_uuid(),
            market_id       BIGINT      NOT NULL REFERENCES markets (id),
            participant_id  VARCHAR(64) NOT NULL,
            side            VARCHAR(4)  NOT NULL,
            stake           BIGINT      NOT NULL,
            created_block   BIGINT      NOT NULL,
            status          VARCHAR(10) NOT NULL DEFAULT 'OPEN',
            payout          BIGINT,
            fee             BIGINT,
            created_at      TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_positions_market_participant UNIQUE (market_id, participant_id),
            CONSTRAINT ck_positions_side        CHECK (side IN ('UP', 'DOWN')),
            CONSTRAINT ck_positions_stake_gt_0  CHECK (stake > 0),
            CONSTRAINT ck_positions_status      CHECK (status IN ('OPEN', 'CLAIMED')),
            CONSTRAINT ck_positions_claim CHECK (
                (status = 'OPEN' AND payout IS NULL AND fee IS NULL)
                OR (status = 'CLAIMED' AND payout >= 0 AND fee >= 0)
            )
        );
    """)
    op.execute("CREATE INDEX idx_positions_participant ON positions (participant_id);")
    op.execute("""
        CREATE TRIGGER trg_positions_updated_at
            BEFORE UPDATE ON positions
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE positions IS 'One stake per participant per market; OPEN -> CLAIMED once';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS positions CASCADE;")
