"""001: create gift_orders table

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Caller and provider strings are opaque and stored unbounded
    op.execute("""
        CREATE TABLE gift_orders (
            id                  UUID            PRIMARY KEY,
            type                VARCHAR(10)     NOT NULL,
            status              VARCHAR(10)     NOT NULL DEFAULT 'pending',
            username            TEXT            NOT NULL,
            recipient_hash      TEXT            NOT NULL,
            quantity            INT,
            months              SMALLINT,
            amount              DOUBLE PRECISION NOT NULL,
            wallet_type         TEXT            NOT NULL,
            tx_hash             TEXT,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            completed_at        TIMESTAMPTZ,
            error_message       TEXT,
            CONSTRAINT ck_gift_orders_type      CHECK (type IN ('star', 'premium')),
            CONSTRAINT ck_gift_orders_status    CHECK (status IN ('pending', 'completed', 'failed')),
            CONSTRAINT ck_gift_orders_months    CHECK (months IS NULL OR months IN (3, 6, 12)),
            CONSTRAINT ck_gift_orders_units     CHECK (
                (type = 'star' AND quantity IS NOT NULL AND months IS NULL) OR
                (type = 'premium' AND months IS NOT NULL AND quantity IS NULL)
            )
        );
    """)
    op.execute("CREATE INDEX idx_gift_orders_username ON gift_orders (username, created_at DESC);")
    op.execute("""
        CREATE INDEX idx_gift_orders_pending
        ON gift_orders (created_at)
        WHERE status = 'pending';
    """)
    op.execute("COMMENT ON TABLE gift_orders IS 'Gift orders placed at iStar; status reconciled by webhook';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS gift_orders CASCADE;")
