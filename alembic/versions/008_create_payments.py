"""008: create payments table

Revision ID: 008
Revises: 007
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "008"
down_revision: Union[str, None] = "007"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE payments (
            id              VARCHAR(64)     PRIMARY KEY,
            buyer_email     VARCHAR(255)    NOT NULL,
            coins           BIGINT          NOT NULL,
            price_cents     BIGINT          NOT NULL,
            transaction_id  VARCHAR(128)    NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_payments_transaction_id UNIQUE (transaction_id),
            CONSTRAINT ck_payments_coins_gt_0 CHECK (coins > 0),
            CONSTRAINT ck_payments_price_gte_0 CHECK (price_cents >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_payments_buyer ON payments (buyer_email, created_at DESC);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS payments CASCADE;")
