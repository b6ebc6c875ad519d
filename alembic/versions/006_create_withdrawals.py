"""006: create withdrawals table

Revision ID: 006
Revises: 005
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE withdrawals (
            id                  VARCHAR(64)     PRIMARY KEY,
            worker_email        VARCHAR(255)    NOT NULL,
            worker_name         VARCHAR(128)    NOT NULL,
            withdrawal_coin     BIGINT          NOT NULL,
            withdrawal_amount_cents BIGINT      NOT NULL,
            payment_system      VARCHAR(64)     NOT NULL,
            account_number      VARCHAR(128)    NOT NULL,
            status              VARCHAR(16)     NOT NULL DEFAULT 'pending',
            requested_at        TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            settled_at          TIMESTAMPTZ,
            CONSTRAINT ck_withdrawals_coin_gt_0 CHECK (withdrawal_coin > 0),
            CONSTRAINT ck_withdrawals_amount_gte_0 CHECK (withdrawal_amount_cents >= 0),
            CONSTRAINT ck_withdrawals_status CHECK (
                status IN ('pending', 'approved', 'denied')
            )
        );
    """)
    op.execute("""
        CREATE INDEX idx_withdrawals_pending
        ON withdrawals (requested_at)
        WHERE status = 'pending';
    """)
    op.execute(
        "CREATE INDEX idx_withdrawals_worker ON withdrawals (worker_email, requested_at DESC);"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS withdrawals CASCADE;")
