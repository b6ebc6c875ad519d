"""005: create submissions table

Revision ID: 005
Revises: 004
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE submissions (
            id                  VARCHAR(64)     PRIMARY KEY,
            task_id             VARCHAR(64)     NOT NULL
                                REFERENCES tasks (id) ON DELETE CASCADE,
            task_title          VARCHAR(200)    NOT NULL,
            payable_amount      BIGINT          NOT NULL,
            worker_email        VARCHAR(255)    NOT NULL,
            worker_name         VARCHAR(128)    NOT NULL,
            buyer_email         VARCHAR(255)    NOT NULL,
            buyer_name          VARCHAR(128)    NOT NULL,
            submission_details  TEXT            NOT NULL,
            status              VARCHAR(16)     NOT NULL DEFAULT 'pending',
            submitted_at        TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            reviewed_at         TIMESTAMPTZ,
            CONSTRAINT ck_submissions_status CHECK (
                status IN ('pending', 'approved', 'rejected')
            )
        );
    """)
    op.execute("CREATE INDEX idx_submissions_task_status ON submissions (task_id, status);")
    op.execute(
        "CREATE INDEX idx_submissions_worker ON submissions (worker_email, submitted_at DESC);"
    )
    op.execute("""
        CREATE INDEX idx_submissions_buyer_pending
        ON submissions (buyer_email, submitted_at)
        WHERE status = 'pending';
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS submissions CASCADE;")
