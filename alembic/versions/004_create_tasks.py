"""004: create tasks table

Revision ID: 004
Revises: 003
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE tasks (
            id                  VARCHAR(64)     PRIMARY KEY,
            buyer_email         VARCHAR(255)    NOT NULL,
            buyer_name          VARCHAR(128)    NOT NULL,
            title               VARCHAR(200)    NOT NULL,
            detail              TEXT            NOT NULL,
            submission_info     TEXT            NOT NULL DEFAULT '',
            image_url           VARCHAR(1024),
            payable_amount      BIGINT          NOT NULL,
            required_workers    INTEGER         NOT NULL,
            completion_date     DATE            NOT NULL,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_tasks_payable_gt_0 CHECK (payable_amount > 0),
            CONSTRAINT ck_tasks_required_workers_gte_0 CHECK (required_workers >= 0)
        );
    """)
    op.execute("""
        CREATE INDEX idx_tasks_open
        ON tasks (created_at DESC)
        WHERE required_workers > 0;
    """)
    op.execute("CREATE INDEX idx_tasks_buyer ON tasks (buyer_email, completion_date DESC);")
    op.execute("""
        CREATE TRIGGER trg_tasks_updated_at
            BEFORE UPDATE ON tasks
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS tasks CASCADE;")
