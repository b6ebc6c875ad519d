"""007: create notifications table

Revision ID: 007
Revises: 006
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE notifications (
            id              VARCHAR(64)     PRIMARY KEY,
            to_email        VARCHAR(255)    NOT NULL,
            message         VARCHAR(1000)   NOT NULL,
            action_route    VARCHAR(255)    NOT NULL,
            is_read         BOOLEAN         NOT NULL DEFAULT FALSE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute(
        "CREATE INDEX idx_notifications_recipient ON notifications (to_email, created_at DESC);"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS notifications CASCADE;")
