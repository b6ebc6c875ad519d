"""002: create users table

Revision ID: 002
Revises: 001
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE users (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            email           VARCHAR(255)    NOT NULL,
            name            VARCHAR(128)    NOT NULL,
            photo_url       VARCHAR(1024),
            role            VARCHAR(16)     NOT NULL,
            coins           BIGINT          NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_users_email       UNIQUE (email),
            CONSTRAINT ck_users_email_lower CHECK (email = lower(email)),
            CONSTRAINT ck_users_role        CHECK (role IN ('admin', 'buyer', 'worker')),
            CONSTRAINT ck_users_coins_gte_0 CHECK (coins >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_users_role_coins ON users (role, coins DESC);")
    op.execute("""
        CREATE TRIGGER trg_users_updated_at
            BEFORE UPDATE ON users
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE users IS 'User directory; coins is written only by the ledger store';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS users CASCADE;")
