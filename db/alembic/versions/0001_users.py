"""Create the users table.

Revision ID: 0001_users
Revises: None
Create Date: 2026-10-19

``google_id`` is unique: concurrent first logins for the same Google
account resolve to a single row through this index.
"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001_users"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id              BIGSERIAL PRIMARY KEY,
            email           VARCHAR(320) NOT NULL,
            name            VARCHAR(255),
            google_id       VARCHAR(255) NOT NULL,
            role            VARCHAR(20) NOT NULL DEFAULT 'USER',
            color           VARCHAR(7) NOT NULL,
            picture         TEXT NOT NULL DEFAULT '',
            created_at      TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at      TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    """)
    op.execute(
        "CREATE UNIQUE INDEX IF NOT EXISTS idx_users_google_id ON users(google_id)"
    )


def downgrade() -> None:
    op.execute("DROP INDEX IF EXISTS idx_users_google_id")
    op.execute("DROP TABLE IF EXISTS users")
