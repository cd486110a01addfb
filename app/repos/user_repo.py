"""User repository -- database reads and writes for the users table."""

from app.repos.db import get_pool

_USER_COLUMNS = "id, email, name, google_id, role, color, picture, created_at, updated_at"


async def get_user_by_google_id(google_id: str) -> dict | None:
    """Fetch a user by Google subject id. Returns None if not found."""
    pool = await get_pool()
    row = await pool.fetchrow(
        f"SELECT {_USER_COLUMNS} FROM users WHERE google_id = $1",
        google_id,
    )
    return dict(row) if row else None


async def create_user(
    email: str,
    name: str | None,
    google_id: str,
    color: str,
    picture: str,
) -> dict:
    """Insert a user keyed by google_id. Returns the user row as a dict.

    The unique index on ``google_id`` decides concurrent first logins: the
    losing insert does nothing and the winner's row is returned instead.
    """
    pool = await get_pool()
    row = await pool.fetchrow(
        f"""
        INSERT INTO users (email, name, google_id, color, picture)
        VALUES ($1, $2, $3, $4, $5)
        ON CONFLICT (google_id) DO NOTHING
        RETURNING {_USER_COLUMNS}
        """,
        email,
        name,
        google_id,
        color,
        picture,
    )
    if row is None:
        row = await pool.fetchrow(
            f"SELECT {_USER_COLUMNS} FROM users WHERE google_id = $1",
            google_id,
        )
    return dict(row)
