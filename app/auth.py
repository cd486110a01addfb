"""Session token issuing and decoding (HS256 JWT, 24 hour lifetime)."""

from datetime import datetime, timedelta, timezone

import jwt

from app.errors import SigningError

ALGORITHM = "HS256"
TOKEN_EXPIRY_HOURS = 24


def create_token(user: dict, *, secret: str) -> str:
    """Sign a session token for a local user row.

    The claims mirror what the front-end reads: ``id``, ``role``, ``name``,
    ``color`` and ``picture``.  Raises :class:`SigningError` if *secret* is
    empty or the payload cannot be encoded.
    """
    if not secret:
        raise SigningError("Session signing secret is not configured")

    now = datetime.now(timezone.utc)
    payload = {
        "id": user["id"],
        "role": user["role"],
        "name": user.get("name") or "",
        "color": user["color"],
        "picture": user.get("picture") or "",
        "iat": now,
        "exp": now + timedelta(hours=TOKEN_EXPIRY_HOURS),
    }
    try:
        return jwt.encode(payload, secret, algorithm=ALGORITHM)
    except (jwt.PyJWTError, TypeError) as exc:
        raise SigningError(f"Failed to sign session token: {exc}") from exc


def decode_token(token: str, *, secret: str) -> dict:
    """Decode and validate a session token. Raises jwt.PyJWTError on failure."""
    return jwt.decode(
        token,
        secret,
        algorithms=[ALGORITHM],
        options={"require": ["exp", "iat", "id"]},
    )
