"""Identity service -- maps a verified Google profile onto a local user."""

import logging
import random

import asyncpg

from app.clients.google_client import GoogleUser
from app.errors import PersistenceError
from app.repos.user_repo import create_user, get_user_by_google_id

logger = logging.getLogger(__name__)

# Connection-level and server-side failures from the user store.
_STORE_EXCEPTIONS = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
    TimeoutError,
)


def random_color() -> str:
    """Return a random ``#RRGGBB`` avatar colour."""
    return f"#{random.randint(0, 0xFFFFFF):06X}"


async def find_or_create_user(profile: GoogleUser) -> dict:
    """Return the local user for *profile*, creating it on first login.

    Existing users are returned as stored; name and picture are not
    refreshed from the newer profile.
    """
    try:
        user = await get_user_by_google_id(profile.sub)
        if user is not None:
            logger.debug("Resolved existing user %s for google_id=%s", user["id"], profile.sub)
            return user

        user = await create_user(
            email=profile.email,
            name=profile.name,
            google_id=profile.sub,
            color=random_color(),
            picture=profile.picture or "",
        )
    except _STORE_EXCEPTIONS as exc:
        raise PersistenceError(f"User store failure for google_id={profile.sub}: {exc!r}") from exc

    logger.info("Created user %s for google_id=%s", user["id"], profile.sub)
    return user
