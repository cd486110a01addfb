"""Auth service -- orchestrates the Google OAuth callback and JWT creation."""

import logging

from app.auth import create_token
from app.clients.google_client import exchange_code_for_token, get_google_user
from app.config import Settings, settings
from app.errors import ValidationError
from app.services.identity_service import find_or_create_user

logger = logging.getLogger(__name__)


def build_frontend_redirect(base_url: str, token: str) -> str:
    """Append the session token to the front-end landing URL."""
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}google_token={token}"


async def handle_google_callback(code: str | None, cfg: Settings = settings) -> str:
    """Process the Google OAuth callback.

    1. Validate the authorization code.
    2. Exchange code for a Google access token.
    3. Fetch the Google profile (verified email only).
    4. Find or create the local user.
    5. Sign a session JWT.

    Returns the front-end URL to redirect the browser to.  Any step raises
    an :class:`~app.errors.AuthFlowError` subclass on failure.
    """
    if not code:
        raise ValidationError("Code is required")

    access_token = await exchange_code_for_token(
        code=code,
        client_id=cfg.GOOGLE_CLIENT_ID,
        client_secret=cfg.GOOGLE_CLIENT_SECRET,
        redirect_uri=cfg.GOOGLE_REDIRECT_URI,
    )
    logger.debug("Google callback: token obtained")

    google_user = await get_google_user(access_token)
    logger.debug("Google callback: profile obtained for google_id=%s", google_user.sub)

    user = await find_or_create_user(google_user)

    token = create_token(user, secret=cfg.SECRET_KEY)
    logger.info("Google sign-in succeeded for user %s", user["id"])

    return build_frontend_redirect(cfg.FRONTEND_REDIRECT_URI, token)
