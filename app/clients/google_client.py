"""Google OAuth client -- authorization URL, code exchange and userinfo."""

import logging
from dataclasses import dataclass
from urllib.parse import urlencode

import httpx

from app.errors import ProfileFetchError, TokenExchangeError, UnverifiedEmailError

logger = logging.getLogger(__name__)

GOOGLE_OAUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"


@dataclass(frozen=True)
class GoogleUser:
    """Profile returned by the userinfo endpoint (only verified ones escape)."""

    sub: str
    email: str
    email_verified: bool
    name: str | None = None
    given_name: str | None = None
    family_name: str | None = None
    picture: str | None = None

    @classmethod
    def from_userinfo(cls, data: dict) -> "GoogleUser":
        return cls(
            sub=str(data["sub"]),
            email=data["email"],
            email_verified=data.get("email_verified") in (True, "true"),
            name=data.get("name"),
            given_name=data.get("given_name"),
            family_name=data.get("family_name"),
            picture=data.get("picture"),
        )


# ── Shared HTTP client (connection pooling) ─────────────────────────────────

_client: httpx.AsyncClient | None = None


def _get_client() -> httpx.AsyncClient:
    """Return (or create) the shared httpx client for Google calls."""
    global _client
    if _client is None:
        _client = httpx.AsyncClient()
    return _client


async def close_client() -> None:
    """Close the shared HTTP client.  Called during app shutdown."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


# ── OAuth ────────────────────────────────────────────────────────────────────


def build_authorization_url(client_id: str, redirect_uri: str, scope: str) -> str:
    """Return the Google consent-screen URL that starts the code flow."""
    params = urlencode({
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "response_type": "code",
        "scope": scope,
    })
    return f"{GOOGLE_OAUTH_URL}?{params}"


async def exchange_code_for_token(
    code: str,
    client_id: str,
    client_secret: str,
    redirect_uri: str,
) -> str:
    """Exchange an OAuth authorization code for an access token.

    Network failures, error statuses, unparsable bodies and bodies without
    an ``access_token`` all raise :class:`TokenExchangeError`.
    """
    client = _get_client()
    try:
        response = await client.post(
            GOOGLE_TOKEN_URL,
            data={
                "code": code,
                "client_id": client_id,
                "client_secret": client_secret,
                "redirect_uri": redirect_uri,
                "grant_type": "authorization_code",
            },
            headers={"Accept": "application/json"},
        )
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise TokenExchangeError(f"Google token exchange failed: {exc}") from exc

    token = data.get("access_token") if isinstance(data, dict) else None
    if not token:
        error = "Unknown error"
        if isinstance(data, dict):
            error = data.get("error_description", data.get("error", error))
        raise TokenExchangeError(f"Google OAuth error: {error}")
    logger.debug("Google token exchange succeeded (scope=%s)", data.get("scope", "-"))
    return token


async def get_google_user(access_token: str) -> GoogleUser:
    """Fetch the authenticated Google profile.

    Raises :class:`UnverifiedEmailError` unless Google vouches for the
    email address.
    """
    client = _get_client()
    try:
        response = await client.get(
            GOOGLE_USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        response.raise_for_status()
        data = response.json()
        user = GoogleUser.from_userinfo(data)
    except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
        raise ProfileFetchError(f"Google userinfo request failed: {exc!r}") from exc

    if not user.email_verified:
        raise UnverifiedEmailError(f"Email not verified for Google account {user.sub}")
    return user
