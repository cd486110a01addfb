"""Authentication router -- Google OAuth sign-in start and callback."""

import logging

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse, RedirectResponse

from app.clients.google_client import build_authorization_url
from app.config import settings
from app.errors import AuthFlowError
from app.services.auth_service import handle_google_callback

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

_GENERIC_FAILURE = "Something went wrong"


def _callback_error_response(exc: Exception) -> JSONResponse:
    """Map a callback failure onto the client-facing response.

    Only the error's ``public_message`` is ever sent, and only in typed mode.
    """
    if settings.CALLBACK_ERROR_MODE == "typed" and isinstance(exc, AuthFlowError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.public_message},
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": _GENERIC_FAILURE},
    )


@router.get("/google")
async def google_oauth_redirect() -> RedirectResponse:
    """Send the browser to Google's consent screen."""
    url = build_authorization_url(
        client_id=settings.GOOGLE_CLIENT_ID,
        redirect_uri=settings.GOOGLE_REDIRECT_URI,
        scope=settings.GOOGLE_SCOPES,
    )
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


@router.get(
    "/google/callback",
    responses={
        302: {"description": "Redirects to the client with the JWT as `google_token`."},
        400: {"description": "Missing code (typed error mode only)."},
        500: {"description": "Any failure during the OAuth process."},
    },
)
async def google_callback(
    code: str | None = Query(
        default=None,
        description="Authorization code returned from Google after user consents.",
    ),
):
    """Handle the Google OAuth callback -- exchange the code for a session JWT.

    Finds or creates the local user, then redirects to the front end with
    the token as the ``google_token`` query parameter.
    """
    try:
        redirect_url = await handle_google_callback(code)
    except Exception as exc:
        logger.error("Google callback failed: %s", exc, exc_info=exc)
        return _callback_error_response(exc)

    return RedirectResponse(redirect_url, status_code=status.HTTP_302_FOUND)
