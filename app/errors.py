"""Domain exception hierarchy for the Google sign-in flow.

Each step of the callback raises its own kind so the router boundary can
log precisely what failed, and (in ``typed`` error mode) answer with a
status code that matches the failure instead of a blanket 500.
"""


class AuthFlowError(Exception):
    """Base for all sign-in flow exceptions.

    ``public_message`` is the only text that may reach the client; the
    exception's own message can carry provider or database detail for logs.
    """

    status_code: int = 500
    public_message: str = "Something went wrong"

    def __init__(self, message: str | None = None, *, status_code: int | None = None):
        super().__init__(message or self.public_message)
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AuthFlowError):
    """The callback request is missing its authorization code (400)."""

    status_code = 400
    public_message = "Code is required"


class ProviderError(AuthFlowError):
    """Google answered badly or not at all (502)."""

    status_code = 502
    public_message = "Failed to authenticate with Google"


class TokenExchangeError(ProviderError):
    """The authorization code could not be exchanged for an access token."""


class ProfileFetchError(ProviderError):
    """The userinfo endpoint could not be read."""


class UnverifiedEmailError(AuthFlowError):
    """Google reports the account's email address as unverified (403)."""

    status_code = 403
    public_message = "Email not verified"


class PersistenceError(AuthFlowError):
    """The user store is unavailable or rejected the write (503)."""

    status_code = 503
    public_message = "User store unavailable"


class SigningError(AuthFlowError):
    """The session token could not be issued (500)."""

    public_message = "Could not issue session token"


def format_error_response(
    *,
    error: str,
    detail: object = None,
    request_id: str = "",
) -> dict:
    """Build a structured error response dict.

    Parameters
    ----------
    error : str
        Short error title (e.g. ``"Internal Server Error"``).
    detail : object
        Human-readable detail string or validation error list.
    request_id : str
        The request ID for tracing.

    Returns
    -------
    dict
        ``{"error": ..., "detail": ..., "request_id": ...}``
    """
    return {
        "error": error,
        "detail": detail if detail is not None else error,
        "request_id": request_id,
    }
