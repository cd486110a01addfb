"""Application configuration loaded from environment variables.

Uses ``pydantic-settings`` for automatic env-var loading, type coercion,
and ``.env`` file support.  Validates required settings on import -- fails
fast if critical vars are missing outside of tests.
"""

VERSION = "0.1.0"

import sys
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


# ---------------------------------------------------------------------------
# Required var names -- checked after instantiation (not during), so tests
# that leave them blank still work.
# ---------------------------------------------------------------------------
_REQUIRED_VARS: list[str] = [
    "DATABASE_URL",
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "GOOGLE_REDIRECT_URI",
    "SECRET_KEY",
    "FRONTEND_REDIRECT_URI",
]


class Settings(BaseSettings):
    """Application settings -- sourced from environment / ``.env`` file.

    Required vars (must be set in production, may be blank in test):
      DATABASE_URL, GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET,
      GOOGLE_REDIRECT_URI, SECRET_KEY, FRONTEND_REDIRECT_URI
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -- required in production (default empty so tests don't fail) --
    DATABASE_URL: str = ""
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""
    GOOGLE_REDIRECT_URI: str = ""
    SECRET_KEY: str = ""
    FRONTEND_REDIRECT_URI: str = ""

    # -- optional with sensible defaults --
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""
    GOOGLE_SCOPES: str = "openid email profile"

    # "generic" answers every callback failure with one opaque 500.
    # "typed" lets each AuthFlowError kind pick its own status and message.
    CALLBACK_ERROR_MODE: Literal["generic", "typed"] = "generic"


def missing_required_settings(cfg: Settings) -> list[str]:
    """Return the names of required settings that are empty on *cfg*."""
    return [v for v in _REQUIRED_VARS if not getattr(cfg, v)]


settings = Settings()


# Validate at import time -- but only when NOT running under pytest.
if "pytest" not in sys.modules:
    _missing = missing_required_settings(settings)
    if _missing:
        print(
            f"[config] FATAL: missing required environment variables: "
            f"{', '.join(_missing)}",
            file=sys.stderr,
        )
        sys.exit(1)
