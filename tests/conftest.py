"""Shared test fixtures -- reduces boilerplate across test modules.

Provides:
- ``set_test_config`` -- autouse fixture that patches common settings
- ``MOCK_USER`` / ``MOCK_USERINFO`` -- canonical user row and Google profile
- ``test_client`` -- pre-built TestClient against the app
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from app.main import app


def pytest_configure(config):
    """Register custom markers.

    Tests that need a real database should be decorated with
    ``@pytest.mark.integration`` and skipped in CI with
    ``-m 'not integration'``.
    """
    config.addinivalue_line(
        "markers",
        "integration: tests requiring external services (database, cache, etc.)",
    )


# ---------------------------------------------------------------------------
# Canonical test data
# ---------------------------------------------------------------------------

TEST_SECRET = "test-secret-key-for-unit-tests"
FRONTEND_URL = "http://localhost:3000/auth/success"

MOCK_USERINFO: dict = {
    "sub": "g-1",
    "name": "Ann",
    "given_name": "Ann",
    "family_name": "Example",
    "picture": "https://example.com/ann.png",
    "email": "a@b.com",
    "email_verified": True,
}

MOCK_USER: dict = {
    "id": 1,
    "email": "a@b.com",
    "name": "Ann",
    "google_id": "g-1",
    "role": "USER",
    "color": "#3FA7D6",
    "picture": "https://example.com/ann.png",
    "created_at": datetime(2026, 1, 1, tzinfo=timezone.utc),
    "updated_at": datetime(2026, 1, 1, tzinfo=timezone.utc),
}

# ---------------------------------------------------------------------------
# Environment patching
# ---------------------------------------------------------------------------

_SETTINGS_PATCHES: dict[str, str] = {
    "app.config.settings.SECRET_KEY": TEST_SECRET,
    "app.config.settings.GOOGLE_CLIENT_ID": "test-client-id",
    "app.config.settings.GOOGLE_CLIENT_SECRET": "test-client-secret",
    "app.config.settings.GOOGLE_REDIRECT_URI": "http://localhost:8000/auth/google/callback",
    "app.config.settings.FRONTEND_REDIRECT_URI": FRONTEND_URL,
    "app.config.settings.CALLBACK_ERROR_MODE": "generic",
}


@pytest.fixture(autouse=True)
def set_test_config(monkeypatch):
    """Patch application settings for a safe, deterministic test environment."""
    for target, value in _SETTINGS_PATCHES.items():
        monkeypatch.setattr(target, value)


@pytest.fixture
def test_client() -> TestClient:
    """A fresh ``TestClient`` that surfaces 500s as responses."""
    return TestClient(app, raise_server_exceptions=False)
