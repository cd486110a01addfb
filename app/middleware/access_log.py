"""HTTP access log middleware -- one structured METRIC line per request.

Records method, path, status code, wall time, the caller's user id (read
from a session JWT if one is presented, no DB call), request ID, and the
error message on 4xx/5xx responses.  Lines go to the ``gauth.access``
logger.
"""

from __future__ import annotations

import json
import logging
import time

import jwt as pyjwt
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.auth import decode_token
from app.config import settings

logger = logging.getLogger("gauth.access")

_SKIP_PREFIXES = ("/health", "/favicon.ico")


class AccessLogMiddleware:
    """ASGI middleware that logs every HTTP request as a METRIC line."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        path: str = scope.get("path", "")
        if scope["type"] != "http" or path.startswith(_SKIP_PREFIXES):
            await self.app(scope, receive, send)
            return

        method: str = scope.get("method", "?")
        user_id = _extract_user_id(scope)
        t0 = time.perf_counter()
        status_code = 0
        error_detail = ""

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code, error_detail
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
            elif message["type"] == "http.response.body" and status_code >= 400:
                error_detail = _error_from_body(message.get("body", b""))
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception:
            if status_code == 0:
                status_code = 500
            raise
        finally:
            request_id = scope.get("state", {}).get("request_id", "-")
            _emit(method, path, status_code, (time.perf_counter() - t0) * 1000,
                  user_id, request_id, error_detail)


def _extract_user_id(scope: Scope) -> str:
    """Return the ``id`` claim of a bearer session token, or ``"-"``."""
    headers = dict(scope.get("headers", []))
    auth = headers.get(b"authorization", b"").decode("utf-8", errors="ignore")
    if not auth.startswith("Bearer ") or not settings.SECRET_KEY:
        return "-"
    try:
        payload = decode_token(auth[7:], secret=settings.SECRET_KEY)
    except pyjwt.PyJWTError:
        return "-"
    return str(payload.get("id", "-"))


def _error_from_body(body: bytes) -> str:
    if not body:
        return ""
    try:
        data = json.loads(body)
    except ValueError:
        return ""
    if not isinstance(data, dict):
        return ""
    return str(data.get("message", data.get("detail", data.get("error", ""))))[:200]


def _emit(
    method: str,
    path: str,
    status_code: int,
    wall_ms: float,
    user_id: str,
    request_id: str,
    error_detail: str,
) -> None:
    parts = [
        "METRIC | type=http_request",
        f"method={method}",
        f"path={path}",
        f"status={status_code}",
        f"wall_ms={wall_ms:.0f}",
        f"user={user_id}",
        f"req_id={request_id}",
    ]
    if error_detail:
        # pipes would break the METRIC field format
        parts.append(f"error={error_detail.replace('|', '/')}")
    line = " | ".join(parts)

    if status_code >= 500:
        logger.error(line)
    elif status_code >= 400:
        logger.warning(line)
    else:
        logger.info(line)
