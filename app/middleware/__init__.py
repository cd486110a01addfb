"""Request-ID middleware -- tags every HTTP request with an ``X-Request-ID``.

Pure ASGI (not BaseHTTPMiddleware) so non-HTTP scopes pass through
untouched.
"""

import uuid

from starlette.types import ASGIApp, Message, Receive, Scope, Send

_HEADER = b"x-request-id"


class RequestIDMiddleware:
    """Reuse the caller's ``X-Request-ID`` or mint a UUID-4.

    The ID is stored on ``scope["state"]`` for handlers and loggers and
    echoed on the response.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        incoming = dict(scope.get("headers", [])).get(_HEADER, b"").decode()
        request_id = incoming or str(uuid.uuid4())
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = [*message.get("headers", []), (_HEADER, request_id.encode())]
                message = {**message, "headers": headers}
            await send(message)

        await self.app(scope, receive, send_with_id)
