"""Request Memo Middleware — opens a per-request memoization scope.

Invariants:
    - Every HTTP request runs inside its own request_scope(); nothing memoized
      in one request is visible to another
    - Non-HTTP scopes (lifespan, websocket) pass through untouched

Design Decisions:
    - Pure ASGI middleware over BaseHTTPMiddleware: the endpoint runs in the
      same context the scope was opened in
"""

from starlette.types import ASGIApp, Receive, Scope, Send

from invoice_dashboard.infrastructure.cache import request_scope


class RequestMemoMiddleware:
    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        with request_scope():
            await self.app(scope, receive, send)
