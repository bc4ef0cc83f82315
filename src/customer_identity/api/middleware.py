"""Bearer token authentication middleware."""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from ..security.gate import AuthenticationGate


class BearerAuthenticationMiddleware(BaseHTTPMiddleware):
    """Attach the request's principal (or None) to ``request.state.principal``.

    Never rejects a request itself; endpoints that need an identity depend on
    ``require_principal``.
    """

    def __init__(self, app: ASGIApp, gate: AuthenticationGate) -> None:
        super().__init__(app)
        self.gate = gate

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.principal = None
        if not self.gate.is_public(request.url.path):
            request.state.principal = self.gate.authenticate(request.headers.get("Authorization"))
        return await call_next(request)
