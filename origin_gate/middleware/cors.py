# origin_gate/middleware/cors.py
from typing import Any, Dict, Optional, Sequence

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp

from origin_gate.matching.facade import Delegate
from origin_gate.utils.errors import OriginNotAllowedError
from origin_gate.utils.logging import logger, origin_ctx
from origin_gate.utils.response import rejected


class CORSGateMiddleware(BaseHTTPMiddleware):
    """
    Runs an origin delegate (see matching.facade) on every request.

    Rejected requests get a 403 without any CORS headers. Accepted ones have
    their Origin reflected; preflights are answered here and never reach the app.
    """

    def __init__(
        self,
        app: ASGIApp,
        delegate: Delegate,
        allow_methods: Sequence[str] = ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"),
        allow_headers: Sequence[str] = ("Content-Type",),
        expose_headers: Sequence[str] = (),
        allow_credentials: bool = False,
        max_age: int = 600,
        exempt_paths: Sequence[str] = (),
    ):
        super().__init__(app)
        self.delegate = delegate
        self.allow_methods = [m.upper() for m in allow_methods]
        self.allow_headers = list(allow_headers)
        self.expose_headers = list(expose_headers)
        self.allow_credentials = allow_credentials
        self.max_age = max_age
        self.exempt_paths = set(exempt_paths)

    def _decide(self, request: Request):
        verdict: Dict[str, Any] = {}

        def callback(error: Optional[OriginNotAllowedError], result: Optional[Dict[str, Any]] = None):
            verdict["error"] = error
            verdict["result"] = result

        self.delegate(request, callback)
        return verdict.get("error"), verdict.get("result") or {}

    def _cors_headers(self, origin: str) -> Dict[str, str]:
        headers = {"Access-Control-Allow-Origin": origin, "Vary": "Origin"}
        if self.allow_credentials:
            headers["Access-Control-Allow-Credentials"] = "true"
        return headers

    def _preflight(self, request: Request, origin: str) -> Response:
        headers = self._cors_headers(origin)
        requested = request.headers.get("access-control-request-headers")
        if "*" in self.allow_headers and requested:
            allow_headers = requested
        else:
            allow_headers = ", ".join(h for h in self.allow_headers if h != "*")
        headers.update({
            "Access-Control-Allow-Methods": ", ".join(self.allow_methods),
            "Access-Control-Max-Age": str(self.max_age),
        })
        if allow_headers:
            headers["Access-Control-Allow-Headers"] = allow_headers
        return PlainTextResponse("OK", status_code=200, headers=headers)

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.exempt_paths:
            return await call_next(request)

        origin = request.headers.get("origin")
        token = origin_ctx.set(origin)
        try:
            error, result = self._decide(request)
            if error is not None:
                logger.warning(f"Rejected request: {error.detail}")
                return rejected(error.detail, status_code=error.status_code)

            reflect = bool(origin) and result.get("origin") is True
            if request.method == "OPTIONS" and "access-control-request-method" in request.headers and reflect:
                return self._preflight(request, origin)

            response = await call_next(request)
            if reflect:
                for name, value in self._cors_headers(origin).items():
                    if name == "Vary" and "vary" in response.headers:
                        value = f"{response.headers['vary']}, Origin"
                    response.headers[name] = value
                if self.expose_headers:
                    response.headers["Access-Control-Expose-Headers"] = ", ".join(self.expose_headers)
            return response
        finally:
            origin_ctx.reset(token)
