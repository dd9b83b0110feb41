from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
from starlette.responses import Response

class AllowCrossDomainMiddleware(BaseHTTPMiddleware):
    """
    Lets every origin through with a wildcard CORS header, no matching at all.
    Only for local development or an API that is already unreachable from untrusted networks.
    """
    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request, call_next):
        resp: Response = await call_next(request)
        resp.headers["Access-Control-Allow-Origin"] = "*"
        resp.headers["Access-Control-Allow-Methods"] = "GET,PUT,POST,DELETE"
        resp.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return resp
