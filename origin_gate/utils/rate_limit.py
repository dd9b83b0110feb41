from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

def origin_key(request: Request) -> str:
    # Browsers send Origin on cross-site calls; fall back to the client IP
    return request.headers.get("origin") or get_remote_address(request)

limiter = Limiter(key_func=origin_key)
