from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette import status
from slowapi.errors import RateLimitExceeded

from origin_gate.utils.logging import logger

NOT_ALLOWED_TEMPLATE = "{candidate} Not Allowed Access"

# Same error whether the origin was block-listed or missing from the allow-list
class OriginNotAllowedError(HTTPException):
    def __init__(self, candidate: str = ""):
        self.candidate = candidate or ""
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=NOT_ALLOWED_TEMPLATE.format(candidate=self.candidate),
        )

# ---- Exception handlers (registered in main.py) ----
async def handle_http_exception(request: Request, exc: HTTPException):
    logger.warning(f"HTTPException {exc.status_code}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": exc.detail},
    )

async def handle_validation_error(request: Request, exc: RequestValidationError | ValidationError):
    logger.warning("ValidationError")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"ok": False, "error": "validation_error", "details": exc.errors()},
    )

async def handle_rate_limit(request: Request, exc: RateLimitExceeded):
    logger.warning(f"Rate limited: {exc.detail}")
    return JSONResponse(status_code=429, content={"ok": False, "error": "rate_limited"})

async def handle_unhandled(request: Request, exc: Exception):
    logger.error(f"Unhandled error: {type(exc).__name__}", exc_info=True)
    return JSONResponse(status_code=500, content={"ok": False, "error": "internal_error"})
