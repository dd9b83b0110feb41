import uuid

from fastapi import FastAPI, Request, HTTPException
from starlette.middleware.trustedhost import TrustedHostMiddleware
from fastapi.exceptions import RequestValidationError

from origin_gate.config import Settings, settings

# Rate limiting
from slowapi.middleware import SlowAPIMiddleware
from slowapi.errors import RateLimitExceeded
from origin_gate.utils.rate_limit import limiter

# Origin matching + CORS adapters
from origin_gate.matching.entries import parse_list
from origin_gate.matching.facade import (
    build_matcher,
    create_allowed_list_middleware,
    create_blocked_list_middleware,
)
from origin_gate.middleware.cors import CORSGateMiddleware
from origin_gate.utils.headers import AllowCrossDomainMiddleware

# Logging / errors
from origin_gate.utils.logging import logger, request_id_ctx
from origin_gate.utils.errors import (
    handle_http_exception,
    handle_validation_error,
    handle_rate_limit,
    handle_unhandled,
)

from origin_gate.origins.routes import router as origins_router

def _add_origin_gate(app: FastAPI, config: Settings) -> None:
    if config.CORS_MODE == "open":
        app.add_middleware(AllowCrossDomainMiddleware)
        return

    if config.CORS_MODE == "block":
        delegate = create_blocked_list_middleware(config.CORS_LIST, config.CORS_INCLUDE_REMOTE_ADDR)
    else:
        delegate = create_allowed_list_middleware(config.CORS_LIST, config.CORS_INCLUDE_REMOTE_ADDR)

    app.add_middleware(
        CORSGateMiddleware,
        delegate=delegate,
        allow_methods=config.CORS_ALLOW_METHODS,
        allow_headers=config.CORS_ALLOW_HEADERS,
        expose_headers=config.CORS_EXPOSE_HEADERS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        max_age=config.CORS_MAX_AGE,
        exempt_paths=config.CORS_EXEMPT_PATHS,
    )

def create_app(config: Settings = settings) -> FastAPI:
    app = FastAPI(
        title=config.APP_NAME,
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Parsed once; every request reuses the same immutable entries
    app.state.settings = config
    app.state.origin_entries = parse_list(config.CORS_LIST)
    app.state.is_member = build_matcher(config.CORS_LIST)

    # ----- Middleware -----
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=(config.TRUSTED_HOSTS + ["*"] if config.APP_ENV == "dev" else config.TRUSTED_HOSTS),
    )

    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    _add_origin_gate(app, config)

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        token = request_id_ctx.set(str(uuid.uuid4())[:8])
        try:
            response = await call_next(request)
            response.headers["X-Request-Id"] = request_id_ctx.get() or "-"
        finally:
            request_id_ctx.reset(token)
        return response

    # ----- Exception Handlers -----
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(RateLimitExceeded, handle_rate_limit)
    app.add_exception_handler(Exception, handle_unhandled)

    # ----- Lifecycle -----
    @app.on_event("startup")
    async def _startup():
        kinds = [e.kind for e in app.state.origin_entries]
        logger.info(
            f"Origin gate mode={config.CORS_MODE} entries={len(kinds)} "
            f"(range={kinds.count('range')} ip={kinds.count('ip')} domain={kinds.count('domain')})"
        )
        if config.RATE_CHECK_PER_MIN != settings.RATE_CHECK_PER_MIN:
            logger.warning(
                f"RATE_CHECK_PER_MIN={config.RATE_CHECK_PER_MIN} ignored; "
                f"/origins/check uses {settings.RATE_CHECK_PER_MIN}/minute from the environment"
            )

    # ----- Health -----
    @app.get("/healthz", tags=["system"])
    async def healthz():
        return {
            "status": "ok",
            "app": config.APP_NAME,
            "env": config.APP_ENV,
            "version": app.version,
            "mode": config.CORS_MODE,
            "entries": len(app.state.origin_entries),
            "rate_check_per_min": settings.RATE_CHECK_PER_MIN,
        }

    # ----- Routers -----
    app.include_router(origins_router)           # /origins/entries, /origins/check

    return app

app = create_app()
