"""
api/main.py -- FastAPI application factory for CarStock.

Run with:  uvicorn asgi:app --reload

create_app(settings) builds a fresh application around one immutable
Settings instance. Nothing reads configuration at import time, so tests can
build as many isolated apps as they like.

Middleware stack (outermost to innermost):
  1. CORSMiddleware     -- adds CORS headers for the configured browser origins
  2. SlowAPIMiddleware  -- enforces per-route rate limits from api.limiter

Lifespan handles startup (engine, stores, schema, token service) and
shutdown (engine disposal) symmetrically.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.limiter import limiter
from api.models import HealthResponse
from api.routes.v1.auth import router as auth_router
from api.routes.v1.cars import router as cars_router
from auth.store import DealerStore
from auth.tokens import TokenService
from core.config import Settings
from core.database import create_store_engine
from inventory.store import CarStore

__version__ = "1.0.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("carstock.api")


# ---------------------------------------------------------------------------
# Lifespan -- modern startup / shutdown pattern (replaces @app.on_event)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application-level resources across the full server lifetime.

    Startup order matters:
      1. Engine first -- both stores share it as their connection factory.
      2. Stores second, then schema creation (idempotent).
      3. Token service last -- pure, depends only on settings.
    """
    settings: Settings = app.state.settings
    logger.info("CarStock API starting up")
    app.state.engine = create_store_engine(settings.database_url)
    app.state.dealer_store = DealerStore(app.state.engine)
    app.state.car_store = CarStore(app.state.engine)
    await app.state.dealer_store.create_schema()
    await app.state.car_store.create_schema()
    logger.info("Database initialized")
    app.state.token_service = TokenService(settings)
    logger.info("Token service initialized (issuer=%s)", settings.jwt_issuer)

    yield

    await app.state.engine.dispose()
    logger.info("CarStock API shutdown complete")


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same {"message": ...} envelope so API clients can
# parse errors uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------


def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 when a rate limit is exceeded.

    Plain function, not a coroutine: SlowAPIMiddleware calls it directly.
    Retry-After tells clients how many seconds to wait before retrying.
    """
    retry_after = int(getattr(exc, "retry_after", 60))
    response = JSONResponse(status_code=429, content={"message": "Too many requests."})
    response.headers["Retry-After"] = str(retry_after)
    return response


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 with field-level messages when the request body has the wrong shape.

    Missing fields and wrong JSON types land here; range checks are done by
    api.validation and produce the same envelope.
    """
    errors: dict[str, str] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        errors[".".join(loc) or "body"] = err.get("msg", "Invalid value.")
    return JSONResponse(status_code=400, content={"message": "Validation failed.", "errors": errors})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Return {"message": detail} for every FastAPI/Starlette HTTP exception."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception is written to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "An unexpected error occurred."})


# ---------------------------------------------------------------------------
# Request logging middleware
# ---------------------------------------------------------------------------


async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Health endpoint
#
# No auth and no rate limit -- load balancers and monitoring must reach it.
# ---------------------------------------------------------------------------


async def health(request: Request) -> HealthResponse:
    """Return API liveness, version, and database reachability."""
    database = "ok"
    try:
        await request.app.state.car_store.ping()
    except SQLAlchemyError:
        logger.warning("Health check: database unreachable")
        database = "error"
    return HealthResponse(version=__version__, components={"app": "ok", "database": database})


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the CarStock ASGI application.

    With no argument, Settings() is read from the environment / .env and a
    missing required value raises pydantic.ValidationError -- the process
    fails at startup instead of on the first request.
    """
    settings = settings if settings is not None else Settings()

    app = FastAPI(
        title="CarStock API",
        description="Dealer-scoped car inventory with cookie-based JWT authentication.",
        version=__version__,
        lifespan=lifespan,
        # Interactive docs only in development.
        docs_url="/docs" if settings.debug else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.debug else None,
    )
    app.state.settings = settings

    # ------------------------------------------------------------------
    # Middleware stack. Starlette wraps the last-registered middleware
    # outermost, so register innermost first: request log, SlowAPI, CORS.
    # ------------------------------------------------------------------

    app.middleware("http")(log_requests)
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
        max_age=3600,
    )

    # SlowAPI looks for app.state.limiter by convention.
    app.state.limiter = limiter

    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(auth_router, prefix="/api", tags=["Auth"])
    app.include_router(cars_router, prefix="/api", tags=["Cars"])
    app.add_api_route("/api/health", health, methods=["GET"], response_model=HealthResponse, tags=["Health"])

    return app
