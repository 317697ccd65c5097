"""
SocialNet Backend — FastAPI Application Factory
=================================================

What:  Builds the FastAPI application: logging, middleware, exception
       handlers and routers.
Who:   uvicorn (`uvicorn socialnet.main:app`) and the API tests.

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware: RequestID → AccessLog → RateLimit       │
    │              → GZip → CORS                           │
    │                                                      │
    │  Routers:  /users/*   /posts/*   /health             │
    │                                                      │
    │  Exception Handlers (error envelope):                │
    │   request body/query/path invalid      → 400         │
    │   ValidationError, ConflictError       → 400         │
    │   AuthenticationError                  → 401         │
    │   NotFoundError                        → 404         │
    │   over rate limit (middleware)         → 429         │
    │   DatabaseError / anything else        → 500         │
    └──────────────────────────────────────────────────────┘

Error envelope:
    {"success": false, "error": <code>, "message": <text>, "request_id": <id>}
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Tuple

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from socialnet import __version__
from socialnet.config import settings
from socialnet.database import dispose_engine
from socialnet.exceptions import (
    REQUEST_FORMAT_ERROR,
    SocialNetError,
    ValidationError,
)
from socialnet.middleware.logging import RequestLoggingMiddleware
from socialnet.middleware.rate_limit import RateLimitMiddleware
from socialnet.middleware.request_id import RequestIDMiddleware, request_id_var
from socialnet.responses import error_response
from socialnet.routes import health, posts, users

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configures the root logger once at startup.

    Format: 2024-01-15T12:00:00 [INFO] socialnet.access: GET /posts 200 ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access log replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    if settings.log_level != "DEBUG":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("SocialNet Backend %s starting (%s)", __version__, settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving so /health can report; the operator must fix the config
        logger.error("Configuration error: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("SocialNet Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _describe_validation_errors(exc: RequestValidationError) -> Tuple[str, str]:
    """First failing field as ("body.email", "value is not a valid email address")."""
    errors = exc.errors()
    if not errors:
        return "", "invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return location, first.get("msg", "invalid value")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Maps exceptions to the error envelope.

    5xx responses never carry internal details; those go to the server log
    together with the request ID.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        field, problem = _describe_validation_errors(exc)
        detail = f"{field}: {problem}" if field else problem
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), detail)
        return error_response(
            400,
            "validation_error",
            f"{REQUEST_FORMAT_ERROR}: {detail}",
            details={"field": field} if field else None,
        )

    @app.exception_handler(SocialNetError)
    async def handle_app_error(request: Request, exc: SocialNetError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
            return error_response(
                exc.status_code,
                exc.error_code,
                "An internal error occurred. Please try again later.",
            )
        logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        details = exc.context if isinstance(exc, ValidationError) else None
        return error_response(exc.status_code, exc.error_code, exc.message, details=details)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        # Unknown routes and wrong methods keep their status, in our envelope
        error = "not_found" if exc.status_code == 404 else "http_error"
        return error_response(exc.status_code, error, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="SocialNet API",
        description=(
            "Minimal social network backend: accounts, text posts, "
            "comments and likes behind bearer-token authentication."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Starlette runs middleware in reverse order of registration:
    # RequestID → Logging → RateLimit → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(users.router)
    app.include_router(posts.router)
    app.include_router(health.router)

    return app


app = create_app()
