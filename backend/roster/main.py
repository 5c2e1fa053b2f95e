"""
Roster Backend: FastAPI Application Factory
=============================================

What:  Creates and configures the FastAPI application instance.
How:   ``create_app()`` registers middleware, exception handlers and routers;
       the module-level ``app`` is what uvicorn serves (roster.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Access Logging → CORS    │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────────────────────┐ ┌───────────────┐   │
    │  │ /api/v1/students (CRUD)    │ │ GET /health   │   │
    │  └────────────────────────────┘ └───────────────┘   │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Email conflicts→400 │ NotFound→404 │ DB→500  │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, optionally seed demo students
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from roster import __version__
from roster.config import settings
from roster.database import dispose_engine
from roster.exceptions import (
    DatabaseError,
    DuplicateEmailError,
    EmailConflictError,
    EmailTakenError,
    NotFoundError,
    RosterError,
)
from roster.middleware.logging import RequestLoggingMiddleware
from roster.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    request_id_var,
)
from roster.routes import health, students

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once at startup.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Access lines come from RequestLoggingMiddleware instead
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.log_level == "DEBUG" else logging.WARNING
    )


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("Roster Backend %s starting up...", __version__)

    if settings.seed_demo_data:
        from roster.seed import seed_demo_data
        await seed_demo_data()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Roster Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    return request_id_var.get("") or getattr(request.state, "request_id", "")


def _error_body(error: str, message: str, request: Request, details=None) -> dict:
    body = {"error": error, "message": message, "request_id": _request_id(request)}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

    Handler hierarchy:
        DuplicateEmailError → 400 "duplicate_email"
        EmailTakenError     → 400 "email_taken"
        EmailConflictError  → 400 "email_conflict"
        NotFoundError       → 404 "not_found"
        DatabaseError       → 500 "server_error" (generic message)
        RosterError (base)  → 500 "server_error"
        Exception           → 500 "internal_server_error"

    Starlette resolves handlers along the exception's MRO, so the two
    email subclasses get their own error codes ahead of the parent.
    Server-side failures never expose their context in the response.
    """

    def conflict_handler(code: str):
        async def handle(request: Request, exc: EmailConflictError):
            logger.warning("[%s] %s: %s", _request_id(request), code, exc.message)
            return JSONResponse(
                status_code=400,
                content=_error_body(code, exc.message, request, exc.context),
            )
        return handle

    app.add_exception_handler(DuplicateEmailError, conflict_handler("duplicate_email"))
    app.add_exception_handler(EmailTakenError, conflict_handler("email_taken"))
    app.add_exception_handler(EmailConflictError, conflict_handler("email_conflict"))

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        logger.warning("[%s] Not found: %s", _request_id(request), exc.message)
        return JSONResponse(
            status_code=404,
            content=_error_body("not_found", exc.message, request),
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            _request_id(request), exc.message, exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "server_error",
                "An internal error occurred. Please try again later.",
                request,
            ),
        )

    @app.exception_handler(RosterError)
    async def handle_roster_error(request: Request, exc: RosterError):
        logger.error("[%s] Unhandled application error: %s", _request_id(request), exc.message)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", exc.message, request),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = _request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        # Built outside RequestIDMiddleware, so the header is not added there
        headers = {REQUEST_ID_HEADER: rid} if rid else None
        return JSONResponse(
            status_code=500,
            headers=headers,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
                request,
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Assemble middleware, exception handlers and routers into an app."""
    app = FastAPI(
        title="Roster API",
        description="Student registry: list, register, update and delete students.",
        version=__version__,
        lifespan=lifespan,
    )

    # Added innermost first: execution order is RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(students.router)
    app.include_router(health.router)

    return app


app = create_app()
