"""
Campus Event Backend - FastAPI Application Entry Point.

This is the main application module that:
1. Builds the FastAPI app around an explicitly constructed Database
2. Sets up structured JSON logging
3. Implements request ID middleware (X-Request-ID header)
4. Maps core errors to HTTP responses
5. Registers all API route handlers and the health check

The application follows a modular architecture:
- routes/: API endpoint handlers
- models/: SQLAlchemy ORM models
- services/: Core logic (entity store, constraints, attendance, reporting)
- errors.py: Typed error taxonomy raised by the core
- logging_config.py: Structured logging configuration
- database.py: Database connection and session management
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.logging_config import (
    setup_logging, get_logger, log_with_context,
    request_id_var, generate_request_id
)
from app.routes import attendance, events, registrations, reports, students
from app.database import Database
from app.errors import ConflictError, DomainError, InternalError, ReferentialError, ValidationError

# ──────────────────────────────────────────────────────────────
# Initialize structured logging BEFORE anything else
# ──────────────────────────────────────────────────────────────
setup_logging()
logger = get_logger("http")

VERSION = "1.0.0"

# Status code per error kind. Unknown references answer 400; only
# uniqueness conflicts get 409.
ERROR_STATUS = {
    ValidationError: 400,
    ReferentialError: 400,
    ConflictError: 409,
    InternalError: 500,
}


def status_for(exc: DomainError) -> int:
    for error_type, status in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status
    return 500


async def domain_error_handler(request: Request, exc: DomainError):
    """Translate a core error into a JSON error response."""
    status = status_for(exc)
    log_with_context(logger, "ERROR" if status >= 500 else "WARNING",
        "{} {} failed: {}".format(request.method, request.url.path, exc.kind),
        extra_data=exc.to_dict())
    return JSONResponse(status_code=status, content={"error": exc.kind, "detail": exc.to_dict()})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report a malformed request body as a ValidationError on the first bad field."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    # loc starts with where the value came from: body, path or query
    loc = [str(part) for part in first.get("loc", ())[1:]]
    field = ".".join(loc) or "body"
    return await domain_error_handler(request, ValidationError(field, first.get("type", "invalid")))


# ──────────────────────────────────────────────────────────────
# Request ID Middleware
#
# Generates a unique UUID per incoming request and:
# 1. Stores it in a context variable (available to all log entries)
# 2. Returns it in the X-Request-ID response header
# 3. Logs request start/end with latency measurement
# ──────────────────────────────────────────────────────────────
async def request_id_middleware(request: Request, call_next):
    req_id = generate_request_id()
    request_id_var.set(req_id)

    start_time = time.time()

    log_with_context(logger, "INFO",
        f"Request started: {request.method} {request.url.path}",
        context={"request_id": req_id},
        extra_data={
            "ip": request.client.host if request.client else "unknown",
            "user_agent": request.headers.get("user-agent", ""),
        })

    response = await call_next(request)

    duration_ms = (time.time() - start_time) * 1000
    response.headers["X-Request-ID"] = req_id

    log_with_context(logger, "INFO",
        f"Request completed: {request.method} {request.url.path} → {response.status_code}",
        context={"request_id": req_id},
        extra_data={
            "duration_ms": round(duration_ms, 2),
            "status_code": response.status_code
        })

    return response


def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Build the application around a storage handle.

    The handle lives on `app.state.database`; request dependencies open
    sessions from it. With no handle given, one is built from DATABASE_URL.
    """
    database = database or Database()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # SQLite has no migrations here; create tables directly
        if database.is_sqlite:
            logger.info("Using SQLite, creating tables directly")
            database.create_tables()
        yield
        database.dispose()

    app = FastAPI(
        title="Campus Event Backend",
        description=(
            "Tracks campus events, student registrations, attendance check-in "
            "and feedback, and serves participation reports."
        ),
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"]
    )
    app.middleware("http")(request_id_middleware)
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(events.router, tags=["Events"])
    app.include_router(students.router, tags=["Students"])
    app.include_router(registrations.router, tags=["Registrations"])
    app.include_router(attendance.router, tags=["Attendance"])
    app.include_router(reports.router, tags=["Reports"])

    @app.get("/health", tags=["Health"])
    def health_check():
        """Health check endpoint for container health checks and monitoring."""
        return {"status": "healthy", "service": "campus-event-backend", "version": VERSION}

    @app.get("/", tags=["Root"])
    def root():
        """Root endpoint with API information."""
        return {
            "service": "Campus Event Backend",
            "version": VERSION,
            "docs": "/docs",
            "health": "/health",
            "endpoints": {
                "events": "POST|GET /events",
                "students": "POST /students",
                "register": "POST /register",
                "attendance": "POST /attendance",
                "feedback": "POST /feedback",
                "popular_events": "GET /reports/popular-events",
                "student_participation": "GET /reports/student-participation",
                "top_students": "GET /reports/top-students",
                "student_registrations": "GET /students/{student_id}/registrations",
                "admin_events": "GET /admin/events",
                "admin_event_registrations": "GET /admin/events/{event_id}/registrations",
                "admin_attendance": "POST /admin/attendance"
            }
        }

    return app


app = create_app()
