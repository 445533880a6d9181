"""
ScoreTrack - FastAPI Application Entry Point.

This module:
1. Initializes the FastAPI app with CORS middleware
2. Sets up structured JSON logging
3. Implements request ID middleware (X-Request-ID header)
4. Translates store errors into HTTP responses
5. Registers the tests and templates routers

Layout:
- routes/: API endpoint handlers (boundary layer)
- services/: marking rules, aggregator, record and template stores
- models/: SQLAlchemy ORM models
- schemas/: pydantic payloads
- database.py: engine, store lock and unit of work
"""

import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scoretrack.logging_config import (
    setup_logging, get_logger, log_with_context,
    request_id_var, generate_request_id
)
from scoretrack import __version__ as VERSION
from scoretrack.errors import ScoreTrackError
from scoretrack.routes import tests, templates
from scoretrack.database import DATABASE_URL, get_database

# Import all models so they are registered with Base.metadata
from scoretrack.models import Test, SubjectEntry, Template  # noqa: F401

setup_logging()
logger = get_logger("http")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables directly for SQLite; other databases use the Alembic revision
    if DATABASE_URL.startswith("sqlite"):
        logger.info("Using SQLite, creating tables directly")
        get_database().create_tables()
    yield


app = FastAPI(
    title="ScoreTrack",
    description=(
        "Stores exam attempts as per-subject question counts, derives score "
        "and accuracy percentages under flat or negative marking, and keeps "
        "reusable marking/subject templates."
    ),
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"]
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """
    Tag every request with a UUID.

    The ID is stored in a context variable (picked up by every log entry),
    returned in the X-Request-ID header, and logged with the latency.
    """
    req_id = generate_request_id()
    request_id_var.set(req_id)
    start_time = time.time()

    log_with_context(logger, "INFO",
        f"Request started: {request.method} {request.url.path}",
        context={"request_id": req_id},
        extra_data={
            "ip": request.client.host if request.client else "unknown",
            "query_params": dict(request.query_params)
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


@app.exception_handler(ScoreTrackError)
async def store_error_handler(request: Request, exc: ScoreTrackError):
    """Surface store errors as {"detail": message} with a matching status code."""
    level = "ERROR" if exc.status_code >= 500 else "WARNING"
    log_with_context(logger, level,
        f"{type(exc).__name__}: {exc.message}",
        extra_data={"path": request.url.path, "status_code": exc.status_code})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(tests.router, tags=["Tests"])
app.include_router(templates.router, tags=["Templates"])


@app.get("/health", tags=["Health"])
def health_check():
    return {"status": "healthy", "service": "scoretrack", "version": VERSION}


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "service": "ScoreTrack",
        "version": VERSION,
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "history": "GET /api/tests",
            "create_test": "POST /api/tests",
            "update_test": "PUT /api/tests/{id}",
            "delete_test": "DELETE /api/tests/{id}",
            "add_subject": "POST /api/tests/{id}/subjects",
            "update_subject": "PUT /api/subjects/{id}",
            "delete_subject": "DELETE /api/subjects/{id}",
            "templates": "GET|POST /api/templates, PUT|DELETE /api/templates/{id}"
        }
    }
