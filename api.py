"""
StudyHub FastAPI Application

Main entry point for the StudyHub API: lessons, quizzes, progress
tracking, discussions and the streaming AI tutor.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

# Common library imports
from common.database import MongoDB
from common.utils import success_response, error_response

# App-specific imports
from studyhub.config import settings

# Import routers
from studyhub.routers import (
    subjects_router,
    lessons_router,
    quiz_router,
    progress_router,
    dashboard_router,
    tutor_router,
    discussions_router,
    profile_router,
)

# Import service initialization
from studyhub.dependencies import init_all_services, shutdown_services, get_progress_service


logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("studyhub")


# =============================================================================
# Database Instance
# =============================================================================
main_db = MongoDB()


# =============================================================================
# Application Lifespan
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown tasks like database connections
    and service initialization.
    """
    # Startup
    logger.info("Starting StudyHub API...")

    if settings.is_production():
        settings.validate_required()
    else:
        for problem in settings.collect_errors():
            logger.warning(f"Configuration: {problem}")

    await main_db.connect(
        uri=settings.MONGODB_URI,
        database_name=settings.MONGODB_DATABASE,
    )
    init_all_services(db=main_db.db, app_settings=settings)
    logger.info("All services initialized")

    try:
        await get_progress_service().ensure_indexes()
    except PyMongoError as e:
        logger.warning(f"Could not create progress indexes: {e}")

    yield

    # Shutdown
    logger.info("Shutting down StudyHub API...")
    await shutdown_services()
    await main_db.disconnect()
    logger.info("StudyHub API shut down complete.")


# =============================================================================
# FastAPI Application
# =============================================================================
app = FastAPI(
    title="StudyHub API",
    description="Adaptive learning platform with progress tracking and an AI tutor",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development() else None,
    redoc_url="/redoc" if settings.is_development() else None,
)

# =============================================================================
# CORS Middleware
# =============================================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================
@app.exception_handler(PyMongoError)
async def database_error_handler(request: Request, exc: PyMongoError):
    """Report store failures as 503 instead of an opaque 500."""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=503,
        content=error_response("Database is unavailable, try again shortly", code="DATABASE_UNAVAILABLE"),
    )


# =============================================================================
# Include Routers (all under /api prefix)
# =============================================================================
API_PREFIX = "/api"

app.include_router(subjects_router, prefix=API_PREFIX, tags=["Subjects"])
app.include_router(lessons_router, prefix=API_PREFIX, tags=["Lessons"])
app.include_router(quiz_router, prefix=API_PREFIX, tags=["Quiz"])
app.include_router(progress_router, prefix=API_PREFIX, tags=["Progress"])
app.include_router(dashboard_router, prefix=API_PREFIX, tags=["Dashboard"])
app.include_router(tutor_router, prefix=API_PREFIX, tags=["Tutor"])
app.include_router(discussions_router, prefix=API_PREFIX, tags=["Discussions"])
app.include_router(profile_router, prefix=API_PREFIX, tags=["Profile"])


# =============================================================================
# Health Check Endpoint
# =============================================================================
@app.get("/health", tags=["Health"])
async def health():
    """
    Health check endpoint.

    Returns the status of the API and whether MongoDB answers a ping.
    """
    database_ok = await main_db.ping()
    return success_response({
        "status": "ok" if database_ok else "degraded",
        "version": "1.0.0",
        "database": database_ok,
    })


# =============================================================================
# Run with Uvicorn
# =============================================================================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development(),
    )
