"""StackIt Backend -- FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from stackit.api.v1.router import api_v1_router
from stackit.config import settings
from stackit.core.exceptions import RemoteServiceError, StackItException
from stackit.db.session import create_tables, engine
from stackit.schemas.common import ErrorDetail, ErrorResponse
from stackit.services.cache_service import get_cache_service

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.DEBUG else logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    logger.info("Starting StackIt API server...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    # Auto-create tables on startup (safe for fresh deployments)
    try:
        await create_tables()
        logger.info("Database tables verified/created")

        if settings.SEED_DEMO_DATA:
            from stackit.db.seed import seed_demo_content

            seeded = await seed_demo_content()
            logger.info(f"Demo content seeded: {seeded} questions")
    except Exception as e:
        logger.error(f"Database init failed: {e}", exc_info=True)

    try:
        cache = get_cache_service()
        if await cache.health_check():
            logger.info("Redis cache connected successfully")
        else:
            logger.warning("Redis cache connection failed (will operate without caching)")
    except Exception as e:
        logger.warning(f"Redis cache initialization failed: {e}")

    yield

    logger.info("Shutting down StackIt API server...")

    try:
        cache = get_cache_service()
        await cache.close()
        logger.info("Redis cache connection closed")
    except Exception as e:
        logger.warning(f"Error closing cache: {e}")

    await engine.dispose()


app = FastAPI(
    title="StackIt API",
    description="Community question and answer API",
    version="0.1.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(status_code: int, code: str, message: str, field: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, field=field))
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(StackItException)
async def stackit_exception_handler(request: Request, exc: StackItException):
    """Render domain errors as the standard error envelope."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return _error_response(exc.status_code, exc.code, exc.message, getattr(exc, "field", None))


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    """Data-layer failures surface as an opaque remote error."""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=True)
    err = RemoteServiceError()
    return _error_response(err.status_code, err.code, err.message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report the first failing field of an invalid request."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    message = first.get("msg", "Invalid request")
    # pydantic prefixes custom validator messages with "Value error, "
    message = message.removeprefix("Value error, ")
    return _error_response(422, "validation_error", message, ".".join(loc) or None)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(exc.status_code, "http_error", str(exc.detail))


# Register API v1 router
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "StackIt API",
        "version": "0.1.0",
        "description": "Community question and answer API",
        "docs": "/docs" if settings.DEBUG else None,
        "health": "/api/v1/health",
    }
