"""
Fastbreak Events - Main Application Entry Point

A small sporting-events manager:
- Server actions returning a uniform {success, data|error} result
- Sports and venues created on first reference, race-free via unique constraints
- Redis-cached dashboard listings invalidated on every event write
- Structured logging with request correlation
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fastbreak.core.config import get_settings
from fastbreak.core.logging import setup_logging, get_logger
from fastbreak.core.metrics import metrics_endpoint
from fastbreak.api.router import api_router
from fastbreak.api.middleware import RequestLoggingMiddleware
from fastbreak.db.session import close_db
from fastbreak.services.cache_service import get_redis, close_redis, get_cache_stats
from fastbreak.web.pages import router as pages_router

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    redis_client = await get_redis()
    if redis_client:
        logger.info("redis_ready")
    else:
        logger.warning("redis_unavailable", message="Running without dashboard cache")

    yield

    await close_redis()
    await close_db()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Create, filter, edit and delete sporting events",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

app.include_router(api_router)
app.include_router(pages_router)


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    cache_stats = await get_cache_stats()
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "cache": cache_stats,
    }


@app.get("/metrics", include_in_schema=False)
async def metrics():
    return metrics_endpoint()
