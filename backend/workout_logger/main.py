"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from workout_logger.config import get_settings
from workout_logger.api import api_router
from workout_logger.errors import register_exception_handlers

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Starting {settings.app_name} (identity provider: {settings.identity_provider})")
    yield
    logger.info(f"Shutting down {settings.app_name}")


app = FastAPI(
    title=settings.app_name,
    description="""
    Workout Logger API

    Log workouts and the exercises performed in them.

    ## Authentication

    Every route except `/api/health` expects `Authorization: Bearer <token>`,
    where the token was issued by the configured identity provider.
    Every query is scoped to the caller.

    ## Errors

    Failures are returned as `{"error": "<message>"}`.
    """,
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(f"{request.method} {request.url.path}")
    return await call_next(request)


register_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix=settings.api_prefix)


def run() -> None:
    """Serve the API with uvicorn."""
    logger.info(f"Server running on port {settings.port}")
    logger.info(f"Health check: http://localhost:{settings.port}{settings.api_prefix}/health")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level="debug" if settings.debug else "info")


if __name__ == "__main__":
    run()
