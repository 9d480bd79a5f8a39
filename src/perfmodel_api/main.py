"""LLM Performance Modeler API - FastAPI main application."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from perfmodel.database.database import get_db_path_from_env

from perfmodel_api import __version__
from perfmodel_api.logging_config import (
    configure_logging,
    get_logger,
    RequestLoggingMiddleware,
)
from perfmodel_api.routers.benchmarks import router as benchmarks_router
from perfmodel_api.routers.modeling import router as modeling_router

# Configure structured logging
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log application startup and shutdown."""
    logger.info("application_started", version=__version__, database_path=get_db_path_from_env())
    yield
    logger.info("application_shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="LLM Performance Modeler API",
        description="Upload LLM benchmarks and predict latency/throughput for new workloads",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Request logging middleware (add first to capture all requests)
    app.add_middleware(RequestLoggingMiddleware)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(benchmarks_router)
    app.include_router(modeling_router)

    @app.get("/")
    async def root():
        return {
            "service": "llm-perfmodel-api",
            "version": __version__,
            "docs": "/docs",
        }

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


app = create_app()


def run() -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8080)


if __name__ == "__main__":
    run()
