from contextlib import asynccontextmanager

from fastapi import FastAPI
from planner.api.router import api_router
from planner.core.config import get_settings
from planner.core.logger import setup_logging

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler: configures logging on startup."""
    setup_logging()
    yield


app = FastAPI(
    title=settings.app_name,
    description="Transcript ingestion and course plan auto-population",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


@app.get("/health", tags=["health"])
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


# Include API routes
app.include_router(api_router, prefix="/api")
