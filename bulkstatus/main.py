"""BulkStatus — FastAPI Application Entry Point.

Resource status batch update service.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from bulkstatus.api.run_routes import router as runs_router
from bulkstatus.config import get_settings
from bulkstatus.core.logging import get_logger

logger = get_logger("main")

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    logger.info("BulkStatus starting up...")
    if not settings.api_base_url:
        logger.warning("API_BASE_URL is not set; runs will fail to connect")
    logger.info(f"Target status: {settings.effective_target_status}")
    yield
    logger.info("BulkStatus shut down")


app = FastAPI(
    title="BulkStatus",
    description="Batch-transition remote resources to a target status.",
    version=VERSION,
    lifespan=lifespan,
)

app.include_router(runs_router)


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "bulkstatus",
        "version": VERSION,
    }
