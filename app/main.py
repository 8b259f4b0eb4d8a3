"""
Main FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.api import router as api_router
from app.services.editing import ItemNotFoundError
from app.services.projects import ProjectFormatError, ProjectNotFoundError
from app.storage import StorageError, get_project_store

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Select the project store once, before serving requests."""
    get_project_store()
    yield


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Fix-and-flip real estate pro forma",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.exception_handler(ProjectNotFoundError)
async def project_not_found_handler(request: Request, exc: ProjectNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ItemNotFoundError)
async def item_not_found_handler(request: Request, exc: ItemNotFoundError):
    # KeyError's str() adds quotes
    return JSONResponse(status_code=404, content={"detail": exc.args[0]})


@app.exception_handler(ProjectFormatError)
async def project_format_handler(request: Request, exc: ProjectFormatError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(f"Storage failure on {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=503, content={"detail": "Project storage is unavailable"}
    )


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "version": "0.1.0"}
