"""
AUV Mission Analysis - FastAPI Backend

Main application entry point and configuration.
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from auvmission.api.missions import analyze_router, folder_router, router as missions_router
from auvmission.config import DATA_FOLDER_ENV
from auvmission.services.repository import get_repository, init_repository


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


APP_NAME = "AUV Mission Analysis"
APP_VERSION = "0.1.0"

# Default data folder (can be overridden via API or environment)
DEFAULT_DATA_FOLDER = Path("./data/missions")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting AUV Mission Analysis Backend")

    repo = get_repository()
    if repo.data_folder is None:
        data_folder = Path(os.getenv(DATA_FOLDER_ENV, str(DEFAULT_DATA_FOLDER)))
        if data_folder.exists():
            init_repository(data_folder)
            logger.info(f"Initialized repository with folder: {data_folder}")
        else:
            logger.info(f"Default data folder not found: {data_folder}")
            logger.info("Use POST /folder to set data folder")

    yield

    logger.info("Shutting down AUV Mission Analysis Backend")


app = FastAPI(
    title=APP_NAME,
    description="""
    Backend API for underwater vehicle mission analysis.

    ## Features
    - Load vehicle telemetry CSVs and planned route JSON files
    - Detect threshold incidents and group them by time
    - Compute one shared bounding box and canvas projection for all layers
    - Serve depth / navigation-mode colors for rendering

    ## Data Flow
    1. Set data folder via POST /folder
    2. List available missions via GET /missions
    3. Get analysis via GET /missions/{id}
    4. Get canvas layers via GET /missions/{id}/scene
    """,
    version=APP_VERSION,
    lifespan=lifespan,
)


# CORS middleware (allow all origins for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(missions_router)
app.include_router(analyze_router)
app.include_router(folder_router)


@app.get("/")
async def root():
    """Root endpoint - basic health check."""
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    repo = get_repository()

    return {
        "status": "healthy",
        "data_folder": str(repo.data_folder) if repo.data_folder else None,
        "mission_count": repo.mission_count,
    }
