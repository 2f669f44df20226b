"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application for the
Face Capture Gate API.

The application provides:
- REST endpoint evaluating detector signals (/evaluate)
- WebSocket endpoint for live capture guidance (/ws/capture)
- Health check endpoint

Usage:
    # From project root:
    uvicorn api.app:app --host 0.0.0.0 --port 8000 --reload

    # Or run directly:
    python -m api.app
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes.capture import router as capture_router
from api.routes.evaluation import router as evaluation_router
from api.schemas import HealthResponse
from capture_gate.config import get_config, get_server_config, setup_logging
from capture_gate.decision import get_decision_engine


# Configure logging from config.yaml
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Builds the shared decision engine on startup so configuration errors
    surface before the first request.
    """
    logger.info("=" * 60)
    logger.info("Starting Face Capture Gate API")
    logger.info("=" * 60)

    engine = get_decision_engine()
    for band in engine.pose_evaluator.bands:
        logger.info(f"{band.axis.label} band: [{band.lower}, {band.upper}]")

    logger.info("API startup complete!")

    yield

    logger.info("Shutdown complete")


app = FastAPI(
    title="Face Capture Gate API",
    description="""
API deciding whether a face is ready to be photographed.

## Features
- **Evaluate**: POST detector signals for one frame, get the decision back
- **Capture**: stream frames over a WebSocket and get per-frame guidance

## WebSocket Capture
Connect to `/ws/capture` and send frames as JSON: `{"type": "frame", "data": "<base64 JPEG>"}`
    """,
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(evaluation_router)
app.include_router(capture_router)


# ============================================================
# Health Check Endpoint
# ============================================================

@app.get("/health", response_model=HealthResponse, tags=["system"])
async def health_check():
    """Report configuration status and the active pose bands."""
    try:
        get_config()
        config_loaded = True
    except FileNotFoundError:
        config_loaded = False

    engine = get_decision_engine() if config_loaded else None
    pose_bands = {}
    if engine is not None:
        pose_bands = {
            band.axis.label: [band.lower, band.upper]
            for band in engine.pose_evaluator.bands
        }

    return HealthResponse(
        status="healthy" if config_loaded else "degraded",
        config_loaded=config_loaded,
        pose_bands=pose_bands,
    )


@app.get("/", tags=["system"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Face Capture Gate API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    server = get_server_config()
    logger.info(f"Starting server on {server['host']}:{server['port']}")
    uvicorn.run(
        "api.app:app",
        host=server["host"],
        port=server["port"],
        reload=True,
        log_level="info",
    )
