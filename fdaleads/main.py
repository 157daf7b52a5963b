"""
FastAPI application for the FDA regulatory lead generation backend
"""
import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .config import API_VERSION, AUTO_GENERATE_ON_STARTUP
from .routers import companies as companies_router
from .routers import export as export_router
from .routers import generation as generation_router
from .routers import health, leads
from .routers import search as search_router
from .routers import statistics as statistics_router
from .services.lead_generation import generate_leads
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"

app = FastAPI(
    title="FDA Regulatory Lead Generation API",
    description="Regulatory intelligence leads from openFDA and ClinicalTrials.gov with scored outreach",
    version=API_VERSION,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(leads.router)
app.include_router(generation_router.router)
app.include_router(statistics_router.router)
app.include_router(companies_router.router)
app.include_router(search_router.router)
app.include_router(export_router.router)

# Dashboard
app.mount("/dashboard", StaticFiles(directory=str(STATIC_DIR), html=True), name="dashboard")


@app.on_event("startup")
async def _on_startup():
    """Install logging and build the first lead snapshot."""
    setup_logging()
    logger.info(f"FDA lead generation backend v{API_VERSION} starting")
    if not AUTO_GENERATE_ON_STARTUP:
        return
    try:
        snapshot = await generate_leads()
        logger.info(f"Startup generation produced {len(snapshot.leads)} leads")
    except Exception as e:
        # Keep serving; the snapshot stays empty until the next POST /api/generate-leads
        logger.error(f"Startup lead generation failed: {e}", exc_info=True)
