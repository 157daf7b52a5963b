"""
Health and basic status endpoints.
"""
from datetime import datetime, timezone

from fastapi import APIRouter

from ..config import API_VERSION, get_feature_flags
from ..services.repository import get_lead_repository

router = APIRouter(prefix="", tags=["health"])

FEATURES = [
    "regulatory-intelligence",
    "specific-issue-detection",
    "therapeutic-area-classification",
    "fda-division-insights",
    "crl-rtf-detection",
    "clinical-trial-pain-points",
    "biomarker-strategy-analysis",
    "enforcement-monitoring",
    "business-opportunity-calculation",
    "personalized-email-generation",
    "deadline-tracking",
]


@router.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "FDA Regulatory Lead Generation Backend - Live!",
        "status": "operational",
        "version": API_VERSION,
        "dashboard": "/dashboard",
    }


@router.get("/health")
async def health_check():
    """Health check with a summary of the current lead snapshot."""
    counts = get_lead_repository().counts()
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": API_VERSION,
        "features": FEATURES,
        "feature_flags": get_feature_flags(),
        "data_status": {
            "total_leads": counts["total_leads"],
            "total_companies": counts["companies"],
            "critical_situations": counts["critical_situations"],
            "last_update": counts["last_update"] or "No data",
        },
    }
