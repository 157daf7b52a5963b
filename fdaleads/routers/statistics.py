"""
Statistics Router

Endpoints:
- GET /api/statistics - Statistics published with the current snapshot
- GET /api/analytics/comprehensive - Nested analytics for the dashboard
"""
import logging

from fastapi import APIRouter, HTTPException

from ..services.repository import get_lead_repository
from ..services.statistics import comprehensive_analytics, generation_statistics

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["statistics"])


@router.get("/statistics")
async def get_statistics():
    try:
        snapshot = get_lead_repository().snapshot
        if snapshot.statistics:
            return dict(snapshot.statistics)
        return generation_statistics(list(snapshot.leads), snapshot.companies)
    except Exception as e:
        logger.error(f"Error computing statistics: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error computing statistics: {str(e)}")


@router.get("/analytics/comprehensive")
async def get_comprehensive_analytics():
    """Overview, by-type breakdowns, therapeutic and biomarker mix, company risk and timing."""
    try:
        snapshot = get_lead_repository().snapshot
        return comprehensive_analytics(list(snapshot.leads), snapshot.companies)
    except Exception as e:
        logger.error(f"Error computing analytics: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Analytics generation failed: {str(e)}")
