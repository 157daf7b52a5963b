"""
Lead Generation Router

POST /api/generate-leads runs a full generation pass and publishes the result.
"""
import logging

from fastapi import APIRouter, HTTPException

from ..services.lead_generation import generate_leads
from ..services.repository import get_lead_repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["generation"])

TOP_LEADS = 5


@router.post("/generate-leads")
async def generate():
    """
    Regenerate every lead from upstream data.

    Concurrent requests are serialized; readers keep seeing the previous
    snapshot until the new one is published.
    """
    try:
        snapshot = await generate_leads(get_lead_repository())
        return {
            "message": "FDA lead generation completed",
            "count": len(snapshot.leads),
            "generated_at": snapshot.generated_at,
            "sources": dict(snapshot.sources),
            "statistics": dict(snapshot.statistics),
            "top_leads": [
                {
                    "id": lead.id,
                    "company": lead.company_name,
                    "type": lead.lead_type.value,
                    "priority": lead.priority.value,
                    "score": lead.score,
                    "issue": lead.urgency_reason,
                    "opportunity_value": lead.application.estimated_opportunity_value if lead.application else None,
                }
                for lead in snapshot.leads[:TOP_LEADS]
            ],
        }
    except Exception as e:
        logger.error(f"Lead generation failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Lead generation failed: {str(e)}")
