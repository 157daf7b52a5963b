"""
Leads Router

Endpoints:
- GET /api/leads - Filtered lead list, best first
- GET /api/leads/{lead_id} - One lead
- GET /api/leads/{lead_id}/email - Outreach email with its trigger and context
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query

from ..models.leads import Lead, LeadType
from ..services.repository import get_lead_repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/leads", tags=["leads"])


def email_payload(lead: Lead) -> Dict[str, Any]:
    """Email, trigger and metadata plus the context block for the lead's type."""
    payload: Dict[str, Any] = {
        "email": lead.email.model_dump(),
        "trigger": lead.email_trigger.model_dump(),
        "metadata": {
            "lead_id": lead.id,
            "company": lead.company_name,
            "priority": lead.priority.value,
            "score": lead.score,
            "urgency_reason": lead.urgency_reason,
            "lead_type": lead.lead_type.value,
            "sub_type": lead.sub_type,
            "therapeutic_area": lead.therapeutic_area,
            "submission_type": lead.application.submission_type if lead.application else None,
            "contact_window": lead.contact_window,
        },
    }

    if lead.lead_type == LeadType.DRUG_APPLICATION and lead.application:
        application = lead.application
        payload["application_context"] = {
            "application_number": application.application_number,
            "status": application.status,
            "issues": [issue.model_dump(mode="json") for issue in lead.issues],
            "products": [product.model_dump() for product in application.products],
            "submission_type": application.submission_type,
            "division_info": application.division_info.model_dump() if application.division_info else None,
            "regulatory_intelligence": application.regulatory_intelligence.model_dump(mode="json"),
        }
    elif lead.lead_type == LeadType.CLINICAL_TRIAL and lead.trial:
        trial = lead.trial
        payload["trial_context"] = {
            "nct_id": trial.nct_id,
            "title": trial.title,
            "phase": trial.phase,
            "status": trial.status,
            "indication": trial.indication,
            "months_since_start": trial.months_since_start,
            "pain_points": [issue.model_dump(mode="json") for issue in lead.issues],
            "biomarker_strategy": trial.biomarker_strategy.model_dump(),
            "competitive": trial.competitive.model_dump(),
            "contact_recommendation": trial.contact_recommendation.model_dump(),
        }
    elif lead.enforcement:
        payload["enforcement_context"] = lead.enforcement.model_dump()

    return payload


@router.get("")
async def list_leads(
    priority: Optional[str] = None,
    type: Optional[str] = None,
    sub_type: Optional[str] = Query(None, alias="subType"),
    therapeutic: Optional[str] = None,
    biomarker: Optional[str] = None,
    phase: Optional[str] = None,
    submission_type: Optional[str] = Query(None, alias="submissionType"),
    high_value: Optional[str] = Query(None, alias="highValue"),
) -> List[Lead]:
    """
    List leads of the current snapshot.

    All filters are optional and combine with AND. `biomarker` accepts
    true/false or an enrichment strategy such as MIXED_POPULATION.
    """
    try:
        return get_lead_repository().filter(
            priority=priority,
            lead_type=type,
            sub_type=sub_type,
            therapeutic=therapeutic,
            biomarker=biomarker,
            phase=phase,
            submission_type=submission_type,
            high_value=high_value,
        )
    except Exception as e:
        logger.error(f"Error fetching leads: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error fetching leads: {str(e)}")


@router.get("/{lead_id}")
async def get_lead(lead_id: str) -> Lead:
    try:
        lead = get_lead_repository().get(lead_id)
        if lead is None:
            raise HTTPException(status_code=404, detail=f"Lead not found: {lead_id}")
        return lead
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching lead {lead_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error fetching lead: {str(e)}")


@router.get("/{lead_id}/email")
async def get_lead_email(lead_id: str):
    """Rendered outreach email for one lead; 404 when the id is not in the current snapshot."""
    try:
        lead = get_lead_repository().get(lead_id)
        if lead is None:
            raise HTTPException(status_code=404, detail=f"Lead not found: {lead_id}")
        return email_payload(lead)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching email for {lead_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error fetching email: {str(e)}")
