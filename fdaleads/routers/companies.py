"""
Companies Router

Endpoints:
- GET /api/companies - Company summaries, most touchpoints first
- GET /api/companies/{name} - Enriched company profile
"""
import logging
from typing import List

from fastapi import APIRouter, HTTPException

from ..models.companies import CompanyProfile, CompanySummary
from ..services.companies import company_profile, company_summary
from ..services.repository import get_lead_repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/companies", tags=["companies"])


@router.get("")
async def list_companies() -> List[CompanySummary]:
    try:
        companies = get_lead_repository().snapshot.companies.values()
        ranked = sorted(companies, key=lambda c: (-c.touchpoints, c.name))
        return [company_summary(company) for company in ranked]
    except Exception as e:
        logger.error(f"Error listing companies: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error listing companies: {str(e)}")


@router.get("/{name}")
async def get_company(name: str) -> CompanyProfile:
    """
    Company profile: therapeutic focus, totals, regulatory profile, challenges,
    recommended approach, risk tier and opportunities.

    The name is matched case-insensitively and after legal-suffix
    normalization, so "Teva Pharmaceuticals, Inc." finds TEVA.
    """
    try:
        company = get_lead_repository().get_company(name)
        if company is None:
            raise HTTPException(status_code=404, detail=f"Company not found: {name}")
        return company_profile(company)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching company {name}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error fetching company: {str(e)}")
