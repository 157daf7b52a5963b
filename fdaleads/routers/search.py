"""
Search Router

GET /api/search?q= - case-insensitive substring search over company names,
urgency reasons, therapeutic areas, identifiers, products and indications.
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException

from ..services.repository import SEARCH_LIMIT, get_lead_repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["search"])


@router.get("/search")
async def search_leads(q: Optional[str] = None):
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail="Search query required")
    try:
        results = get_lead_repository().search(q, limit=SEARCH_LIMIT)
        return {"query": q, "count": len(results), "results": results}
    except Exception as e:
        logger.error(f"Search failed for {q!r}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Search failed: {str(e)}")
