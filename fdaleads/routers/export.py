"""
Export Router

GET /api/export/leads?format=json|csv&priority=&type= - download the current
leads as an attachment.
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse, Response

from ..services.export import EXPORT_FORMATS, export_csv, export_filename, export_json
from ..services.repository import get_lead_repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/export", tags=["export"])


@router.get("/leads")
async def export_leads(format: str = "json", priority: Optional[str] = None, type: Optional[str] = None):
    fmt = format.lower()
    if fmt not in EXPORT_FORMATS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported export format '{format}'; expected one of {', '.join(EXPORT_FORMATS)}",
        )
    try:
        leads = get_lead_repository().filter(priority=priority, lead_type=type)
        headers = {"Content-Disposition": f'attachment; filename="{export_filename(fmt)}"'}
        if fmt == "csv":
            return Response(content=export_csv(leads), media_type="text/csv", headers=headers)
        return JSONResponse(
            content=export_json(leads, {"priority": priority, "type": type}),
            headers=headers,
        )
    except Exception as e:
        logger.error(f"Error exporting leads: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Export failed: {str(e)}")
