"""
Lead Export

Serializes a lead collection as a JSON document or a flat CSV sheet for
download from /api/export/leads.
"""
import csv
import io
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..models.leads import Lead

EXPORT_FORMATS = ("json", "csv")
EXPORT_BASENAME = "fda_leads"

CSV_COLUMNS = [
    "rank",
    "id",
    "company",
    "lead_type",
    "sub_type",
    "priority",
    "score",
    "therapeutic_area",
    "identifier",
    "status",
    "submission_type",
    "phase",
    "urgency_reason",
    "opportunity_value",
    "timeline_urgency",
    "key_stakeholders",
    "last_activity",
    "contact_window",
    "created_at",
]


def export_filename(fmt: str) -> str:
    return f"{EXPORT_BASENAME}.{fmt}"


def export_json(leads: List[Lead], filters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Export document: timestamp, count, the filters applied and the leads."""
    return {
        "export_date": datetime.now(timezone.utc).isoformat(),
        "total_leads": len(leads),
        "filters": filters or {},
        "leads": [lead.model_dump(mode="json") for lead in leads],
    }


def _identifier(lead: Lead) -> str:
    if lead.application:
        return lead.application.application_number
    if lead.trial:
        return lead.trial.nct_id
    if lead.enforcement:
        return lead.enforcement.recall_number
    return ""


def _status(lead: Lead) -> str:
    if lead.application:
        return lead.application.status
    if lead.trial:
        return lead.trial.status
    if lead.enforcement:
        return lead.enforcement.classification
    return ""


def csv_row(lead: Lead) -> Dict[str, Any]:
    application = lead.application
    return {
        "rank": lead.rank or "",
        "id": lead.id,
        "company": lead.company_name,
        "lead_type": lead.lead_type.value,
        "sub_type": lead.sub_type,
        "priority": lead.priority.value,
        "score": lead.score,
        "therapeutic_area": lead.therapeutic_area,
        "identifier": _identifier(lead),
        "status": _status(lead),
        "submission_type": application.submission_type if application else "",
        "phase": lead.trial.phase if lead.trial else "",
        "urgency_reason": lead.urgency_reason,
        "opportunity_value": application.estimated_opportunity_value if application else "",
        "timeline_urgency": application.timeline_urgency if application else "",
        "key_stakeholders": "; ".join(application.key_stakeholders) if application else "",
        "last_activity": lead.last_activity or "",
        "contact_window": lead.contact_window,
        "created_at": lead.created_at,
    }


def export_csv(leads: List[Lead]) -> str:
    """Header row plus one quoted row per lead."""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_COLUMNS, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writeheader()
    for lead in leads:
        writer.writerow(csv_row(lead))
    return buffer.getvalue()
