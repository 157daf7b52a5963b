"""
Enforcement report classification: warning letters, recalls and GMP
inspection findings.
"""
import hashlib
from dataclasses import dataclass, field
from typing import Dict, Optional

from ...models.leads import EnforcementDetails, Issue, LeadType, Priority
from ...models.records import EnforcementRecord
from ...utils.dates import parse_date
from .scoring import clamp_to_band, normalize_company_name

ID_PREFIXES = {
    LeadType.WARNING_LETTER: "warning",
    LeadType.RECALL: "recall",
    LeadType.INSPECTION_FINDING: "inspection",
}


@dataclass
class EnforcementAnalysis:
    """
    Classified enforcement report.

    Attributes:
        flags: Company flags this report sets (urgent, compliance, quality)
    """
    record: EnforcementRecord
    lead_id: str
    lead_type: LeadType
    company_name: str
    sub_type: str
    priority: Priority
    score: int
    urgency_reason: str
    issue: Issue
    details: EnforcementDetails
    last_activity: Optional[str] = None
    flags: Dict[str, bool] = field(default_factory=dict)


def enforcement_lead_id(lead_type: LeadType, record: EnforcementRecord) -> str:
    """Stable id: recall number, else event id, else a digest of the report."""
    key = record.recall_number or record.event_id
    if not key:
        raw = "|".join([record.recalling_firm, record.product_description, record.reason_for_recall,
                        record.report_date, record.recall_initiation_date])
        key = hashlib.sha1(raw.encode("utf-8")).hexdigest()[:12]
    return f"{ID_PREFIXES[lead_type]}-{key}"


def _details(record: EnforcementRecord) -> EnforcementDetails:
    voluntary = None
    if record.voluntary_mandated:
        voluntary = record.voluntary_mandated.lower().startswith("voluntary")
    return EnforcementDetails(
        recall_number=record.recall_number,
        classification=record.classification,
        status=record.status,
        product_description=record.product_description,
        reason=record.reason_for_recall,
        report_date=record.report_date,
        initiation_date=record.recall_initiation_date,
        voluntary=voluntary,
        distribution_pattern=record.distribution_pattern,
        code_info=record.code_info,
    )


def _iso(value: str) -> Optional[str]:
    parsed = parse_date(value)
    return parsed.isoformat() if parsed else None


def classify_warning_letter(record: EnforcementRecord) -> EnforcementAnalysis:
    priority = Priority.CRITICAL
    return EnforcementAnalysis(
        record=record,
        lead_id=enforcement_lead_id(LeadType.WARNING_LETTER, record),
        lead_type=LeadType.WARNING_LETTER,
        company_name=normalize_company_name(record.recalling_firm),
        sub_type=record.classification or "UNCLASSIFIED",
        priority=priority,
        score=clamp_to_band(priority, 95),
        urgency_reason="FDA enforcement action requires immediate response",
        issue=Issue(
            type="WARNING_LETTER",
            severity="CRITICAL",
            description=record.reason_for_recall or "FDA enforcement action",
            next_step="Warning letter response and compliance remediation",
            urgency="critical",
            details={
                "product": record.product_description,
                "classification": record.classification,
                "distribution_pattern": record.distribution_pattern,
            },
        ),
        details=_details(record),
        last_activity=_iso(record.report_date),
        flags={"urgent": True, "compliance": True},
    )


def classify_recall(record: EnforcementRecord) -> EnforcementAnalysis:
    class_one = record.classification == "Class I"
    priority = Priority.CRITICAL if class_one else Priority.HIGH
    classification = record.classification or "Unclassified"
    return EnforcementAnalysis(
        record=record,
        lead_id=enforcement_lead_id(LeadType.RECALL, record),
        lead_type=LeadType.RECALL,
        company_name=normalize_company_name(record.recalling_firm),
        sub_type=record.classification or "UNCLASSIFIED",
        priority=priority,
        score=clamp_to_band(priority, 90 if class_one else 80),
        urgency_reason=f"{classification} recall requiring comprehensive response",
        issue=Issue(
            type="RECALL",
            severity="CRITICAL" if class_one else "HIGH",
            description=record.reason_for_recall or f"{classification} recall",
            next_step="Recall management and corrective action planning",
            urgency="critical" if class_one else "high",
            details={"product": record.product_description, "classification": record.classification},
        ),
        details=_details(record),
        last_activity=_iso(record.recall_initiation_date),
        flags={"quality": True},
    )


def classify_inspection(record: EnforcementRecord) -> EnforcementAnalysis:
    priority = Priority.MEDIUM
    return EnforcementAnalysis(
        record=record,
        lead_id=enforcement_lead_id(LeadType.INSPECTION_FINDING, record),
        lead_type=LeadType.INSPECTION_FINDING,
        company_name=normalize_company_name(record.recalling_firm),
        sub_type="GMP_ISSUE",
        priority=priority,
        score=clamp_to_band(priority, 70),
        urgency_reason="GMP compliance gaps require proactive remediation",
        issue=Issue(
            type="GMP Compliance Issue",
            severity="MEDIUM",
            description=record.reason_for_recall,
            next_step="Inspection readiness and GMP remediation",
            urgency="medium",
        ),
        details=_details(record),
        last_activity=_iso(record.report_date),
        flags={"quality": True},
    )


CLASSIFIERS = {
    LeadType.WARNING_LETTER: classify_warning_letter,
    LeadType.RECALL: classify_recall,
    LeadType.INSPECTION_FINDING: classify_inspection,
}


def classify_enforcement(lead_type: LeadType, record: EnforcementRecord) -> EnforcementAnalysis:
    return CLASSIFIERS[LeadType(lead_type)](record)
