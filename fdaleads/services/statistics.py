"""
Aggregation / Statistics Service

Recomputes summary counts from a complete lead collection. Every function is a
pure pass over its inputs; nothing is maintained incrementally.
"""
from collections import Counter
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from ..models.leads import ENFORCEMENT_LEAD_TYPES, Lead, LeadType, Priority
from ..utils.dates import days_since, parse_date
from .companies import Company, risk_profile
from .engine.applications import HIGH_VALUE_OPPORTUNITY

TRIAL_PHASES = ["EARLY_PHASE1", "PHASE1", "PHASE2", "PHASE3"]
TRIAL_STATUSES = ["NOT_YET_RECRUITING", "RECRUITING", "ACTIVE_NOT_RECRUITING", "SUSPENDED", "TERMINATED"]
SUBMISSION_TYPES = ["NDA", "BLA", "ANDA", "SUPPLEMENTAL", "OTHER"]


def _count(leads: List[Lead], predicate) -> int:
    return sum(1 for lead in leads if predicate(lead))


def _phase(lead: Lead) -> Optional[str]:
    return lead.trial.phase if lead.trial else None


def _trial_status(lead: Lead) -> Optional[str]:
    return lead.trial.status if lead.trial else None


def _submission_type(lead: Lead) -> Optional[str]:
    return lead.application.submission_type if lead.application else None


def _application_status(lead: Lead) -> Optional[str]:
    return lead.application.status if lead.application else None


def uses_biomarkers(lead: Lead) -> bool:
    return bool(lead.trial and lead.trial.biomarker_strategy.uses_biomarkers)


def has_issue(lead: Lead, issue_type: str) -> bool:
    return any(issue.type == issue_type for issue in lead.issues)


def by_lead_type(leads: List[Lead]) -> Dict[str, int]:
    return {
        "drug_applications": _count(leads, lambda l: l.lead_type == LeadType.DRUG_APPLICATION),
        "clinical_trials": _count(leads, lambda l: l.lead_type == LeadType.CLINICAL_TRIAL),
        "warning_letters": _count(leads, lambda l: l.lead_type == LeadType.WARNING_LETTER),
        "recalls": _count(leads, lambda l: l.lead_type == LeadType.RECALL),
        "inspections": _count(leads, lambda l: l.lead_type == LeadType.INSPECTION_FINDING),
    }


def by_priority(leads: List[Lead]) -> Dict[str, int]:
    return {p.value.lower(): _count(leads, lambda l, p=p: l.priority == p) for p in Priority}


def by_submission_type(leads: List[Lead]) -> Dict[str, int]:
    return {t.lower(): _count(leads, lambda l, t=t: _submission_type(l) == t) for t in SUBMISSION_TYPES}


def by_phase(leads: List[Lead]) -> Dict[str, int]:
    return {p.lower(): _count(leads, lambda l, p=p: _phase(l) == p) for p in TRIAL_PHASES}


def enhanced_trial_insights(leads: List[Lead]) -> Dict[str, Any]:
    """Trial-only breakdown: phase, status, pain points, timing and value."""
    trials = [lead for lead in leads if lead.lead_type == LeadType.CLINICAL_TRIAL]

    def months(lead: Lead) -> Optional[int]:
        return lead.trial.months_since_start if lead.trial else None

    phases = by_phase(trials)
    phases["phase1_2_combo"] = _count(trials, lambda l: bool(l.trial and l.trial.phase_combo))

    return {
        "total_trial_leads": len(trials),
        "by_phase": phases,
        "by_status": {s.lower(): _count(trials, lambda l, s=s: _trial_status(l) == s) for s in TRIAL_STATUSES},
        "pain_point_analysis": {
            "phase2_stagnation": _count(trials, lambda l: has_issue(l, "phase2_stagnation")),
            "new_trial_opportunities": _count(trials, lambda l: bool(l.trial and l.trial.new_trial_opportunities)),
            "recruitment_challenges": _count(trials, lambda l: has_issue(l, "recruitment_challenges")),
            "biomarker_complexity": _count(trials, lambda l: has_issue(l, "complex_biomarker_strategy")),
            "competitive_pressure": _count(trials, lambda l: has_issue(l, "competitive_pressure")),
        },
        "timing_insights": {
            "recently_started": _count(trials, lambda l: months(l) is not None and months(l) <= 6),
            "long_running": _count(trials, lambda l: months(l) is not None and months(l) > 36),
            "pre_recruitment_window": _count(trials, lambda l: _trial_status(l) == "NOT_YET_RECRUITING"),
        },
        "value_metrics": {
            "high_value_trials": _count(trials, lambda l: l.is_high_value),
            "critical_priority": _count(trials, lambda l: l.priority == Priority.CRITICAL),
            "high_urgency_score": _count(trials, lambda l: l.score >= 80),
            "average_urgency_score": round(sum(l.score for l in trials) / len(trials)) if trials else 0,
        },
    }


def generation_statistics(leads: List[Lead], companies: Mapping[str, Company]) -> Dict[str, Any]:
    """Summary published with every generation pass."""
    return {
        "total_leads": len(leads),
        "total_companies": len(companies),
        "by_lead_type": by_lead_type(leads),
        "by_priority": by_priority(leads),
        "by_submission_type": by_submission_type(leads),
        "by_phase": by_phase(leads),
        "companies_with_multiple_issues": sum(1 for c in companies.values() if c.touchpoints > 1),
        "companies_with_compliance_issues": sum(1 for c in companies.values() if c.has_compliance_issues),
        "high_value_leads": _count(leads, lambda l: l.is_high_value),
        "biomarker_trials": _count(leads, uses_biomarkers),
        "enhanced_trial_insights": enhanced_trial_insights(leads),
    }


def leads_by_month(leads: List[Lead]) -> Dict[str, int]:
    """Histogram of last activity by YYYY-MM, oldest month first."""
    months = Counter()
    for lead in leads:
        parsed = parse_date(lead.last_activity)
        if parsed is not None:
            months[parsed.strftime("%Y-%m")] += 1
    return dict(sorted(months.items()))


def comprehensive_analytics(
    leads: List[Lead],
    companies: Mapping[str, Company],
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Nested analytics for the dashboard's analytics view."""
    applications = [l for l in leads if l.lead_type == LeadType.DRUG_APPLICATION]
    trials = [l for l in leads if l.lead_type == LeadType.CLINICAL_TRIAL]

    def strategy(lead: Lead):
        return lead.trial.biomarker_strategy if lead.trial else None

    markers = Counter()
    for lead in trials:
        markers.update(lead.trial.biomarker_strategy.specific_markers)

    def recent(lead: Lead) -> bool:
        elapsed = days_since(lead.last_activity, today)
        return elapsed is not None and elapsed < 30

    recent_leads = [l for l in leads if recent(l)]
    risks = [risk_profile(c) for c in companies.values()]

    return {
        "overview": {
            "total_leads": len(leads),
            "total_companies": len(companies),
            "critical_situations": _count(leads, lambda l: l.priority == Priority.CRITICAL),
            "high_value_leads": _count(leads, lambda l: l.is_high_value or l.score >= 80),
            "average_score": round(sum(l.score for l in leads) / len(leads)) if leads else 0,
        },
        "by_type": {
            "drug_applications": {
                "total": len(applications),
                "with_crl": _count(applications, lambda l: _application_status(l) == "COMPLETE_RESPONSE_LETTER"),
                "with_rtf": _count(applications, lambda l: _application_status(l) == "REFUSE_TO_FILE"),
                "under_review": _count(applications, lambda l: _application_status(l) == "FILED_UNDER_REVIEW"),
                "by_submission_type": by_submission_type(applications),
            },
            "clinical_trials": {
                "total": len(trials),
                "with_biomarkers": _count(trials, uses_biomarkers),
                "by_phase": by_phase(trials),
                "by_status": {
                    s.lower(): _count(trials, lambda l, s=s: _trial_status(l) == s) for s in TRIAL_STATUSES[:3]
                },
            },
            "enforcement": {
                "warning_letters": _count(leads, lambda l: l.lead_type == LeadType.WARNING_LETTER),
                "recalls": _count(leads, lambda l: l.lead_type == LeadType.RECALL),
                "inspections": _count(leads, lambda l: l.lead_type == LeadType.INSPECTION_FINDING),
            },
        },
        "therapeutic_distribution": dict(Counter(l.therapeutic_area or "UNSPECIFIED" for l in leads)),
        "biomarker_insights": {
            "total_with_biomarkers": _count(trials, uses_biomarkers),
            "mixed_population": _count(trials, lambda l: strategy(l).enrichment_strategy == "MIXED_POPULATION"),
            "enriched_only": _count(trials, lambda l: strategy(l).enrichment_strategy == "ENRICHED_ONLY"),
            "complex_biomarker": _count(trials, lambda l: strategy(l).complexity == "HIGH"),
            "specific_markers": dict(markers),
        },
        "company_insights": {
            "with_multiple_issues": sum(1 for c in companies.values() if c.touchpoints > 1),
            "with_urgent_issues": sum(1 for c in companies.values() if c.has_urgent_issues),
            "with_quality_issues": sum(1 for c in companies.values() if c.has_quality_issues),
            "with_compliance_issues": sum(1 for c in companies.values() if c.has_compliance_issues),
            "high_risk": sum(1 for r in risks if r in ("CRITICAL", "HIGH")),
            "risk_distribution": {level: risks.count(level) for level in ("CRITICAL", "HIGH", "MEDIUM", "LOW")},
        },
        "opportunities": {
            "immediate_response_needed": _count(leads, lambda l: l.priority == Priority.CRITICAL),
            "high_value_targets": _count(leads, lambda l: l.score >= 80),
            "biomarker_consulting": _count(
                trials,
                lambda l: uses_biomarkers(l)
                or any(c.type == "COMPLEX_BIOMARKER_DESIGN" for c in l.trial.design_challenges),
            ),
            "quality_remediation": _count(leads, lambda l: l.lead_type in ENFORCEMENT_LEAD_TYPES),
            "pre_submission_optimization": _count(
                leads,
                lambda l: _trial_status(l) == "NOT_YET_RECRUITING" or _application_status(l) == "FILED_UNDER_REVIEW",
            ),
            "expedited_pathway_candidates": _count(
                trials, lambda l: bool(l.trial.competitive.expedited_pathways)
            ),
        },
        "regulatory_intelligence": {
            "crl_responses_needed": _count(leads, lambda l: has_issue(l, "CRL_RESPONSE_REQUIRED")),
            "rtf_remediations": _count(leads, lambda l: has_issue(l, "RTF_REMEDIATION")),
            "active_reviews": _count(leads, lambda l: _application_status(l) == "FILED_UNDER_REVIEW"),
            "priority_reviews": _count(
                applications, lambda l: l.application.review_priority in ("PRIORITY", "BREAKTHROUGH")
            ),
        },
        "business_opportunities": {
            "total_estimated_value": sum(
                l.application.estimated_opportunity_value for l in applications
            ),
            "high_value_count": _count(
                applications, lambda l: l.application.estimated_opportunity_value >= HIGH_VALUE_OPPORTUNITY
            ),
            "critical_urgent_count": _count(leads, lambda l: l.priority == Priority.CRITICAL),
            "immediate_contact_needed": _count(leads, lambda l: "immediately" in (l.contact_window or "")),
        },
        "timing": {
            "recent_activity_30_days": len(recent_leads),
            "urgent_in_recent": _count(recent_leads, lambda l: l.priority in (Priority.CRITICAL, Priority.HIGH)),
            "leads_by_month": leads_by_month(leads),
        },
    }
