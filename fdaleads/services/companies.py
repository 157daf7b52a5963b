"""
Company aggregation.

A Company collects every included lead that names it (keyed by normalized
name), the therapeutic areas those leads touch, and three flags: urgent
(a CRITICAL application or a warning letter), quality (recall or GMP
finding) and compliance (warning letter). After the generation pass the
aggregate feeds score boosts and the company profile endpoint.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from ..models.companies import CompanyProfile, CompanySummary, RegulatoryProfile
from ..models.leads import Issue, LeadType, Priority
from .engine.applications import ApplicationAnalysis
from .engine.enforcement import EnforcementAnalysis
from .engine.fit import TrialAnalysis
from .engine.rules import Rule, first_match
from .engine.scoring import clamp_to_band, normalize_company_name

TOUCHPOINT_BOOST = 5
URGENT_BOOST = 10
COMPLIANCE_BOOST = 15


@dataclass
class Company:
    """
    Aggregate of one company's leads.

    Attributes:
        touchpoints: Number of leads attributed to the company
        lead_ids: In processing order
    """
    name: str
    applications: List[ApplicationAnalysis] = field(default_factory=list)
    trials: List[TrialAnalysis] = field(default_factory=list)
    warning_letters: List[EnforcementAnalysis] = field(default_factory=list)
    recalls: List[EnforcementAnalysis] = field(default_factory=list)
    inspections: List[EnforcementAnalysis] = field(default_factory=list)
    therapeutic_areas: Set[str] = field(default_factory=set)
    has_urgent_issues: bool = False
    has_quality_issues: bool = False
    has_compliance_issues: bool = False
    touchpoints: int = 0
    lead_ids: List[str] = field(default_factory=list)

    def add_application(self, lead_id: str, analysis: ApplicationAnalysis):
        self._touch(lead_id)
        self.applications.append(analysis)
        self.therapeutic_areas.add(analysis.therapeutic_area)
        self.has_urgent_issues = self.has_urgent_issues or analysis.priority == Priority.CRITICAL

    def add_trial(self, lead_id: str, analysis: TrialAnalysis):
        self._touch(lead_id)
        self.trials.append(analysis)
        self.therapeutic_areas.add(analysis.therapeutic_area)

    def add_enforcement(self, lead_id: str, analysis: EnforcementAnalysis):
        self._touch(lead_id)
        if analysis.lead_type == LeadType.WARNING_LETTER:
            self.warning_letters.append(analysis)
        elif analysis.lead_type == LeadType.RECALL:
            self.recalls.append(analysis)
        else:
            self.inspections.append(analysis)
        self.has_urgent_issues = self.has_urgent_issues or analysis.flags.get("urgent", False)
        self.has_quality_issues = self.has_quality_issues or analysis.flags.get("quality", False)
        self.has_compliance_issues = self.has_compliance_issues or analysis.flags.get("compliance", False)

    def _touch(self, lead_id: str):
        self.touchpoints += 1
        self.lead_ids.append(lead_id)


class CompanyRegistry:
    """Builds Company aggregates during one generation pass."""

    def __init__(self):
        self.companies: Dict[str, Company] = {}

    def get_or_create(self, name: str) -> Company:
        key = normalize_company_name(name)
        if key not in self.companies:
            self.companies[key] = Company(name=key)
        return self.companies[key]


def boosted_score(score: int, priority: Priority, company: Optional[Company]) -> int:
    """Apply company-level boosts, then hold the result inside the priority band."""
    if company is None:
        return score
    if company.touchpoints > 1:
        score += TOUCHPOINT_BOOST * company.touchpoints
    if company.has_urgent_issues:
        score += URGENT_BOOST
    if company.has_compliance_issues:
        score += COMPLIANCE_BOOST
    return clamp_to_band(priority, score)


def all_challenges(company: Company) -> List[Issue]:
    challenges: List[Issue] = []
    for application in company.applications:
        challenges.extend(application.issues)
    for trial in company.trials:
        challenges.extend(trial.design_challenges)
    if company.warning_letters:
        challenges.append(Issue(
            type="WARNING_LETTER",
            severity="CRITICAL",
            description="Active FDA warning letter requiring response",
        ))
    if company.recalls:
        challenges.append(Issue(
            type="PRODUCT_RECALL",
            severity="HIGH",
            description="Product recall requiring comprehensive response",
        ))
    return challenges


def primary_challenge(company: Company) -> Optional[Issue]:
    challenges = all_challenges(company)
    for severity in ("CRITICAL", "HIGH"):
        match = next((c for c in challenges if c.severity == severity), None)
        if match is not None:
            return match
    return challenges[0] if challenges else None


def risk_profile(company: Company) -> str:
    score = 30 * len(company.warning_letters) + 25 * len(company.recalls)
    for application in company.applications:
        if application.status == "COMPLETE_RESPONSE_LETTER":
            score += 20
        elif application.status == "REFUSE_TO_FILE":
            score += 15
    for trial in company.trials:
        if any(c.severity == "CRITICAL" for c in trial.design_challenges + trial.pain_points):
            score += 15

    if score >= 50:
        return "CRITICAL"
    if score >= 30:
        return "HIGH"
    if score >= 15:
        return "MEDIUM"
    return "LOW"


def _critical_challenges(company: Company) -> List[Issue]:
    found = [i for a in company.applications for i in a.issues if i.severity == "CRITICAL"]
    found += [c for t in company.trials for c in t.design_challenges if c.severity == "CRITICAL"]
    return found


APPROACH_RULES = [
    Rule(
        "warning_letter",
        lambda c: bool(c.warning_letters),
        "IMMEDIATE: Warning letter response and comprehensive compliance remediation",
    ),
    Rule("recall", lambda c: bool(c.recalls), "URGENT: Recall management and quality system enhancement"),
    Rule(
        "critical_challenge",
        lambda c: bool(_critical_challenges(c)),
        lambda c: f"Critical support needed: {_critical_challenges(c)[0].description}",
    ),
    Rule("urgent", lambda c: c.has_urgent_issues, "High-priority FDA regulatory support for ongoing submissions"),
    Rule(
        "mixed_population",
        lambda c: any(t.biomarkers.enrichment_strategy == "MIXED_POPULATION" for t in c.trials),
        "Biomarker enrichment strategy optimization",
    ),
    Rule("quality", lambda c: c.has_quality_issues, "Quality system enhancement and inspection readiness"),
]
DEFAULT_APPROACH = "Standard FDA regulatory intelligence and submission optimization"


def recommended_approach(company: Company) -> str:
    return first_match(APPROACH_RULES, company, default=DEFAULT_APPROACH)


def _is_rare(trial: TrialAnalysis) -> bool:
    condition = trial.record.primary_condition.lower()
    return "rare" in condition or "orphan" in condition


def _is_adaptive(trial: TrialAnalysis) -> bool:
    return "adaptive" in trial.record.display_title.lower() or any(
        c.type == "ADAPTIVE_DESIGN_COMPLEXITY" for c in trial.design_challenges
    )


OPPORTUNITY_RULES = [
    Rule(
        "biomarkers",
        lambda c: any(t.biomarkers.uses_biomarkers for t in c.trials),
        "Biomarker strategy optimization for FDA alignment",
    ),
    Rule(
        "rare_disease",
        lambda c: any(_is_rare(t) for t in c.trials),
        "Orphan drug designation and expedited pathway strategy",
    ),
    Rule(
        "oncology",
        lambda c: "ONCOLOGY" in c.therapeutic_areas,
        "Competitive intelligence for crowded oncology market",
    ),
    Rule(
        "quality",
        lambda c: c.has_quality_issues,
        "Proactive quality system enhancement to prevent future issues",
    ),
    Rule(
        "adaptive",
        lambda c: any(_is_adaptive(t) for t in c.trials),
        "Adaptive trial design FDA strategy and statistical planning",
    ),
]


def opportunities(company: Company) -> List[str]:
    return [rule.resolve(company) for rule in OPPORTUNITY_RULES if rule.matches(company)]


def regulatory_profile(company: Company) -> RegulatoryProfile:
    applications = company.applications
    profile = RegulatoryProfile(
        submission_types=sorted({a.submission_type for a in applications}),
        therapeutic_focus=sorted(company.therapeutic_areas),
        fda_interaction_frequency=len(applications),
    )
    if any(a.status in ("COMPLETE_RESPONSE_LETTER", "REFUSE_TO_FILE") for a in applications):
        profile.regulatory_complexity = "HIGH"
        profile.risk_factors.append("Recent FDA actions requiring response")
    if any(len(a.issues) > 2 for a in applications):
        profile.regulatory_complexity = "HIGH"
        profile.risk_factors.append("Multiple regulatory issues identified")
    if len(applications) > 3:
        profile.risk_factors.append("High FDA interaction volume")
    return profile


def company_summary(company: Company) -> CompanySummary:
    return CompanySummary(
        name=company.name,
        touchpoints=company.touchpoints,
        lead_count=len(company.lead_ids),
        therapeutic_areas=sorted(company.therapeutic_areas),
        has_urgent_issues=company.has_urgent_issues,
        has_quality_issues=company.has_quality_issues,
        has_compliance_issues=company.has_compliance_issues,
        risk_profile=risk_profile(company),
    )


def company_profile(company: Company) -> CompanyProfile:
    summary = company_summary(company)
    return CompanyProfile(
        **summary.model_dump(),
        therapeutic_focus=sorted(company.therapeutic_areas),
        total_applications=len(company.applications),
        total_trials=len(company.trials),
        total_warning_letters=len(company.warning_letters),
        total_recalls=len(company.recalls),
        total_inspections=len(company.inspections),
        lead_ids=list(company.lead_ids),
        regulatory_profile=regulatory_profile(company),
        regulatory_challenges=all_challenges(company),
        primary_challenge=primary_challenge(company),
        recommended_approach=recommended_approach(company),
        opportunities=opportunities(company),
    )
