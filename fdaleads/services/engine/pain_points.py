"""
Clinical trial pain-point detectors and the scores derived from them.

Each detector looks at one trial (and, where it needs it, the rest of the
fetched batch) and returns zero or more Issue objects. Severities are always
uppercase; urgencies are lowercase (critical, high, medium, low).
"""
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from ...models.leads import (
    BiomarkerStrategy,
    ContactRecommendation,
    Issue,
    NewTrialOpportunity,
    PhaseInfo,
)
from ...models.records import TrialRecord
from ...utils.dates import months_since
from .scoring import normalize_company_name
from .trials import (
    classify_phase,
    is_similar_indication,
    months_since_start,
    primary_indication,
)

PHASE2_STAGNATION = "phase2_stagnation"
RECRUITMENT_CHALLENGES = "recruitment_challenges"
COMPLEX_BIOMARKER_STRATEGY = "complex_biomarker_strategy"
ENDPOINT_CHALLENGES = "endpoint_challenges"
COMPETITIVE_PRESSURE = "competitive_pressure"
REGULATORY_STRATEGY_GAPS = "regulatory_strategy_gaps"
COMPLEX_TRIAL_DESIGN = "complex_trial_design"

ACTIVE_STATUSES = ("RECRUITING", "ACTIVE_NOT_RECRUITING")

DOSE_KEYWORDS = (
    "dose finding", "dose-finding", "dose escalation", "dose optimization",
    "optimal dose", "maximum tolerated dose", "mtd", "dose expansion",
    "dose de-escalation", "dose response", "dose selection",
)
SELECTION_KEYWORDS = (
    "biomarker", "enrichment", "patient selection", "stratification",
    "companion diagnostic", "predictive marker", "prognostic marker",
)
COMPLEX_CRITERIA = (
    "biomarker positive", "mutation", "expression", "prior therapy",
    "refractory", "resistant", "failure", "progression", "relapsed",
)
ENDPOINT_UNCERTAINTY_KEYWORDS = (
    "exploratory", "feasibility", "pilot", "proof of concept", "poc",
    "preliminary", "surrogate", "biomarker endpoint", "novel endpoint",
    "composite endpoint", "multiple endpoints",
)
BIOMARKER_REQUIREMENTS = (
    "positive", "mutation", "expression", "biomarker", "testing required",
    "companion diagnostic", "genomic", "molecular", "sequencing",
)
PRIOR_THERAPY_REQUIREMENTS = (
    "refractory", "resistant", "relapsed", "failed", "progression",
    "prior lines", "previous treatment", "salvage", "second-line", "third-line",
)
NOVEL_ENDPOINT_KEYWORDS = (
    "novel endpoint", "exploratory endpoint", "biomarker endpoint",
    "composite endpoint", "surrogate endpoint", "patient reported outcome",
    "quality of life", "digital endpoint", "wearable", "real-world evidence",
)
PHASE3_READY_KEYWORDS = (
    "overall survival", "progression-free survival", "objective response rate",
    "complete response", "duration of response", "time to progression",
)
EARLY_STAGE_KEYWORDS = ("feasibility", "proof of concept", "pilot", "dose finding", "safety run-in")
ADAPTIVE_KEYWORDS = (
    "adaptive", "seamless", "platform", "umbrella", "basket",
    "master protocol", "bayesian", "interim adaptation",
)
COMPLEX_RANDOMIZATION = (
    "factorial", "crossover", "stepped wedge", "cluster randomized",
    "multi-arm", "dose escalation with expansion",
)
BIG_PHARMA = (
    "pfizer", "merck", "novartis", "roche", "genentech", "sanofi",
    "gsk", "astrazeneca", "johnson", "abbvie", "bristol", "eli lilly",
)

RECRUITMENT_TIMEFRAMES = {"EARLY_PHASE1": 12, "PHASE1": 12, "PHASE2": 18, "PHASE3": 24}

OPPORTUNITY_DESCRIPTIONS = {
    "FIRST_IN_HUMAN": "Comprehensive IND strategy and early development planning",
    "PRE_RECRUITMENT_OPTIMIZATION": "Protocol optimization and FDA alignment before recruitment",
    "NEW_EARLY_PHASE_TRIAL": "Early phase development strategy and advancement planning",
}

OPPORTUNITY_NEEDS = {
    "FIRST_IN_HUMAN": [
        "IND submission strategy and pre-IND meeting preparation",
        "Starting dose selection and dose escalation methodology",
        "Safety committee protocols and stopping rules",
        "Biomarker strategy for early efficacy signals",
        "Phase 2 design planning and patient population definition",
    ],
    "PRE_RECRUITMENT_OPTIMIZATION": [
        "Protocol review and FDA guidance alignment",
        "Statistical plan optimization and power analysis",
        "Inclusion/exclusion criteria refinement",
        "Site selection and enrollment feasibility assessment",
        "Biomarker strategy and companion diagnostic planning",
    ],
    "NEW_EARLY_PHASE_TRIAL": [
        "Early development strategy and milestone planning",
        "FDA meeting strategy and communication plan",
        "Dose selection and expansion cohort design",
        "Biomarker development and validation pathway",
        "Competitive landscape and differentiation strategy",
    ],
}
DEFAULT_NEEDS = [
    "Regulatory strategy and FDA alignment",
    "Trial design optimization",
    "Development timeline acceleration",
    "Risk mitigation and contingency planning",
]

HIGH_VALUE_PAIN_POINTS = (
    PHASE2_STAGNATION, "first_in_human", "pre_recruitment_optimization",
    COMPLEX_BIOMARKER_STRATEGY, COMPETITIVE_PRESSURE,
)

SEVERITY_POINTS = {"CRITICAL": 25, "HIGH": 15, "MEDIUM": 8, "LOW": 3}
URGENCY_POINTS = {"critical": 15, "high": 10, "medium": 5}


@dataclass
class Finding:
    """Accumulates signals of one detector; the last severity assigned wins."""
    severity: str = "LOW"
    urgency: str = "low"
    parts: List[str] = field(default_factory=list)
    evidence: List[str] = field(default_factory=list)

    def add(self, description: str, severity: Optional[str] = None, urgency: Optional[str] = None):
        self.parts.append(description)
        if severity:
            self.severity = severity
        if urgency:
            self.urgency = urgency

    @property
    def found(self) -> bool:
        return bool(self.parts)

    @property
    def description(self) -> str:
        return " | ".join(self.parts)


def _title(trial: TrialRecord) -> str:
    return trial.display_title.lower()


def _eligibility(trial: TrialRecord) -> str:
    return trial.eligibility.criteria.lower()


def _is_phase2_like(phase: PhaseInfo) -> bool:
    return phase.primary == "PHASE2" or phase.is_combo


def sponsor_trials(trial: TrialRecord, all_trials: List[TrialRecord]) -> List[TrialRecord]:
    """Trials in the batch led by, or in collaboration with, the same sponsor."""
    key = normalize_company_name(trial.sponsor)
    if not key:
        return [trial]
    return [
        t for t in all_trials
        if normalize_company_name(t.sponsor) == key
        or key in (normalize_company_name(c) for c in t.collaborators)
    ]


def detect_phase2_stagnation(
    trial: TrialRecord,
    phase: PhaseInfo,
    company_trials: List[TrialRecord],
    today: Optional[date] = None,
) -> Optional[Issue]:
    if not _is_phase2_like(phase):
        return None

    finding = Finding(severity="MEDIUM")
    indication = primary_indication(trial)
    months = months_since_start(trial, today)
    title = _title(trial)

    same_indication = [
        t for t in company_trials
        if _is_phase2_like(classify_phase(t.phases))
        and is_similar_indication(indication, primary_indication(t))
    ]
    if len(same_indication) >= 2:
        finding.add(
            f"Multiple Phase 2 trials ({len(same_indication)}) in {indication} suggests "
            f"dose/endpoint optimization challenges",
            severity="HIGH",
        )
        finding.evidence.append(f"{len(same_indication)} Phase 2 trials in similar indications")

    if months is not None and months > 30:
        finding.add(f"Extended Phase 2 duration ({months} months) indicates development challenges")
        finding.evidence.append(f"{months} months in Phase 2 development")

    if any(k in title for k in DOSE_KEYWORDS):
        finding.add("Dose optimization focus suggests ongoing Phase 2 challenges")
        finding.evidence.append("Dose optimization focus in trial design")

    if any(k in title for k in SELECTION_KEYWORDS):
        finding.add("Biomarker strategy development indicates patient selection challenges")
        finding.evidence.append("Biomarker/patient selection focus")

    if trial.status in ("SUSPENDED", "TERMINATED"):
        finding.add(f"Trial {trial.status.lower()} - requires immediate strategic review", severity="CRITICAL")
        finding.evidence.append(f"Trial status: {trial.status}")

    # Enrollment signals
    if months is not None and months > 24 and trial.status == "RECRUITING":
        finding.add(f"Extended recruitment ({months} months) suggests patient identification challenges")
        finding.evidence.append(f"{months} months of recruitment for {trial.enrollment} patients")
    if months is not None and 0 < trial.enrollment < 100 and months > 18:
        finding.add("Small trial with extended recruitment indicates rare patient population")
        finding.evidence.append(f"Small trial ({trial.enrollment} patients) with long recruitment")
    criteria_count = sum(1 for c in COMPLEX_CRITERIA if c in _eligibility(trial))
    if criteria_count >= 3:
        finding.add("Complex eligibility criteria may limit patient pool")
        finding.evidence.append(f"{criteria_count} complex eligibility requirements")

    # Endpoint signals
    if any(k in title for k in ENDPOINT_UNCERTAINTY_KEYWORDS):
        finding.add("Exploratory/novel endpoints suggest regulatory pathway uncertainty")
        finding.evidence.append("Endpoint development focus in trial design")
    outcome_count = len(trial.primary_outcomes)
    if outcome_count > 2:
        finding.add(f"Multiple primary endpoints ({outcome_count}) suggest regulatory uncertainty")
        finding.evidence.append(f"{outcome_count} primary endpoints")

    if not finding.found:
        return None
    return Issue(
        type=PHASE2_STAGNATION,
        severity=finding.severity,
        description=finding.description,
        next_step="Phase 2 optimization and advancement strategy",
        urgency="critical" if finding.severity == "CRITICAL" else "high",
        evidence=finding.evidence,
        specific_needs=[
            "Root cause analysis of Phase 2 delays",
            "Dose optimization and patient enrichment strategy",
            "Endpoint refinement for Phase 3 readiness",
            "FDA meeting strategy for advancement pathway",
        ],
    )


def detect_new_trial_opportunities(
    trial: TrialRecord,
    phase: PhaseInfo,
    today: Optional[date] = None,
) -> List[NewTrialOpportunity]:
    opportunities = []
    months = months_since_start(trial, today)

    if months is not None and months <= 6 and (phase.primary == "PHASE1" or phase.is_combo):
        opportunities.append(NewTrialOpportunity(
            type="NEW_EARLY_PHASE_TRIAL",
            severity="HIGH",
            description=(
                f"New {'Phase 1/2' if phase.is_combo else 'Phase 1'} trial recently started - "
                f"optimal time for FDA strategy alignment"
            ),
            urgency="high",
        ))

    if trial.status == "NOT_YET_RECRUITING":
        opportunities.append(NewTrialOpportunity(
            type="PRE_RECRUITMENT_OPTIMIZATION",
            severity="HIGH",
            description="Trial not yet recruiting - critical window for protocol optimization and FDA alignment",
            urgency="high",
        ))

    title = _title(trial)
    if "first in human" in title or "first-in-human" in title or "fih" in title:
        opportunities.append(NewTrialOpportunity(
            type="FIRST_IN_HUMAN",
            severity="CRITICAL",
            description="First-in-human study requires comprehensive IND strategy and FDA alignment",
            urgency="critical",
        ))

    return opportunities


def opportunity_issue(opportunity: NewTrialOpportunity) -> Issue:
    return Issue(
        type=opportunity.type.lower(),
        severity=opportunity.severity,
        description=opportunity.description,
        next_step=OPPORTUNITY_DESCRIPTIONS.get(opportunity.type, "Clinical development strategic support"),
        urgency=opportunity.urgency,
        window=opportunity.window,
        specific_needs=list(OPPORTUNITY_NEEDS.get(opportunity.type, DEFAULT_NEEDS)),
    )


def detect_recruitment_challenges(
    trial: TrialRecord,
    phase: PhaseInfo,
    today: Optional[date] = None,
) -> Optional[Issue]:
    finding = Finding()
    months = months_since_start(trial, today)
    eligibility = _eligibility(trial)

    if months is not None and trial.enrollment > 0:
        expected = RECRUITMENT_TIMEFRAMES.get(phase.primary, 18)
        if months > expected and trial.status == "RECRUITING":
            severity = "HIGH" if months > expected * 1.5 else "MEDIUM"
            finding.add(
                f"Extended {phase.primary} recruitment ({months} months) suggests patient identification challenges",
                severity=severity,
                urgency=severity.lower(),
            )

    if trial.enrollment < 50 and phase.primary != "PHASE1":
        finding.add("Small patient population requires specialized recruitment strategy",
                    severity="MEDIUM", urgency="medium")

    requirement_count = sum(1 for r in BIOMARKER_REQUIREMENTS if r in eligibility)
    if requirement_count >= 2:
        finding.add("Multiple biomarker requirements may limit eligible patient pool",
                    severity="HIGH" if requirement_count >= 4 else "MEDIUM", urgency="medium")

    if any(r in eligibility for r in PRIOR_THERAPY_REQUIREMENTS):
        finding.add("Late-line therapy requirements present recruitment complexity",
                    severity="MEDIUM", urgency="medium")

    if trial.location_count < 10 and trial.enrollment > 100:
        finding.add("Limited site network for target enrollment size", severity="MEDIUM", urgency="medium")

    if not finding.found:
        return None
    return Issue(
        type=RECRUITMENT_CHALLENGES,
        severity=finding.severity,
        description=finding.description,
        next_step="Patient identification and enrollment optimization",
        urgency=finding.urgency,
        specific_needs=[
            "Patient population analysis and site selection",
            "Eligibility criteria optimization",
            "Competitive enrollment landscape assessment",
            "Digital patient identification strategies",
        ],
    )


def detect_complex_biomarker_strategy(biomarkers: BiomarkerStrategy) -> Optional[Issue]:
    if not (biomarkers.uses_biomarkers and biomarkers.complexity == "HIGH"):
        return None
    return Issue(
        type=COMPLEX_BIOMARKER_STRATEGY,
        severity="HIGH",
        description=f"Complex {biomarkers.enrichment_strategy} biomarker strategy requires FDA alignment",
        next_step="Biomarker strategy optimization and regulatory pathway clarity",
        urgency="high",
        specific_needs=[
            "Biomarker validation strategy and regulatory precedents",
            "Companion diagnostic development pathway",
            "Patient enrichment vs. all-comers strategy analysis",
            "Labeling and market access implications",
        ],
    )


def detect_endpoint_challenges(trial: TrialRecord, phase: PhaseInfo) -> Optional[Issue]:
    finding = Finding()
    title = _title(trial)
    outcomes = trial.primary_outcomes

    if any(k in title for k in NOVEL_ENDPOINT_KEYWORDS):
        finding.add("Novel endpoints require FDA validation and precedent analysis", severity="HIGH", urgency="high")

    if len(outcomes) > 2:
        finding.add(f"Multiple primary endpoints ({len(outcomes)}) suggest regulatory uncertainty",
                    severity="HIGH" if len(outcomes) > 3 else "MEDIUM", urgency="medium")

    if phase.primary == "PHASE2":
        phase3_ready = any(
            k in title or any(k in o.measure.lower() for o in outcomes)
            for k in PHASE3_READY_KEYWORDS
        )
        if not phase3_ready:
            finding.add("Phase 2 endpoints may need alignment with Phase 3 strategy",
                        severity="MEDIUM", urgency="medium")

    if any(k in title for k in EARLY_STAGE_KEYWORDS):
        finding.add("Early-stage endpoints require progression planning to registrational studies",
                    severity="MEDIUM", urgency="medium")

    if not finding.found:
        return None
    return Issue(
        type=ENDPOINT_CHALLENGES,
        severity=finding.severity,
        description=finding.description,
        next_step="Endpoint optimization and FDA alignment strategy",
        urgency=finding.urgency,
        specific_needs=[
            "Endpoint validation and regulatory acceptance analysis",
            "Surrogate vs. clinical endpoint strategy",
            "Composite endpoint design and powering",
            "Real-world evidence integration opportunities",
        ],
    )


def detect_competitive_pressure(
    trial: TrialRecord,
    phase: PhaseInfo,
    all_trials: List[TrialRecord],
    today: Optional[date] = None,
) -> Optional[Issue]:
    finding = Finding()
    indication = primary_indication(trial)

    competitors = [
        t for t in all_trials
        if is_similar_indication(indication, primary_indication(t))
        and classify_phase(t.phases).primary == phase.primary
        and normalize_company_name(t.sponsor) != normalize_company_name(trial.sponsor)
        and t.status in ACTIVE_STATUSES
    ]
    if len(competitors) >= 3:
        finding.add(
            f"{len(competitors)} competing {phase.primary} trials in {indication} create time pressure",
            severity="HIGH" if len(competitors) >= 5 else "MEDIUM",
            urgency="high",
        )

    def _recently_completed(other: TrialRecord) -> bool:
        completed = other.completion_date or other.primary_completion_date
        months = months_since(completed, today)
        return months is not None and 0 <= months < 12

    recent_completions = [
        t for t in all_trials
        if is_similar_indication(indication, primary_indication(t))
        and classify_phase(t.phases).primary == "PHASE3"
        and _recently_completed(t)
    ]
    if recent_completions:
        finding.add(f"Recent Phase 3 completions in {indication} suggest imminent competitive approvals",
                    severity="HIGH", urgency="critical")

    if any(any(b in t.sponsor.lower() for b in BIG_PHARMA) for t in competitors):
        finding.add("Big pharma competition requires differentiation strategy", severity="HIGH", urgency="high")

    if not finding.found:
        return None
    return Issue(
        type=COMPETITIVE_PRESSURE,
        severity=finding.severity,
        description=finding.description,
        next_step="Competitive differentiation and acceleration strategy",
        urgency=finding.urgency,
        specific_needs=[
            "Competitive landscape mapping and timeline analysis",
            "Differentiation strategy and positioning",
            "Expedited pathway opportunities",
            "Market access and commercialization timing",
        ],
    )


def detect_regulatory_gaps(
    trial: TrialRecord,
    phase: PhaseInfo,
    today: Optional[date] = None,
) -> Optional[Issue]:
    finding = Finding()
    needs: List[str] = []
    indication = primary_indication(trial).lower()

    if phase.primary in ("PHASE1", "EARLY_PHASE1"):
        finding.add("Early phase development requires IND strategy and Phase 2 planning",
                    severity="MEDIUM", urgency="medium")
        needs.extend([
            "IND submission optimization and FDA pre-IND meeting strategy",
            "Dose escalation design and safety committee protocols",
            "Biomarker development strategy for Phase 2 readiness",
            "Patient population definition and expansion cohort planning",
        ])
    elif phase.primary == "PHASE2":
        needs.extend([
            "FDA guidance on Phase 3 endpoint acceptability",
            "Patient enrichment strategy and biomarker development",
            "Dose selection methodology and FDA precedents",
            "Go/no-go criteria and decision frameworks",
        ])
        months = months_since_start(trial, today)
        if months is not None and months > 24:
            finding.add("Extended Phase 2 development requires strategic review and advancement planning",
                        severity="HIGH", urgency="high")
            needs.append("Root cause analysis and development acceleration strategies")
        else:
            finding.add("Phase 2 development requires FDA alignment for Phase 3 advancement",
                        severity="MEDIUM", urgency="medium")
    elif phase.primary == "PHASE3":
        finding.add("Pivotal trial requires comprehensive FDA alignment and approval strategy",
                    severity="HIGH", urgency="high")
        needs.extend([
            "FDA agreement on primary endpoints and analysis plan",
            "Advisory committee preparation and strategy",
            "NDA/BLA submission planning and timeline optimization",
            "Post-marketing commitment strategy",
        ])

    if len(trial.interventions) > 1 or any("combination" in i.name.lower() for i in trial.interventions):
        finding.add("Combination therapy requires specialized regulatory strategy",
                    severity="HIGH" if finding.severity == "HIGH" else "MEDIUM")
        needs.append("Combination therapy regulatory pathway and FDA precedents")

    if "rare" in indication or "orphan" in indication:
        finding.add("Rare disease development offers expedited pathway opportunities")
        needs.extend([
            "Orphan drug designation strategy",
            "FDA flexibility in trial design and endpoints",
            "Breakthrough therapy designation assessment",
        ])

    title = _title(trial)
    if "first-in-class" in title or "novel mechanism" in title:
        finding.add("First-in-class therapy requires comprehensive regulatory strategy",
                    severity="HIGH", urgency="high")
        needs.extend([
            "Novel mechanism of action regulatory precedents",
            "FDA guidance on first-in-class development expectations",
            "Risk-benefit framework and safety considerations",
        ])

    if not finding.found:
        return None
    return Issue(
        type=REGULATORY_STRATEGY_GAPS,
        severity=finding.severity,
        description=finding.description,
        next_step="Regulatory pathway optimization and FDA strategy",
        urgency=finding.urgency,
        specific_needs=needs,
    )


def detect_design_complexity(trial: TrialRecord) -> Optional[Issue]:
    finding = Finding()
    title = _title(trial)
    types = {i.type for i in trial.interventions}

    if any(k in title for k in ADAPTIVE_KEYWORDS):
        finding.add("Adaptive trial design requires specialized statistical and regulatory expertise",
                    severity="HIGH", urgency="high")
    if any(k in title for k in COMPLEX_RANDOMIZATION):
        finding.add("Complex randomization design requires careful statistical planning",
                    severity="HIGH" if finding.severity == "HIGH" else "MEDIUM", urgency="medium")
    if trial.enrollment > 500:
        finding.add("Large trial requires interim analysis and DMC strategy", severity="MEDIUM", urgency="medium")
    if len(trial.interventions) > 2:
        finding.add("Multiple intervention arms increase design complexity", severity="MEDIUM", urgency="medium")
    if "COMBINATION_PRODUCT" in types or ("DRUG" in types and "DEVICE" in types):
        finding.add("Combination product requires CDER/CDRH coordination", severity="HIGH", urgency="high")

    if not finding.found:
        return None
    return Issue(
        type=COMPLEX_TRIAL_DESIGN,
        severity=finding.severity,
        description=finding.description,
        next_step="Trial design optimization and regulatory strategy",
        urgency=finding.urgency,
        specific_needs=[
            "Statistical plan optimization and power analysis",
            "Adaptive design considerations and FDA guidance",
            "Interim analysis strategy and DMC charter",
            "Protocol amendment minimization strategies",
        ],
    )


def calculate_urgency_score(
    pain_points: List[Issue],
    phase: PhaseInfo,
    trial: TrialRecord,
    today: Optional[date] = None,
) -> int:
    """Trial urgency on a 0-100 scale, from a base of 50."""
    score = 50
    for point in pain_points:
        score += SEVERITY_POINTS.get(point.severity, 0)
        score += URGENCY_POINTS.get(point.urgency or "", 0)

    if phase.primary == "PHASE3":
        score += 15
    if phase.primary == "EARLY_PHASE1":
        score += 12
    if phase.is_combo:
        score += 8

    if trial.status == "NOT_YET_RECRUITING":
        score += 15
    if trial.status in ("SUSPENDED", "TERMINATED"):
        score += 20

    months = months_since_start(trial, today)
    if months is not None:
        if months < 6:
            score += 10
        if months > 36:
            score += 8

    if any(p.type == COMPETITIVE_PRESSURE and p.urgency == "critical" for p in pain_points):
        score += 12

    return min(score, 100)


def calculate_priority_ranking(pain_points: List[Issue], phase: PhaseInfo) -> int:
    ranking = 50
    ranking += 25 * sum(1 for p in pain_points if p.severity == "CRITICAL")
    ranking += 15 * sum(1 for p in pain_points if p.urgency in ("critical", "high"))
    ranking += {"PHASE3": 20, "EARLY_PHASE1": 15, "PHASE2": 10}.get(phase.primary, 0)
    ranking += 10 * sum(1 for p in pain_points if p.type in HIGH_VALUE_PAIN_POINTS)
    if any(p.window == "immediate" for p in pain_points):
        ranking += 15
    return min(ranking, 100)


def recommend_contact(pain_points: List[Issue], phase: PhaseInfo) -> ContactRecommendation:
    recommendation = ContactRecommendation()
    critical = next((p for p in pain_points if p.severity == "CRITICAL"), None)
    urgent = next((p for p in pain_points if p.urgency in ("critical", "high")), None)

    if critical is not None:
        recommendation.timing = "Contact immediately"
        recommendation.message_framing = "Critical development issue requiring immediate attention"
        recommendation.approach = "Emergency consultation offering"
        if critical.type == "first_in_human":
            recommendation.stakeholders = ["Chief Medical Officer", "Clinical Development", "Regulatory Affairs"]
            recommendation.value_proposition = "Comprehensive IND strategy and FDA alignment for program success"
        elif critical.type == PHASE2_STAGNATION:
            recommendation.stakeholders = ["Clinical Development", "Regulatory Affairs", "Business Development"]
            recommendation.value_proposition = "Phase 2 optimization and advancement strategy to accelerate timeline"
    elif urgent is not None:
        recommendation.timing = "Contact within 1 week"
        recommendation.message_framing = "Time-sensitive development opportunity"
        if urgent.type == "pre_recruitment_optimization":
            recommendation.stakeholders = ["Clinical Operations", "Clinical Development", "Biostatistics"]
            recommendation.value_proposition = "Protocol optimization before recruitment to avoid costly amendments"
            recommendation.approach = "Pre-trial optimization consulting"
        elif urgent.type == "new_early_phase_trial":
            recommendation.stakeholders = ["Clinical Development", "Regulatory Affairs"]
            recommendation.value_proposition = "Early phase strategy optimization for maximum program value"

    if phase.primary == "PHASE2":
        recommendation.stakeholders += ["Biostatistics", "Medical Affairs"]
        if "Phase 2" not in recommendation.value_proposition:
            recommendation.value_proposition = "Phase 2 optimization for successful Phase 3 transition"
    elif phase.primary == "PHASE3":
        recommendation.stakeholders += ["Regulatory Affairs", "Medical Affairs", "Commercial"]
        recommendation.value_proposition = "Pivotal trial success and approval timeline optimization"

    if any(p.type == COMPLEX_BIOMARKER_STRATEGY for p in pain_points):
        recommendation.stakeholders += ["Translational Medicine", "Companion Diagnostics"]
        recommendation.message_framing = "Biomarker strategy requiring FDA alignment"

    return recommendation


def next_contact_window(pain_points: List[Issue]) -> str:
    if any(p.urgency in ("immediate", "critical") for p in pain_points):
        return "Contact immediately"
    if any(p.urgency == "high" for p in pain_points):
        return "Contact within 1 week"
    return "Contact within 1 month"
