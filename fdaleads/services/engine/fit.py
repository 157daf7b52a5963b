"""
Trial inclusion, sub type, priority, urgency reason and high-value ladders.

`analyze_trial` runs the full trial pipeline (profile, pain points, scores)
and then evaluates the ladders below against the result. A trial becomes a
lead only when it passes every gate and at least one fit rule; the first
matching fit rule is recorded as the fit reason.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from ...models.leads import (
    BiomarkerStrategy,
    CompetitiveLandscape,
    ContactRecommendation,
    EndpointProfile,
    Issue,
    NewTrialOpportunity,
    PhaseInfo,
    Priority,
)
from ...models.records import TrialRecord
from ...utils.dates import parse_date
from .pain_points import (
    COMPETITIVE_PRESSURE,
    PHASE2_STAGNATION,
    RECRUITMENT_CHALLENGES,
    calculate_priority_ranking,
    calculate_urgency_score,
    detect_competitive_pressure,
    detect_complex_biomarker_strategy,
    detect_design_complexity,
    detect_endpoint_challenges,
    detect_new_trial_opportunities,
    detect_phase2_stagnation,
    detect_recruitment_challenges,
    detect_regulatory_gaps,
    next_contact_window,
    opportunity_issue,
    recommend_contact,
    sponsor_trials,
)
from .rules import Rule, first_match, first_rule
from .scoring import clamp_to_band, normalize_company_name
from .therapeutic import classify_trial_area
from .trials import (
    analyze_biomarker_strategy,
    analyze_endpoints,
    assess_competitive_landscape,
    calculate_complexity,
    classify_phase,
    identify_design_challenges,
    is_high_value_sponsor,
    months_since_start,
    primary_indication,
)

VALID_INTERVENTION_TYPES = ("DRUG", "BIOLOGICAL", "COMBINATION_PRODUCT")
VALID_STATUSES = ("NOT_YET_RECRUITING", "RECRUITING", "ACTIVE_NOT_RECRUITING", "SUSPENDED", "TERMINATED")
EARLY_PHASES = ("PHASE1", "EARLY_PHASE1")
ADVANCED_PHASES = ("PHASE2", "PHASE3")
TERMINAL_STATUSES = ("SUSPENDED", "TERMINATED")


@dataclass
class TrialAnalysis:
    """
    Fully profiled trial.

    Attributes:
        pain_points: Detector output, with new-trial opportunities appended
        urgency_score: 0-100 urgency before banding
        score: urgency_score held in the band of `priority`
        included / fit_reason: Outcome of the gates and fit rules
    """
    record: TrialRecord
    company_name: str
    phase: PhaseInfo
    indication: str
    therapeutic_area: str
    months_since_start: Optional[int]
    biomarkers: BiomarkerStrategy
    endpoints: EndpointProfile
    design_challenges: List[Issue]
    competitive: CompetitiveLandscape
    complexity_score: int
    opportunities: List[NewTrialOpportunity]
    pain_points: List[Issue]
    urgency_score: int
    priority_ranking: int
    contact: ContactRecommendation
    contact_window: str
    included: bool = False
    fit_reason: str = ""
    sub_type: str = ""
    priority: Priority = Priority.LOW
    score: int = 0
    urgency_reason: str = ""
    is_high_value: bool = False
    last_activity: Optional[str] = None

    def pain_point(self, kind: str) -> Optional[Issue]:
        return next((p for p in self.pain_points if p.type == kind), None)

    def has_severity(self, severity: str) -> bool:
        return any(p.severity == severity for p in self.pain_points)

    @property
    def stagnation(self) -> Optional[Issue]:
        return self.pain_point(PHASE2_STAGNATION)

    @property
    def status(self) -> str:
        return self.record.status


GATES = [
    Rule("interventional", lambda t: t.record.study_type == "INTERVENTIONAL", "Not interventional study"),
    Rule(
        "drug_intervention",
        lambda t: any(i.type in VALID_INTERVENTION_TYPES for i in t.record.interventions),
        "No drug/biological intervention",
    ),
    Rule("relevant_status", lambda t: t.status in VALID_STATUSES, "Not in relevant status"),
]

FIT_RULES = [
    Rule("critical_pain_point", lambda t: t.has_severity("CRITICAL"), "Critical development issues identified"),
    Rule(
        "new_trial_opportunity",
        lambda t: bool(t.opportunities),
        lambda t: f"New trial opportunity: {t.opportunities[0].type}",
    ),
    Rule("phase2_stagnation", lambda t: t.stagnation is not None, "Phase 2 stagnation detected"),
    Rule("high_urgency", lambda t: t.urgency_score >= 70, lambda t: f"High urgency score: {t.urgency_score}"),
    Rule(
        "complex_biomarkers",
        lambda t: t.biomarkers.uses_biomarkers and t.biomarkers.complexity == "HIGH",
        "Complex biomarker strategy requiring FDA alignment",
    ),
    Rule(
        "early_phase",
        lambda t: t.phase.primary in EARLY_PHASES or t.phase.is_combo,
        lambda t: f"Early phase trial: {t.phase.primary}{'/combo' if t.phase.is_combo else ''}",
    ),
    Rule("phase2", lambda t: t.phase.primary == "PHASE2", "Phase 2 trial with optimization potential"),
    Rule("phase3", lambda t: t.phase.primary == "PHASE3", "Pivotal Phase 3 trial"),
    Rule(
        "high_complexity",
        lambda t: t.complexity_score >= 60,
        lambda t: f"High complexity score: {t.complexity_score}",
    ),
    Rule(
        "critical_competition",
        lambda t: any(p.type == COMPETITIVE_PRESSURE and p.urgency == "critical" for p in t.pain_points),
        "Critical competitive pressure",
    ),
    Rule(
        "recruitment_challenges",
        lambda t: any(p.type == RECRUITMENT_CHALLENGES and p.severity == "HIGH" for p in t.pain_points),
        "Significant recruitment challenges",
    ),
    Rule(
        "recently_started",
        lambda t: t.months_since_start is not None and t.months_since_start <= 6,
        "Recently started trial",
    ),
    Rule("pre_recruitment", lambda t: t.status == "NOT_YET_RECRUITING", "Pre-recruitment optimization window"),
    Rule("rescue", lambda t: t.status in TERMINAL_STATUSES, "Trial issues requiring strategic intervention"),
    Rule(
        "high_value_sponsor",
        lambda t: is_high_value_sponsor(t.record.sponsor) and t.phase.primary in ADVANCED_PHASES,
        "High-value sponsor with advanced development",
    ),
]

SUB_TYPE_RULES = [
    Rule("opportunity", lambda t: bool(t.opportunities), lambda t: f"{t.phase.primary}_{t.opportunities[0].type}"),
    Rule("stagnation", lambda t: t.stagnation is not None, lambda t: f"{t.phase.primary}_STAGNATION"),
    Rule("critical", lambda t: t.has_severity("CRITICAL"), lambda t: f"{t.phase.primary}_CRITICAL"),
    Rule("biomarker", lambda t: t.biomarkers.uses_biomarkers, lambda t: f"{t.phase.primary}_BIOMARKER"),
]

PRIORITY_LADDER = [
    Rule(
        "critical",
        lambda t: t.has_severity("CRITICAL")
        or any(o.urgency == "critical" for o in t.opportunities)
        or t.status in TERMINAL_STATUSES,
        Priority.CRITICAL,
    ),
    Rule(
        "high",
        lambda t: (t.stagnation is not None and t.stagnation.severity == "HIGH")
        or any(p.urgency == "high" for p in t.pain_points)
        or bool(t.opportunities)
        or t.phase.primary == "PHASE3"
        or (t.status == "NOT_YET_RECRUITING" and t.phase.primary != "PHASE4"),
        Priority.HIGH,
    ),
    Rule(
        "medium",
        lambda t: t.phase.primary == "PHASE2"
        or t.biomarkers.uses_biomarkers
        or t.complexity_score >= 60
        or len(t.pain_points) >= 2,
        Priority.MEDIUM,
    ),
]


def _first_description(t: TrialAnalysis, predicate) -> Optional[str]:
    issue = next((p for p in t.pain_points if predicate(p)), None)
    return issue.description if issue else None


URGENCY_REASON_RULES = [
    Rule(
        "critical_pain_point",
        lambda t: t.has_severity("CRITICAL"),
        lambda t: _first_description(t, lambda p: p.severity == "CRITICAL"),
    ),
    Rule("opportunity", lambda t: bool(t.opportunities), lambda t: t.opportunities[0].description),
    Rule("stagnation", lambda t: t.stagnation is not None, lambda t: t.stagnation.description),
    Rule(
        "high_urgency",
        lambda t: any(p.urgency == "high" for p in t.pain_points),
        lambda t: _first_description(t, lambda p: p.urgency == "high"),
    ),
    Rule(
        "pre_recruitment",
        lambda t: t.status == "NOT_YET_RECRUITING",
        "Pre-recruitment phase offers critical window for protocol optimization",
    ),
    Rule(
        "suspended",
        lambda t: t.status == "SUSPENDED",
        "Trial suspension requires immediate strategic review and remediation",
    ),
    Rule(
        "terminated",
        lambda t: t.status == "TERMINATED",
        "Trial termination analysis can inform future development strategy",
    ),
    Rule(
        "pivotal",
        lambda t: t.phase.primary == "PHASE3",
        "Pivotal trial design decisions directly impact approval probability",
    ),
    Rule(
        "early_phase",
        lambda t: t.phase.primary in EARLY_PHASES,
        "Early phase decisions establish foundation for entire development program",
    ),
    Rule(
        "phase2",
        lambda t: t.phase.primary == "PHASE2",
        "Phase 2 optimization critical for successful Phase 3 advancement",
    ),
    Rule(
        "biomarkers",
        lambda t: t.biomarkers.uses_biomarkers,
        "Biomarker strategy requires FDA alignment for regulatory success",
    ),
]
DEFAULT_URGENCY_REASON = "Clinical development optimization opportunity identified"

HIGH_VALUE_RULES = [
    Rule("critical_pain_point", lambda t: t.has_severity("CRITICAL"), True),
    Rule("opportunity", lambda t: bool(t.opportunities), True),
    Rule("urgent", lambda t: t.urgency_score >= 80, True),
    Rule("stagnation", lambda t: t.stagnation is not None, True),
    Rule(
        "complex_biomarkers",
        lambda t: t.biomarkers.enrichment_strategy == "MIXED_POPULATION" or t.biomarkers.complexity == "HIGH",
        True,
    ),
    Rule("large_pivotal", lambda t: t.phase.primary == "PHASE3" and t.record.enrollment > 200, True),
    Rule("complex_early", lambda t: t.phase.primary in EARLY_PHASES and t.complexity_score >= 70, True),
    Rule(
        "pre_recruitment_advanced",
        lambda t: t.status == "NOT_YET_RECRUITING" and t.phase.primary in ADVANCED_PHASES,
        True,
    ),
    Rule("many_pain_points", lambda t: len(t.pain_points) >= 3, True),
    Rule(
        "high_value_sponsor",
        lambda t: is_high_value_sponsor(t.record.sponsor)
        and t.phase.primary in ADVANCED_PHASES
        and t.record.enrollment >= 100,
        True,
    ),
]


def evaluate_fit(analysis: TrialAnalysis):
    """Returns (included, reason): a failed gate's reason, or the first fit rule's."""
    for gate in GATES:
        if not gate.matches(analysis):
            return False, gate.resolve(analysis)
    rule = first_rule(FIT_RULES, analysis)
    if rule is None:
        return False, "Does not meet enhanced inclusion criteria"
    return True, rule.resolve(analysis)


def trial_sub_type(analysis: TrialAnalysis) -> str:
    return first_match(
        SUB_TYPE_RULES,
        analysis,
        default=f"{analysis.phase.primary}_{analysis.status or 'UNKNOWN'}",
    )


def trial_priority(analysis: TrialAnalysis) -> Priority:
    return first_match(PRIORITY_LADDER, analysis, default=Priority.LOW)


def trial_urgency_reason(analysis: TrialAnalysis) -> str:
    return first_match(URGENCY_REASON_RULES, analysis, default=DEFAULT_URGENCY_REASON) or DEFAULT_URGENCY_REASON


def is_high_value_trial(analysis: TrialAnalysis) -> bool:
    return first_match(HIGH_VALUE_RULES, analysis, default=False)


def detect_pain_points(
    trial: TrialRecord,
    phase: PhaseInfo,
    biomarkers: BiomarkerStrategy,
    opportunities: List[NewTrialOpportunity],
    all_trials: List[TrialRecord],
    today: Optional[date] = None,
) -> List[Issue]:
    """Every detector, in a fixed order, followed by the opportunity issues."""
    found = [
        detect_phase2_stagnation(trial, phase, sponsor_trials(trial, all_trials), today),
        detect_recruitment_challenges(trial, phase, today),
        detect_complex_biomarker_strategy(biomarkers),
        detect_endpoint_challenges(trial, phase),
        detect_competitive_pressure(trial, phase, all_trials, today),
        detect_regulatory_gaps(trial, phase, today),
        detect_design_complexity(trial),
    ]
    return [issue for issue in found if issue is not None] + [opportunity_issue(o) for o in opportunities]


def analyze_trial(
    trial: TrialRecord,
    all_trials: Optional[List[TrialRecord]] = None,
    today: Optional[date] = None,
) -> TrialAnalysis:
    """
    Profile one trial against the rest of its batch. Pure.

    Args:
        trial: Decoded study
        all_trials: The whole fetched batch, used for sponsor history and
            competitor counts; defaults to just this trial
        today: Reference date for every elapsed-time rule
    """
    today = today or date.today()
    all_trials = all_trials if all_trials is not None else [trial]

    phase = classify_phase(trial.phases)
    biomarkers = analyze_biomarker_strategy(trial.eligibility.criteria, trial.display_title)
    endpoints = analyze_endpoints(trial)
    opportunities = detect_new_trial_opportunities(trial, phase, today)
    pain_points = detect_pain_points(trial, phase, biomarkers, opportunities, all_trials, today)
    last_activity = parse_date(trial.last_update_posted_date) or parse_date(trial.first_posted_date)

    analysis = TrialAnalysis(
        record=trial,
        company_name=normalize_company_name(trial.sponsor),
        phase=phase,
        indication=primary_indication(trial),
        therapeutic_area=classify_trial_area(trial.conditions, trial.display_title),
        months_since_start=months_since_start(trial, today),
        biomarkers=biomarkers,
        endpoints=endpoints,
        design_challenges=identify_design_challenges(trial, phase, biomarkers, endpoints),
        competitive=assess_competitive_landscape(trial, phase, endpoints),
        complexity_score=calculate_complexity(trial, phase, biomarkers, endpoints),
        opportunities=opportunities,
        pain_points=pain_points,
        urgency_score=calculate_urgency_score(pain_points, phase, trial, today),
        priority_ranking=calculate_priority_ranking(pain_points, phase),
        contact=recommend_contact(pain_points, phase),
        contact_window=next_contact_window(pain_points),
        last_activity=last_activity.isoformat() if last_activity else None,
    )
    analysis.included, analysis.fit_reason = evaluate_fit(analysis)
    analysis.sub_type = trial_sub_type(analysis)
    analysis.priority = trial_priority(analysis)
    analysis.score = clamp_to_band(analysis.priority, analysis.urgency_score)
    analysis.urgency_reason = trial_urgency_reason(analysis)
    analysis.is_high_value = is_high_value_trial(analysis)
    return analysis
