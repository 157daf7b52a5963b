"""
Clinical trial profiling: phase, indication, biomarker strategy, endpoints,
design challenges, competitive landscape and complexity.
"""
import re
from datetime import date
from typing import Dict, List, Optional

from ...models.leads import (
    BiomarkerStrategy,
    CompetitiveLandscape,
    Endpoint,
    EndpointProfile,
    Issue,
    PhaseInfo,
)
from ...models.records import TrialRecord
from ...utils.dates import months_since, parse_date
from .rules import Rule, all_matches, first_match, keyword_rule

UNKNOWN_PHASE = "UNKNOWN"

# Order matters: EARLYPHASE1 also contains PHASE1
PHASE_RULES = [
    Rule("early_phase1", lambda s: "EARLYPHASE1" in s, PhaseInfo(primary="EARLY_PHASE1")),
    Rule("phase1_2", lambda s: "PHASE1" in s and "PHASE2" in s,
         PhaseInfo(primary="PHASE1", secondary="PHASE2", is_combo=True)),
    Rule("phase2_3", lambda s: "PHASE2" in s and "PHASE3" in s,
         PhaseInfo(primary="PHASE2", secondary="PHASE3", is_combo=True)),
    Rule("phase3", lambda s: "PHASE3" in s, PhaseInfo(primary="PHASE3")),
    Rule("phase2", lambda s: "PHASE2" in s, PhaseInfo(primary="PHASE2")),
    Rule("phase1", lambda s: "PHASE1" in s, PhaseInfo(primary="PHASE1")),
    Rule("phase4", lambda s: "PHASE4" in s, PhaseInfo(primary="PHASE4")),
]

INDICATION_PATTERNS = [
    re.compile(r"in (?:patients with )?([^,]+)", re.IGNORECASE),
    re.compile(r"for (?:the treatment of )?([^,]+)", re.IGNORECASE),
    re.compile(r"treatment of ([^,]+)", re.IGNORECASE),
    re.compile(r"therapy for ([^,]+)", re.IGNORECASE),
]

CANCER_TERMS = ("cancer", "carcinoma", "sarcoma", "lymphoma", "leukemia", "melanoma")
ORGAN_TERMS = ("breast", "lung", "colon", "prostate", "ovarian", "pancreatic", "liver", "kidney")

BIOMARKER_TYPE_PATTERNS = {
    "genetic": re.compile(r"mutation|variant|polymorphism|genotype|allele|chromosome"),
    "protein": re.compile(r"expression|overexpression|positive|negative|\bhigh\b|\blow\b"),
    "genomic": re.compile(r"genomic|sequencing|\bngs\b|\bwgs\b|\bwes\b|panel"),
    "liquid_biopsy": re.compile(r"ctdna|cfdna|liquid biopsy|circulating"),
    "immunologic": re.compile(r"pd-l1|pd-1|\bmsi\b|\btmb\b|\bhla\b|immune"),
}

KNOWN_MARKERS = [
    "her2", "egfr", "pd-l1", "pd-1", "brca1", "brca2", "alk", "ros1",
    "kras", "nras", "braf", "met", "ret", "ntrk", "fgfr", "pik3ca",
    "msi-h", "tmb-h", "mmr", "tp53", "apc", "cdh1", "vhl", "kit",
]
_MARKER_RES = {m: re.compile(r"(?<![a-z0-9])" + re.escape(m) + r"(?![a-z0-9])") for m in KNOWN_MARKERS}

ENRICHMENT_RULES = [
    Rule("mixed_population", lambda t: "positive" in t["text"] and "negative" in t["text"], "MIXED_POPULATION"),
    Rule("enriched_only", lambda t: "positive" in t["text"] or "enriched" in t["text"], "ENRICHED_ONLY"),
    Rule("all_comers", lambda t: "all-comers" in t["text"] or "unselected" in t["text"], "ALL_COMERS"),
    Rule("stratified", lambda t: t["uses_biomarkers"], "BIOMARKER_STRATIFIED"),
]

NOVEL_ENDPOINT_TERMS = ("novel", "new", "composite", "combined", "proprietary")
SURROGATE_ENDPOINT_TERMS = ("biomarker", "expression", "level", "concentration", "surrogate")

LARGE_PHARMA = (
    "pfizer", "merck", "novartis", "roche", "sanofi", "gsk",
    "astrazeneca", "johnson", "abbvie", "bristol",
)
HIGH_VALUE_SPONSOR_TERMS = (
    "therapeutics", "biopharma", "biopharmaceutical", "sciences", "pharmaceuticals",
    "biotech", "inc.", "corporation", "limited",
)


def classify_phase(phases: List[str]) -> PhaseInfo:
    """Phase summary from raw phase tags, e.g. ["PHASE1", "PHASE2"] -> PHASE1 combo."""
    normalized = [re.sub(r"[^A-Z0-9|]", "", str(p).upper()) for p in phases]
    info = first_match(PHASE_RULES, "|".join(normalized), default=PhaseInfo(primary=UNKNOWN_PHASE))
    return info.model_copy()


def primary_indication(trial: TrialRecord) -> str:
    if trial.conditions:
        return trial.conditions[0]
    title = trial.display_title
    for pattern in INDICATION_PATTERNS:
        match = pattern.search(title)
        if match:
            return match.group(1).strip()
    return "Unknown"


def is_similar_indication(first: str, second: str) -> bool:
    """Same normalized indication, or two cancers of the same organ."""
    if not first or not second:
        return False
    a = re.sub(r"[^a-z0-9]", "", first.lower())
    b = re.sub(r"[^a-z0-9]", "", second.lower())
    if a == b:
        return True
    if any(t in a for t in CANCER_TERMS) and any(t in b for t in CANCER_TERMS):
        return any(organ in a and organ in b for organ in ORGAN_TERMS)
    return False


def trial_start_date(trial: TrialRecord) -> Optional[date]:
    """First parseable of start, first submitted and first posted dates."""
    for value in (trial.start_date, trial.first_submit_date, trial.first_posted_date):
        parsed = parse_date(value)
        if parsed is not None:
            return parsed
    return None


def months_since_start(trial: TrialRecord, today: Optional[date] = None) -> Optional[int]:
    start = trial_start_date(trial)
    return months_since(start, today) if start else None


def analyze_biomarker_strategy(eligibility: str, title: str) -> BiomarkerStrategy:
    text = f"{eligibility} {title}".lower()
    types = {name: bool(pattern.search(text)) for name, pattern in BIOMARKER_TYPE_PATTERNS.items()}
    markers = [m.upper() for m in KNOWN_MARKERS if _MARKER_RES[m].search(text)]
    uses_biomarkers = any(types.values())
    enrichment = first_match(ENRICHMENT_RULES, {"text": text, "uses_biomarkers": uses_biomarkers}, default="NONE")

    type_count = sum(types.values())
    if type_count >= 3 or len(markers) >= 3:
        complexity = "HIGH"
    elif type_count >= 2 or len(markers) >= 2:
        complexity = "MEDIUM"
    else:
        complexity = "LOW"

    return BiomarkerStrategy(
        uses_biomarkers=uses_biomarkers,
        biomarker_types=types,
        specific_markers=markers,
        enrichment_strategy=enrichment,
        complexity=complexity,
    )


def analyze_endpoints(trial: TrialRecord) -> EndpointProfile:
    primary = []
    for outcome in trial.primary_outcomes:
        measure = outcome.measure.lower()
        is_novel = any(term in measure for term in NOVEL_ENDPOINT_TERMS)
        is_surrogate = any(term in measure for term in SURROGATE_ENDPOINT_TERMS)
        primary.append(Endpoint(
            measure=outcome.measure,
            time_frame=outcome.time_frame,
            description=outcome.description,
            is_novel=is_novel,
            is_surrogate=is_surrogate,
            requires_validation=is_novel or is_surrogate,
        ))

    if any(e.is_novel and e.is_surrogate for e in primary):
        complexity = "HIGH"
    elif any(e.is_novel or e.is_surrogate for e in primary):
        complexity = "MEDIUM"
    else:
        complexity = "LOW"

    return EndpointProfile(
        primary=primary,
        secondary_count=trial.secondary_outcome_count,
        has_novel_endpoints=any(e.is_novel for e in primary),
        has_surrogate_endpoints=any(e.is_surrogate for e in primary),
        complexity=complexity,
    )


def _is_adaptive(trial: TrialRecord) -> bool:
    title = trial.display_title.lower()
    return "adaptive" in title or "seamless" in title


def _has_combination_product(trial: TrialRecord) -> bool:
    types = {i.type for i in trial.interventions}
    return "COMBINATION_PRODUCT" in types or ("DRUG" in types and "DEVICE" in types)


DESIGN_CHALLENGE_RULES = [
    Rule("mixed_population",
         lambda c: c["biomarkers"].enrichment_strategy == "MIXED_POPULATION",
         Issue(type="COMPLEX_BIOMARKER_DESIGN", severity="CRITICAL",
               description="Mixed biomarker population requires careful FDA alignment",
               next_step="Analysis of FDA enrichment guidance interpretation across divisions")),
    Rule("novel_endpoints",
         lambda c: c["endpoints"].has_novel_endpoints,
         Issue(type="NOVEL_ENDPOINT_VALIDATION", severity="HIGH",
               description="Novel endpoints require extensive FDA validation",
               next_step="Precedent analysis for endpoint acceptance in similar indications")),
    Rule("small_sample",
         lambda c: c["trial"].enrollment < 50 and c["phase"].primary != "PHASE1",
         Issue(type="SMALL_SAMPLE_SIZE", severity="HIGH",
               description="Small sample size requires robust statistical justification",
               next_step="Statistical power analysis and FDA precedents for small trials")),
    Rule("large_trial",
         lambda c: c["trial"].enrollment > 1000,
         Issue(type="LARGE_TRIAL_MANAGEMENT", severity="MEDIUM",
               description="Large trial requires interim analysis strategy",
               next_step="FDA guidance on DMC charters and interim analyses")),
    Rule("rare_disease_phase2",
         lambda c: c["phase"].primary == "PHASE2" and "rare" in c["trial"].primary_condition.lower(),
         Issue(type="RARE_DISEASE_DEVELOPMENT", severity="HIGH",
               description="Rare disease development pathway optimization needed",
               next_step="FDA orphan drug and expedited pathway strategy")),
    Rule("adaptive_design",
         lambda c: _is_adaptive(c["trial"]),
         Issue(type="ADAPTIVE_DESIGN_COMPLEXITY", severity="HIGH",
               description="Adaptive trial design requires specialized FDA interaction",
               next_step="FDA guidance on adaptive designs and statistical analysis plans")),
    Rule("pre_trial",
         lambda c: c["trial"].status == "NOT_YET_RECRUITING",
         Issue(type="PRE_TRIAL_OPTIMIZATION", severity="MEDIUM",
               description="Pre-recruitment window for protocol optimization",
               next_step="FDA Type B meeting preparation and protocol alignment")),
    Rule("combination_product",
         lambda c: _has_combination_product(c["trial"]),
         Issue(type="COMBINATION_PRODUCT_COMPLEXITY", severity="HIGH",
               description="Combination product requires cross-center FDA coordination",
               next_step="Navigating CDER/CDRH jurisdictional considerations")),
]


def identify_design_challenges(
    trial: TrialRecord,
    phase: PhaseInfo,
    biomarkers: BiomarkerStrategy,
    endpoints: EndpointProfile,
) -> List[Issue]:
    context = {"trial": trial, "phase": phase, "biomarkers": biomarkers, "endpoints": endpoints}
    return [issue.model_copy() for issue in all_matches(DESIGN_CHALLENGE_RULES, context)]


LANDSCAPE_RULES = [
    keyword_rule("oncology", ("cancer", "oncol"), {
        "intensity": "HIGH",
        "key_competitors": ["Multiple PD-1/PD-L1 inhibitors", "CAR-T therapies", "ADCs"],
        "market_insights": ["Crowded market requires differentiation", "Biomarker strategy critical"],
    }, text_of=str),
    keyword_rule("neurodegeneration", ("alzheimer", "parkinson"), {
        "intensity": "HIGH",
        "key_competitors": ["Aduhelm controversy impacts", "Multiple Phase 3 failures"],
        "market_insights": ["FDA bar remains high", "Endpoints under scrutiny"],
    }, text_of=str),
    keyword_rule("rare", ("rare", "orphan"), {
        "intensity": "LOW",
        "key_competitors": ["Limited competition", "First-in-class opportunity"],
        "market_insights": ["FDA more flexible on endpoints", "Expedited pathways available"],
    }, text_of=str),
    keyword_rule("metabolic", ("diabetes", "metabolic"), {
        "intensity": "HIGH",
        "key_competitors": ["GLP-1 dominance", "Established SOC"],
        "market_insights": ["CV outcomes expected", "Differentiation needed"],
    }, text_of=str),
]

MARKET_DYNAMICS_RULES = [
    keyword_rule("biosimilar", ("biosimilar",), "PRICE_PRESSURE", text_of=str),
    keyword_rule("rare", ("rare",), "PREMIUM_PRICING", text_of=str),
    keyword_rule("generic", ("generic",), "COMMODITY", text_of=str),
    keyword_rule("first_in_class", ("first-in-class",), "INNOVATION_PREMIUM", text_of=str),
]

FDA_CLIMATE_RULES = [
    keyword_rule("opioid", ("opioid",), "HEIGHTENED_SCRUTINY", text_of=str),
    keyword_rule("pediatric", ("pediatric",), "SUPPORTIVE", text_of=str),
    keyword_rule("antibiotic", ("antibiotic",), "EXPEDITED", text_of=str),
    keyword_rule("alzheimer", ("alzheimer",), "EVOLVING_STANDARDS", text_of=str),
    keyword_rule("rare", ("rare",), "FLEXIBLE", text_of=str),
]

EXPEDITED_PATHWAY_RULES = [
    Rule("breakthrough", lambda c: "cancer" in c["indication"] or "rare" in c["indication"],
         "Breakthrough Therapy Designation"),
    Rule("fast_track", lambda c: "serious" in c["indication"] or "life-threatening" in c["indication"],
         "Fast Track Designation"),
    Rule("orphan", lambda c: "rare" in c["indication"] or "orphan" in c["indication"],
         "Orphan Drug Designation"),
    Rule("priority_review", lambda c: c["phase"] == "PHASE3", "Priority Review"),
    Rule("accelerated_approval", lambda c: c["surrogate"], "Accelerated Approval"),
]


def assess_competitive_landscape(
    trial: TrialRecord,
    phase: PhaseInfo,
    endpoints: EndpointProfile,
) -> CompetitiveLandscape:
    indication = trial.primary_condition.lower()
    profile: Dict = first_match(LANDSCAPE_RULES, indication, default={})
    pathways = all_matches(EXPEDITED_PATHWAY_RULES, {
        "indication": indication,
        "phase": phase.primary,
        "surrogate": endpoints.has_surrogate_endpoints,
    })
    return CompetitiveLandscape(
        intensity=profile.get("intensity", "MODERATE"),
        key_competitors=list(profile.get("key_competitors", [])),
        market_insights=list(profile.get("market_insights", [])),
        market_dynamics=first_match(MARKET_DYNAMICS_RULES, indication, default="COMPETITIVE"),
        fda_climate=first_match(FDA_CLIMATE_RULES, indication, default="STANDARD"),
        expedited_pathways=pathways,
    )


PHASE_COMPLEXITY = {"PHASE3": 30, "PHASE2": 20, "PHASE1": 10, "EARLY_PHASE1": 15}
MODEL_COMPLEXITY = {"PARALLEL": 5, "CROSSOVER": 10, "FACTORIAL": 15}


def calculate_complexity(
    trial: TrialRecord,
    phase: PhaseInfo,
    biomarkers: BiomarkerStrategy,
    endpoints: EndpointProfile,
) -> int:
    """Design complexity on a 0-100 scale."""
    score = PHASE_COMPLEXITY.get(phase.primary, 0)

    if biomarkers.enrichment_strategy == "MIXED_POPULATION":
        score += 25
    elif biomarkers.uses_biomarkers:
        score += 15

    if endpoints.has_novel_endpoints:
        score += 20
    if endpoints.has_surrogate_endpoints:
        score += 15

    score += MODEL_COMPLEXITY.get(trial.intervention_model.upper(), 0)

    if trial.enrollment > 500:
        score += 10
    elif trial.enrollment < 50 and phase.primary != "PHASE1":
        score += 15

    if len(trial.interventions) > 2:
        score += 10
    if _is_adaptive(trial):
        score += 20

    return min(score, 100)


def is_high_value_sponsor(sponsor: str) -> bool:
    """Mid-size industry sponsors; large pharma is excluded."""
    name = (sponsor or "").lower()
    if any(company in name for company in LARGE_PHARMA):
        return False
    return any(term in name for term in HIGH_VALUE_SPONSOR_TERMS)
