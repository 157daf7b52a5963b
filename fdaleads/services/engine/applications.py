"""
Drug application classification.

Maps one decoded drugs@FDA application to its regulatory intelligence,
priority tier and banded score.
"""
import hashlib
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional

from ...models.leads import (
    DivisionInfo,
    Issue,
    Priority,
    Product,
    RegulatoryIntelligence,
)
from ...models.records import ApplicationRecord
from ...utils.dates import add_months, days_since, parse_date
from .rules import Rule, all_matches, first_match
from .scoring import clamp_to_band, normalize_company_name, severity_bonus
from .therapeutic import (
    classify_application_area,
    division_for,
    key_stakeholders,
    submission_type,
    translate_status,
)

CRL_RESPONSE_DAYS = 180
RTF_RESPONSE_DAYS = 30

RECENT_ACTIVITY_DAYS = 30
VERY_RECENT_ACTIVITY_DAYS = 7
RECENT_ACTIVITY_BONUS = 10
VERY_RECENT_ACTIVITY_BONUS = 5

OPPORTUNITY_BASE_VALUE = 75000
HIGH_VALUE_OPPORTUNITY = 150000

CONTACT_WINDOWS = {
    Priority.CRITICAL: "Contact immediately (within 24 hours)",
    Priority.HIGH: "Contact within 2-3 days",
    Priority.MEDIUM: "Contact within 1 week",
    Priority.LOW: "Contact within 2 weeks",
}


@dataclass
class ApplicationFacts:
    """The few fields every application ladder reads."""
    status: str
    review_priority: str
    submission_count: int
    original_count: int
    review_span_days: int
    has_open_priority_review: bool


@dataclass(frozen=True)
class Tier:
    priority: Priority
    base_score: int


URGENCY_LADDER: List[Rule] = [
    Rule("complete_response_letter", lambda f: f.status == "COMPLETE_RESPONSE_LETTER", Tier(Priority.CRITICAL, 95)),
    Rule("refuse_to_file", lambda f: f.status == "REFUSE_TO_FILE", Tier(Priority.CRITICAL, 90)),
    Rule("breakthrough_review", lambda f: f.review_priority == "BREAKTHROUGH", Tier(Priority.HIGH, 85)),
    Rule("priority_review", lambda f: f.review_priority == "PRIORITY", Tier(Priority.HIGH, 80)),
    Rule("active_review", lambda f: f.status == "FILED_UNDER_REVIEW", Tier(Priority.HIGH, 75)),
    Rule("repeated_cycles", lambda f: f.submission_count > 2, Tier(Priority.MEDIUM, 70)),
]
DEFAULT_TIER = Tier(Priority.LOW, 50)

SUPPLEMENTARY_PAIN_POINTS: List[Rule] = [
    Rule(
        "multiple_review_cycles",
        lambda f: f.original_count > 1,
        lambda f: Issue(
            type="MULTIPLE_REVIEW_CYCLES",
            severity="HIGH",
            description=f"{f.original_count} review cycles indicate persistent FDA concerns",
            next_step="Root cause analysis, regulatory strategy optimization",
        ),
    ),
    Rule(
        "extended_review",
        lambda f: f.review_span_days > 365,
        lambda f: Issue(
            type="EXTENDED_REVIEW",
            severity="MEDIUM",
            description=f"{f.review_span_days} days in review suggests complex regulatory issues",
            next_step="FDA communication strategy, submission optimization",
        ),
    ),
    Rule(
        "priority_review_challenges",
        lambda f: f.has_open_priority_review,
        Issue(
            type="PRIORITY_REVIEW_CHALLENGES",
            severity="HIGH",
            description="Priority review designation with ongoing challenges",
            next_step="Expedited pathway navigation, FDA alignment",
        ),
    ),
]

OPPORTUNITY_MULTIPLIERS = {
    "CRL_RESPONSE_REQUIRED": 2.5,
    "RTF_REMEDIATION": 2.0,
    "COMPLEX_REGULATORY_HISTORY": 1.5,
    "ACTIVE_REVIEW_OPTIMIZATION": 1.2,
}
REVIEW_PRIORITY_PREMIUM = {"BREAKTHROUGH": 1.5, "PRIORITY": 1.2}


@dataclass
class ApplicationAnalysis:
    """
    Classified drug application, ready to become a lead.

    Attributes:
        priority: Tier from URGENCY_LADDER
        score: base + recency + supplementary pain points, held in the priority band
        issues: Status issues followed by supplementary pain points
    """
    record: ApplicationRecord
    lead_id: str
    company_name: str
    application_number: str
    therapeutic_area: str
    division: Optional[DivisionInfo]
    status: str
    submission_type: str
    review_priority: str
    products: List[Product]
    intelligence: RegulatoryIntelligence
    priority: Priority
    base_score: int
    recency_bonus: int
    pain_point_bonus: int
    score: int
    issues: List[Issue] = field(default_factory=list)
    opportunity_value: int = 0
    opportunity_rationale: str = ""
    stakeholders: List[str] = field(default_factory=list)
    contact_window: str = ""
    last_activity: Optional[str] = None
    is_high_priority: bool = False
    is_high_value: bool = False
    data_quality: int = 100

    @property
    def product_name(self) -> str:
        return self.record.primary_product.display_name

    @property
    def urgency_reason(self) -> str:
        return self.intelligence.specific_issue


def application_facts(app: ApplicationRecord) -> ApplicationFacts:
    submission = app.latest_submission
    dated = [parse_date(s.submission_status_date) for s in app.submissions]
    dated = [d for d in dated if d is not None]
    return ApplicationFacts(
        status=translate_status(app),
        review_priority=submission.review_priority if submission else "",
        submission_count=len(app.submissions),
        original_count=sum(1 for s in app.submissions if s.submission_type.upper() == "ORIG"),
        review_span_days=(max(dated) - min(dated)).days if dated else 0,
        has_open_priority_review=any(
            s.review_priority == "PRIORITY" and s.submission_status.upper() != "AP" for s in app.submissions
        ),
    )


def generate_intelligence(
    app: ApplicationRecord,
    facts: ApplicationFacts,
    area: str,
    today: Optional[date] = None,
) -> RegulatoryIntelligence:
    """Specific issue, timeline, issues and challenges for the application's status."""
    today = today or date.today()
    product = app.primary_product
    product_name = product.brand_name or product.generic_name or "the product"
    specific_issue = "Regulatory support opportunity identified"
    timeline = "Standard timeline"
    issues: List[Issue] = []
    challenges: List[Issue] = []

    if facts.status == "COMPLETE_RESPONSE_LETTER":
        specific_issue = (
            f"Complete Response Letter received for {product_name} - "
            f"FDA requires additional data before approval"
        )
        timeline = f"CRL response due within 6 months (by {add_months(today, 6).strftime('%b %d, %Y')})"
        issues.append(Issue(
            type="CRL_RESPONSE_REQUIRED",
            severity="CRITICAL",
            description=(
                f"FDA issued CRL requesting additional efficacy data and safety analysis "
                f"for {area.lower()} indication"
            ),
            deadline=(today + timedelta(days=CRL_RESPONSE_DAYS)).isoformat(),
            next_step="CRL response with Type A meeting recommended",
        ))
        challenges.append(Issue(
            type="DATA_GENERATION",
            description="Additional clinical or non-clinical studies may be required",
            timeline="6-18 months",
        ))

    elif facts.status == "REFUSE_TO_FILE":
        specific_issue = (
            "Refuse to File letter issued - application has fundamental deficiencies "
            "requiring immediate remediation"
        )
        timeline = "RTF response required within 30 days for priority designation maintenance"
        issues.append(Issue(
            type="RTF_REMEDIATION",
            severity="CRITICAL",
            description="FDA refused to file due to application quality deficiencies - immediate corrective action required",
            deadline=(today + timedelta(days=RTF_RESPONSE_DAYS)).isoformat(),
            next_step="Complete resubmission with quality fixes",
        ))

    elif facts.status == "FILED_UNDER_REVIEW":
        is_priority = facts.review_priority == "PRIORITY"
        review_label = (facts.review_priority or "standard").lower()
        specific_issue = (
            f"{'Priority Review' if is_priority else 'Standard Review'} active - "
            f"proactive FDA communication strategy recommended"
        )
        timeline = "6-month PDUFA date" if is_priority else "10-month PDUFA date"
        issues.append(Issue(
            type="ACTIVE_REVIEW_OPTIMIZATION",
            severity="HIGH",
            description=f"Application under {review_label} review - opportunity for proactive FDA engagement",
            timeline="6 months" if is_priority else "10 months",
            next_step="Mid-cycle communication and information request preparation",
        ))

    elif facts.status == "TENTATIVE_APPROVAL":
        specific_issue = "Tentative Approval granted - final approval pending patent/exclusivity resolution"
        timeline = "Approval expected upon patent expiration or resolution"
        issues.append(Issue(
            type="TENTATIVE_APPROVAL_CONVERSION",
            severity="MEDIUM",
            description="Tentative approval requires patent challenge or expiration monitoring",
            next_step="Patent certification and launch preparation",
        ))

    elif facts.submission_count > 2:
        specific_issue = "Multiple submission cycles detected - complex regulatory history requiring strategic analysis"
        issues.append(Issue(
            type="COMPLEX_REGULATORY_HISTORY",
            severity="HIGH",
            description=f"{facts.submission_count} submission cycles indicate persistent FDA concerns",
            next_step="Historical analysis and strategy optimization",
        ))

    division = division_for(area)
    if division is not None:
        challenges.append(Issue(
            type="DIVISION_SPECIFIC_REQUIREMENTS",
            description=f"{division.division} typical concerns: {', '.join(division.common_concerns)}",
            timeline=division.review_timeline,
        ))

    return RegulatoryIntelligence(
        specific_issue=specific_issue,
        timeline=timeline,
        issues=issues,
        challenges=challenges,
        division_focus=list(division.common_concerns) if division else [],
    )


def recency_bonus(status_date: str, today: Optional[date] = None) -> int:
    """+10 for activity within 30 days, a further +5 within 7 days."""
    days = days_since(status_date, today)
    if days is None:
        return 0
    bonus = 0
    if days < RECENT_ACTIVITY_DAYS:
        bonus += RECENT_ACTIVITY_BONUS
    if days < VERY_RECENT_ACTIVITY_DAYS:
        bonus += VERY_RECENT_ACTIVITY_BONUS
    return bonus


def business_opportunity(issues: List[Issue], review_priority: str):
    """Estimated consulting value and its rationale."""
    multiplier = 1.0
    for issue in issues:
        multiplier += OPPORTUNITY_MULTIPLIERS.get(issue.type, 0.5)
    multiplier += REVIEW_PRIORITY_PREMIUM.get(review_priority, 0.0)
    value = int(round(OPPORTUNITY_BASE_VALUE * multiplier))
    rationale = (
        f"Based on {len(issues)} regulatory complexity factors and "
        f"{review_priority or 'standard'} review priority"
    )
    return value, rationale


def application_lead_id(app: ApplicationRecord) -> str:
    """Stable id: application number, else a digest of sponsor, product and latest submission."""
    key = app.application_number
    if not key:
        submission = app.latest_submission
        raw = "|".join([
            app.sponsor_name,
            app.primary_product.display_name,
            submission.submission_type if submission else "",
            submission.submission_number if submission else "",
            submission.submission_status_date if submission else "",
        ])
        key = hashlib.sha1(raw.encode("utf-8")).hexdigest()[:12]
    return f"app-{key}"


def data_quality(app: ApplicationRecord) -> int:
    quality = 100
    if not app.sponsor_name:
        quality -= 20
    if not app.products:
        quality -= 15
    if not app.submissions:
        quality -= 15
    return quality


def classify_application(app: ApplicationRecord, today: Optional[date] = None) -> ApplicationAnalysis:
    """Classify one application. Pure; tolerates every field being empty."""
    today = today or date.today()
    facts = application_facts(app)
    area = classify_application_area(app)
    intelligence = generate_intelligence(app, facts, area, today)

    tier = first_match(URGENCY_LADDER, facts, default=DEFAULT_TIER)
    submission = app.latest_submission
    status_date = submission.submission_status_date if submission else ""
    bonus = recency_bonus(status_date, today)
    supplementary = all_matches(SUPPLEMENTARY_PAIN_POINTS, facts)
    pain_bonus = severity_bonus(issue.severity for issue in supplementary)
    score = clamp_to_band(tier.priority, tier.base_score + bonus + pain_bonus)

    issues = intelligence.issues + supplementary
    value, rationale = business_opportunity(intelligence.issues, facts.review_priority)
    sub_type = submission_type(app)

    return ApplicationAnalysis(
        record=app,
        lead_id=application_lead_id(app),
        company_name=normalize_company_name(app.sponsor_name),
        application_number=app.application_number or "Unknown",
        therapeutic_area=area,
        division=division_for(area),
        status=facts.status,
        submission_type=sub_type,
        review_priority=facts.review_priority,
        products=[
            Product(
                brand_name=p.brand_name or None,
                generic_name=p.generic_name,
                dosage_form=p.dosage_form,
                active_ingredients=list(p.active_ingredients),
            )
            for p in app.products
        ],
        intelligence=intelligence,
        priority=tier.priority,
        base_score=tier.base_score,
        recency_bonus=bonus,
        pain_point_bonus=pain_bonus,
        score=score,
        issues=issues,
        opportunity_value=value,
        opportunity_rationale=rationale,
        stakeholders=key_stakeholders(area),
        contact_window=CONTACT_WINDOWS[tier.priority],
        last_activity=parse_date(status_date).isoformat() if parse_date(status_date) else None,
        is_high_priority=tier.priority in (Priority.CRITICAL, Priority.HIGH)
        or sub_type in ("BLA", "NDA")
        or facts.has_open_priority_review,
        is_high_value=tier.priority == Priority.CRITICAL or value >= HIGH_VALUE_OPPORTUNITY,
        data_quality=data_quality(app),
    )
