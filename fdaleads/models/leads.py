"""
Pydantic Models for leads, their analysis sub-objects and generated emails
"""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Priority(str, Enum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


PRIORITY_ORDER = {
    Priority.CRITICAL: 4,
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


class LeadType(str, Enum):
    DRUG_APPLICATION = "DRUG_APPLICATION"
    CLINICAL_TRIAL = "CLINICAL_TRIAL"
    WARNING_LETTER = "WARNING_LETTER"
    RECALL = "RECALL"
    INSPECTION_FINDING = "INSPECTION_FINDING"


ENFORCEMENT_LEAD_TYPES = (LeadType.WARNING_LETTER, LeadType.RECALL, LeadType.INSPECTION_FINDING)


class Issue(BaseModel):
    """A detected pain point, regulatory issue or design challenge."""
    type: str
    severity: str = Field(default="MEDIUM", description="CRITICAL, HIGH, MEDIUM or LOW")
    description: str = ""
    next_step: Optional[str] = Field(None, description="Recommended next step or regulatory path")
    deadline: Optional[str] = Field(None, description="YYYY-MM-DD response deadline")
    timeline: Optional[str] = None
    urgency: Optional[str] = Field(None, description="critical, high, medium or low")
    window: Optional[str] = Field(None, description="Contact window, e.g. immediate")
    evidence: List[str] = Field(default_factory=list)
    specific_needs: List[str] = Field(default_factory=list)
    details: Dict[str, Any] = Field(default_factory=dict)


class Product(BaseModel):
    brand_name: Optional[str] = None
    generic_name: str = ""
    dosage_form: str = ""
    active_ingredients: List[str] = Field(default_factory=list)


class DivisionInfo(BaseModel):
    division: str
    common_concerns: List[str] = Field(default_factory=list)
    review_timeline: str = ""
    key_reviewers: List[str] = Field(default_factory=list)


class RegulatoryIntelligence(BaseModel):
    specific_issue: str
    timeline: str
    issues: List[Issue] = Field(default_factory=list)
    challenges: List[Issue] = Field(default_factory=list)
    division_focus: List[str] = Field(default_factory=list)


class ApplicationDetails(BaseModel):
    application_number: str
    submission_type: str
    status: str
    review_priority: str = ""
    products: List[Product] = Field(default_factory=list)
    division_info: Optional[DivisionInfo] = None
    regulatory_intelligence: RegulatoryIntelligence
    estimated_opportunity_value: int = 0
    opportunity_rationale: str = ""
    timeline_urgency: str = ""
    key_stakeholders: List[str] = Field(default_factory=list)


class PhaseInfo(BaseModel):
    primary: str = "UNKNOWN"
    secondary: Optional[str] = None
    is_combo: bool = False


class BiomarkerStrategy(BaseModel):
    uses_biomarkers: bool = False
    biomarker_types: Dict[str, bool] = Field(default_factory=dict)
    specific_markers: List[str] = Field(default_factory=list)
    enrichment_strategy: str = "NONE"
    complexity: str = "LOW"


class Endpoint(BaseModel):
    measure: str = ""
    time_frame: str = ""
    description: str = ""
    is_novel: bool = False
    is_surrogate: bool = False
    requires_validation: bool = False


class EndpointProfile(BaseModel):
    primary: List[Endpoint] = Field(default_factory=list)
    secondary_count: int = 0
    has_novel_endpoints: bool = False
    has_surrogate_endpoints: bool = False
    complexity: str = "LOW"


class CompetitiveLandscape(BaseModel):
    intensity: str = "MODERATE"
    key_competitors: List[str] = Field(default_factory=list)
    market_insights: List[str] = Field(default_factory=list)
    market_dynamics: str = "COMPETITIVE"
    fda_climate: str = "STANDARD"
    expedited_pathways: List[str] = Field(default_factory=list)


class NewTrialOpportunity(BaseModel):
    type: str
    severity: str
    description: str
    urgency: str
    window: str = "immediate"


class ContactRecommendation(BaseModel):
    timing: str = "Contact within 1 month"
    stakeholders: List[str] = Field(default_factory=lambda: ["Clinical Development"])
    message_framing: str = "Clinical development optimization opportunity"
    value_proposition: str = "Accelerate development and reduce regulatory risk"
    approach: str = "Standard regulatory consulting outreach"


class Intervention(BaseModel):
    type: str = ""
    name: str = ""
    description: str = ""


class TrialDetails(BaseModel):
    nct_id: str
    title: str = ""
    sponsor: str = ""
    phase: str = "UNKNOWN"
    phase_combo: bool = False
    phase_info: PhaseInfo = Field(default_factory=PhaseInfo)
    status: str = ""
    study_type: str = ""
    indication: str = "Unknown"
    conditions: List[str] = Field(default_factory=list)
    enrollment: int = 0
    enrollment_type: str = ""
    start_date: str = ""
    primary_completion_date: str = ""
    primary_purpose: str = ""
    interventions: List[Intervention] = Field(default_factory=list)
    months_since_start: Optional[int] = None
    biomarker_strategy: BiomarkerStrategy = Field(default_factory=BiomarkerStrategy)
    endpoints: EndpointProfile = Field(default_factory=EndpointProfile)
    design_challenges: List[Issue] = Field(default_factory=list)
    competitive: CompetitiveLandscape = Field(default_factory=CompetitiveLandscape)
    complexity_score: int = 0
    urgency_score: int = 0
    priority_ranking: int = 0
    new_trial_opportunities: List[NewTrialOpportunity] = Field(default_factory=list)
    contact_recommendation: ContactRecommendation = Field(default_factory=ContactRecommendation)
    fit_reason: str = ""


class EnforcementDetails(BaseModel):
    recall_number: str = ""
    classification: str = ""
    status: str = ""
    product_description: str = ""
    reason: str = ""
    report_date: str = ""
    initiation_date: str = ""
    voluntary: Optional[bool] = None
    distribution_pattern: str = ""
    code_info: str = ""


class EmailTrigger(BaseModel):
    """What prompted the outreach and the raw material for the email."""
    trigger_type: str
    subject: str
    main_issue: str = ""
    context: str = ""
    offering: str = ""
    personalized_hook: str = ""
    specific_analysis: List[str] = Field(default_factory=list)
    urgency_level: str = "MEDIUM"
    urgency_note: str = ""
    competitive_angle: str = ""
    call_to_action: str = ""


class EmailMessage(BaseModel):
    """Rendered outreach email; `body` joins the non-empty paragraphs in order."""
    subject: str
    greeting: str
    opening: str = ""
    problem_statement: str = ""
    solution: str = ""
    specific_analysis: str = ""
    competitive_context: str = ""
    credibility: str = ""
    urgency: str = ""
    call_to_action: str = ""
    signature: str = ""
    body: str = ""


class Lead(BaseModel):
    """A scored, classified opportunity derived from one upstream record."""
    id: str
    company_name: str
    lead_type: LeadType
    sub_type: str = ""
    priority: Priority
    score: int = Field(..., ge=0, le=100)
    therapeutic_area: str = "OTHER"
    urgency_reason: str = ""
    issues: List[Issue] = Field(default_factory=list)
    email_trigger: EmailTrigger
    email: EmailMessage
    is_high_value: bool = False
    is_high_priority: bool = False
    contact_window: str = ""
    rank: int = 0
    last_activity: Optional[str] = None
    created_at: str
    data_quality: int = 100
    application: Optional[ApplicationDetails] = None
    trial: Optional[TrialDetails] = None
    enforcement: Optional[EnforcementDetails] = None
