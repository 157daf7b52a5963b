"""
Decoded upstream records.

Every field is defaulted so that the scoring engine never has to guard against
missing keys: absent text becomes "" or "Unknown", absent lists become [], and
absent counts become 0.
"""
from dataclasses import dataclass, field
from typing import List, Optional

UNKNOWN = "Unknown"


@dataclass
class ProductRecord:
    """One marketed product on a drugs@FDA application."""
    brand_name: str = ""
    generic_name: str = ""
    dosage_form: str = ""
    active_ingredients: List[str] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.brand_name or self.generic_name or UNKNOWN


@dataclass
class SubmissionRecord:
    submission_type: str = ""
    submission_number: str = ""
    submission_status: str = ""
    submission_status_date: str = ""
    review_priority: str = ""


@dataclass
class ApplicationRecord:
    """
    A drugs@FDA application.

    Attributes:
        application_number: e.g. "NDA216845" or "BLA-125742"
        sponsor_name: Sponsor as reported upstream (not normalized)
        submissions: Most recent first
        pharm_class: openfda.pharm_class_epc/moa/cs values
    """
    application_number: str = ""
    sponsor_name: str = ""
    products: List[ProductRecord] = field(default_factory=list)
    submissions: List[SubmissionRecord] = field(default_factory=list)
    pharm_class: List[str] = field(default_factory=list)

    @property
    def latest_submission(self) -> Optional[SubmissionRecord]:
        return self.submissions[0] if self.submissions else None

    @property
    def primary_product(self) -> ProductRecord:
        return self.products[0] if self.products else ProductRecord()


@dataclass
class InterventionRecord:
    type: str = ""
    name: str = ""
    description: str = ""


@dataclass
class OutcomeRecord:
    measure: str = ""
    time_frame: str = ""
    description: str = ""


@dataclass
class EligibilityRecord:
    criteria: str = ""


@dataclass
class TrialRecord:
    """
    A ClinicalTrials.gov v2 study, flattened from its protocolSection.

    Attributes:
        nct_id: Registry identifier, never empty for a decoded record
        phases: Raw phase tags, e.g. ["PHASE1", "PHASE2"]
        start_date / first_submit_date / first_posted_date: Upstream date strings
        location_count: Number of listed sites
    """
    nct_id: str
    title: str = ""
    official_title: str = ""
    sponsor: str = ""
    collaborators: List[str] = field(default_factory=list)
    phases: List[str] = field(default_factory=list)
    study_type: str = ""
    status: str = ""
    conditions: List[str] = field(default_factory=list)
    enrollment: int = 0
    enrollment_type: str = ""
    intervention_model: str = ""
    primary_purpose: str = ""
    start_date: str = ""
    first_submit_date: str = ""
    first_posted_date: str = ""
    last_update_posted_date: str = ""
    primary_completion_date: str = ""
    completion_date: str = ""
    interventions: List[InterventionRecord] = field(default_factory=list)
    primary_outcomes: List[OutcomeRecord] = field(default_factory=list)
    secondary_outcome_count: int = 0
    eligibility: EligibilityRecord = field(default_factory=EligibilityRecord)
    location_count: int = 0

    @property
    def display_title(self) -> str:
        return self.title or self.official_title

    @property
    def primary_condition(self) -> str:
        return self.conditions[0] if self.conditions else ""


@dataclass
class EnforcementRecord:
    """
    An openFDA drug enforcement report (recall / enforcement action).

    Attributes:
        recalling_firm: Company as reported upstream
        classification: "Class I", "Class II" or "Class III"
        report_date / recall_initiation_date: YYYYMMDD strings
    """
    recall_number: str = ""
    event_id: str = ""
    recalling_firm: str = ""
    classification: str = ""
    status: str = ""
    reason_for_recall: str = ""
    product_description: str = ""
    code_info: str = ""
    distribution_pattern: str = ""
    voluntary_mandated: str = ""
    report_date: str = ""
    recall_initiation_date: str = ""
