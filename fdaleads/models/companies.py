"""
Pydantic Models for company summaries and profiles
"""
from typing import List, Optional

from pydantic import BaseModel, Field

from .leads import Issue


class CompanySummary(BaseModel):
    name: str
    touchpoints: int = 0
    lead_count: int = 0
    therapeutic_areas: List[str] = Field(default_factory=list)
    has_urgent_issues: bool = False
    has_quality_issues: bool = False
    has_compliance_issues: bool = False
    risk_profile: str = "LOW"


class RegulatoryProfile(BaseModel):
    submission_types: List[str] = Field(default_factory=list)
    therapeutic_focus: List[str] = Field(default_factory=list)
    regulatory_complexity: str = "STANDARD"
    fda_interaction_frequency: int = 0
    risk_factors: List[str] = Field(default_factory=list)


class CompanyProfile(CompanySummary):
    """Everything known about one company in the current snapshot."""
    therapeutic_focus: List[str] = Field(default_factory=list)
    total_applications: int = 0
    total_trials: int = 0
    total_warning_letters: int = 0
    total_recalls: int = 0
    total_inspections: int = 0
    lead_ids: List[str] = Field(default_factory=list)
    regulatory_profile: RegulatoryProfile = Field(default_factory=RegulatoryProfile)
    regulatory_challenges: List[Issue] = Field(default_factory=list)
    primary_challenge: Optional[Issue] = None
    recommended_approach: str = ""
    opportunities: List[str] = Field(default_factory=list)
