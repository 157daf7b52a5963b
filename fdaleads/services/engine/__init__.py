"""
Classification & Scoring Engine

Pure, table-driven classification of decoded upstream records into scored
lead drafts. No I/O.
"""

from .applications import ApplicationAnalysis, classify_application
from .enforcement import EnforcementAnalysis, classify_enforcement, enforcement_lead_id
from .fit import TrialAnalysis, analyze_trial, evaluate_fit
from .rules import Rule, all_matches, first_match
from .scoring import clamp, clamp_to_band, normalize_company_name, priority_sort_key
from .therapeutic import classify_text, translate_status_code

__all__ = [
    "ApplicationAnalysis",
    "classify_application",
    "EnforcementAnalysis",
    "classify_enforcement",
    "enforcement_lead_id",
    "TrialAnalysis",
    "analyze_trial",
    "evaluate_fit",
    "Rule",
    "all_matches",
    "first_match",
    "clamp",
    "clamp_to_band",
    "normalize_company_name",
    "priority_sort_key",
    "classify_text",
    "translate_status_code",
]
