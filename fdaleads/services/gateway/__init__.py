"""
External Data Gateway - openFDA and ClinicalTrials.gov fetches with sample fallback
"""

from .api_client import (
    FetchResult,
    UpstreamData,
    fetch_all,
    fetch_clinical_trials,
    fetch_drug_applications,
    fetch_inspection_findings,
    fetch_recalls,
    fetch_warning_letters,
    merge_studies,
)
from .decoder import decode_application, decode_enforcement, decode_study
from .query_builder import CTGovQueryBuilder, OpenFDAQueryBuilder

__all__ = [
    "FetchResult",
    "UpstreamData",
    "fetch_all",
    "fetch_clinical_trials",
    "fetch_drug_applications",
    "fetch_inspection_findings",
    "fetch_recalls",
    "fetch_warning_letters",
    "merge_studies",
    "decode_application",
    "decode_enforcement",
    "decode_study",
    "CTGovQueryBuilder",
    "OpenFDAQueryBuilder",
]
