"""
External Data Gateway - Configuration Constants

Endpoints, lookback windows and page sizes for openFDA and ClinicalTrials.gov.
"""
from ...config import CTGOV_BASE_URL, CTGOV_TIMEOUT, FDA_TIMEOUT, OPENFDA_BASE_URL

# openFDA endpoints
DRUGSFDA_URL = f"{OPENFDA_BASE_URL}/drug/drugsfda.json"
ENFORCEMENT_URL = f"{OPENFDA_BASE_URL}/drug/enforcement.json"

# ClinicalTrials.gov API v2 endpoint
CTGOV_STUDIES_URL = f"{CTGOV_BASE_URL}/studies"

# Request timeouts in seconds
FDA_REQUEST_TIMEOUT = FDA_TIMEOUT
CTGOV_REQUEST_TIMEOUT = CTGOV_TIMEOUT

# Lookback windows in days
APPLICATION_WINDOW_DAYS = 365
WARNING_LETTER_WINDOW_DAYS = 180
RECALL_WINDOW_DAYS = 90
RECENT_TRIAL_WINDOW_DAYS = 183  # ~6 months

# Result limits
APPLICATION_LIMIT = 100
WARNING_LETTER_LIMIT = 100
RECALL_LIMIT = 100
INSPECTION_LIMIT = 50
TRIAL_PAGE_SIZE = 100
EARLY_PHASE_PAGE_SIZE = 75

# Trial status groups
ACTIVE_STATUSES = ["RECRUITING", "ACTIVE_NOT_RECRUITING", "ENROLLING_BY_INVITATION"]
RECENT_STATUSES = ["NOT_YET_RECRUITING", "RECRUITING", "ACTIVE_NOT_RECRUITING"]
PHASE2_STATUSES = ["RECRUITING", "ACTIVE_NOT_RECRUITING", "SUSPENDED", "TERMINATED"]

EARLY_PHASES = ["EARLY_PHASE1", "PHASE1"]
PHASE2_PHASES = ["PHASE2"]

# Enforcement records kept as warning-letter grade actions
WARNING_CLASSIFICATIONS = ["Class I", "Class II"]
WARNING_REASON_KEYWORDS = ["cgmp", "adulterated"]
INSPECTION_SEARCH = 'reason_for_recall:"GMP" OR reason_for_recall:"CGMP" OR reason_for_recall:"manufacturing"'
