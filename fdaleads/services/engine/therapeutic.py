"""
Therapeutic area, FDA division and status lookup tables.
"""
from typing import Dict, List, Optional

from ...models.leads import DivisionInfo
from ...models.records import ApplicationRecord
from .rules import Rule, first_match

OTHER = "OTHER"

# First matching area wins, so order matters
THERAPEUTIC_KEYWORDS = [
    ("ONCOLOGY", ["cancer", "tumor", "carcinoma", "lymphoma", "leukemia", "melanoma", "sarcoma",
                  "oncol", "antineoplastic", "myeloma"]),
    ("CNS", ["alzheimer", "parkinson", "depression", "epilepsy", "migraine", "schizophrenia",
             "neurolog", "psych", "multiple sclerosis"]),
    ("CARDIOVASCULAR", ["heart", "cardiac", "cardio", "hypertension", "cholesterol", "stroke", "lipid"]),
    ("METABOLIC", ["diabetes", "obesity", "metabolic", "thyroid"]),
    ("IMMUNOLOGY", ["rheumatoid", "psoriasis", "crohn", "lupus", "immune", "immunolog", "autoimmun"]),
    ("INFECTIOUS", ["antibiotic", "antiviral", "antibacterial", "infection", "pneumonia", "vaccine", "covid"]),
    ("RARE_DISEASE", ["orphan", "rare", "syndrome", "dystrophy"]),
]

THERAPEUTIC_RULES = [
    Rule(area, lambda text, words=tuple(words): any(w in text for w in words), area)
    for area, words in THERAPEUTIC_KEYWORDS
]

FDA_DIVISIONS: Dict[str, DivisionInfo] = {
    "ONCOLOGY": DivisionInfo(
        division="Division of Oncology Products (DOP)",
        common_concerns=["Overall Survival endpoints", "Accelerated approval conversions", "Biomarker validation"],
        review_timeline="10-12 months",
        key_reviewers=["Dr. Richard Pazdur", "Dr. Julia Beaver"],
    ),
    "CNS": DivisionInfo(
        division="Division of Neurology Products (DNP)",
        common_concerns=["CNS penetration", "Cognitive assessments", "Long-term safety"],
        review_timeline="12-14 months",
        key_reviewers=["Dr. Eric Bastings", "Dr. Tiffany Farchione"],
    ),
    "CARDIOVASCULAR": DivisionInfo(
        division="Division of Cardiology and Nephrology (DCN)",
        common_concerns=["MACE endpoints", "CV safety studies", "Real-world evidence"],
        review_timeline="10-12 months",
        key_reviewers=["Dr. Norman Stockbridge", "Dr. Mary Parks"],
    ),
}

STATUS_CODES = {
    "AP": "APPROVED",
    "CR": "COMPLETE_RESPONSE_LETTER",
    "RT": "REFUSE_TO_FILE",
    "FI": "FILED_UNDER_REVIEW",
    "TA": "TENTATIVE_APPROVAL",
    "WD": "WITHDRAWN",
}

NO_SUBMISSION = "NO_SUBMISSION"

BASE_STAKEHOLDERS = ["Head of Regulatory Affairs", "Chief Medical Officer"]
AREA_STAKEHOLDERS = {
    "ONCOLOGY": ["VP of Oncology Development", "Director of Biomarkers"],
    "CNS": ["VP of Neuroscience", "Director of Clinical Operations"],
    "CARDIOVASCULAR": ["VP of Cardiovascular Development", "Director of Clinical Data"],
}
DEFAULT_AREA_STAKEHOLDERS = ["VP of Clinical Development"]

SUBMISSION_TYPE_RULES = [
    Rule("bla", lambda app: app.application_number.upper().startswith("BLA"), "BLA"),
    Rule("nda", lambda app: app.application_number.upper().startswith("NDA"), "NDA"),
    Rule("anda", lambda app: app.application_number.upper().startswith("ANDA"), "ANDA"),
    Rule("supplemental",
         lambda app: app.latest_submission is not None and app.latest_submission.submission_type.upper() == "SUPPL",
         "SUPPLEMENTAL"),
]


def classify_text(text: str) -> str:
    """Therapeutic area of free text, OTHER when no keyword list matches."""
    return first_match(THERAPEUTIC_RULES, (text or "").lower(), default=OTHER)


def classify_application_area(app: ApplicationRecord) -> str:
    """Area from the first product's name and the pharmacologic classes."""
    product = app.primary_product
    text = " ".join([product.brand_name or product.generic_name] + app.pharm_class)
    return classify_text(text)


def classify_trial_area(conditions: List[str], title: str = "") -> str:
    return classify_text(" ".join(conditions + [title]))


def division_for(area: str) -> Optional[DivisionInfo]:
    return FDA_DIVISIONS.get(area)


def translate_status_code(code: Optional[str]) -> str:
    """Documented status for a known code; unknown codes pass through unchanged."""
    if code is None:
        return NO_SUBMISSION
    return STATUS_CODES.get(code.upper(), code) if code else "UNKNOWN"


def translate_status(app: ApplicationRecord) -> str:
    submission = app.latest_submission
    if submission is None:
        return NO_SUBMISSION
    return translate_status_code(submission.submission_status)


def submission_type(app: ApplicationRecord) -> str:
    return first_match(SUBMISSION_TYPE_RULES, app, default="OTHER")


def key_stakeholders(area: str) -> List[str]:
    return BASE_STAKEHOLDERS + AREA_STAKEHOLDERS.get(area, DEFAULT_AREA_STAKEHOLDERS)
