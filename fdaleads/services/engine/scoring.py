"""
Shared scoring helpers: clamping, priority bands, severity weights and
company-name normalization.

A lead's priority is decided by its ladder; its score is then held inside that
priority's band so that ordering by (priority, score) and by score agree.
"""
import re
from typing import Iterable, Tuple

from ...models.leads import PRIORITY_ORDER, Priority

SCORE_MIN = 0
SCORE_MAX = 100

PRIORITY_BANDS = {
    Priority.CRITICAL: (90, 100),
    Priority.HIGH: (75, 89),
    Priority.MEDIUM: (60, 74),
    Priority.LOW: (0, 59),
}

# Additive bonus per supplementary pain point
SEVERITY_WEIGHTS = {
    "CRITICAL": 15,
    "HIGH": 10,
    "MEDIUM": 5,
    "LOW": 2,
}

SEVERITY_ORDER = {"CRITICAL": 4, "HIGH": 3, "MEDIUM": 2, "LOW": 1}

COMPANY_SUFFIX_RE = re.compile(
    r"\s+(LLC|INC|CORP|CORPORATION|LTD|LIMITED|GMBH|SA|AG|PLC|LP|LLP|CO|COMPANY|"
    r"PHARMACEUTICALS?|PHARMA|BIOTECH|BIO|THERAPEUTICS|SCIENCES|LABORATORIES|LABS)\.?$",
    re.IGNORECASE,
)


def clamp(value: float, low: int = SCORE_MIN, high: int = SCORE_MAX) -> int:
    return int(max(low, min(high, round(value))))


def band_for(priority: Priority) -> Tuple[int, int]:
    return PRIORITY_BANDS[Priority(priority)]


def clamp_to_band(priority: Priority, score: float) -> int:
    """Clamp into [0, 100] and then into the priority's band."""
    low, high = band_for(priority)
    return clamp(clamp(score), low, high)


def severity_bonus(severities: Iterable[str]) -> int:
    return sum(SEVERITY_WEIGHTS.get(str(s).upper(), 0) for s in severities)


def priority_sort_key(priority: Priority, score: int) -> Tuple[int, int]:
    """Descending sort key: priority first, then score."""
    return (-PRIORITY_ORDER[Priority(priority)], -score)


def normalize_company_name(name: str) -> str:
    """
    Canonical company key: corporate suffixes, commas and periods stripped,
    whitespace collapsed, uppercased.

    Stripping repeats until nothing changes, so
    normalize_company_name(normalize_company_name(x)) == normalize_company_name(x).
    """
    current = (name or "").strip()
    while True:
        stripped = COMPANY_SUFFIX_RE.sub("", current)
        stripped = re.sub(r"[,.]", "", stripped)
        stripped = re.sub(r"\s+", " ", stripped).strip().upper()
        if stripped == current:
            return stripped
        current = stripped
