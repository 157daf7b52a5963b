"""
Query builders for openFDA and ClinicalTrials.gov API v2.

Both build plain parameter dicts for httpx; nothing here performs I/O.
"""
from datetime import date, timedelta
from typing import Any, Dict, List, Optional


class CTGovQueryBuilder:
    """Builder for ClinicalTrials.gov API v2 study queries."""

    def __init__(self):
        self.params: Dict[str, Any] = {}
        self.intervention_terms: List[str] = []
        self.advanced_terms: List[str] = []

    def add_intervention(self, intervention: str) -> "CTGovQueryBuilder":
        """Add an intervention term (e.g., "Drug")."""
        if intervention:
            self.intervention_terms.append(intervention)
        return self

    def add_status(self, status: List[str]) -> "CTGovQueryBuilder":
        """
        Add status filters.

        Args:
            status: List of statuses (e.g., ["RECRUITING", "NOT_YET_RECRUITING"])
        """
        if status:
            # API v2 expects comma-separated values, not pipe-separated
            self.params["filter.overallStatus"] = ",".join(status)
        return self

    def add_phase(self, phases: List[str]) -> "CTGovQueryBuilder":
        """
        Add phase filters as an Essie expression.

        Args:
            phases: List of phases (e.g., ["EARLY_PHASE1", "PHASE1"])
        """
        if phases:
            self.advanced_terms.append(
                "(" + " OR ".join(f"AREA[Phase]{phase}" for phase in phases) + ")"
            )
        return self

    def add_first_submitted_since(self, days_back: int, today: Optional[date] = None) -> "CTGovQueryBuilder":
        """Restrict to studies first submitted within the last `days_back` days."""
        end = today or date.today()
        start = end - timedelta(days=days_back)
        self.advanced_terms.append(
            f"AREA[StudyFirstSubmitDate]RANGE[{start.isoformat()},{end.isoformat()}]"
        )
        return self

    def set_page_size(self, page_size: int) -> "CTGovQueryBuilder":
        self.params["pageSize"] = page_size
        return self

    def build(self) -> Dict[str, Any]:
        """
        Build the final query parameters.

        Returns:
            Dictionary of query parameters ready for API call
        """
        params = self.params.copy()

        if self.intervention_terms:
            params["query.intr"] = " OR ".join(self.intervention_terms)

        if self.advanced_terms:
            params["filter.advanced"] = " AND ".join(self.advanced_terms)

        params["format"] = "json"
        params.setdefault("pageSize", 100)

        return params


class OpenFDAQueryBuilder:
    """Builder for openFDA `search` / `limit` parameters."""

    def __init__(self):
        self.search_terms: List[str] = []
        self.limit: int = 100

    def add_date_range(self, field_name: str, days_back: int, today: Optional[date] = None) -> "OpenFDAQueryBuilder":
        """Add `field:[YYYYMMDD TO YYYYMMDD]` covering the last `days_back` days."""
        end = today or date.today()
        start = end - timedelta(days=days_back)
        self.search_terms.append(
            f"{field_name}:[{start.strftime('%Y%m%d')} TO {end.strftime('%Y%m%d')}]"
        )
        return self

    def add_raw(self, expression: str) -> "OpenFDAQueryBuilder":
        if expression:
            self.search_terms.append(expression)
        return self

    def set_limit(self, limit: int) -> "OpenFDAQueryBuilder":
        self.limit = limit
        return self

    def build(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {"limit": self.limit}
        if self.search_terms:
            params["search"] = " AND ".join(self.search_terms)
        return params
