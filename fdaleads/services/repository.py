"""
Lead Repository

Owns the current lead snapshot. A generation pass builds a complete new
LeadSnapshot off to the side and publishes it in one assignment, so readers
always see either the previous or the next collection, never a mix.
"""
import asyncio
import logging
import threading
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..models.leads import Lead, LeadType, Priority
from .companies import Company
from .engine.scoring import normalize_company_name

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 50


@dataclass(frozen=True)
class LeadSnapshot:
    """
    Immutable view of one generation pass.

    Attributes:
        leads: Ranked, best first
        companies: Keyed by normalized company name
        sources: Per dataset, "live", "sample" or "empty"
    """
    leads: Tuple[Lead, ...] = ()
    companies: Mapping[str, Company] = field(default_factory=dict)
    statistics: Mapping[str, Any] = field(default_factory=dict)
    sources: Mapping[str, str] = field(default_factory=dict)
    generated_at: Optional[str] = None

    @cached_property
    def by_id(self) -> Dict[str, Lead]:
        return {lead.id: lead for lead in self.leads}


def _is_true(value: Optional[str]) -> bool:
    return str(value).lower() in ("true", "1", "yes")


def _matches_biomarker(lead: Lead, value: str) -> bool:
    strategy = lead.trial.biomarker_strategy if lead.trial else None
    if value.lower() in ("true", "1", "yes"):
        return bool(strategy and strategy.uses_biomarkers)
    if value.lower() in ("false", "0", "no"):
        return not (strategy and strategy.uses_biomarkers)
    return bool(strategy and strategy.enrichment_strategy == value.upper())


def _search_text(lead: Lead) -> str:
    parts = [lead.id, lead.company_name, lead.urgency_reason, lead.therapeutic_area, lead.sub_type]
    if lead.application:
        parts.append(lead.application.application_number)
        for product in lead.application.products:
            parts.extend([product.brand_name or "", product.generic_name])
    if lead.trial:
        parts.extend([lead.trial.nct_id, lead.trial.title, lead.trial.indication])
    if lead.enforcement:
        parts.extend([lead.enforcement.recall_number, lead.enforcement.product_description])
    return " ".join(p for p in parts if p).lower()


class LeadRepository:
    """Holds the current snapshot; reads never block on a regeneration."""

    def __init__(self):
        self._snapshot = LeadSnapshot()
        self._publish_lock = threading.Lock()
        self.generation_lock = asyncio.Lock()

    @property
    def snapshot(self) -> LeadSnapshot:
        return self._snapshot

    def publish(self, snapshot: LeadSnapshot) -> LeadSnapshot:
        """Swap in a fully built snapshot; returns the one it replaced."""
        with self._publish_lock:
            previous, self._snapshot = self._snapshot, snapshot
        logger.info(f"Published {len(snapshot.leads)} leads across {len(snapshot.companies)} companies")
        return previous

    def get(self, lead_id: str) -> Optional[Lead]:
        return self._snapshot.by_id.get(lead_id)

    def get_company(self, name: str) -> Optional[Company]:
        snapshot = self._snapshot
        return snapshot.companies.get(name.strip().upper()) or snapshot.companies.get(normalize_company_name(name))

    def filter(
        self,
        priority: Optional[str] = None,
        lead_type: Optional[str] = None,
        sub_type: Optional[str] = None,
        therapeutic: Optional[str] = None,
        biomarker: Optional[str] = None,
        phase: Optional[str] = None,
        submission_type: Optional[str] = None,
        high_value: Optional[str] = None,
    ) -> List[Lead]:
        """Every filter is optional; string comparisons ignore case."""
        leads = list(self._snapshot.leads)
        if priority:
            leads = [l for l in leads if l.priority.value == priority.upper()]
        if lead_type:
            leads = [l for l in leads if l.lead_type.value == lead_type.upper()]
        if sub_type:
            leads = [l for l in leads if l.sub_type.upper() == sub_type.upper()]
        if therapeutic:
            leads = [l for l in leads if l.therapeutic_area.upper() == therapeutic.upper()]
        if biomarker:
            leads = [l for l in leads if _matches_biomarker(l, biomarker)]
        if phase:
            leads = [l for l in leads if l.trial and l.trial.phase == phase.upper()]
        if submission_type:
            leads = [
                l for l in leads
                if l.application and l.application.submission_type == submission_type.upper()
            ]
        if high_value and _is_true(high_value):
            leads = [l for l in leads if l.is_high_value or l.score >= 80]
        return leads

    def search(self, query: str, limit: int = SEARCH_LIMIT) -> List[Lead]:
        needle = query.strip().lower()
        if not needle:
            return []
        return [lead for lead in self._snapshot.leads if needle in _search_text(lead)][:limit]

    def counts(self) -> Dict[str, Any]:
        snapshot = self._snapshot
        return {
            "total_leads": len(snapshot.leads),
            "companies": len(snapshot.companies),
            "critical_situations": sum(1 for l in snapshot.leads if l.priority == Priority.CRITICAL),
            "clinical_trials": sum(1 for l in snapshot.leads if l.lead_type == LeadType.CLINICAL_TRIAL),
            "last_update": snapshot.generated_at,
        }


_repository_instance: Optional[LeadRepository] = None


def get_lead_repository() -> LeadRepository:
    """Get the process-wide repository."""
    global _repository_instance
    if _repository_instance is None:
        _repository_instance = LeadRepository()
    return _repository_instance
