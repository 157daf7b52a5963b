"""
Lead Generation Service

One generation pass: fetch every dataset, classify each record, turn the
survivors into Leads, apply company boosts, rank, compute statistics and
publish the result as a new snapshot.
"""
import logging
import random
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import List, Optional

from ..config import ENABLE_ENFORCEMENT, ENABLE_SAMPLE_FALLBACK, ENABLE_TRIALS, OFFLINE_MODE
from ..models.leads import (
    ApplicationDetails,
    Intervention,
    Lead,
    LeadType,
    TrialDetails,
)
from .companies import CompanyRegistry, boosted_score
from .email_templates import EmailTemplateEngine
from .engine.applications import ApplicationAnalysis, classify_application
from .engine.enforcement import EnforcementAnalysis, classify_enforcement
from .engine.fit import TrialAnalysis, analyze_trial
from .engine.scoring import priority_sort_key
from .gateway import UpstreamData, fetch_all
from .repository import LeadRepository, LeadSnapshot, get_lead_repository
from .statistics import generation_statistics

logger = logging.getLogger(__name__)


@dataclass
class PassCounts:
    processed: int = 0
    included: int = 0
    filtered: int = 0
    failed: int = 0
    duplicates: int = 0


def application_lead(analysis: ApplicationAnalysis, templates: EmailTemplateEngine, created_at: str) -> Lead:
    trigger = templates.application_trigger(analysis)
    return Lead(
        id=analysis.lead_id,
        company_name=analysis.company_name,
        lead_type=LeadType.DRUG_APPLICATION,
        sub_type=analysis.status,
        priority=analysis.priority,
        score=analysis.score,
        therapeutic_area=analysis.therapeutic_area,
        urgency_reason=analysis.urgency_reason,
        issues=analysis.issues,
        email_trigger=trigger,
        email=templates.application_email(analysis, trigger),
        is_high_value=analysis.is_high_value,
        is_high_priority=analysis.is_high_priority,
        contact_window=analysis.contact_window,
        last_activity=analysis.last_activity,
        created_at=created_at,
        data_quality=analysis.data_quality,
        application=ApplicationDetails(
            application_number=analysis.application_number,
            submission_type=analysis.submission_type,
            status=analysis.status,
            review_priority=analysis.review_priority,
            products=analysis.products,
            division_info=analysis.division,
            regulatory_intelligence=analysis.intelligence,
            estimated_opportunity_value=analysis.opportunity_value,
            opportunity_rationale=analysis.opportunity_rationale,
            timeline_urgency=analysis.intelligence.timeline,
            key_stakeholders=analysis.stakeholders,
        ),
    )


def trial_lead(analysis: TrialAnalysis, templates: EmailTemplateEngine, created_at: str) -> Lead:
    trial = analysis.record
    trigger = templates.trial_trigger(analysis)
    return Lead(
        id=f"trial-{trial.nct_id}",
        company_name=analysis.company_name,
        lead_type=LeadType.CLINICAL_TRIAL,
        sub_type=analysis.sub_type,
        priority=analysis.priority,
        score=analysis.score,
        therapeutic_area=analysis.therapeutic_area,
        urgency_reason=analysis.urgency_reason,
        issues=analysis.pain_points,
        email_trigger=trigger,
        email=templates.trial_email(analysis, trigger),
        is_high_value=analysis.is_high_value,
        is_high_priority=analysis.priority.value in ("CRITICAL", "HIGH"),
        contact_window=analysis.contact_window,
        last_activity=analysis.last_activity,
        created_at=created_at,
        trial=TrialDetails(
            nct_id=trial.nct_id,
            title=trial.display_title,
            sponsor=trial.sponsor,
            phase=analysis.phase.primary,
            phase_combo=analysis.phase.is_combo,
            phase_info=analysis.phase,
            status=trial.status,
            study_type=trial.study_type,
            indication=analysis.indication,
            conditions=list(trial.conditions),
            enrollment=trial.enrollment,
            enrollment_type=trial.enrollment_type,
            start_date=trial.start_date,
            primary_completion_date=trial.primary_completion_date,
            primary_purpose=trial.primary_purpose,
            interventions=[
                Intervention(type=i.type, name=i.name, description=i.description) for i in trial.interventions
            ],
            months_since_start=analysis.months_since_start,
            biomarker_strategy=analysis.biomarkers,
            endpoints=analysis.endpoints,
            design_challenges=analysis.design_challenges,
            competitive=analysis.competitive,
            complexity_score=analysis.complexity_score,
            urgency_score=analysis.urgency_score,
            priority_ranking=analysis.priority_ranking,
            new_trial_opportunities=analysis.opportunities,
            contact_recommendation=analysis.contact,
            fit_reason=analysis.fit_reason,
        ),
    )


def enforcement_lead(analysis: EnforcementAnalysis, templates: EmailTemplateEngine, created_at: str) -> Lead:
    trigger = templates.enforcement_trigger(analysis)
    return Lead(
        id=analysis.lead_id,
        company_name=analysis.company_name,
        lead_type=analysis.lead_type,
        sub_type=analysis.sub_type,
        priority=analysis.priority,
        score=analysis.score,
        therapeutic_area="OTHER",
        urgency_reason=analysis.urgency_reason,
        issues=[analysis.issue],
        email_trigger=trigger,
        email=templates.enforcement_email(analysis, trigger),
        is_high_value=analysis.priority.value == "CRITICAL",
        is_high_priority=analysis.priority.value in ("CRITICAL", "HIGH"),
        contact_window="Contact immediately (within 24 hours)" if analysis.priority.value == "CRITICAL"
        else "Contact within 1 week",
        last_activity=analysis.last_activity,
        created_at=created_at,
        enforcement=analysis.details,
    )


def rank_leads(leads: List[Lead]) -> List[Lead]:
    """Sort by priority then score, best first, and number from 1."""
    ranked = sorted(leads, key=lambda lead: priority_sort_key(lead.priority, lead.score))
    for index, lead in enumerate(ranked):
        lead.rank = index + 1
    return ranked


def build_snapshot(
    data: UpstreamData,
    today: Optional[date] = None,
    templates: Optional[EmailTemplateEngine] = None,
) -> LeadSnapshot:
    """
    Classify every upstream record and assemble a ranked snapshot. No I/O.

    A record that raises during analysis is logged and skipped; the rest of
    the batch carries on.
    """
    today = today or date.today()
    templates = templates or EmailTemplateEngine()
    created_at = datetime.now(timezone.utc).isoformat()
    registry = CompanyRegistry()
    leads: List[Lead] = []
    seen = set()
    counts = PassCounts()

    def keep(lead: Lead) -> bool:
        if lead.id in seen:
            counts.duplicates += 1
            logger.debug(f"Duplicate lead {lead.id} dropped")
            return False
        seen.add(lead.id)
        leads.append(lead)
        counts.included += 1
        return True

    for app in data.applications:
        counts.processed += 1
        if not app.sponsor_name:
            counts.filtered += 1
            continue
        try:
            analysis = classify_application(app, today)
            lead = application_lead(analysis, templates, created_at)
        except Exception as e:
            counts.failed += 1
            logger.warning(f"Skipping application {app.application_number or '<unknown>'}: {e}")
            continue
        if keep(lead):
            registry.get_or_create(lead.company_name).add_application(lead.id, analysis)

    for trial in data.trials:
        counts.processed += 1
        if not trial.sponsor:
            counts.filtered += 1
            continue
        try:
            analysis = analyze_trial(trial, data.trials, today)
            if not analysis.included:
                counts.filtered += 1
                logger.debug(f"Trial {trial.nct_id} excluded: {analysis.fit_reason}")
                continue
            lead = trial_lead(analysis, templates, created_at)
        except Exception as e:
            counts.failed += 1
            logger.warning(f"Skipping trial {trial.nct_id}: {e}")
            continue
        if keep(lead):
            registry.get_or_create(lead.company_name).add_trial(lead.id, analysis)

    enforcement_batches = (
        (LeadType.WARNING_LETTER, data.warning_letters),
        (LeadType.RECALL, data.recalls),
        (LeadType.INSPECTION_FINDING, data.inspections),
    )
    for lead_type, records in enforcement_batches:
        for record in records:
            counts.processed += 1
            if not record.recalling_firm:
                counts.filtered += 1
                continue
            try:
                analysis = classify_enforcement(lead_type, record)
                lead = enforcement_lead(analysis, templates, created_at)
            except Exception as e:
                counts.failed += 1
                logger.warning(f"Skipping {lead_type.value.lower()} {record.recall_number or '<unknown>'}: {e}")
                continue
            if keep(lead):
                registry.get_or_create(lead.company_name).add_enforcement(lead.id, analysis)

    for lead in leads:
        lead.score = boosted_score(lead.score, lead.priority, registry.companies.get(lead.company_name))

    ranked = rank_leads(leads)
    logger.info(
        f"Generation pass: {counts.processed} records, {counts.included} leads, "
        f"{counts.filtered} filtered, {counts.failed} failed, {counts.duplicates} duplicates"
    )
    return LeadSnapshot(
        leads=tuple(ranked),
        companies=dict(registry.companies),
        statistics=generation_statistics(ranked, registry.companies),
        sources=dict(data.sources),
        generated_at=created_at,
    )


async def generate_leads(
    repository: Optional[LeadRepository] = None,
    offline: Optional[bool] = None,
    fallback: Optional[bool] = None,
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
) -> LeadSnapshot:
    """
    Run a full generation pass and publish its snapshot.

    Concurrent calls are serialized; readers keep the previous snapshot until
    the new one is published.
    """
    repository = repository or get_lead_repository()
    offline = OFFLINE_MODE if offline is None else offline
    fallback = ENABLE_SAMPLE_FALLBACK if fallback is None else fallback

    async with repository.generation_lock:
        logger.info(f"Starting lead generation (offline={offline}, fallback={fallback})")
        data = await fetch_all(
            offline=offline,
            fallback=fallback,
            include_trials=ENABLE_TRIALS,
            include_enforcement=ENABLE_ENFORCEMENT,
            today=today,
        )
        snapshot = build_snapshot(data, today, EmailTemplateEngine(rng))
        repository.publish(snapshot)
        return snapshot
