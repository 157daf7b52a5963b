"""
Pytest fixtures for Classification & Scoring Engine tests.
"""
from datetime import date, timedelta

import pytest

from fdaleads.models.records import (
    ApplicationRecord,
    EligibilityRecord,
    EnforcementRecord,
    InterventionRecord,
    OutcomeRecord,
    ProductRecord,
    SubmissionRecord,
    TrialRecord,
)
from fdaleads.utils.dates import add_months


@pytest.fixture
def today() -> date:
    """Fixed reference date for every elapsed-time rule"""
    return date(2025, 6, 15)


@pytest.fixture
def make_application(today):
    """Factory for an application with one submission `days_ago` days old"""
    def _make(status="CR", days_ago=10, number="NDA216845", priority="STANDARD",
              sponsor="GILEAD SCIENCES INC", brand="VEKLURY", pharm_class="Antiviral",
              extra_submissions=()):
        submissions = [SubmissionRecord(
            submission_type="SUPPL",
            submission_status=status,
            submission_status_date=(today - timedelta(days=days_ago)).strftime("%Y%m%d"),
            review_priority=priority,
        )]
        submissions.extend(extra_submissions)
        return ApplicationRecord(
            application_number=number,
            sponsor_name=sponsor,
            products=[ProductRecord(brand_name=brand, generic_name="remdesivir", dosage_form="INJECTION")],
            submissions=submissions,
            pharm_class=[pharm_class],
        )
    return _make


@pytest.fixture
def make_trial(today):
    """Factory for an interventional drug trial started `months_ago` months before today"""
    def _make(nct_id="NCT00000001", phases=("PHASE2",), status="RECRUITING", months_ago=30,
              sponsor="Halcyon Biopharma", title="Study of HLB-1 in Metastatic Breast Cancer",
              conditions=("Metastatic Breast Cancer",), enrollment=120, criteria="",
              interventions=None, outcomes=("Objective response rate",), locations=12,
              study_type="INTERVENTIONAL"):
        return TrialRecord(
            nct_id=nct_id,
            title=title,
            sponsor=sponsor,
            phases=list(phases),
            study_type=study_type,
            status=status,
            conditions=list(conditions),
            enrollment=enrollment,
            start_date=add_months(today, -months_ago).isoformat(),
            interventions=interventions if interventions is not None
            else [InterventionRecord(type="DRUG", name="HLB-1")],
            primary_outcomes=[OutcomeRecord(measure=m) for m in outcomes],
            eligibility=EligibilityRecord(criteria=criteria),
            location_count=locations,
        )
    return _make


@pytest.fixture
def class_one_report(today) -> EnforcementRecord:
    """Class I mandated recall reported 12 days ago"""
    return EnforcementRecord(
        recall_number="D-0101-2025",
        event_id="0101",
        recalling_firm="Solara Pharma Labs LLC",
        classification="Class I",
        status="Ongoing",
        reason_for_recall="CGMP Deviations: sterility assurance failures",
        product_description="Ceftriaxone for Injection",
        voluntary_mandated="FDA Mandated",
        report_date=(today - timedelta(days=12)).strftime("%Y%m%d"),
        recall_initiation_date=(today - timedelta(days=20)).strftime("%Y%m%d"),
    )
