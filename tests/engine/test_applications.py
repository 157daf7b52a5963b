"""
Tests for drug application classification.
"""
from datetime import timedelta

import pytest

from fdaleads.models.leads import Priority
from fdaleads.models.records import ApplicationRecord, SubmissionRecord
from fdaleads.services.engine.applications import application_lead_id, classify_application, recency_bonus
from fdaleads.services.engine.therapeutic import (
    classify_text,
    submission_type,
    translate_status,
    translate_status_code,
)


def test_recent_crl_is_critical(make_application, today):
    """CR letter 10 days ago: CRITICAL, score >= 95, reason names the CRL"""
    analysis = classify_application(make_application(status="CR", days_ago=10), today)

    assert analysis.priority == Priority.CRITICAL
    assert analysis.score >= 95
    assert "Complete Response Letter" in analysis.urgency_reason
    assert analysis.contact_window == "Contact immediately (within 24 hours)"


def test_crl_issue_deadline_is_180_days_out(make_application, today):
    analysis = classify_application(make_application(status="CR"), today)
    issue = analysis.intelligence.issues[0]

    assert issue.type == "CRL_RESPONSE_REQUIRED"
    assert issue.severity == "CRITICAL"
    assert issue.deadline == (today + timedelta(days=180)).isoformat()


def test_refuse_to_file_deadline_is_30_days_out(make_application, today):
    analysis = classify_application(make_application(status="RT", days_ago=14), today)

    assert analysis.priority == Priority.CRITICAL
    assert analysis.intelligence.issues[0].deadline == (today + timedelta(days=30)).isoformat()


@pytest.mark.parametrize("status,priority,expected", [
    ("FI", "STANDARD", Priority.HIGH),
    ("AP", "BREAKTHROUGH", Priority.HIGH),
    ("AP", "PRIORITY", Priority.HIGH),
    ("AP", "STANDARD", Priority.LOW),
])
def test_urgency_ladder(make_application, today, status, priority, expected):
    analysis = classify_application(make_application(status=status, priority=priority, days_ago=60), today)
    assert analysis.priority == expected


def test_score_stays_inside_priority_band(make_application, today):
    """Recency and pain-point bonuses never push a HIGH lead into the CRITICAL band"""
    analysis = classify_application(make_application(status="FI", priority="PRIORITY", days_ago=2), today)

    assert analysis.priority == Priority.HIGH
    assert 75 <= analysis.score <= 89


def test_many_submissions_is_medium(make_application, today):
    older = [
        SubmissionRecord(submission_type="SUPPL", submission_status="AP", submission_status_date="20240101"),
        SubmissionRecord(submission_type="SUPPL", submission_status="AP", submission_status_date="20230101"),
    ]
    analysis = classify_application(
        make_application(status="AP", days_ago=90, extra_submissions=older), today
    )

    assert analysis.priority == Priority.MEDIUM
    assert any(i.type == "COMPLEX_REGULATORY_HISTORY" for i in analysis.issues)
    assert any(i.type == "EXTENDED_REVIEW" for i in analysis.issues)


def test_recency_bonus(today):
    assert recency_bonus((today - timedelta(days=3)).strftime("%Y%m%d"), today) == 15
    assert recency_bonus((today - timedelta(days=20)).strftime("%Y%m%d"), today) == 10
    assert recency_bonus((today - timedelta(days=45)).strftime("%Y%m%d"), today) == 0
    assert recency_bonus("", today) == 0


def test_empty_application_gets_defaults(today):
    """Every field missing: still classifies, LOW with documented defaults"""
    analysis = classify_application(ApplicationRecord(), today)

    assert analysis.priority == Priority.LOW
    assert analysis.status == "NO_SUBMISSION"
    assert analysis.application_number == "Unknown"
    assert analysis.product_name == "Unknown"
    assert analysis.therapeutic_area == "OTHER"
    assert analysis.last_activity is None
    assert 0 <= analysis.score <= 59


def test_product_name_falls_back_to_generic(make_application, today):
    analysis = classify_application(make_application(brand=""), today)
    assert analysis.product_name == "remdesivir"


def test_lead_id_uses_application_number(make_application):
    assert application_lead_id(make_application(number="NDA216845")) == "app-NDA216845"


def test_numberless_applications_get_distinct_stable_ids(make_application):
    """No application number: id is a digest of sponsor, product and submission"""
    first = make_application(number="", brand="VEKLURY")
    second = make_application(number="", brand="ONCOTINIB")

    assert application_lead_id(first) == application_lead_id(make_application(number="", brand="VEKLURY"))
    assert application_lead_id(first) != application_lead_id(second)
    assert application_lead_id(first).startswith("app-")
    assert application_lead_id(first) != "app-Unknown"


def test_area_division_and_stakeholders(make_application, today):
    analysis = classify_application(
        make_application(brand="ONCOTINIB", pharm_class="Kinase Inhibitor, antineoplastic"), today
    )

    assert analysis.therapeutic_area == "ONCOLOGY"
    assert analysis.division.division == "Division of Oncology Products (DOP)"
    assert "Director of Biomarkers" in analysis.stakeholders


def test_opportunity_value_for_crl(make_application, today):
    analysis = classify_application(make_application(status="CR", priority="PRIORITY"), today)

    # base 75k x (1 + 2.5 CRL + 1.2 priority)
    assert analysis.opportunity_value == 352500
    assert analysis.is_high_value


@pytest.mark.parametrize("code,expected", [
    ("AP", "APPROVED"),
    ("cr", "COMPLETE_RESPONSE_LETTER"),
    ("RT", "REFUSE_TO_FILE"),
    ("FI", "FILED_UNDER_REVIEW"),
    ("TA", "TENTATIVE_APPROVAL"),
    ("WD", "WITHDRAWN"),
    ("ZZ", "ZZ"),
    (None, "NO_SUBMISSION"),
])
def test_translate_status_code(code, expected):
    assert translate_status_code(code) == expected


def test_translate_status_without_submissions():
    assert translate_status(ApplicationRecord(application_number="NDA1")) == "NO_SUBMISSION"


@pytest.mark.parametrize("number,latest_type,expected", [
    ("BLA125742", "ORIG", "BLA"),
    ("NDA216845", "SUPPL", "NDA"),
    ("ANDA218956", "ORIG", "ANDA"),
    ("208123", "SUPPL", "SUPPLEMENTAL"),
    ("208123", "ORIG", "OTHER"),
])
def test_submission_type(number, latest_type, expected):
    app = ApplicationRecord(
        application_number=number,
        submissions=[SubmissionRecord(submission_type=latest_type)],
    )
    assert submission_type(app) == expected


def test_classify_text_first_area_wins():
    assert classify_text("Breast cancer with cardiac toxicity") == "ONCOLOGY"
    assert classify_text("Type 2 diabetes") == "METABOLIC"
    assert classify_text("") == "OTHER"
