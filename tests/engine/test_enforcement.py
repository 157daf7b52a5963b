"""
Tests for warning letter, recall and inspection classification.
"""
from dataclasses import replace

from fdaleads.models.leads import LeadType, Priority
from fdaleads.models.records import EnforcementRecord
from fdaleads.services.engine.enforcement import (
    classify_enforcement,
    classify_inspection,
    classify_recall,
    classify_warning_letter,
    enforcement_lead_id,
)
from fdaleads.utils.dates import parse_date


def test_warning_letter(class_one_report):
    analysis = classify_warning_letter(class_one_report)

    assert analysis.lead_id == "warning-D-0101-2025"
    assert analysis.priority == Priority.CRITICAL
    assert analysis.score == 95
    assert analysis.issue.urgency == "critical"
    assert analysis.flags == {"urgent": True, "compliance": True}
    assert analysis.details.voluntary is False


def test_class_one_recall(class_one_report):
    analysis = classify_recall(class_one_report)

    assert analysis.lead_id == "recall-D-0101-2025"
    assert analysis.priority == Priority.CRITICAL
    assert analysis.score == 90
    assert analysis.urgency_reason == "Class I recall requiring comprehensive response"
    assert analysis.last_activity == parse_date(class_one_report.recall_initiation_date).isoformat()


def test_class_two_recall(class_one_report):
    record = replace(class_one_report, classification="Class II", voluntary_mandated="Voluntary: Firm initiated")
    analysis = classify_recall(record)

    assert analysis.priority == Priority.HIGH
    assert analysis.score == 80
    assert analysis.issue.severity == "HIGH"
    assert analysis.details.voluntary is True


def test_inspection_finding(class_one_report):
    analysis = classify_enforcement(LeadType.INSPECTION_FINDING, class_one_report)

    assert analysis.lead_type == LeadType.INSPECTION_FINDING
    assert analysis.sub_type == "GMP_ISSUE"
    assert analysis.priority == Priority.MEDIUM
    assert analysis.score == 70
    assert analysis.flags == {"quality": True}


def test_lead_id_falls_back_to_event_id(class_one_report):
    record = replace(class_one_report, recall_number="")
    assert enforcement_lead_id(LeadType.RECALL, record) == "recall-0101"


def test_lead_id_digest_is_stable(class_one_report):
    record = replace(class_one_report, recall_number="", event_id="")

    first = enforcement_lead_id(LeadType.INSPECTION_FINDING, record)
    second = enforcement_lead_id(LeadType.INSPECTION_FINDING, replace(record))

    assert first == second
    assert first.startswith("inspection-")
    assert len(first) == len("inspection-") + 12


def test_unclassified_report_gets_defaults():
    analysis = classify_inspection(EnforcementRecord())

    assert analysis.details.voluntary is None
    assert analysis.last_activity is None
    assert 60 <= analysis.score <= 74
