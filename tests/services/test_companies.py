"""
Tests for company aggregation, boosts and profiles.
"""
from fdaleads.models.leads import LeadType, Priority
from fdaleads.models.records import EnforcementRecord
from fdaleads.services.companies import (
    Company,
    CompanyRegistry,
    boosted_score,
    company_profile,
    recommended_approach,
    risk_profile,
)
from fdaleads.services.engine.enforcement import classify_enforcement


def _report(number: str, firm: str = "Solara Pharma Labs LLC", classification: str = "Class I") -> EnforcementRecord:
    return EnforcementRecord(recall_number=number, recalling_firm=firm, classification=classification)


def test_registry_merges_name_variants():
    registry = CompanyRegistry()

    first = registry.get_or_create("Teva Pharmaceuticals, Inc.")
    second = registry.get_or_create("TEVA PHARMACEUTICALS")

    assert first is second
    assert list(registry.companies) == ["TEVA"]


def test_boost_without_company_is_identity():
    assert boosted_score(63, Priority.MEDIUM, None) == 63


def test_boost_is_held_in_band():
    company = Company(name="ACME", touchpoints=3, has_urgent_issues=True, has_compliance_issues=True)

    assert boosted_score(62, Priority.MEDIUM, company) == 74
    assert boosted_score(95, Priority.CRITICAL, company) == 100


def test_single_touchpoint_gets_no_touchpoint_boost():
    company = Company(name="ACME", touchpoints=1)
    assert boosted_score(76, Priority.HIGH, company) == 76


def test_warning_letters_drive_risk_and_approach():
    company = Company(name="SOLARA PHARMA LABS")
    for number in ("D-1", "D-2"):
        analysis = classify_enforcement(LeadType.WARNING_LETTER, _report(number))
        company.add_enforcement(analysis.lead_id, analysis)

    assert company.touchpoints == 2
    assert company.has_compliance_issues and company.has_urgent_issues
    assert risk_profile(company) == "CRITICAL"
    assert recommended_approach(company).startswith("IMMEDIATE")


def test_recall_sets_quality_flag_only():
    company = Company(name="BRIGHTWELL GENERICS")
    analysis = classify_enforcement(LeadType.RECALL, _report("D-9", classification="Class II"))
    company.add_enforcement(analysis.lead_id, analysis)

    assert company.has_quality_issues
    assert not company.has_compliance_issues
    assert risk_profile(company) == "MEDIUM"


def test_empty_company_profile():
    profile = company_profile(Company(name="QUIET CO"))

    assert profile.risk_profile == "LOW"
    assert profile.primary_challenge is None
    assert profile.opportunities == []
    assert profile.recommended_approach == "Standard FDA regulatory intelligence and submission optimization"


def test_sample_company_spans_datasets(snapshot):
    """TEVA appears as an application sponsor and as a recalling firm"""
    teva = snapshot.companies["TEVA"]
    profile = company_profile(teva)

    assert profile.total_applications == 1
    assert profile.total_recalls == 1
    assert profile.touchpoints >= 2
    assert teva.has_quality_issues
