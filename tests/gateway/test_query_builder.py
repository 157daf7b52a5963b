"""
Tests for openFDA and ClinicalTrials.gov query builders.
"""
from fdaleads.services.gateway.query_builder import CTGovQueryBuilder, OpenFDAQueryBuilder


def test_openfda_date_range(today):
    params = (
        OpenFDAQueryBuilder()
        .add_date_range("report_date", 180, today)
        .set_limit(100)
        .build()
    )

    assert params == {"limit": 100, "search": "report_date:[20241217 TO 20250615]"}


def test_openfda_without_terms_has_no_search():
    assert OpenFDAQueryBuilder().set_limit(50).build() == {"limit": 50}


def test_ctgov_status_and_intervention():
    params = (
        CTGovQueryBuilder()
        .add_intervention("Drug")
        .add_status(["RECRUITING", "ACTIVE_NOT_RECRUITING"])
        .set_page_size(75)
        .build()
    )

    assert params["query.intr"] == "Drug"
    assert params["filter.overallStatus"] == "RECRUITING,ACTIVE_NOT_RECRUITING"
    assert params["pageSize"] == 75
    assert params["format"] == "json"


def test_ctgov_advanced_terms_are_anded(today):
    params = (
        CTGovQueryBuilder()
        .add_phase(["EARLY_PHASE1", "PHASE1"])
        .add_first_submitted_since(30, today)
        .build()
    )

    assert params["filter.advanced"] == (
        "(AREA[Phase]EARLY_PHASE1 OR AREA[Phase]PHASE1) AND "
        "AREA[StudyFirstSubmitDate]RANGE[2025-05-16,2025-06-15]"
    )
    assert params["pageSize"] == 100
