"""
Tests for raw upstream JSON decoding.
"""
from fdaleads.services.gateway.decoder import (
    decode_application,
    decode_enforcement,
    decode_many,
    decode_study,
)


def test_decode_application_orders_submissions_newest_first(raw_application):
    """Latest submission is the dated one with the most recent status date"""
    app = decode_application(raw_application)

    assert app.application_number == "NDA021234"
    assert [s.submission_status for s in app.submissions] == ["CR", "AP", "FI"]
    assert app.latest_submission.review_priority == "PRIORITY"


def test_decode_application_products_and_classes(raw_application):
    """Non-dict products are skipped and ingredient objects are flattened"""
    app = decode_application(raw_application)

    assert len(app.products) == 1
    assert app.products[0].active_ingredients == ["ACMEZOLIMAB"]
    assert app.pharm_class == ["Kinase Inhibitor [EPC]"]


def test_decode_application_defaults_for_empty_payload():
    """An empty object decodes to a fully defaulted record"""
    app = decode_application({})

    assert app.application_number == ""
    assert app.sponsor_name == ""
    assert app.products == []
    assert app.latest_submission is None


def test_decode_application_rejects_non_objects():
    assert decode_application(None) is None
    assert decode_application(["NDA1"]) is None


def test_decode_study_flattens_modules(raw_study):
    trial = decode_study(raw_study)

    assert trial.nct_id == "NCT05551234"
    assert trial.status == "RECRUITING"
    assert trial.phases == ["PHASE2"]
    assert trial.enrollment == 85
    assert trial.collaborators == ["Beta Labs"]
    assert trial.conditions == ["Melanoma"]
    assert trial.interventions[0].type == "DRUG"
    assert trial.start_date == "2024-01"


def test_decode_study_missing_modules_default(raw_study):
    """Absent eligibility, outcomes and locations collapse to defaults"""
    trial = decode_study(raw_study)

    assert trial.eligibility.criteria == ""
    assert trial.primary_outcomes == []
    assert trial.location_count == 0
    assert trial.completion_date == ""


def test_decode_study_ignores_fields_no_rule_reads(raw_study):
    """Stop reason, keywords, masking and age limits are not carried on the record"""
    protocol = raw_study["protocolSection"]
    protocol["statusModule"]["whyStopped"] = "Sponsor decision"
    protocol["conditionsModule"]["keywords"] = ["BRAF"]
    protocol["designModule"]["designInfo"] = {"allocation": "RANDOMIZED", "maskingInfo": {"masking": "DOUBLE"}}
    protocol["eligibilityModule"] = {"eligibilityCriteria": "Age >= 18", "sex": "ALL", "minimumAge": "18 Years"}
    protocol["identificationModule"]["briefTitle"] = ""
    protocol["identificationModule"]["officialTitle"] = "A Phase 2 Study of ABC-1"

    trial = decode_study(raw_study)

    assert trial.eligibility.criteria == "Age >= 18"
    assert trial.display_title == "A Phase 2 Study of ABC-1"
    for name in ("why_stopped", "keywords", "masking", "allocation"):
        assert not hasattr(trial, name)
    assert not hasattr(trial.eligibility, "minimum_age")


def test_decode_study_without_nct_id_is_rejected():
    assert decode_study({"protocolSection": {"identificationModule": {"briefTitle": "x"}}}) is None


def test_decode_enforcement_null_fields():
    record = decode_enforcement({"recall_number": "D-1-2025", "recalling_firm": None, "classification": "Class I"})

    assert record.recall_number == "D-1-2025"
    assert record.recalling_firm == ""
    assert record.classification == "Class I"


def test_decode_many_skips_rejected_items(studies_payload):
    records = decode_many(studies_payload["studies"] + ["junk", 42], decode_study)

    assert [r.nct_id for r in records] == ["NCT05551234"]


def test_decode_many_non_list_payload():
    assert decode_many(None, decode_study) == []
    assert decode_many({"studies": []}, decode_study) == []
