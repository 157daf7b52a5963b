"""
Tests for trial profiling helpers.
"""
import pytest

from fdaleads.models.records import TrialRecord
from fdaleads.services.engine.trials import (
    analyze_biomarker_strategy,
    classify_phase,
    is_high_value_sponsor,
    is_similar_indication,
    months_since_start,
    primary_indication,
    trial_start_date,
)


@pytest.mark.parametrize("phases,primary,combo", [
    (["PHASE1", "PHASE2"], "PHASE1", True),
    (["PHASE2", "PHASE3"], "PHASE2", True),
    (["EARLY_PHASE1"], "EARLY_PHASE1", False),
    (["PHASE3"], "PHASE3", False),
    (["NA"], "UNKNOWN", False),
    ([], "UNKNOWN", False),
])
def test_classify_phase(phases, primary, combo):
    info = classify_phase(phases)
    assert info.primary == primary
    assert info.is_combo == combo


def test_primary_indication_from_conditions_or_title():
    assert primary_indication(TrialRecord(nct_id="N1", conditions=["Melanoma"])) == "Melanoma"
    assert primary_indication(TrialRecord(nct_id="N2", title="Study of X in Patients With Gout")) == "Gout"
    assert primary_indication(TrialRecord(nct_id="N3")) == "Unknown"


def test_similar_indication_by_organ_cancer():
    assert is_similar_indication("Metastatic Breast Cancer", "HER2+ breast cancer")
    assert not is_similar_indication("Breast Cancer", "Lung Cancer")


def test_start_date_falls_back_to_first_submitted(today):
    trial = TrialRecord(nct_id="N1", first_submit_date="2024-06-15")

    assert trial_start_date(trial).isoformat() == "2024-06-15"
    assert months_since_start(trial, today) == 12
    assert months_since_start(TrialRecord(nct_id="N2"), today) is None


def test_mixed_population_biomarkers():
    strategy = analyze_biomarker_strategy(
        "HER2 positive or HER2 negative; documented PIK3CA mutation; NGS panel", ""
    )

    assert strategy.uses_biomarkers
    assert strategy.enrichment_strategy == "MIXED_POPULATION"
    assert strategy.specific_markers == ["HER2", "PIK3CA"]
    assert strategy.complexity == "HIGH"


def test_marker_matching_respects_word_boundaries():
    """'met' inside 'metastatic' or 'kit' inside 'kits' is not a marker"""
    strategy = analyze_biomarker_strategy("metastatic disease; diagnostic kits", "")
    assert strategy.specific_markers == []


def test_no_biomarkers():
    strategy = analyze_biomarker_strategy("Adults aged 18 to 65", "Healthy volunteer study")

    assert not strategy.uses_biomarkers
    assert strategy.enrichment_strategy == "NONE"
    assert strategy.complexity == "LOW"


def test_high_value_sponsor_excludes_large_pharma():
    assert is_high_value_sponsor("Nuvexa Therapeutics, Inc.")
    assert not is_high_value_sponsor("Pfizer Pharmaceuticals")
    assert not is_high_value_sponsor("")
