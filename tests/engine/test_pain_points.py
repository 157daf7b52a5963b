"""
Tests for the trial pain-point detectors and derived scores.
"""
from fdaleads.models.leads import Issue, PhaseInfo
from fdaleads.services.engine.pain_points import (
    calculate_urgency_score,
    detect_competitive_pressure,
    detect_phase2_stagnation,
    detect_recruitment_challenges,
    next_contact_window,
    sponsor_trials,
)

PHASE2 = PhaseInfo(primary="PHASE2")


def test_sibling_phase2_trials_raise_stagnation_severity(make_trial, today):
    trial = make_trial(nct_id="NCT1", months_ago=10)
    sibling = make_trial(nct_id="NCT2", months_ago=8, title="Study of HLB-2 in HER2+ Breast Cancer",
                         conditions=("HER2-Positive Breast Cancer",))

    issue = detect_phase2_stagnation(trial, PHASE2, [trial, sibling], today)

    assert issue.severity == "HIGH"
    assert "Multiple Phase 2 trials (2)" in issue.description


def test_young_quiet_phase2_has_no_stagnation(make_trial, today):
    trial = make_trial(months_ago=6)
    assert detect_phase2_stagnation(trial, PHASE2, [trial], today) is None


def test_sponsor_trials_match_normalized_names_and_collaborators(make_trial):
    own = make_trial(nct_id="NCT1", sponsor="Halcyon Biopharma, Inc.")
    same = make_trial(nct_id="NCT2", sponsor="HALCYON BIOPHARMA")
    partnered = make_trial(nct_id="NCT3", sponsor="Other Co")
    partnered.collaborators = ["Halcyon Biopharma Inc"]
    unrelated = make_trial(nct_id="NCT4", sponsor="Unrelated")

    found = sponsor_trials(own, [own, same, partnered, unrelated])

    assert [t.nct_id for t in found] == ["NCT1", "NCT2", "NCT3"]


def test_slow_recruitment_is_high_severity(make_trial, today):
    issue = detect_recruitment_challenges(make_trial(months_ago=30), PHASE2, today)

    assert issue.severity == "HIGH"
    assert issue.urgency == "high"


def test_competitive_pressure_from_big_pharma(make_trial, today):
    trial = make_trial(nct_id="NCT0", sponsor="Halcyon Biopharma")
    rivals = [
        make_trial(nct_id="NCT1", sponsor="Pfizer"),
        make_trial(nct_id="NCT2", sponsor="Small Bio One"),
        make_trial(nct_id="NCT3", sponsor="Small Bio Two"),
    ]

    issue = detect_competitive_pressure(trial, PHASE2, [trial] + rivals, today)

    assert issue.severity == "HIGH"
    assert "3 competing PHASE2 trials" in issue.description
    assert "Big pharma competition" in issue.description


def test_no_competitors_no_pressure(make_trial, today):
    trial = make_trial()
    assert detect_competitive_pressure(trial, PHASE2, [trial], today) is None


def test_urgency_score_is_capped(make_trial, today):
    issues = [Issue(type="x", severity="CRITICAL", urgency="critical") for _ in range(5)]
    assert calculate_urgency_score(issues, PHASE2, make_trial(), today) == 100


def test_next_contact_window():
    assert next_contact_window([Issue(type="a", urgency="critical")]) == "Contact immediately"
    assert next_contact_window([Issue(type="a", urgency="high")]) == "Contact within 1 week"
    assert next_contact_window([]) == "Contact within 1 month"
