"""
Tests for trial analysis: inclusion gates, fit rules and the priority ladders.
"""
from datetime import date

import pytest

from fdaleads.models.leads import Priority
from fdaleads.models.records import InterventionRecord, TrialRecord
from fdaleads.services.engine.fit import analyze_trial, evaluate_fit
from fdaleads.services.engine.scoring import band_for
from fdaleads.services.gateway.decoder import decode_many, decode_study
from fdaleads.services.gateway.sample_data import sample_studies


def test_stagnating_phase2_is_included(make_trial, today):
    """PHASE2, recruiting for 30 months: stagnation pain point and a lead"""
    analysis = analyze_trial(make_trial(phases=("PHASE2",), status="RECRUITING", months_ago=30), today=today)

    assert analysis.stagnation is not None
    assert analysis.included
    assert analysis.fit_reason == "Phase 2 stagnation detected"
    assert analysis.sub_type == "PHASE2_STAGNATION"
    assert analysis.priority == Priority.HIGH


def test_first_in_human_is_critical(make_trial, today):
    trial = make_trial(
        phases=("PHASE1",),
        status="RECRUITING",
        months_ago=12,
        title="A First-in-Human Study of NVX-101 in Advanced Solid Tumors",
        conditions=("Advanced Solid Tumors",),
    )
    analysis = analyze_trial(trial, today=today)

    assert [o.type for o in analysis.opportunities] == ["FIRST_IN_HUMAN"]
    assert analysis.priority == Priority.CRITICAL
    assert analysis.urgency_reason.startswith("First-in-human study")
    assert analysis.contact_window == "Contact immediately"
    assert analysis.is_high_value


def test_suspended_trial_is_critical(make_trial, today):
    analysis = analyze_trial(make_trial(status="SUSPENDED", months_ago=14), today=today)

    assert analysis.priority == Priority.CRITICAL
    assert analysis.stagnation.severity == "CRITICAL"
    assert analysis.fit_reason == "Critical development issues identified"


@pytest.mark.parametrize("overrides,reason", [
    ({"study_type": "OBSERVATIONAL"}, "Not interventional study"),
    ({"interventions": [InterventionRecord(type="DEVICE", name="Stent")]}, "No drug/biological intervention"),
    ({"status": "COMPLETED"}, "Not in relevant status"),
])
def test_gates_exclude(make_trial, today, overrides, reason):
    analysis = analyze_trial(make_trial(**overrides), today=today)

    assert not analysis.included
    assert analysis.fit_reason == reason


def test_no_fit_rule_excludes(make_trial, today):
    """Quiet Phase 4 study: passes every gate but matches no fit rule"""
    analysis = analyze_trial(make_trial(phases=("PHASE4",), months_ago=12), today=today)

    assert not analysis.included
    assert analysis.fit_reason == "Does not meet enhanced inclusion criteria"


def test_adding_a_critical_signal_never_excludes(make_trial, today):
    quiet = analyze_trial(make_trial(phases=("PHASE4",), months_ago=12), today=today)
    pre_recruitment = analyze_trial(
        make_trial(phases=("PHASE4",), months_ago=12, status="NOT_YET_RECRUITING"), today=today
    )

    assert not quiet.included
    assert pre_recruitment.included
    assert evaluate_fit(pre_recruitment) == (True, "New trial opportunity: PRE_RECRUITMENT_OPTIMIZATION")


def test_bare_record_uses_defaults(today):
    analysis = analyze_trial(TrialRecord(nct_id="NCT99999999"), today=today)

    assert not analysis.included
    assert analysis.indication == "Unknown"
    assert analysis.months_since_start is None
    assert analysis.phase.primary == "UNKNOWN"
    assert 0 <= analysis.score <= 100


def test_sample_studies_scores_stay_in_band():
    today = date(2025, 6, 15)
    trials = decode_many(sample_studies(today), decode_study)

    analyses = [analyze_trial(t, trials, today) for t in trials]

    assert any(a.included for a in analyses)
    for analysis in analyses:
        low, high = band_for(analysis.priority)
        assert low <= analysis.score <= high
