"""
Tests for generation statistics and dashboard analytics.
"""
from datetime import date

from fdaleads.services.statistics import (
    by_lead_type,
    by_priority,
    comprehensive_analytics,
    generation_statistics,
    leads_by_month,
)


def test_breakdowns_cover_every_lead(snapshot):
    leads = list(snapshot.leads)

    assert sum(by_priority(leads).values()) == len(leads)
    assert sum(by_lead_type(leads).values()) == len(leads)
    assert set(by_priority(leads)) == {"critical", "high", "medium", "low"}


def test_generation_statistics_of_nothing():
    stats = generation_statistics([], {})

    assert stats["total_leads"] == 0
    assert stats["by_priority"] == {"critical": 0, "high": 0, "medium": 0, "low": 0}
    assert stats["high_value_leads"] == 0


def test_leads_by_month_is_sorted(snapshot):
    months = list(leads_by_month(list(snapshot.leads)))
    assert months == sorted(months)


def test_comprehensive_analytics_overview(snapshot):
    leads = list(snapshot.leads)

    analytics = comprehensive_analytics(leads, snapshot.companies, date(2025, 6, 15))

    overview = analytics["overview"]
    assert overview["total_leads"] == len(leads)
    assert overview["total_companies"] == len(snapshot.companies)
    assert 0 <= overview["average_score"] <= 100
    assert analytics["by_type"]["clinical_trials"]["total"] == by_lead_type(leads)["clinical_trials"]
