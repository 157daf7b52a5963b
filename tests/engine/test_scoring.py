"""
Tests for clamping, priority bands and company-name normalization.
"""
import pytest

from fdaleads.models.leads import Priority
from fdaleads.services.engine.scoring import (
    band_for,
    clamp,
    clamp_to_band,
    normalize_company_name,
    priority_sort_key,
    severity_bonus,
)


@pytest.mark.parametrize("value,expected", [(-20, 0), (0, 0), (57.6, 58), (100, 100), (140, 100)])
def test_clamp_bounds(value, expected):
    assert clamp(value) == expected


def test_clamp_to_band_holds_score_inside_priority_band():
    assert clamp_to_band(Priority.CRITICAL, 120) == 100
    assert clamp_to_band(Priority.CRITICAL, 50) == 90
    assert clamp_to_band(Priority.HIGH, 95) == 89
    assert clamp_to_band(Priority.MEDIUM, 70) == 70
    assert clamp_to_band(Priority.LOW, 80) == 59


def test_bands_do_not_overlap():
    ordered = [Priority.LOW, Priority.MEDIUM, Priority.HIGH, Priority.CRITICAL]
    for lower, higher in zip(ordered, ordered[1:]):
        assert band_for(lower)[1] < band_for(higher)[0]


def test_priority_sort_key_orders_priority_before_score():
    keys = sorted([
        (Priority.HIGH, 89),
        (Priority.CRITICAL, 90),
        (Priority.LOW, 59),
        (Priority.CRITICAL, 100),
    ], key=lambda pair: priority_sort_key(*pair))

    assert keys == [(Priority.CRITICAL, 100), (Priority.CRITICAL, 90), (Priority.HIGH, 89), (Priority.LOW, 59)]


def test_severity_bonus_ignores_case_and_unknowns():
    assert severity_bonus(["critical", "HIGH", "Medium", "low", "bogus"]) == 15 + 10 + 5 + 2


@pytest.mark.parametrize("raw,expected", [
    ("Teva Pharmaceuticals, Inc.", "TEVA"),
    ("TEVA PHARMACEUTICALS", "TEVA"),
    ("  Gilead   Sciences ", "GILEAD"),
    ("Acme Bio Labs LLC", "ACME"),
    ("Halcyon Biopharma", "HALCYON BIOPHARMA"),
    ("", ""),
])
def test_normalize_company_name(raw, expected):
    assert normalize_company_name(raw) == expected


@pytest.mark.parametrize("raw", [
    "Teva Pharmaceuticals, Inc.",
    "Solara Pharma Labs LLC",
    "Merck Sharp & Dohme Corp.",
    "co co co",
])
def test_normalize_company_name_is_idempotent(raw):
    once = normalize_company_name(raw)
    assert normalize_company_name(once) == once
