"""
Tests for the ordered rule-table helpers.
"""
from fdaleads.services.engine.rules import (
    Rule,
    all_matches,
    first_match,
    first_rule,
    keyword_rule,
)

LADDER = [
    Rule("big", lambda n: n > 100, "BIG"),
    Rule("medium", lambda n: n > 10, lambda n: f"MEDIUM:{n}"),
    Rule("positive", lambda n: n > 0, "POSITIVE"),
]


def test_first_match_is_order_sensitive():
    assert first_match(LADDER, 500) == "BIG"
    assert first_match(LADDER, 50) == "MEDIUM:50"
    assert first_match(LADDER, 1) == "POSITIVE"


def test_first_match_default():
    assert first_match(LADDER, -1) is None
    assert first_match(LADDER, -1, default="NONE") == "NONE"


def test_all_matches_in_table_order():
    assert all_matches(LADDER, 500) == ["BIG", "MEDIUM:500", "POSITIVE"]
    assert all_matches(LADDER, -5) == []


def test_first_rule():
    assert first_rule(LADDER, 20).name == "medium"
    assert first_rule(LADDER, 0) is None


def test_keyword_rule_is_case_insensitive():
    rule = keyword_rule("oncology", ("Cancer", "tumor"), "ONCOLOGY", text_of=lambda s: s)

    assert rule.matches("Metastatic CANCER")
    assert not rule.matches("Heart failure")
