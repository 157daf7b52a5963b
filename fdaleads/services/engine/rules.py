"""
Ordered (predicate, outcome) rule tables.

Every business ladder in the engine is a list of Rule objects evaluated top to
bottom. `first_match` returns the outcome of the first rule whose predicate
holds; `all_matches` returns every matching outcome in table order. Outcomes
may be plain values or callables taking the subject, for outcomes that
interpolate record fields.
"""
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Rule(Generic[T]):
    """
    One row of a rule table.

    Attributes:
        name: Stable identifier, used in tests and audit output
        predicate: subject -> bool
        outcome: Value returned on match, or subject -> value
    """
    name: str
    predicate: Callable[[Any], bool]
    outcome: Any

    def matches(self, subject: Any) -> bool:
        return bool(self.predicate(subject))

    def resolve(self, subject: Any) -> T:
        return self.outcome(subject) if callable(self.outcome) else self.outcome


def first_rule(rules: Iterable[Rule], subject: Any) -> Optional[Rule]:
    for rule in rules:
        if rule.matches(subject):
            return rule
    return None


def first_match(rules: Iterable[Rule], subject: Any, default: Any = None) -> Any:
    """Outcome of the first matching rule, or `default`."""
    rule = first_rule(rules, subject)
    return rule.resolve(subject) if rule is not None else default


def all_matches(rules: Iterable[Rule], subject: Any) -> List[Any]:
    """Outcomes of every matching rule, in table order."""
    return [rule.resolve(subject) for rule in rules if rule.matches(subject)]


def keyword_rule(name: str, keywords: Iterable[str], outcome: Any, text_of: Callable[[Any], str]) -> Rule:
    """Rule matching when any keyword is a substring of the subject's lowercased text."""
    words = tuple(k.lower() for k in keywords)
    return Rule(name, lambda subject: any(w in text_of(subject).lower() for w in words), outcome)
