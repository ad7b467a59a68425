"""
Ordered match rules for scored candidate pairs.

Rules are grouped in tiers of decreasing confidence:

1. Tier 0: identity-led. An exact strong identifier (government id, email,
   phone) gated by a name-similarity floor, so two people who were issued
   the same id are not merged.
2. Tier 1: contact tokens and address overlap when an identifier is missing
   on one side.
3. Tier 2: error-tolerant fallbacks for typos and birth-year drift, anchored
   by an id or a shared birth-year/initials token.

Evaluation is first-match-wins in list order. Rule numbers 11-15 are reserved
and have no runtime entry.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from customer_resolution.config import RuleThresholds
from customer_resolution.errors import ConfigurationError
from customer_resolution.models import NO_MATCH, MatchDecision, ScoredPair


_RULE_ID = re.compile(r"^RULE_(0[1-9]|1[0-8])$")
RESERVED_RULE_NUMBERS = frozenset(range(11, 16))


@dataclass(frozen=True)
class MatchRule:
    rule_id: str
    tier: int
    reason: str
    predicate: Callable[[ScoredPair], bool]


def _same(left: object, right: object) -> bool:
    """Null-safe equality: None or empty on either side never matches."""
    if left is None or right is None or left == "" or right == "":
        return False
    return left == right


def _ids_equal(p: ScoredPair) -> bool:
    return _same(p.left.cid, p.right.cid)


def _emails_equal(p: ScoredPair) -> bool:
    return _same(p.left.cemail, p.right.cemail)


def _phones_equal(p: ScoredPair) -> bool:
    return _same(p.left.cphone, p.right.cphone)


def _last_names_equal(p: ScoredPair) -> bool:
    return _same(p.left.cln, p.right.cln)


def _id_missing(p: ScoredPair) -> bool:
    return p.left.cid is None or p.right.cid is None


def _names_above(p: ScoredPair, fn: float, ln: float) -> bool:
    return p.fn_score > fn and p.ln_score > ln


def _years_within(p: ScoredPair, tolerance: int) -> bool:
    if p.yob_a is None or p.yob_b is None:
        return False
    return abs(p.yob_a - p.yob_b) <= tolerance


def build_rules(t: RuleThresholds | None = None) -> list[MatchRule]:
    """Materialize the ordered rule list from a set of thresholds."""
    t = t or RuleThresholds()
    return [
        # Tier 0
        MatchRule("RULE_01", 0, "VERIFIED_ID", lambda p: _ids_equal(p) and p.fn_score > t.rule_01_fn),
        MatchRule(
            "RULE_02",
            0,
            "VERIFIED_ID",
            lambda p: _ids_equal(p) and p.fn_score > t.rule_02_fn and _last_names_equal(p),
        ),
        MatchRule(
            "RULE_03",
            0,
            "DIGITAL_TOKEN",
            lambda p: _emails_equal(p) and _phones_equal(p) and _ids_equal(p),
        ),
        MatchRule(
            "RULE_04",
            0,
            "DIGITAL_TOKEN",
            lambda p: _emails_equal(p) and _names_above(p, t.rule_04_fn, t.rule_04_ln),
        ),
        MatchRule(
            "RULE_05",
            0,
            "DIGITAL_TOKEN",
            lambda p: _phones_equal(p) and _names_above(p, t.rule_05_fn, t.rule_05_ln),
        ),
        # Tier 1
        MatchRule(
            "RULE_06",
            1,
            "ADDRESS_MATCH",
            lambda p: p.addr_score > t.rule_06_addr
            and _names_above(p, t.rule_06_fn, t.rule_06_ln)
            and (_phones_equal(p) or _emails_equal(p)),
        ),
        MatchRule(
            "RULE_07",
            1,
            "MISSING_ID_TOKEN",
            lambda p: _id_missing(p) and _emails_equal(p) and _phones_equal(p) and p.ln_score > t.rule_07_ln,
        ),
        MatchRule(
            "RULE_08",
            1,
            "MISSING_ID_TOKEN",
            lambda p: _id_missing(p) and _phones_equal(p) and _names_above(p, t.rule_08_fn, t.rule_08_ln),
        ),
        MatchRule(
            "RULE_09",
            1,
            "MISSING_ID_TOKEN",
            lambda p: _id_missing(p) and _emails_equal(p) and _names_above(p, t.rule_09_fn, t.rule_09_ln),
        ),
        MatchRule(
            "RULE_10",
            1,
            "ID_PLUS_TOKEN",
            lambda p: _ids_equal(p) and (_emails_equal(p) or _phones_equal(p)),
        ),
        # Tier 2
        MatchRule(
            "RULE_16",
            2,
            "DOB_FUZZY",
            lambda p: _same(p.yob_fn_a, p.yob_fn_b)
            and _years_within(p, t.rule_16_year_tolerance)
            and _names_above(p, t.rule_16_fn, t.rule_16_ln),
        ),
        MatchRule(
            "RULE_17",
            2,
            "DOB_FUZZY",
            lambda p: _years_within(p, 0) and _names_above(p, t.rule_17_fn, t.rule_17_ln),
        ),
        MatchRule(
            "RULE_18",
            2,
            "FUZZY_FALLBACK",
            lambda p: _ids_equal(p) and (p.fn_score + p.ln_score) / 2 > t.rule_18_avg,
        ),
    ]


def validate_rules(rules: Sequence[MatchRule]) -> None:
    if not rules:
        raise ConfigurationError("rule list is empty")
    seen: set[str] = set()
    for rule in rules:
        match = _RULE_ID.match(rule.rule_id)
        if match is None or int(match.group(1)) in RESERVED_RULE_NUMBERS:
            raise ConfigurationError(f"unknown or reserved rule id: {rule.rule_id!r}")
        if rule.rule_id in seen:
            raise ConfigurationError(f"duplicate rule id: {rule.rule_id!r}")
        seen.add(rule.rule_id)


class RuleEngine:
    """First-match-wins classifier over an ordered rule list."""

    def __init__(self, rules: Sequence[MatchRule] | None = None) -> None:
        self._rules = tuple(rules) if rules is not None else tuple(build_rules())
        validate_rules(self._rules)

    @classmethod
    def from_thresholds(cls, thresholds: RuleThresholds) -> "RuleEngine":
        return cls(build_rules(thresholds))

    @property
    def rules(self) -> tuple[MatchRule, ...]:
        return self._rules

    def classify(self, scored: ScoredPair) -> MatchDecision:
        aid, bid = scored.pair.key
        scores = {
            "fn_score": scored.fn_score,
            "ln_score": scored.ln_score,
            "addr_score": scored.addr_score,
        }
        for rule in self._rules:
            if rule.predicate(scored):
                return MatchDecision(aid, bid, rule.rule_id, rule.tier, rule.reason, scores)
        return MatchDecision(aid, bid, NO_MATCH, None, "", scores)

    def classify_all(self, pairs: Sequence[ScoredPair]) -> list[MatchDecision]:
        return [self.classify(pair) for pair in pairs]
