from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import date

NO_MATCH = "NO_MATCH"


@dataclass(frozen=True, slots=True)
class RawRecord:
    """Source account record as handed over by ingestion."""

    account_id: str
    first_name: str | None = None
    last_name: str | None = None
    dob: date | str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    gov_id: str | None = None


@dataclass(frozen=True, slots=True)
class NormalizedRecord:
    """Comparison-ready view of a RawRecord."""

    account_id: str
    cfn: str
    cln: str
    dob: date | None
    cemail: str | None
    cphone: str | None
    cid: str | None
    caddr: str
    zip: str


@dataclass(frozen=True, slots=True)
class CandidatePair:
    """Blocked pair, always ordered so that left.account_id < right.account_id."""

    left: NormalizedRecord
    right: NormalizedRecord

    def __post_init__(self) -> None:
        if not self.left.account_id < self.right.account_id:
            raise ValueError(
                f"candidate pair must be ordered: {self.left.account_id!r} < {self.right.account_id!r}"
            )

    @property
    def key(self) -> tuple[str, str]:
        return self.left.account_id, self.right.account_id


@dataclass(frozen=True, slots=True)
class ScoredPair:
    pair: CandidatePair
    fn_score: float
    ln_score: float
    addr_score: float
    yob_a: int | None
    yob_b: int | None
    yob_fn_a: str | None
    yob_fn_b: str | None

    @property
    def left(self) -> NormalizedRecord:
        return self.pair.left

    @property
    def right(self) -> NormalizedRecord:
        return self.pair.right


@dataclass(frozen=True, slots=True)
class MatchDecision:
    """Outcome of the rule engine for one candidate pair."""

    aid: str
    bid: str
    label: str
    tier: int | None = None
    reason: str = ""
    scores: dict[str, float] = field(default_factory=dict, compare=False)

    @property
    def is_match(self) -> bool:
        return self.label != NO_MATCH

    def edges(self) -> tuple[tuple[str, str], tuple[str, str]]:
        return (self.aid, self.bid), (self.bid, self.aid)


@dataclass(slots=True)
class Cluster:
    """A connected component of accounts sharing one golden customer id."""

    customer_id: str
    account_ids: list[str]

    @property
    def size(self) -> int:
        return len(self.account_ids)


@dataclass(slots=True)
class ResolutionResult:
    """Everything a run produces: the mapping plus its audit trail."""

    assignments: dict[str, str]
    matches: list[MatchDecision]
    records: dict[str, NormalizedRecord] = field(default_factory=dict)
    candidate_count: int = 0
    edge_count: int = 0

    def clusters(self) -> list[Cluster]:
        grouped: dict[str, list[str]] = defaultdict(list)
        for account_id, customer_id in self.assignments.items():
            grouped[customer_id].append(account_id)
        return [
            Cluster(customer_id=customer_id, account_ids=sorted(members))
            for customer_id, members in sorted(grouped.items())
        ]

    def membership_counts(self) -> dict[str, int]:
        return dict(sorted(Counter(self.assignments.values()).items()))

    def multi_member_clusters(self, limit: int | None = None) -> list[Cluster]:
        multi = [cluster for cluster in self.clusters() if cluster.size > 1]
        if limit is not None:
            multi = multi[:limit]
        return multi

    def label_counts(self) -> dict[str, int]:
        return dict(sorted(Counter(decision.label for decision in self.matches).items()))
