from __future__ import annotations

from collections.abc import Iterable
from threading import Event
from typing import Protocol, Sequence

from customer_resolution.models import (
    CandidatePair,
    MatchDecision,
    NormalizedRecord,
    RawRecord,
    ResolutionResult,
    ScoredPair,
)


class Normalizer(Protocol):
    """Step 1: map raw records into a comparison-ready representation."""

    def normalize(self, record: RawRecord) -> NormalizedRecord:
        ...

    def normalize_all(self, records: Sequence[RawRecord]) -> list[NormalizedRecord]:
        ...


class CandidateGenerator(Protocol):
    """Step 2: block records and emit deduplicated candidate pairs."""

    def candidate_pairs(self, records: Sequence[NormalizedRecord]) -> list[CandidatePair]:
        ...


class PairScorer(Protocol):
    """Step 3: fuzzy similarity on names and address."""

    def verify(self) -> None:
        ...

    def score(self, pair: CandidatePair) -> ScoredPair:
        ...

    def score_all(self, pairs: Sequence[CandidatePair]) -> list[ScoredPair]:
        ...


class PairClassifier(Protocol):
    """Step 4: label each scored pair with a rule id or NO_MATCH."""

    def classify(self, scored: ScoredPair) -> MatchDecision:
        ...

    def classify_all(self, pairs: Sequence[ScoredPair]) -> list[MatchDecision]:
        ...


class ComponentBuilder(Protocol):
    """Step 5: connected components with a golden id per component."""

    def cluster(self, account_ids: Iterable[str], decisions: Sequence[MatchDecision]) -> dict[str, str]:
        ...


class ResolutionPipeline(Protocol):
    """Runs the five resolution stages over a batch of raw account records."""

    def run(self, records: Iterable[RawRecord], cancel_event: Event | None = None) -> ResolutionResult:
        ...
