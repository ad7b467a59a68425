from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from threading import Event

from customer_resolution.config import Settings, get_settings
from customer_resolution.errors import DuplicateAccountError, PipelineCancelled
from customer_resolution.interfaces import (
    CandidateGenerator,
    ComponentBuilder,
    Normalizer,
    PairClassifier,
    PairScorer,
)
from customer_resolution.models import CandidatePair, MatchDecision, RawRecord, ResolutionResult
from customer_resolution.steps import (
    BlockingIndex,
    ClusterBuilder,
    RecordNormalizer,
    RuleEngine,
    TrigramScorer,
    materialize_edges,
)
from customer_resolution.utils.parallel import map_in_chunks

logger = logging.getLogger(__name__)


class LocalResolutionPipeline:
    """Local runner suitable for large single-machine datasets.

    Stages run strictly forward: normalize, block, score + classify, cluster.
    The cancel event is checked at each stage boundary.
    """

    def __init__(
        self,
        normalizer: Normalizer,
        candidate_generator: CandidateGenerator,
        scorer: PairScorer,
        classifier: PairClassifier,
        cluster_builder: ComponentBuilder,
        max_workers: int = 1,
        chunk_size: int = 5000,
    ) -> None:
        self._normalizer = normalizer
        self._candidate_generator = candidate_generator
        self._scorer = scorer
        self._classifier = classifier
        self._cluster_builder = cluster_builder
        self._max_workers = max_workers
        self._chunk_size = chunk_size
        # fail before any record is processed
        self._scorer.verify()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "LocalResolutionPipeline":
        settings = settings or get_settings()
        return cls(
            normalizer=RecordNormalizer(zip_policy=settings.zip_policy),
            candidate_generator=BlockingIndex(
                block_size_warning=settings.block_size_warning,
                max_workers=settings.max_workers,
            ),
            scorer=TrigramScorer(ngram_size=settings.ngram_size),
            classifier=RuleEngine.from_thresholds(settings.thresholds),
            cluster_builder=ClusterBuilder(),
            max_workers=settings.max_workers,
            chunk_size=settings.chunk_size,
        )

    def run(self, records: Iterable[RawRecord], cancel_event: Event | None = None) -> ResolutionResult:
        records = list(records)
        _check_cancelled(cancel_event, "normalize")
        _check_unique(records)
        normalized = map_in_chunks(
            records,
            self._normalizer.normalize_all,
            max_workers=self._max_workers,
            chunk_size=self._chunk_size,
            desc="normalize",
        )
        logger.info("Normalized %d records", len(normalized))

        _check_cancelled(cancel_event, "blocking")
        pairs = self._candidate_generator.candidate_pairs(normalized)
        logger.info("Blocking produced %d candidate pairs", len(pairs))

        _check_cancelled(cancel_event, "scoring")
        decisions = map_in_chunks(
            pairs,
            self._decide_chunk,
            max_workers=self._max_workers,
            chunk_size=self._chunk_size,
            desc="score",
        )
        matches = [decision for decision in decisions if decision.is_match]
        logger.info("Classified %d pairs: %d matched", len(decisions), len(matches))

        _check_cancelled(cancel_event, "clustering")
        assignments = self._cluster_builder.cluster(
            (record.account_id for record in normalized),
            matches,
        )
        result = ResolutionResult(
            assignments=assignments,
            matches=matches,
            records={record.account_id: record for record in normalized},
            candidate_count=len(pairs),
            edge_count=len(materialize_edges(matches)),
        )
        logger.info(
            "Built %d clusters from %d edges (%d multi-member)",
            len(set(assignments.values())),
            result.edge_count,
            len(result.multi_member_clusters()),
        )
        return result

    def _decide_chunk(self, chunk: Sequence[CandidatePair]) -> list[MatchDecision]:
        return self._classifier.classify_all(self._scorer.score_all(chunk))


def _check_cancelled(cancel_event: Event | None, stage: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        logger.info("Cancellation requested before %s", stage)
        raise PipelineCancelled(stage)


def _check_unique(records: Sequence[RawRecord]) -> None:
    counts = Counter(record.account_id for record in records)
    duplicates = sorted(account_id for account_id, count in counts.items() if count > 1)
    if duplicates:
        raise DuplicateAccountError(duplicates)
