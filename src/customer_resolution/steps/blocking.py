from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable, Hashable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from itertools import combinations

from customer_resolution.models import CandidatePair, NormalizedRecord

logger = logging.getLogger(__name__)

PairKey = tuple[str, str]


@dataclass(frozen=True)
class BlockKey:
    """A named strong-key extractor; records sharing a non-null key are compared."""

    name: str
    extract: Callable[[NormalizedRecord], Hashable | None]


def _gov_id_key(record: NormalizedRecord) -> str | None:
    return record.cid


def _phone_key(record: NormalizedRecord) -> str | None:
    return record.cphone


def _email_key(record: NormalizedRecord) -> str | None:
    return record.cemail


def _name_zip_key(record: NormalizedRecord) -> tuple[str, str]:
    # No null guard: an empty prefix/zip pair is a valid (weak) block.
    return record.cfn[:3], record.zip


DEFAULT_BLOCK_KEYS: tuple[BlockKey, ...] = (
    BlockKey("gov_id", _gov_id_key),
    BlockKey("phone", _phone_key),
    BlockKey("email", _email_key),
    BlockKey("name_prefix_zip", _name_zip_key),
)


class BlockingIndex:
    """Candidate generation by union of strong-key blocks.

    Only records sharing at least one block key are paired, so the number of
    comparisons is the sum of within-block combinations rather than n^2.
    """

    def __init__(
        self,
        block_keys: Sequence[BlockKey] = DEFAULT_BLOCK_KEYS,
        block_size_warning: int = 1000,
        max_workers: int = 1,
    ) -> None:
        self._block_keys = tuple(block_keys)
        self._block_size_warning = block_size_warning
        self._max_workers = max_workers

    def build_candidates(self, records: Sequence[NormalizedRecord]) -> set[CandidatePair]:
        by_id = {record.account_id: record for record in records}
        return {CandidatePair(left=by_id[aid], right=by_id[bid]) for aid, bid in self.pair_keys(records)}

    def candidate_pairs(self, records: Sequence[NormalizedRecord]) -> list[CandidatePair]:
        """Same pairs as build_candidates, in (aid, bid) order."""
        by_id = {record.account_id: record for record in records}
        return [CandidatePair(left=by_id[aid], right=by_id[bid]) for aid, bid in sorted(self.pair_keys(records))]

    def pair_keys(self, records: Sequence[NormalizedRecord]) -> set[PairKey]:
        if len(records) < 2:
            return set()

        if self._max_workers > 1:
            with ThreadPoolExecutor(max_workers=min(self._max_workers, len(self._block_keys))) as executor:
                per_key = list(executor.map(lambda key: self._pairs_for_key(key, records), self._block_keys))
        else:
            per_key = [self._pairs_for_key(key, records) for key in self._block_keys]

        merged: set[PairKey] = set()
        for pairs in per_key:
            merged |= pairs
        logger.debug(
            "Blocking produced %d unique pairs from %d per-key pairs",
            len(merged),
            sum(len(pairs) for pairs in per_key),
        )
        return merged

    def _pairs_for_key(self, block_key: BlockKey, records: Sequence[NormalizedRecord]) -> set[PairKey]:
        groups: dict[Hashable, set[str]] = defaultdict(set)
        for record in records:
            key = block_key.extract(record)
            if key is None:
                continue
            groups[key].add(record.account_id)

        pairs: set[PairKey] = set()
        for key, members in groups.items():
            if len(members) < 2:
                continue
            if len(members) >= self._block_size_warning:
                logger.warning(
                    "Large block on %s: %d accounts share key %r (%d pairs)",
                    block_key.name,
                    len(members),
                    key,
                    len(members) * (len(members) - 1) // 2,
                )
            # sorted input makes every emitted combination satisfy aid < bid
            pairs.update(combinations(sorted(members), 2))

        logger.debug("Block key %s: %d groups, %d pairs", block_key.name, len(groups), len(pairs))
        return pairs
