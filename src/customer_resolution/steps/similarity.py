from __future__ import annotations

from collections.abc import Sequence
from functools import lru_cache

from customer_resolution.errors import SimilarityBackendError
from customer_resolution.models import CandidatePair, NormalizedRecord, ScoredPair

# outside the normalized alphabet [A-Z0-9 ], so edge grams never collide with internal spaces
PAD = "$"
DEFAULT_NGRAM_SIZE = 3


@lru_cache(maxsize=65536)
def ngrams(value: str, size: int = DEFAULT_NGRAM_SIZE) -> frozenset[str]:
    """Set of overlapping substrings of ``value`` padded with size-1 placeholders per side."""
    if not value:
        return frozenset()
    padding = PAD * (size - 1)
    padded = f"{padding}{value}{padding}"
    return frozenset(padded[i : i + size] for i in range(len(padded) - size + 1))


def similarity(left: str, right: str, size: int = DEFAULT_NGRAM_SIZE) -> float:
    """Jaccard coefficient of the two strings' n-gram sets; 0.0 when either is empty."""
    left_grams = ngrams(left, size)
    right_grams = ngrams(right, size)
    if not left_grams or not right_grams:
        return 0.0
    shared = len(left_grams & right_grams)
    return shared / (len(left_grams) + len(right_grams) - shared)


def birth_year(record: NormalizedRecord) -> int | None:
    return record.dob.year if record.dob is not None else None


def year_initial_token(record: NormalizedRecord) -> str | None:
    year = birth_year(record)
    if year is None:
        return None
    return f"{year}_{record.cfn[:2]}"


class TrigramScorer:
    """Scores candidate pairs on first name, last name and address similarity."""

    def __init__(self, ngram_size: int = DEFAULT_NGRAM_SIZE) -> None:
        self._ngram_size = ngram_size

    def verify(self) -> None:
        """Startup self-check; a broken backend must fail before any record is scored."""
        try:
            same = similarity("RESOLVE", "RESOLVE", self._ngram_size)
            disjoint = similarity("ABC", "XYZ", self._ngram_size)
            empty = similarity("", "ABC", self._ngram_size)
        except Exception as exc:
            raise SimilarityBackendError(f"similarity backend failed: {exc}") from exc
        if same != 1.0 or disjoint != 0.0 or empty != 0.0:
            raise SimilarityBackendError(
                f"similarity backend self-check failed (same={same}, disjoint={disjoint}, empty={empty})"
            )

    def score(self, pair: CandidatePair) -> ScoredPair:
        left, right = pair.left, pair.right
        size = self._ngram_size
        return ScoredPair(
            pair=pair,
            fn_score=similarity(left.cfn, right.cfn, size),
            ln_score=similarity(left.cln, right.cln, size),
            addr_score=similarity(left.caddr, right.caddr, size),
            yob_a=birth_year(left),
            yob_b=birth_year(right),
            yob_fn_a=year_initial_token(left),
            yob_fn_b=year_initial_token(right),
        )

    def score_all(self, pairs: Sequence[CandidatePair]) -> list[ScoredPair]:
        return [self.score(pair) for pair in pairs]
